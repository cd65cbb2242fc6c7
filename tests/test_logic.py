import pytest

from fundamod.engine import ProcessArgs
from fundamod.logic import Logic

ARGS = ProcessArgs(sample_rate=1000.0)
HIGH = 10.0
LOW = 0.0


def make(a=None, b=None):
    module = Logic()
    for port in module.outputs:
        port.connect(1)
    for index, values in ((Logic.A_INPUT, a), (Logic.B_INPUT, b)):
        if values is not None:
            module.inputs[index].connect(len(values))
            for c, v in enumerate(values):
                module.inputs[index].set_voltage(v, c)
    return module


def outputs(module, channel=0):
    return tuple(port.get_voltage(channel) for port in module.outputs)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (0.0, 0.0, (HIGH, HIGH, LOW, HIGH, LOW, HIGH, LOW, HIGH)),
        (5.0, 0.0, (LOW, HIGH, HIGH, LOW, LOW, HIGH, HIGH, LOW)),
        (0.0, 5.0, (HIGH, LOW, HIGH, LOW, LOW, HIGH, HIGH, LOW)),
        (5.0, 5.0, (LOW, LOW, HIGH, LOW, HIGH, LOW, LOW, HIGH)),
    ],
)
def test_truth_table(a, b, expected):
    module = make([a], [b])
    module.process(ARGS)
    assert outputs(module) == expected


def test_threshold_is_one_volt_inclusive():
    module = make([1.0], [0.99])
    module.process(ARGS)
    assert module.outputs[Logic.NOTA_OUTPUT].get_voltage() == LOW
    assert module.outputs[Logic.NOTB_OUTPUT].get_voltage() == HIGH


def test_button_forces_b_high():
    module = make([0.0], [0.0])
    module.params[Logic.B_PARAM].value = 1.0
    module.process(ARGS)
    assert module.outputs[Logic.NOTB_OUTPUT].get_voltage() == LOW
    assert module.outputs[Logic.OR_OUTPUT].get_voltage() == HIGH


def test_unpatched_inputs_are_low():
    module = make()
    module.process(ARGS)
    assert module.outputs[Logic.NOR_OUTPUT].get_voltage() == HIGH
    assert module.outputs[Logic.AND_OUTPUT].get_voltage() == LOW


def test_mono_input_spreads_over_poly_channels():
    module = make([5.0], [0.0, 5.0])
    module.process(ARGS)
    assert all(port.channels == 2 for port in module.outputs)
    assert module.outputs[Logic.AND_OUTPUT].get_voltage(0) == LOW
    assert module.outputs[Logic.AND_OUTPUT].get_voltage(1) == HIGH


def test_outputs_are_complementary_pairs():
    module = make([5.0, 0.0, 5.0], [0.0, 0.0, 5.0])
    module.process(ARGS)
    for c in range(3):
        v = outputs(module, c)
        assert v[Logic.OR_OUTPUT] + v[Logic.NOR_OUTPUT] == HIGH
        assert v[Logic.AND_OUTPUT] + v[Logic.NAND_OUTPUT] == HIGH
        assert v[Logic.XOR_OUTPUT] + v[Logic.XNOR_OUTPUT] == HIGH


def test_lights_after_divider():
    module = make([5.0], [0.0])
    module.params[Logic.B_PARAM].value = 0.0
    for _ in range(32):
        module.process(ARGS)
    or_light = Logic.NOTA_LIGHT + 2 * Logic.OR_OUTPUT
    and_light = Logic.NOTA_LIGHT + 2 * Logic.AND_OUTPUT
    assert module.lights[or_light].brightness == 1.0
    assert module.lights[or_light + 1].brightness == 0.0
    assert module.lights[and_light].brightness == 0.0
    assert module.lights[Logic.B_BUTTON_LIGHT].brightness == 0.0