import pytest

from fundamod.cvmix import CVMix
from fundamod.engine import ProcessArgs


@pytest.fixture
def mix():
    module = CVMix()
    module.outputs[CVMix.MIX_OUTPUT].connect()
    return module


def test_defaults_give_silence(mix):
    mix.process(ProcessArgs())
    assert mix.outputs[0].get_voltage(0) == 0.0


def test_unpatched_inputs_are_normalled_to_ten_volts(mix):
    mix.params[0].value = 1.0
    mix.process(ProcessArgs())
    assert mix.outputs[0].get_voltage(0) == pytest.approx(10.0)


def test_patched_input_replaces_normal(mix):
    mix.params[0].value = 1.0
    mix.inputs[0].connect()
    mix.inputs[0].set_voltage(3.0)
    mix.process(ProcessArgs())
    assert mix.outputs[0].get_voltage(0) == pytest.approx(3.0)


def test_mono_input_spreads_over_poly_channels(mix):
    mix.params[0].value = 1.0
    mix.inputs[0].connect(1)
    mix.inputs[0].set_voltage(2.0)
    mix.inputs[1].connect(3)
    mix.inputs[1].set_voltages([5.0, 6.0, 7.0])
    mix.process(ProcessArgs())
    assert mix.outputs[0].channels == 3
    assert mix.outputs[0].voltages[:3] == [2.0, 2.0, 2.0]


def test_negative_level_inverts(mix):
    mix.inputs[2].connect()
    mix.inputs[2].set_voltage(4.0)
    mix.params[2].value = 1.0
    mix.process(ProcessArgs())
    positive = mix.outputs[0].get_voltage(0)
    mix.params[2].value = -1.0
    mix.process(ProcessArgs())
    assert mix.outputs[0].get_voltage(0) == pytest.approx(-positive)


def test_unpatched_output_is_left_alone():
    module = CVMix()
    module.params[0].value = 1.0
    module.process(ProcessArgs())
    assert module.outputs[0].channels == 0
    assert module.outputs[0].get_voltage(0) == 0.0