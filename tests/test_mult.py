from fundamod.engine import ProcessArgs
from fundamod.mult import Mult


def test_copies_polyphonic_input_to_every_output():
    mult = Mult()
    mult.inputs[Mult.MULT_INPUT].connect(3)
    mult.inputs[Mult.MULT_INPUT].set_voltages([1.0, -2.0, 3.5])
    for output in mult.outputs:
        output.connect()
    mult.process(ProcessArgs())
    for output in mult.outputs:
        assert output.channels == 3
        assert output.voltages[:3] == [1.0, -2.0, 3.5]


def test_unpatched_input_gives_single_zero_channel():
    mult = Mult()
    mult.outputs[0].connect(4)
    mult.outputs[0].voltages[0] = 7.0
    mult.process(ProcessArgs())
    assert mult.outputs[0].channels == 1
    assert mult.outputs[0].get_voltage(0) == 0.0


def test_unpatched_output_stays_disconnected():
    mult = Mult()
    mult.inputs[0].connect(2)
    mult.inputs[0].set_voltages([4.0, 5.0])
    mult.process(ProcessArgs())
    assert mult.outputs[5].channels == 0
    assert mult.outputs[5].voltages[:2] == [0.0, 0.0]


def test_output_names():
    mult = Mult()
    assert [info.name for info in mult.output_infos][:2] == ["Mult 1", "Mult 2"]