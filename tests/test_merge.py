from fundamod.engine import ProcessArgs
from fundamod.merge import Merge


def _connect(module, index, voltage):
    port = module.inputs[index]
    port.connect(1)
    port.set_voltage(voltage)


def test_automatic_channels_follow_last_connected_input():
    m = Merge()
    _connect(m, 0, 1.5)
    _connect(m, 2, -2.5)
    m.process(ProcessArgs())
    out = m.outputs[Merge.POLY_OUTPUT]
    assert m.automatic_channels == 3
    assert out.channels == 3
    assert out.voltages[:3] == [1.5, 0.0, -2.5]


def test_no_inputs_gives_zero_channels_automatically():
    m = Merge()
    m.process(ProcessArgs())
    assert m.automatic_channels == 0
    assert m.outputs[Merge.POLY_OUTPUT].channels == 0
    assert not m.outputs[Merge.POLY_OUTPUT].is_connected


def test_fixed_channel_count_overrides_automatic():
    m = Merge()
    _connect(m, 0, 4.0)
    m.channels = 5
    m.process(ProcessArgs())
    out = m.outputs[Merge.POLY_OUTPUT]
    assert out.channels == 5
    assert out.voltages[0] == 4.0
    assert out.voltages[1:5] == [0.0] * 4


def test_fixed_zero_channels():
    m = Merge()
    _connect(m, 7, 3.0)
    m.channels = 0
    m.process(ProcessArgs())
    assert m.outputs[Merge.POLY_OUTPUT].channels == 0
    assert m.automatic_channels == 8


def test_reset_returns_to_automatic():
    m = Merge()
    m.channels = 4
    m.reset()
    assert m.channels == Merge.AUTOMATIC


def test_json_round_trip():
    m = Merge()
    m.channels = 12
    saved = m.to_json()
    other = Merge()
    other.from_json(saved)
    assert other.channels == 12
    assert saved["data"] == {"channels": 12}


def test_data_without_channels_keeps_setting():
    m = Merge()
    m.channels = 6
    m.data_from_json({})
    assert m.channels == 6


def test_channel_labels():
    m = Merge()
    _connect(m, 1, 0.0)
    m.process(ProcessArgs())
    labels = m.channel_labels()
    assert labels[0] == "Automatic (2)"
    assert labels[1:] == [str(i) for i in range(17)]