import pytest

from fundamod.engine import Light, Module, Param, Port, ProcessArgs


def test_process_args_sample_time():
    args = ProcessArgs(sample_rate=48000.0)
    assert args.sample_time == pytest.approx(1 / 48000.0)


def test_process_args_rejects_bad_rate():
    with pytest.raises(ValueError):
        ProcessArgs(sample_rate=0)


def test_port_starts_disconnected():
    port = Port()
    assert port.channels == 0
    assert not port.is_connected


def test_connect_rejects_bad_channel_count():
    port = Port()
    with pytest.raises(ValueError):
        port.connect(17)
    with pytest.raises(ValueError):
        port.connect(0)


def test_poly_voltage_spreads_mono_signal():
    port = Port()
    port.connect(1)
    port.set_voltage(3.5)
    assert [port.get_poly_voltage(c) for c in range(4)] == [3.5] * 4
    assert port.get_voltage(2) == 0.0


def test_poly_voltage_reads_each_channel():
    port = Port()
    port.connect(3)
    port.set_voltages([1.0, 2.0, 3.0])
    assert [port.get_poly_voltage(c) for c in range(3)] == [1.0, 2.0, 3.0]


def test_normal_poly_voltage():
    port = Port()
    assert port.get_normal_poly_voltage(10.0, 0) == 10.0
    port.connect(1)
    port.set_voltage(-2.0)
    assert port.get_normal_poly_voltage(10.0, 5) == -2.0


def test_voltage_sum():
    port = Port()
    port.connect(2)
    port.set_voltages([1.5, 2.5, 100.0])
    assert port.get_voltage_sum() == pytest.approx(1.5 + 2.5)
    assert port.voltages[2] == 0.0


def test_get_voltages_is_a_copy():
    port = Port()
    port.connect(1)
    values = port.get_voltages()
    values[0] = 9.0
    assert port.get_voltage(0) == 0.0
    assert len(values) == 16


def test_set_channels_keeps_disconnected_port_disconnected():
    port = Port()
    port.set_channels(4)
    assert port.channels == 0


def test_set_channels_zeroes_unused_and_floors_at_one():
    port = Port()
    port.connect(4)
    port.set_voltages([1.0, 2.0, 3.0, 4.0])
    port.set_channels(2)
    assert port.voltages[:4] == [1.0, 2.0, 0.0, 0.0]
    port.set_channels(0)
    assert port.channels == 1
    with pytest.raises(ValueError):
        port.set_channels(20)


def test_disconnect_clears():
    port = Port()
    port.connect(2)
    port.set_voltages([5.0, 6.0])
    port.disconnect()
    assert port.channels == 0
    assert port.get_voltages() == [0.0] * 16


def test_param_reset_and_display():
    param = Param(min_value=-1.0, max_value=1.0, default=0.25, display_multiplier=100)
    param.value = 0.75
    param.reset()
    assert param.value == 0.25
    assert param.display_value() == pytest.approx(25.0)


def test_param_exponential_display():
    param = Param(min_value=0.0, max_value=10.0, default=3.0, display_base=2)
    assert param.display_value() == pytest.approx(8.0)


def test_param_rejects_inverted_range():
    with pytest.raises(ValueError):
        Param(min_value=1.0, max_value=0.0)


def test_light_rises_immediately_and_fades_slowly():
    light = Light()
    light.set_brightness_smooth(1.0, 0.001)
    assert light.brightness == 1.0
    light.set_brightness_smooth(0.0, 0.001)
    assert 0.0 < light.brightness < 1.0


def test_config_param_sets_default_value():
    module = Module(2, 0, 0, 0)
    module.config_param(1, 0.0, 1.0, 0.5, "Level", "%", 0, 100)
    assert module.params[1].value == 0.5
    assert module.params[1].name == "Level"


def test_reset_restores_defaults():
    module = Module(1)
    module.config_param(0, 0.0, 1.0, 0.3)
    module.params[0].value = 0.9
    module.reset()
    assert module.params[0].value == 0.3


def test_json_round_trip():
    module = Module(3)
    for i in range(3):
        module.config_param(i, -1.0, 1.0, 0.0)
    module.params[0].value = 0.5
    module.params[2].value = -0.25
    other = Module(3)
    other.from_json(module.to_json())
    assert [p.value for p in other.params] == [p.value for p in module.params]


def test_params_from_json_legacy_ids_and_positions():
    module = Module(3)
    module.params_from_json([{"value": 0.1}, {"paramId": 2, "value": 0.7}, {"id": 9, "value": 1.0}])
    assert module.params[0].value == 0.1
    assert module.params[2].value == 0.7
    assert module.params[1].value == 0.0


def test_config_ports_store_infos():
    module = Module(0, 1, 1)
    module.config_input(0, "CV", "Normalled to 10 V")
    module.config_output(0, "Mix")
    assert module.input_infos[0].description == "Normalled to 10 V"
    assert module.output_infos[0].name == "Mix"


def test_base_process_forwards_bypass_routes():
    module = Module(0, 1, 1)
    module.config_bypass(0, 0)
    module.inputs[0].connect(2)
    module.inputs[0].set_voltages([1.0, -1.0])
    module.outputs[0].connect()
    module.process(ProcessArgs())
    assert module.outputs[0].channels == 2
    assert module.outputs[0].voltages[:2] == [1.0, -1.0]