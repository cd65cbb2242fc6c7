import pytest

from fundamod.adsr import ADSR
from fundamod.engine import ProcessArgs

ARGS = ProcessArgs()


def run(module, samples):
    values = []
    for _ in range(samples):
        module.process(ARGS)
        values.append(module.outputs[ADSR.ENVELOPE_OUTPUT].get_voltage(0))
    return values


def fast_envelope(sustain=0.5):
    adsr = ADSR()
    adsr.params[ADSR.ATTACK_PARAM].value = 0.0
    adsr.params[ADSR.DECAY_PARAM].value = 0.0
    adsr.params[ADSR.RELEASE_PARAM].value = 0.0
    adsr.params[ADSR.SUSTAIN_PARAM].value = sustain
    adsr.inputs[ADSR.GATE_INPUT].connect(1)
    adsr.outputs[ADSR.ENVELOPE_OUTPUT].connect(1)
    return adsr


def set_gate(adsr, voltage):
    adsr.inputs[ADSR.GATE_INPUT].set_voltage(voltage, 0)


def test_envelope_waits_for_first_cv_update():
    adsr = fast_envelope()
    set_gate(adsr, 10.0)
    values = run(adsr, 16)
    assert all(v == 0.0 for v in values[:15])
    assert values[15] > 0.0


def test_attack_overshoots_to_full_scale_after_low_gate():
    adsr = fast_envelope()
    set_gate(adsr, 0.0)
    run(adsr, 1)
    set_gate(adsr, 10.0)
    values = run(adsr, 2000)
    assert max(values) >= 10.0


def test_gate_high_from_start_skips_attack():
    adsr = fast_envelope()
    set_gate(adsr, 10.0)
    values = run(adsr, 2000)
    assert max(values) < 10.0


def test_settles_at_sustain_level():
    sustain = 0.3
    adsr = fast_envelope(sustain)
    set_gate(adsr, 0.0)
    run(adsr, 1)
    set_gate(adsr, 10.0)
    values = run(adsr, 4410)
    assert values[-1] == pytest.approx(10.0 * sustain, abs=0.05)


def test_release_returns_to_zero():
    adsr = fast_envelope()
    set_gate(adsr, 10.0)
    run(adsr, 2000)
    set_gate(adsr, 0.0)
    values = run(adsr, 4410)
    assert values[-1] == pytest.approx(0.0, abs=0.01)


def test_push_button_acts_as_gate():
    adsr = ADSR()
    adsr.params[ADSR.ATTACK_PARAM].value = 0.0
    adsr.params[ADSR.PUSH_PARAM].value = 1.0
    adsr.outputs[ADSR.ENVELOPE_OUTPUT].connect(1)
    values = run(adsr, 512)
    assert values[-1] > 0.0
    assert adsr.lights[ADSR.PUSH_LIGHT].brightness == 1.0


def test_sustain_light_after_settling():
    adsr = fast_envelope()
    set_gate(adsr, 0.0)
    run(adsr, 1)
    set_gate(adsr, 10.0)
    run(adsr, 128 * 35 - 1)
    assert adsr.lights[ADSR.SUSTAIN_LIGHT].brightness == 1.0
    assert adsr.lights[ADSR.ATTACK_LIGHT].brightness == 0.0
    assert adsr.lights[ADSR.RELEASE_LIGHT].brightness == 0.0


def test_retrigger_restarts_attack():
    adsr = fast_envelope()
    set_gate(adsr, 10.0)
    adsr.inputs[ADSR.RETRIG_INPUT].connect(1)
    before = run(adsr, 2000)
    assert max(before) < 10.0
    adsr.inputs[ADSR.RETRIG_INPUT].set_voltage(10.0, 0)
    after = run(adsr, 2000)
    assert max(after) >= 10.0


def test_polyphonic_channels_are_independent():
    adsr = fast_envelope()
    gate = adsr.inputs[ADSR.GATE_INPUT]
    gate.connect(2)
    gate.set_voltage(10.0, 0)
    gate.set_voltage(0.0, 1)
    run(adsr, 2000)
    out = adsr.outputs[ADSR.ENVELOPE_OUTPUT]
    assert out.channels == 2
    assert out.get_voltage(0) > 1.0
    assert out.get_voltage(1) == pytest.approx(0.0, abs=1e-9)


def test_legacy_params_open_cv_attenuators():
    adsr = ADSR()
    adsr.params_from_json([{"id": ADSR.ATTACK_PARAM, "value": 0.25}])
    assert adsr.params[ADSR.ATTACK_PARAM].value == 0.25
    for index in (ADSR.ATTACK_CV_PARAM, ADSR.DECAY_CV_PARAM, ADSR.SUSTAIN_CV_PARAM, ADSR.RELEASE_CV_PARAM):
        assert adsr.params[index].value == 1.0


def test_saved_cv_params_override_legacy_default():
    adsr = ADSR()
    adsr.params_from_json([{"id": ADSR.DECAY_CV_PARAM, "value": -0.5}])
    assert adsr.params[ADSR.DECAY_CV_PARAM].value == -0.5
    assert adsr.params[ADSR.ATTACK_CV_PARAM].value == 1.0


def test_json_round_trip_keeps_params():
    adsr = ADSR()
    adsr.params[ADSR.SUSTAIN_PARAM].value = 0.75
    adsr.params[ADSR.ATTACK_CV_PARAM].value = -0.2
    restored = ADSR()
    restored.from_json(adsr.to_json())
    assert [p.value for p in restored.params] == [p.value for p in adsr.params]