"""ADSR: polyphonic exponential attack/decay/sustain/release envelope generator."""

from __future__ import annotations

from typing import Any, Iterable

from fundamod.dsp import ClockDivider, SchmittTrigger, clamp
from fundamod.engine import Module, ProcessArgs

_MAX_CHANNELS = 16
_LANE_WIDTH = 4


class ADSR(Module):
    ATTACK_PARAM = 0
    DECAY_PARAM = 1
    SUSTAIN_PARAM = 2
    RELEASE_PARAM = 3
    ATTACK_CV_PARAM = 4
    DECAY_CV_PARAM = 5
    SUSTAIN_CV_PARAM = 6
    RELEASE_CV_PARAM = 7
    PUSH_PARAM = 8
    NUM_PARAMS = 9

    ATTACK_INPUT = 0
    DECAY_INPUT = 1
    SUSTAIN_INPUT = 2
    RELEASE_INPUT = 3
    GATE_INPUT = 4
    RETRIG_INPUT = 5
    NUM_INPUTS = 6

    ENVELOPE_OUTPUT = 0
    NUM_OUTPUTS = 1

    ATTACK_LIGHT = 0
    DECAY_LIGHT = 1
    SUSTAIN_LIGHT = 2
    RELEASE_LIGHT = 3
    PUSH_LIGHT = 4
    NUM_LIGHTS = 5

    MIN_TIME = 1e-3
    MAX_TIME = 10.0
    LAMBDA_BASE = MAX_TIME / MIN_TIME
    ATTACK_TARGET = 1.2
    LIGHT_EPSILON = 0.01

    def __init__(self) -> None:
        super().__init__(self.NUM_PARAMS, self.NUM_INPUTS, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        time_multiplier = self.MIN_TIME * 1000
        self.config_param(self.ATTACK_PARAM, 0.0, 1.0, 0.5, "Attack", " ms", self.LAMBDA_BASE, time_multiplier)
        self.config_param(self.DECAY_PARAM, 0.0, 1.0, 0.5, "Decay", " ms", self.LAMBDA_BASE, time_multiplier)
        self.config_param(self.SUSTAIN_PARAM, 0.0, 1.0, 0.5, "Sustain", "%", 0, 100)
        self.config_param(self.RELEASE_PARAM, 0.0, 1.0, 0.5, "Release", " ms", self.LAMBDA_BASE, time_multiplier)

        self.config_param(self.ATTACK_CV_PARAM, -1.0, 1.0, 0.0, "Attack CV", "%", 0, 100)
        self.config_param(self.DECAY_CV_PARAM, -1.0, 1.0, 0.0, "Decay CV", "%", 0, 100)
        self.config_param(self.SUSTAIN_CV_PARAM, -1.0, 1.0, 0.0, "Sustain CV", "%", 0, 100)
        self.config_param(self.RELEASE_CV_PARAM, -1.0, 1.0, 0.0, "Release CV", "%", 0, 100)

        self.config_button(self.PUSH_PARAM, "Push")

        self.config_input(self.ATTACK_INPUT, "Attack")
        self.config_input(self.DECAY_INPUT, "Decay")
        self.config_input(self.SUSTAIN_INPUT, "Sustain")
        self.config_input(self.RELEASE_INPUT, "Release")
        self.config_input(self.GATE_INPUT, "Gate")
        self.config_input(self.RETRIG_INPUT, "Retrigger")

        self.config_output(self.ENVELOPE_OUTPUT, "Envelope")

        self.attacking = [False] * _MAX_CHANNELS
        self.env = [0.0] * _MAX_CHANNELS
        self.triggers = [SchmittTrigger() for _ in range(_MAX_CHANNELS)]
        self.attack_lambda = [0.0] * _MAX_CHANNELS
        self.decay_lambda = [0.0] * _MAX_CHANNELS
        self.release_lambda = [0.0] * _MAX_CHANNELS
        self.sustain = [0.0] * _MAX_CHANNELS

        self.cv_divider = ClockDivider(16)
        self.light_divider = ClockDivider(128)

    def _stage_value(self, param: int, cv_param: int, port: int, channel: int) -> float:
        value = self.params[param].value
        value += self.inputs[port].get_poly_voltage(channel) / 10.0 * self.params[cv_param].value
        return clamp(value, 0.0, 1.0)

    def _lambda(self, amount: float) -> float:
        return self.LAMBDA_BASE ** -amount / self.MIN_TIME

    def _update_stages(self, lanes: Iterable[int]) -> None:
        for c in lanes:
            attack = self._stage_value(self.ATTACK_PARAM, self.ATTACK_CV_PARAM, self.ATTACK_INPUT, c)
            decay = self._stage_value(self.DECAY_PARAM, self.DECAY_CV_PARAM, self.DECAY_INPUT, c)
            sustain = self._stage_value(self.SUSTAIN_PARAM, self.SUSTAIN_CV_PARAM, self.SUSTAIN_INPUT, c)
            release = self._stage_value(self.RELEASE_PARAM, self.RELEASE_CV_PARAM, self.RELEASE_INPUT, c)
            self.attack_lambda[c] = self._lambda(attack)
            self.decay_lambda[c] = self._lambda(decay)
            self.release_lambda[c] = self._lambda(release)
            self.sustain[c] = sustain

    def process(self, args: ProcessArgs) -> None:
        gate_port = self.inputs[self.GATE_INPUT]
        retrig_port = self.inputs[self.RETRIG_INPUT]
        output = self.outputs[self.ENVELOPE_OUTPUT]
        channels = max(1, gate_port.channels)
        # Channels are handled in groups of four, so a partly used group is processed whole.
        lanes = range(min(_MAX_CHANNELS, -(-channels // _LANE_WIDTH) * _LANE_WIDTH))

        if self.cv_divider.process():
            self._update_stages(lanes)

        push = self.params[self.PUSH_PARAM].value > 0.0
        gates = [False] * _MAX_CHANNELS

        for c in lanes:
            gate = push or gate_port.get_voltage(c) >= 1.0
            gates[c] = gate

            if self.triggers[c].process(retrig_port.get_poly_voltage(c)):
                self.attacking[c] = True

            if gate:
                if self.attacking[c]:
                    target, rate = self.ATTACK_TARGET, self.attack_lambda[c]
                else:
                    target, rate = self.sustain[c], self.decay_lambda[c]
            else:
                target, rate = 0.0, self.release_lambda[c]

            self.env[c] += (target - self.env[c]) * rate * args.sample_time

            if self.env[c] >= 1.0:
                self.attacking[c] = False
            if not gate:
                self.attacking[c] = True

            if c < channels:
                output.set_voltage(10.0 * self.env[c], c)

        output.set_channels(channels)

        if self.light_divider.process():
            self._update_lights(lanes, gates)

    def _update_lights(self, lanes: Iterable[int], gates: list[bool]) -> None:
        attack_on = decay_on = sustain_on = release_on = any_gate = False
        for c in lanes:
            env = self.env[c]
            sustaining = self.sustain[c] <= env < self.sustain[c] + self.LIGHT_EPSILON
            resting = env < self.LIGHT_EPSILON
            gate = gates[c]
            attacking = self.attacking[c]
            attack_on = attack_on or (gate and attacking)
            decay_on = decay_on or (gate and not attacking and not sustaining)
            sustain_on = sustain_on or (gate and not attacking and sustaining)
            release_on = release_on or (not gate and not resting)
            any_gate = any_gate or gate

        self.lights[self.ATTACK_LIGHT].brightness = float(attack_on)
        self.lights[self.DECAY_LIGHT].brightness = float(decay_on)
        self.lights[self.SUSTAIN_LIGHT].brightness = float(sustain_on)
        self.lights[self.RELEASE_LIGHT].brightness = float(release_on)
        self.lights[self.PUSH_LIGHT].brightness = float(any_gate)

    def params_from_json(self, data: Iterable[dict[str, Any]]) -> None:
        """Load params; patches saved before the CV attenuators existed get them fully open."""
        for index in (
            self.ATTACK_CV_PARAM,
            self.DECAY_CV_PARAM,
            self.SUSTAIN_CV_PARAM,
            self.RELEASE_CV_PARAM,
        ):
            self.params[index].value = 1.0
        super().params_from_json(data)