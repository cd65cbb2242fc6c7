"""Compare: minimum, maximum, clipping and comparison of two voltages."""

from __future__ import annotations

from fundamod.dsp import ClockDivider
from fundamod.engine import Module, ProcessArgs


class Compare(Module):
    B_PARAM = 0

    A_INPUT = 0
    B_INPUT = 1

    MAX_OUTPUT = 0
    MIN_OUTPUT = 1
    CLIP_OUTPUT = 2
    LIM_OUTPUT = 3
    CLIPGATE_OUTPUT = 4
    LIMGATE_OUTPUT = 5
    GREATER_OUTPUT = 6
    LESS_OUTPUT = 7
    NUM_OUTPUTS = 8

    CLIP_LIGHT = 0
    LIM_LIGHT = 2
    GREATER_LIGHT = 4
    LESS_LIGHT = 6
    NUM_LIGHTS = 8

    GATE_VOLTAGE = 10.0

    def __init__(self) -> None:
        super().__init__(1, 2, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        self.config_param(self.B_PARAM, -10.0, 10.0, 0.0, "B offset", " V")
        self.config_input(self.A_INPUT, "A")
        self.config_input(self.B_INPUT, "B")
        self.config_output(self.MAX_OUTPUT, "Maximum")
        self.config_output(self.MIN_OUTPUT, "Minimum")
        self.config_output(self.CLIP_OUTPUT, "Clip")
        self.config_output(self.LIM_OUTPUT, "Limit")
        self.config_output(self.CLIPGATE_OUTPUT, "Clip gate")
        self.config_output(self.LIMGATE_OUTPUT, "Limit gate")
        self.config_output(self.GREATER_OUTPUT, "A>B")
        self.config_output(self.LESS_OUTPUT, "A<B")
        self.light_divider = ClockDivider(32)

    def _gate(self, state: bool) -> float:
        return self.GATE_VOLTAGE if state else 0.0

    def process(self, args: ProcessArgs) -> None:
        a_port = self.inputs[self.A_INPUT]
        b_port = self.inputs[self.B_INPUT]
        channels = max(1, a_port.channels, b_port.channels)
        b_offset = self.params[self.B_PARAM].value
        out = self.outputs

        any_clipped = any_limited = any_greater = any_less = False

        for c in range(channels):
            a = a_port.get_voltage(c)
            b = b_port.get_voltage(c) + b_offset
            b_abs = abs(b)

            out[self.MAX_OUTPUT].set_voltage(max(a, b), c)
            out[self.MIN_OUTPUT].set_voltage(min(a, b), c)

            clip = a
            clipped = False
            if b_abs < a:
                clip = b_abs
                clipped = True
            elif a < -b_abs:
                clip = -b_abs
                clipped = True
            out[self.CLIP_OUTPUT].set_voltage(clip, c)
            out[self.LIM_OUTPUT].set_voltage(a - clip, c)

            out[self.CLIPGATE_OUTPUT].set_voltage(self._gate(clipped), c)
            out[self.LIMGATE_OUTPUT].set_voltage(self._gate(not clipped), c)
            any_clipped = any_clipped or clipped
            any_limited = any_limited or not clipped

            out[self.GREATER_OUTPUT].set_voltage(self._gate(a > b), c)
            out[self.LESS_OUTPUT].set_voltage(self._gate(a < b), c)
            any_greater = any_greater or a > b
            any_less = any_less or a < b

        for port in out:
            port.set_channels(channels)

        if self.light_divider.process():
            light_time = args.sample_time * self.light_divider.division
            for index, active in (
                (self.CLIP_LIGHT, any_clipped),
                (self.LIM_LIGHT, any_limited),
                (self.GREATER_LIGHT, any_greater),
                (self.LESS_LIGHT, any_less),
            ):
                self.lights[index].set_brightness_smooth(active and channels <= 1, light_time)
                self.lights[index + 1].set_brightness_smooth(active and channels > 1, light_time)