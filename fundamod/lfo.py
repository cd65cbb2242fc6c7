"""LFO: polyphonic low-frequency oscillator with clock sync, reset and pulse width."""

from __future__ import annotations

import math

from fundamod.dsp import ClockDivider, SchmittTrigger, Timer, clamp, exp2_taylor5
from fundamod.engine import Module, ProcessArgs

_MAX_CHANNELS = 16
_LANE_WIDTH = 4


class LFO(Module):
    OFFSET_PARAM = 0
    INVERT_PARAM = 1
    FREQ_PARAM = 2
    FM_PARAM = 3
    FM2_PARAM = 4  # no longer used
    PW_PARAM = 5
    PWM_PARAM = 6
    NUM_PARAMS = 7

    FM_INPUT = 0
    FM2_INPUT = 1  # no longer used
    RESET_INPUT = 2
    PW_INPUT = 3
    CLOCK_INPUT = 4
    NUM_INPUTS = 5

    SIN_OUTPUT = 0
    TRI_OUTPUT = 1
    SAW_OUTPUT = 2
    SQR_OUTPUT = 3
    NUM_OUTPUTS = 4

    PHASE_LIGHT = 0
    INVERT_LIGHT = 3
    OFFSET_LIGHT = 4
    NUM_LIGHTS = 5

    DEFAULT_CLOCK_FREQ = 2.0
    MIN_CLOCK_FREQ = 0.001
    MAX_CLOCK_FREQ = 1000.0

    def __init__(self) -> None:
        super().__init__(self.NUM_PARAMS, self.NUM_INPUTS, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        self.config_switch(self.OFFSET_PARAM, 0.0, 1.0, 1.0, "Offset", ("Bipolar", "Unipolar"))
        self.config_switch(self.INVERT_PARAM, 0.0, 1.0, 0.0, "Invert")
        self.config_param(self.FREQ_PARAM, -8.0, 10.0, 1.0, "Frequency", " Hz", 2, 1)
        self.config_param(self.FM_PARAM, -1.0, 1.0, 0.0, "Frequency modulation", "%", 0.0, 100.0)
        self.params[self.FM_PARAM].randomize_enabled = False
        self.config_param(self.PW_PARAM, 0.01, 0.99, 0.5, "Pulse width", "%", 0.0, 100.0)
        self.config_param(self.PWM_PARAM, -1.0, 1.0, 0.0, "Pulse width modulation", "%", 0.0, 100.0)
        self.params[self.PWM_PARAM].randomize_enabled = False

        self.config_input(self.FM_INPUT, "Frequency modulation")
        self.config_input(self.CLOCK_INPUT, "Clock")
        self.config_input(self.RESET_INPUT, "Reset")
        self.config_input(self.PW_INPUT, "Pulse width modulation")

        self.config_output(self.SIN_OUTPUT, "Sine")
        self.config_output(self.TRI_OUTPUT, "Triangle")
        self.config_output(self.SAW_OUTPUT, "Sawtooth")
        self.config_output(self.SQR_OUTPUT, "Square")

        self.config_light(self.PHASE_LIGHT, "Phase")

        self.phases = [0.0] * _MAX_CHANNELS
        self.reset_triggers = [SchmittTrigger() for _ in range(_MAX_CHANNELS)]
        self.clock_trigger = SchmittTrigger()
        self.clock_freq = 1.0
        self.clock_timer = Timer()
        self.light_divider = ClockDivider(16)
        self.reset()

    def reset(self) -> None:
        super().reset()
        self.phases = [0.0] * _MAX_CHANNELS
        self.clock_freq = 1.0
        self.clock_timer.reset()

    def frequency_display(self) -> float:
        """Frequency knob value as shown: Hz when free-running, a multiple when clocked."""
        param = self.params[self.FREQ_PARAM]
        if self.clock_freq == self.DEFAULT_CLOCK_FREQ:
            param.unit = " Hz"
            param.display_multiplier = 1.0
        else:
            param.unit = "x"
            param.display_multiplier = 0.5
        return param.display_value()

    def _follow_clock(self, args: ProcessArgs) -> None:
        clock = self.inputs[self.CLOCK_INPUT]
        if not clock.is_connected:
            self.clock_freq = self.DEFAULT_CLOCK_FREQ
            return
        self.clock_timer.process(args.sample_time)
        if self.clock_trigger.process(clock.get_voltage(), 0.1, 2.0):
            freq = 1.0 / self.clock_timer.time
            self.clock_timer.reset()
            if self.MIN_CLOCK_FREQ <= freq <= self.MAX_CLOCK_FREQ:
                self.clock_freq = freq

    def process(self, args: ProcessArgs) -> None:
        freq_param = self.params[self.FREQ_PARAM].value
        fm_param = self.params[self.FM_PARAM].value
        pw_param = self.params[self.PW_PARAM].value
        pwm_param = self.params[self.PWM_PARAM].value
        offset = self.params[self.OFFSET_PARAM].value > 0.0
        invert = self.params[self.INVERT_PARAM].value > 0.0

        self._follow_clock(args)

        fm = self.inputs[self.FM_INPUT]
        pw_in = self.inputs[self.PW_INPUT]
        reset_in = self.inputs[self.RESET_INPUT]
        sin_out = self.outputs[self.SIN_OUTPUT]
        tri_out = self.outputs[self.TRI_OUTPUT]
        saw_out = self.outputs[self.SAW_OUTPUT]
        sqr_out = self.outputs[self.SQR_OUTPUT]

        def shape(v: float) -> float:
            if invert:
                v = -v
            if offset:
                v += 1.0
            return 5.0 * v

        channels = max(1, fm.channels)
        # Channels run in groups of four, so a partly used group is advanced whole.
        lanes = range(min(_MAX_CHANNELS, -(-channels // _LANE_WIDTH) * _LANE_WIDTH))

        for c in lanes:
            pitch = freq_param + fm.get_voltage(c) * fm_param
            freq = self.clock_freq / 2.0 * exp2_taylor5(pitch + 30.0) / 2.0**30
            pw = clamp(pw_param + pw_in.get_poly_voltage(c) / 10.0 * pwm_param, 0.01, 0.99)

            phase = self.phases[c] + min(freq * args.sample_time, 0.5)
            phase -= math.trunc(phase)
            if self.reset_triggers[c].process(reset_in.get_poly_voltage(c), 0.1, 2.0):
                phase = 0.0
            self.phases[c] = phase

            if c >= channels:
                continue

            if sin_out.is_connected:
                p = phase - 0.25 if offset else phase
                sin_out.set_voltage(shape(math.sin(2.0 * math.pi * p)), c)
            if tri_out.is_connected:
                p = phase if offset else phase + 0.25
                tri_out.set_voltage(shape(4.0 * abs(p - round(p)) - 1.0), c)
            if saw_out.is_connected:
                p = phase - 0.5 if offset else phase
                saw_out.set_voltage(shape(2.0 * (p - round(p))), c)
            if sqr_out.is_connected:
                sqr_out.set_voltage(shape(1.0 if phase < pw else -1.0), c)

        for port in self.outputs:
            port.set_channels(channels)

        if self.light_divider.process():
            self.lights[self.OFFSET_LIGHT].brightness = float(offset)
            self.lights[self.INVERT_LIGHT].brightness = float(invert)