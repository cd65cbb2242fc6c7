"""Gates: edge triggers, flip-flop, gate lengthener and gate delay."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field

from fundamod.dsp import BooleanTrigger, ClockDivider, PulseGenerator, SchmittTrigger, exp2_taylor5
from fundamod.engine import Module, ProcessArgs

_MAX_EVENTS = (1 << 10) - 1
_PULSE_TIME = 1e-3


@dataclass
class _StateEvents:
    """Gate state changes ordered by time."""

    times: list[float] = field(default_factory=list)
    states: list[bool] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.times)

    def clear(self) -> None:
        self.times.clear()
        self.states.clear()

    def state_at(self, time: float) -> bool:
        """State of the latest event at or before ``time``; False if there is none."""
        index = bisect.bisect_right(self.times, time)
        return self.states[index - 1] if index > 0 else False

    def drop_oldest(self) -> None:
        del self.times[0]
        del self.states[0]

    def record(self, time: float, state: bool) -> None:
        index = bisect.bisect_left(self.times, time)
        if index < len(self.times) and self.times[index] == time:
            self.states[index] = state
        else:
            self.times.insert(index, time)
            self.states.insert(index, state)


@dataclass
class _Engine:
    state: bool = False
    reset_trigger: SchmittTrigger = field(default_factory=SchmittTrigger)
    rise_pulse: PulseGenerator = field(default_factory=PulseGenerator)
    fall_pulse: PulseGenerator = field(default_factory=PulseGenerator)
    flop: bool = False
    gate_time: float = math.inf
    events: _StateEvents = field(default_factory=_StateEvents)


class Gates(Module):
    LENGTH_PARAM = 0
    RESET_PARAM = 1

    LENGTH_INPUT = 0
    IN_INPUT = 1
    RESET_INPUT = 2

    RISE_OUTPUT = 0
    FALL_OUTPUT = 1
    FLIP_OUTPUT = 2
    FLOP_OUTPUT = 3
    GATE_OUTPUT = 4
    DELAY_OUTPUT = 5
    NUM_OUTPUTS = 6

    RESET_LIGHT = 0
    RISE_LIGHT = 1
    FALL_LIGHT = 3
    FLIP_LIGHT = 5
    FLOP_LIGHT = 7
    GATE_LIGHT = 9
    DELAY_LIGHT = 11
    NUM_LIGHTS = 13

    GATE_VOLTAGE = 10.0

    def __init__(self) -> None:
        super().__init__(2, 3, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        self.config_param(
            self.LENGTH_PARAM, math.log2(1e-3), math.log2(10.0), math.log2(0.1),
            "Gate length", " ms", 2, 1000,
        )
        self.config_button(self.RESET_PARAM, "Reset flip/flop")
        self.config_input(self.LENGTH_INPUT, "Gate length")
        self.config_input(self.IN_INPUT, "Gate")
        self.config_input(self.RESET_INPUT, "Reset flip/flop")
        self.config_output(self.RISE_OUTPUT, "Rising edge trigger")
        self.config_output(self.FALL_OUTPUT, "Falling edge trigger")
        self.config_output(self.FLIP_OUTPUT, "Flip")
        self.config_output(self.FLOP_OUTPUT, "Flop")
        self.config_output(self.GATE_OUTPUT, "Gate")
        self.config_output(self.DELAY_OUTPUT, "Gate delay")

        self.time = 0.0
        self.reset_param_trigger = BooleanTrigger()
        self.light_divider = ClockDivider(32)
        self.engines = [_Engine() for _ in range(16)]

    def _gate(self, state: bool) -> float:
        return self.GATE_VOLTAGE if state else 0.0

    def process(self, args: ProcessArgs) -> None:
        gate_in = self.inputs[self.IN_INPUT]
        channels = max(1, gate_in.channels)
        out = self.outputs
        delay_connected = out[self.DELAY_OUTPUT].is_connected

        any_rise = any_fall = any_flip = any_flop = any_gate = any_delay = False

        reset_button = self.reset_param_trigger.process(self.params[self.RESET_PARAM].value > 0.0)

        for c in range(channels):
            e = self.engines[c]
            v = gate_in.get_voltage(c)

            new_state = False
            if e.state:
                if v <= 0.1:
                    e.state = False
                    e.fall_pulse.trigger(_PULSE_TIME)
                    new_state = True
            elif v >= 2.0:
                e.state = True
                e.rise_pulse.trigger(_PULSE_TIME)
                e.flop = not e.flop
                e.gate_time = 0.0
                new_state = True

            reset = reset_button
            if e.reset_trigger.process(self.inputs[self.RESET_INPUT].get_voltage(c), 0.1, 2.0):
                reset = True
            if reset:
                e.flop = False
                e.events.clear()

            rise = e.rise_pulse.process(args.sample_time)
            out[self.RISE_OUTPUT].set_voltage(self._gate(rise), c)
            any_rise = any_rise or rise

            fall = e.fall_pulse.process(args.sample_time)
            out[self.FALL_OUTPUT].set_voltage(self._gate(fall), c)
            any_fall = any_fall or fall

            out[self.FLIP_OUTPUT].set_voltage(self._gate(not e.flop), c)
            any_flip = any_flip or not e.flop

            out[self.FLOP_OUTPUT].set_voltage(self._gate(e.flop), c)
            any_flop = any_flop or e.flop

            gate_pitch = self.params[self.LENGTH_PARAM].value + self.inputs[self.LENGTH_INPUT].get_poly_voltage(c)
            gate_length = exp2_taylor5(gate_pitch + 30.0) / 1073741824
            if math.isfinite(e.gate_time):
                e.gate_time += args.sample_time
                if reset or e.gate_time >= gate_length:
                    e.gate_time = math.inf

            gate = math.isfinite(e.gate_time)
            out[self.GATE_OUTPUT].set_voltage(self._gate(gate), c)
            any_gate = any_gate or gate

            if delay_connected:
                delay_gate = e.events.state_at(self.time - gate_length)
                if new_state:
                    if len(e.events) >= _MAX_EVENTS:
                        e.events.drop_oldest()
                    e.events.record(self.time, e.state)
                out[self.DELAY_OUTPUT].set_voltage(self._gate(delay_gate), c)
                any_delay = any_delay or delay_gate

        self.time += args.sample_time

        for port in out:
            port.set_channels(channels)

        if self.light_divider.process():
            light_time = args.sample_time * self.light_divider.division
            self.lights[self.RESET_LIGHT].brightness = float(self.params[self.RESET_PARAM].value > 0.0)
            for index, active in (
                (self.RISE_LIGHT, any_rise),
                (self.FALL_LIGHT, any_fall),
                (self.FLIP_LIGHT, any_flip),
                (self.FLOP_LIGHT, any_flop),
                (self.GATE_LIGHT, any_gate),
                (self.DELAY_LIGHT, any_delay),
            ):
                self.lights[index].set_brightness_smooth(active and channels <= 1, light_time)
                self.lights[index + 1].set_brightness_smooth(active and channels > 1, light_time)