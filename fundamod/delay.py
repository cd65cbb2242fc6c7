"""Delay: clock-syncable delay line with feedback, tone and dry/wet mix."""

from __future__ import annotations

import math
from collections import deque
from itertools import islice
from typing import Any, Iterable, Sequence

from fundamod.dsp import RCFilter, SchmittTrigger, Timer, clamp, crossfade
from fundamod.engine import Module, ProcessArgs


class _LinearResampler:
    """Streaming linear-interpolation sample rate converter."""

    def __init__(self) -> None:
        self.previous = 0.0
        self.current = 0.0
        self.position = 1.0

    def process(self, frames: Sequence[float], ratio: float, max_output: int) -> tuple[int, list[float]]:
        """Convert ``frames`` at ``ratio`` (output rate / input rate).

        Returns how many input frames were used and the frames generated.
        """
        step = 1.0 / ratio
        used = 0
        generated: list[float] = []
        while len(generated) < max_output:
            while self.position >= 1.0:
                if used >= len(frames):
                    return used, generated
                self.previous, self.current = self.current, frames[used]
                used += 1
                self.position -= 1.0
            generated.append(self.previous + (self.current - self.previous) * self.position)
            self.position += step
        return used, generated


class Delay(Module):
    TIME_PARAM = 0
    FEEDBACK_PARAM = 1
    TONE_PARAM = 2
    MIX_PARAM = 3
    TIME_CV_PARAM = 4
    FEEDBACK_CV_PARAM = 5
    TONE_CV_PARAM = 6
    MIX_CV_PARAM = 7
    NUM_PARAMS = 8

    TIME_INPUT = 0
    FEEDBACK_INPUT = 1
    TONE_INPUT = 2
    MIX_INPUT = 3
    IN_INPUT = 4
    CLOCK_INPUT = 5
    NUM_INPUTS = 6

    MIX_OUTPUT = 0
    WET_OUTPUT = 1
    NUM_OUTPUTS = 2

    CLOCK_LIGHT = 0
    NUM_LIGHTS = 1

    HISTORY_SIZE = 1 << 21
    OUT_BUFFER_SIZE = 16
    DEFAULT_CLOCK_FREQ = 2.0

    def __init__(self) -> None:
        super().__init__(self.NUM_PARAMS, self.NUM_INPUTS, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        # Time knob maps 0..1 to 0.001..10 s as time = 0.001 * 10000**value.
        time_min = math.log10(0.001 * 1000) / 4
        time_max = math.log10(10.0 * 1000) / 4
        time_default = math.log10(0.5 * 1000) / 4
        self.config_param(self.TIME_PARAM, time_min, time_max, time_default, "Time", " s", 10.0 / 1e-3, 1e-3)
        self.config_param(self.FEEDBACK_PARAM, 0.0, 1.0, 0.5, "Feedback", "%", 0, 100)
        self.config_param(self.TONE_PARAM, 0.0, 1.0, 0.5, "Tone", "%", 0, 200, -100)
        self.config_param(self.MIX_PARAM, 0.0, 1.0, 0.5, "Mix", "%", 0, 100)
        for index, name in (
            (self.TIME_CV_PARAM, "Time CV"),
            (self.FEEDBACK_CV_PARAM, "Feedback CV"),
            (self.TONE_CV_PARAM, "Tone CV"),
            (self.MIX_CV_PARAM, "Mix CV"),
        ):
            param = self.config_param(index, -1.0, 1.0, 0.0, name, "%", 0, 100)
            param.randomize_enabled = False

        self.config_input(self.TIME_INPUT, "Time", "1V/octave when Time CV is 100%")
        self.config_input(self.FEEDBACK_INPUT, "Feedback")
        self.config_input(self.TONE_INPUT, "Tone")
        self.config_input(self.MIX_INPUT, "Mix")
        self.config_input(self.IN_INPUT, "Audio")
        self.config_input(self.CLOCK_INPUT, "Clock")

        self.config_output(self.MIX_OUTPUT, "Mix")
        self.config_output(self.WET_OUTPUT, "Wet")

        self.config_bypass(self.IN_INPUT, self.WET_OUTPUT)
        self.config_bypass(self.IN_INPUT, self.MIX_OUTPUT)

        self.history: deque[float] = deque()
        self.out_buffer: deque[float] = deque()
        self.resampler = _LinearResampler()
        self.last_wet = 0.0
        self.lowpass_filter = RCFilter()
        self.highpass_filter = RCFilter()
        self.clock_freq = 1.0
        self.clock_timer = Timer()
        self.clock_trigger = SchmittTrigger()

    def _follow_clock(self, args: ProcessArgs) -> None:
        clock = self.inputs[self.CLOCK_INPUT]
        if not clock.is_connected:
            self.clock_freq = self.DEFAULT_CLOCK_FREQ
            return
        self.clock_timer.process(args.sample_time)
        if self.clock_trigger.process(clock.get_voltage(), 0.1, 2.0):
            freq = 1.0 / self.clock_timer.time
            self.clock_timer.reset()
            if 0.001 <= freq <= 1000.0:
                self.clock_freq = freq

    def _modulated(self, param: int, cv_param: int, port: int) -> float:
        value = self.params[param].value
        value += self.inputs[port].get_voltage() / 10.0 * self.params[cv_param].value
        return clamp(value, 0.0, 1.0)

    def process(self, args: ProcessArgs) -> None:
        self._follow_clock(args)

        dry_in = self.inputs[self.IN_INPUT].get_voltage_sum()
        feedback = self._modulated(self.FEEDBACK_PARAM, self.FEEDBACK_CV_PARAM, self.FEEDBACK_INPUT)
        dry = dry_in + self.last_wet * feedback

        # The time knob is rescaled to 1 V/octave pitch for backwards compatibility.
        pitch = math.log2(1000.0) - math.log2(10000.0) * self.params[self.TIME_PARAM].value
        pitch += self.inputs[self.TIME_INPUT].get_voltage() * self.params[self.TIME_CV_PARAM].value
        freq = self.clock_freq / 2.0 * 2.0**pitch
        index = args.sample_rate / freq
        # Compensate for the output buffer and the converter's own latency.
        index -= self.OUT_BUFFER_SIZE + 4.0
        index = clamp(index, 2.0, float(self.HISTORY_SIZE - 1))

        if len(self.history) < self.HISTORY_SIZE:
            self.history.append(dry)

        if not self.out_buffer:
            consume = index - len(self.history)
            ratio = 4.0 ** clamp(consume / 10000.0, -1.0, 1.0)
            frames = list(islice(self.history, min(len(self.history), self.OUT_BUFFER_SIZE)))
            used, generated = self.resampler.process(frames, ratio, self.OUT_BUFFER_SIZE)
            for _ in range(used):
                self.history.popleft()
            self.out_buffer.extend(generated)

        wet = self.out_buffer.popleft() if self.out_buffer else 0.0

        color = self._modulated(self.TONE_PARAM, self.TONE_CV_PARAM, self.TONE_INPUT)
        color_freq = 100.0 ** (2.0 * color - 1.0)

        lowpass_freq = clamp(20000.0 * color_freq, 20.0, 20000.0)
        self.lowpass_filter.set_cutoff_freq(lowpass_freq / args.sample_rate)
        self.lowpass_filter.process(wet)
        wet = self.lowpass_filter.lowpass()

        highpass_freq = clamp(20.0 * color_freq, 20.0, 20000.0)
        self.highpass_filter.set_cutoff(highpass_freq / args.sample_rate)
        self.highpass_filter.process(wet)
        wet = self.highpass_filter.highpass()

        self.outputs[self.WET_OUTPUT].set_voltage(wet)
        self.last_wet = wet

        mix = self._modulated(self.MIX_PARAM, self.MIX_CV_PARAM, self.MIX_INPUT)
        self.outputs[self.MIX_OUTPUT].set_voltage(crossfade(dry_in, wet, mix))

    def params_from_json(self, data: Iterable[dict[str, Any]]) -> None:
        """Load params; patches saved before the CV attenuators existed get them fully open.

        The time CV scaling changed, so it keeps its default instead.
        """
        for index in (self.FEEDBACK_CV_PARAM, self.TONE_CV_PARAM, self.MIX_CV_PARAM):
            self.params[index].value = 1.0
        super().params_from_json(data)