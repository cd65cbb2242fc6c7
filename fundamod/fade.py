"""Fade: crossfader between two polyphonic inputs with a selectable pan law."""

from __future__ import annotations

import math
from typing import Any

from fundamod.dsp import clamp
from fundamod.engine import Module, ProcessArgs


class Fade(Module):
    CROSSFADE_PARAM = 0
    CROSSFADE_CV_PARAM = 1

    CROSSFADE_INPUT = 0
    IN1_INPUT = 1
    IN2_INPUT = 2

    OUT1_OUTPUT = 0
    OUT2_OUTPUT = 1

    PAN_LAW_LINEAR = 0
    PAN_LAW_SQRT = 1
    PAN_LAW_LABELS = ("-6 dB (linear)", "-3 dB")

    def __init__(self) -> None:
        super().__init__(2, 3, 2, 0)
        self.pan_law = self.PAN_LAW_LINEAR
        self.config_param(self.CROSSFADE_PARAM, 0.0, 1.0, 0.5, "Crossfade", "%", 0, 100)
        self.config_param(self.CROSSFADE_CV_PARAM, -1.0, 1.0, 0.0, "Crossfade CV", "%", 0, 100)
        self.config_input(self.CROSSFADE_INPUT, "Crossfade")
        self.config_input(self.IN1_INPUT, "Ch 1")
        self.config_input(self.IN2_INPUT, "Ch 2")
        self.config_output(self.OUT1_OUTPUT, "Ch 1")
        self.config_output(self.OUT2_OUTPUT, "Ch 2")
        self.config_bypass(self.IN1_INPUT, self.OUT1_OUTPUT)
        self.config_bypass(self.IN2_INPUT, self.OUT2_OUTPUT)

    def reset(self) -> None:
        super().reset()
        self.pan_law = self.PAN_LAW_LINEAR

    def process(self, args: ProcessArgs) -> None:
        out1 = self.outputs[self.OUT1_OUTPUT]
        out2 = self.outputs[self.OUT2_OUTPUT]
        if not out1.is_connected and not out2.is_connected:
            return

        in1 = self.inputs[self.IN1_INPUT]
        in2 = self.inputs[self.IN2_INPUT]
        cv = self.inputs[self.CROSSFADE_INPUT]
        channels = max(1, in1.channels, in2.channels)
        knob = self.params[self.CROSSFADE_PARAM].value
        cv_amount = self.params[self.CROSSFADE_CV_PARAM].value

        for c in range(channels):
            fade = clamp(knob + cv.get_poly_voltage(c) / 10.0 * cv_amount, 0.0, 1.0)
            fade_inv = 1.0 - fade
            if self.pan_law == self.PAN_LAW_SQRT:
                fade = math.sqrt(fade)
                fade_inv = math.sqrt(fade_inv)

            a = in1.get_poly_voltage(c)
            b = in2.get_poly_voltage(c)
            out1.set_voltage(fade_inv * a + fade * b, c)
            out2.set_voltage(fade * a + fade_inv * b, c)

        out1.set_channels(channels)
        out2.set_channels(channels)

    def data_to_json(self) -> dict[str, Any]:
        return {"panLaw": self.pan_law}

    def data_from_json(self, data: dict[str, Any]) -> None:
        if "panLaw" in data:
            value = data["panLaw"]
            self.pan_law = value if isinstance(value, int) and not isinstance(value, bool) else 0