"""Octave: shifts a 1 V/octave pitch by whole octaves."""

from __future__ import annotations

import math
from typing import Any

from fundamod.engine import Module, ProcessArgs


def _round_half_away(x: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


class Octave(Module):
    OCTAVE_PARAM = 0

    PITCH_INPUT = 0
    OCTAVE_INPUT = 1

    PITCH_OUTPUT = 0

    def __init__(self) -> None:
        super().__init__(1, 2, 1, 0)
        param = self.config_param(self.OCTAVE_PARAM, -4.0, 4.0, 0.0, "Shift", " oct")
        param.snap = True
        self.config_input(self.PITCH_INPUT, "1V/octave pitch")
        self.config_input(self.OCTAVE_INPUT, "Octave shift CV")
        self.config_output(self.PITCH_OUTPUT, "Pitch")
        self.config_bypass(self.PITCH_INPUT, self.PITCH_OUTPUT)
        self.last_octave = 0

    def process(self, args: ProcessArgs) -> None:
        pitch_in = self.inputs[self.PITCH_INPUT]
        octave_in = self.inputs[self.OCTAVE_INPUT]
        output = self.outputs[self.PITCH_OUTPUT]
        channels = max(pitch_in.channels, 1)
        octave_param = _round_half_away(self.params[self.OCTAVE_PARAM].value)

        for c in range(channels):
            octave = octave_param + _round_half_away(octave_in.get_poly_voltage(c))
            output.set_voltage(pitch_in.get_voltage(c) + octave, c)
            if c == 0:
                self.last_octave = octave
        output.set_channels(channels)

    def data_from_json(self, data: Any) -> None:
        """Older patches stored the shift as data instead of a param."""
        if not isinstance(data, dict) or "octave" not in data:
            return
        value = data["octave"]
        if isinstance(value, bool) or not isinstance(value, int):
            value = 0
        self.params[self.OCTAVE_PARAM].value = float(value)