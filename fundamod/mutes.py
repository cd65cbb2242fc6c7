"""Mutes: ten mute switches, each row normalled to the row above it."""

from __future__ import annotations

from typing import Any

from fundamod.engine import Module, ProcessArgs

_MAX_CHANNELS = 16


class Mutes(Module):
    MUTE_PARAMS = 0
    IN_INPUTS = 0
    OUT_OUTPUTS = 0
    MUTE_LIGHTS = 0
    NUM_ROWS = 10

    def __init__(self) -> None:
        super().__init__(self.NUM_ROWS, self.NUM_ROWS, self.NUM_ROWS, self.NUM_ROWS)
        for i in range(self.NUM_ROWS):
            self.config_switch(self.MUTE_PARAMS + i, 0.0, 1.0, 0.0, f"Row {i + 1} mute")
            self.config_input(self.IN_INPUTS + i, f"Row {i + 1}")
            self.config_output(self.OUT_OUTPUTS + i, f"Row {i + 1}")

    def process(self, args: ProcessArgs) -> None:
        signal = [0.0] * _MAX_CHANNELS
        silence = [0.0] * _MAX_CHANNELS

        for port, param, output, light in zip(self.inputs, self.params, self.outputs, self.lights):
            channels = 1
            mute = param.value > 0.0

            # An unpatched row keeps the signal of the row above it.
            if port.is_connected:
                channels = port.channels
                signal[:channels] = port.get_voltages()[:channels]

            if output.is_connected:
                output.set_channels(channels)
                output.set_voltages(silence if mute else signal)

            light.brightness = float(mute)

    def data_from_json(self, data: Any) -> None:
        """Load mute states from patches that stored them as data rather than params."""
        if not isinstance(data, dict):
            return
        states = data.get("states")
        if not isinstance(states, list):
            return
        for param, state in zip(self.params, states):
            if state is not None:
                param.value = 0.0 if state is True else 1.0

    def invert(self) -> None:
        """Flip every mute switch."""
        for param in self.params:
            param.value = 1.0 if param.value == 0.0 else 0.0