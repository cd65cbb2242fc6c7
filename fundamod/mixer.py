"""Mixer: sums six polyphonic inputs with a level control."""

from __future__ import annotations

from typing import Any

from fundamod.engine import Module, ProcessArgs


class Mixer(Module):
    LEVEL_PARAM = 0
    IN_INPUTS = 0
    OUT_OUTPUT = 0
    NUM_INPUTS = 6

    def __init__(self) -> None:
        super().__init__(1, self.NUM_INPUTS, 1, 0)
        self.invert = False
        self.average = False
        self.config_param(self.LEVEL_PARAM, 0.0, 1.0, 1.0, "Level", "%", 0, 100)
        for i in range(self.NUM_INPUTS):
            self.config_input(self.IN_INPUTS + i, f"Channel {i + 1}")
        self.config_output(self.OUT_OUTPUT, "Mix")

    def process(self, args: ProcessArgs) -> None:
        channels = max(1, *(port.channels for port in self.inputs))
        connected = sum(1 for port in self.inputs if port.is_connected)

        gain = self.params[self.LEVEL_PARAM].value
        if self.invert:
            gain *= -1.0
        if self.average:
            gain /= max(1, connected)

        output = self.outputs[self.OUT_OUTPUT]
        for c in range(channels):
            output.set_voltage(sum(port.get_voltage(c) for port in self.inputs) * gain, c)
        output.set_channels(channels)

    def data_to_json(self) -> dict[str, Any]:
        return {"average": self.average, "invert": self.invert}

    def data_from_json(self, data: dict[str, Any]) -> None:
        if "average" in data:
            self.average = data["average"] is True
        if "invert" in data:
            self.invert = data["invert"] is True