"""Mult: copies one polyphonic input to eight outputs."""

from __future__ import annotations

from fundamod.engine import Module, ProcessArgs


class Mult(Module):
    MULT_INPUT = 0
    MULT_OUTPUTS = 0
    NUM_OUTPUTS = 8

    def __init__(self) -> None:
        super().__init__(0, 1, self.NUM_OUTPUTS, 0)
        self.config_input(self.MULT_INPUT, "Mult")
        for i in range(self.NUM_OUTPUTS):
            self.config_output(self.MULT_OUTPUTS + i, f"Mult {i + 1}")

    def process(self, args: ProcessArgs) -> None:
        source = self.inputs[self.MULT_INPUT]
        channels = max(1, source.channels)
        voltages = source.get_voltages()
        for output in self.outputs:
            output.set_channels(channels)
            output.set_voltages(voltages)