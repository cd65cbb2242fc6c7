"""8vert: eight attenuverter rows, each normalled to the row above it."""

from __future__ import annotations

from fundamod.dsp import ClockDivider
from fundamod.engine import Module, ProcessArgs


class EightVert(Module):
    GAIN_PARAMS = 0
    IN_INPUTS = 0
    OUT_OUTPUTS = 0
    NUM_ROWS = 8
    NORMAL_VOLTAGE = 10.0

    def __init__(self) -> None:
        super().__init__(self.NUM_ROWS, self.NUM_ROWS, self.NUM_ROWS, 0)
        for i in range(self.NUM_ROWS):
            self.config_param(self.GAIN_PARAMS + i, -1.0, 1.0, 0.0, f"Row {i + 1} gain", "%", 0, 100)
            self.config_input(self.IN_INPUTS + i, f"Row {i + 1}")
            self.config_output(self.OUT_OUTPUTS + i, f"Row {i + 1}")
        self.param_divider = ClockDivider(2048)

    def process(self, args: ProcessArgs) -> None:
        signal = [self.NORMAL_VOLTAGE] + [0.0] * 15
        channels = 1

        for port, param, output in zip(self.inputs, self.params, self.outputs):
            if port.is_connected:
                channels = port.channels
                signal[:channels] = port.get_voltages()[:channels]

            if output.is_connected:
                gain = param.value
                output.set_channels(channels)
                output.set_voltages(gain * v for v in signal[:channels])

        if self.param_divider.process():
            self.refresh_param_quantities()

    def refresh_param_quantities(self) -> None:
        """Show gains in volts while rows still carry the 10 V normal, else in percent."""
        normalized = True
        for port, param in zip(self.inputs, self.params):
            if port.is_connected:
                normalized = False
            if normalized:
                param.unit = "V"
                param.display_multiplier = 10.0
            else:
                param.unit = "%"
                param.display_multiplier = 100.0