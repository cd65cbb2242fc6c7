"""CV Mix: three attenuverted CV inputs, normalled to 10 V, summed."""

from __future__ import annotations

from fundamod.engine import Module, ProcessArgs


class CVMix(Module):
    LEVEL_PARAMS = 0
    CV_INPUTS = 0
    MIX_OUTPUT = 0
    NUM_ROWS = 3
    NORMAL_VOLTAGE = 10.0

    def __init__(self) -> None:
        super().__init__(self.NUM_ROWS, self.NUM_ROWS, 1, 0)
        for i in range(self.NUM_ROWS):
            self.config_param(self.LEVEL_PARAMS + i, -1.0, 1.0, 0.0, f"Level {i + 1}", "%", 0, 100)
        for i in range(self.NUM_ROWS):
            self.config_input(self.CV_INPUTS + i, f"CV {i + 1}", "Normalled to 10 V")
        self.config_output(self.MIX_OUTPUT, "Mix")

    def process(self, args: ProcessArgs) -> None:
        output = self.outputs[self.MIX_OUTPUT]
        if not output.is_connected:
            return

        rows = list(zip(self.inputs, self.params))
        channels = max(1, *(port.channels for port in self.inputs))
        for c in range(channels):
            mix = sum(
                port.get_normal_poly_voltage(self.NORMAL_VOLTAGE, c) * param.value
                for port, param in rows
            )
            output.set_voltage(mix, c)
        output.set_channels(channels)