"""Merge: combines sixteen monophonic inputs into one polyphonic output."""

from __future__ import annotations

from typing import Any

from fundamod.dsp import ClockDivider
from fundamod.engine import Module, ProcessArgs


class Merge(Module):
    MONO_INPUTS = 0
    NUM_INPUTS = 16

    POLY_OUTPUT = 0
    NUM_OUTPUTS = 1

    CHANNEL_LIGHTS = 0
    NUM_LIGHTS = 16

    AUTOMATIC = -1

    def __init__(self) -> None:
        super().__init__(0, self.NUM_INPUTS, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        for i in range(self.NUM_INPUTS):
            self.config_input(self.MONO_INPUTS + i, f"Channel {i + 1}")
        self.config_output(self.POLY_OUTPUT, "Polyphonic")

        self.light_divider = ClockDivider(512)
        self.channels = self.AUTOMATIC
        self.automatic_channels = 0
        self.reset()

    def reset(self) -> None:
        super().reset()
        self.channels = self.AUTOMATIC

    def process(self, args: ProcessArgs) -> None:
        output = self.outputs[self.POLY_OUTPUT]
        last_channel = -1
        for c, port in enumerate(self.inputs):
            voltage = 0.0
            if port.is_connected:
                last_channel = c
                voltage = port.get_voltage()
            output.set_voltage(voltage, c)
        self.automatic_channels = last_channel + 1

        # Zero channels is allowed here, so the count is set directly.
        output.channels = self.channels if self.channels >= 0 else self.automatic_channels

    def channel_labels(self) -> list[str]:
        """Menu labels: automatic first, then every fixed count from 0 to 16."""
        labels = [f"Automatic ({self.automatic_channels})"]
        labels.extend(str(i) for i in range(self.NUM_INPUTS + 1))
        return labels

    def data_to_json(self) -> dict[str, Any]:
        return {"channels": self.channels}

    def data_from_json(self, data: dict[str, Any]) -> None:
        if "channels" in data:
            value = data["channels"]
            self.channels = value if isinstance(value, int) and not isinstance(value, bool) else 0