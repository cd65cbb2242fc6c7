"""Mid/Side: stereo to mid/side encoder and mid/side to stereo decoder with width."""

from __future__ import annotations

from fundamod.engine import Module, Port, ProcessArgs


class MidSide(Module):
    ENC_WIDTH_PARAM = 0
    DEC_WIDTH_PARAM = 1

    ENC_WIDTH_INPUT = 0
    ENC_LEFT_INPUT = 1
    ENC_RIGHT_INPUT = 2
    DEC_WIDTH_INPUT = 3
    DEC_MID_INPUT = 4
    DEC_SIDES_INPUT = 5

    ENC_MID_OUTPUT = 0
    ENC_SIDES_OUTPUT = 1
    DEC_LEFT_OUTPUT = 2
    DEC_RIGHT_OUTPUT = 3

    def __init__(self) -> None:
        super().__init__(2, 6, 4, 0)
        self.config_param(self.ENC_WIDTH_PARAM, 0.0, 2.0, 1.0, "Encoder width", "%", 0, 100)
        self.config_param(self.DEC_WIDTH_PARAM, 0.0, 2.0, 1.0, "Decoder width", "%", 0, 100)
        self.config_input(self.ENC_WIDTH_INPUT, "Encoder width")
        self.config_input(self.ENC_LEFT_INPUT, "Encoder left")
        self.config_input(self.ENC_RIGHT_INPUT, "Encoder right")
        self.config_input(self.DEC_WIDTH_INPUT, "Decoder width")
        self.config_input(self.DEC_MID_INPUT, "Decoder mid")
        self.config_input(self.DEC_SIDES_INPUT, "Decoder sides")
        self.config_output(self.ENC_MID_OUTPUT, "Encoder mid")
        self.config_output(self.ENC_SIDES_OUTPUT, "Encoder sides")
        self.config_output(self.DEC_LEFT_OUTPUT, "Decoder left")
        self.config_output(self.DEC_RIGHT_OUTPUT, "Decoder right")

    @staticmethod
    def _width(knob: float, cv: Port, channel: int) -> float:
        return max(knob + cv.get_poly_voltage(channel) / 10.0 * 2.0, 0.0)

    def process(self, args: ProcessArgs) -> None:
        self._encode()
        self._decode()

    def _encode(self) -> None:
        left = self.inputs[self.ENC_LEFT_INPUT]
        right = self.inputs[self.ENC_RIGHT_INPUT]
        mid_out = self.outputs[self.ENC_MID_OUTPUT]
        sides_out = self.outputs[self.ENC_SIDES_OUTPUT]
        channels = max(left.channels, right.channels)
        mid_out.set_channels(channels)
        sides_out.set_channels(channels)

        knob = self.params[self.ENC_WIDTH_PARAM].value
        width_cv = self.inputs[self.ENC_WIDTH_INPUT]
        for c in range(channels):
            width = self._width(knob, width_cv, c)
            l = left.get_voltage(c)
            r = right.get_voltage(c)
            mid_out.set_voltage((l + r) / 2.0, c)
            sides_out.set_voltage((l - r) / 2.0 * width, c)

    def _decode(self) -> None:
        mid = self.inputs[self.DEC_MID_INPUT]
        sides = self.inputs[self.DEC_SIDES_INPUT]
        left_out = self.outputs[self.DEC_LEFT_OUTPUT]
        right_out = self.outputs[self.DEC_RIGHT_OUTPUT]
        channels = max(mid.channels, sides.channels)
        left_out.set_channels(channels)
        right_out.set_channels(channels)

        knob = self.params[self.DEC_WIDTH_PARAM].value
        width_cv = self.inputs[self.DEC_WIDTH_INPUT]
        for c in range(channels):
            width = self._width(knob, width_cv, c)
            m = mid.get_voltage(c)
            s = sides.get_voltage(c) * width
            left_out.set_voltage(m + s, c)
            right_out.set_voltage(m - s, c)