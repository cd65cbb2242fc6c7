"""Logic: boolean operations on two gate inputs."""

from __future__ import annotations

from fundamod.dsp import ClockDivider
from fundamod.engine import Module, ProcessArgs


class Logic(Module):
    B_PARAM = 0

    A_INPUT = 0
    B_INPUT = 1

    NOTA_OUTPUT = 0
    NOTB_OUTPUT = 1
    OR_OUTPUT = 2
    NOR_OUTPUT = 3
    AND_OUTPUT = 4
    NAND_OUTPUT = 5
    XOR_OUTPUT = 6
    XNOR_OUTPUT = 7
    NUM_OUTPUTS = 8

    B_BUTTON_LIGHT = 0
    NOTA_LIGHT = 1
    NUM_LIGHTS = 1 + 2 * NUM_OUTPUTS

    THRESHOLD = 1.0
    GATE_VOLTAGE = 10.0

    def __init__(self) -> None:
        super().__init__(1, 2, self.NUM_OUTPUTS, self.NUM_LIGHTS)
        self.config_button(self.B_PARAM, "B")
        self.config_input(self.A_INPUT, "A")
        self.config_input(self.B_INPUT, "B")
        names = ("NOT A", "NOT B", "OR", "NOR", "AND", "NAND", "XOR", "XNOR")
        for i, name in enumerate(names):
            self.config_output(self.NOTA_OUTPUT + i, name)
        self.light_divider = ClockDivider(32)

    @staticmethod
    def _states(a: bool, b: bool) -> tuple[bool, ...]:
        return (
            not a,
            not b,
            a or b,
            not (a or b),
            a and b,
            not (a and b),
            a != b,
            a == b,
        )

    def process(self, args: ProcessArgs) -> None:
        a_port = self.inputs[self.A_INPUT]
        b_port = self.inputs[self.B_INPUT]
        channels = max(1, a_port.channels, b_port.channels)
        b_push = self.params[self.B_PARAM].value > 0.0
        any_state = [False] * self.NUM_OUTPUTS

        for c in range(channels):
            a = a_port.get_poly_voltage(c) >= self.THRESHOLD
            b = b_push or b_port.get_poly_voltage(c) >= self.THRESHOLD
            for i, state in enumerate(self._states(a, b)):
                self.outputs[self.NOTA_OUTPUT + i].set_voltage(self.GATE_VOLTAGE if state else 0.0, c)
                if state:
                    any_state[i] = True

        for port in self.outputs:
            port.set_channels(channels)

        if self.light_divider.process():
            light_time = args.sample_time * self.light_divider.division
            self.lights[self.B_BUTTON_LIGHT].brightness = float(b_push)
            for i, active in enumerate(any_state):
                base = self.NOTA_LIGHT + 2 * i
                self.lights[base].set_brightness_smooth(active and channels == 1, light_time)
                self.lights[base + 1].set_brightness_smooth(active and channels > 1, light_time)