"""Core signal model: ports, parameters, lights and the module base class."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from fundamod.dsp import ClockDivider  # noqa: F401  (re-exported for modules)

PORT_MAX_CHANNELS = 16
LIGHT_SMOOTH_LAMBDA = 30.0


@dataclass(frozen=True)
class ProcessArgs:
    """Timing information handed to a module for each processed sample."""

    sample_rate: float = 44100.0
    frame: int = 0

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("sample rate must be positive")

    @property
    def sample_time(self) -> float:
        return 1.0 / self.sample_rate


class Port:
    """A polyphonic jack carrying up to 16 channels of voltage.

    A port with zero channels is disconnected.
    """

    def __init__(self) -> None:
        self.channels = 0
        self.voltages = [0.0] * PORT_MAX_CHANNELS

    def __repr__(self) -> str:
        return f"Port(channels={self.channels}, voltages={self.voltages[:self.channels]})"

    @property
    def is_connected(self) -> bool:
        return self.channels > 0

    @property
    def is_monophonic(self) -> bool:
        return self.channels == 1

    def connect(self, channels: int = 1) -> None:
        """Mark the port as patched with the given number of channels."""
        if not 1 <= channels <= PORT_MAX_CHANNELS:
            raise ValueError(f"channels must be between 1 and {PORT_MAX_CHANNELS}")
        self.channels = channels
        for c in range(channels, PORT_MAX_CHANNELS):
            self.voltages[c] = 0.0

    def disconnect(self) -> None:
        """Unpatch the port and clear its voltages."""
        self.channels = 0
        self.voltages = [0.0] * PORT_MAX_CHANNELS

    def get_voltage(self, channel: int = 0) -> float:
        return self.voltages[channel]

    def get_poly_voltage(self, channel: int) -> float:
        """Voltage of a channel, with a monophonic signal spread to every channel."""
        return self.voltages[0] if self.is_monophonic else self.voltages[channel]

    def get_normal_poly_voltage(self, normal: float, channel: int) -> float:
        """Like get_poly_voltage, but ``normal`` when nothing is patched."""
        return self.get_poly_voltage(channel) if self.is_connected else normal

    def get_voltages(self) -> list[float]:
        """Return a copy of all channel voltages."""
        return list(self.voltages)

    def get_voltage_sum(self) -> float:
        return sum(self.voltages[: self.channels])

    def set_voltage(self, voltage: float, channel: int = 0) -> None:
        self.voltages[channel] = float(voltage)

    def set_voltages(self, voltages: Iterable[float]) -> None:
        """Write voltages into the port's active channels."""
        values = [float(v) for v in list(voltages)[: self.channels]]
        self.voltages[: len(values)] = values

    def set_channels(self, channels: int) -> None:
        """Set the channel count of a connected port, zeroing unused channels.

        A disconnected port stays disconnected, and zero channels becomes one.
        """
        if not 0 <= channels <= PORT_MAX_CHANNELS:
            raise ValueError(f"channels must be between 0 and {PORT_MAX_CHANNELS}")
        if self.channels == 0:
            return
        for c in range(channels, self.channels):
            self.voltages[c] = 0.0
        self.channels = max(channels, 1)


@dataclass
class Param:
    """A knob, switch or button together with its display settings."""

    min_value: float = 0.0
    max_value: float = 1.0
    default: float = 0.0
    name: str = ""
    unit: str = ""
    display_base: float = 0.0
    display_multiplier: float = 1.0
    display_offset: float = 0.0
    snap: bool = False
    randomize_enabled: bool = True
    labels: tuple[str, ...] = ()
    value: float = field(init=False)

    def __post_init__(self) -> None:
        if self.min_value > self.max_value:
            raise ValueError("min_value must not exceed max_value")
        self.value = float(self.default)

    def reset(self) -> None:
        self.value = float(self.default)

    def display_value(self) -> float:
        """The value as shown to the user, after base, multiplier and offset."""
        if self.display_base == 0:
            v = self.value
        elif self.display_base < 0:
            v = math.log(self.value) / math.log(-self.display_base)
        else:
            v = math.pow(self.display_base, self.value)
        return v * self.display_multiplier + self.display_offset

    @property
    def label(self) -> str | None:
        """The label of the current switch position, if the param has labels."""
        if not self.labels:
            return None
        index = int(round(self.value - self.min_value))
        return self.labels[max(0, min(index, len(self.labels) - 1))]


@dataclass
class Light:
    brightness: float = 0.0
    name: str = ""

    def set_brightness_smooth(self, brightness: float, delta_time: float) -> None:
        """Light up immediately, but fade out exponentially."""
        brightness = float(brightness)
        if brightness < self.brightness:
            self.brightness += (brightness - self.brightness) * LIGHT_SMOOTH_LAMBDA * delta_time
        else:
            self.brightness = brightness


@dataclass
class PortInfo:
    name: str = ""
    description: str = ""


class Module:
    """Base class of every module: holds params, inputs, outputs and lights."""

    def __init__(self, num_params: int = 0, num_inputs: int = 0, num_outputs: int = 0, num_lights: int = 0) -> None:
        self.params = [Param() for _ in range(num_params)]
        self.inputs = [Port() for _ in range(num_inputs)]
        self.outputs = [Port() for _ in range(num_outputs)]
        self.lights = [Light() for _ in range(num_lights)]
        self.input_infos = [PortInfo() for _ in range(num_inputs)]
        self.output_infos = [PortInfo() for _ in range(num_outputs)]
        self.bypass_routes: list[tuple[int, int]] = []

    def config_param(
        self,
        index: int,
        min_value: float,
        max_value: float,
        default: float,
        name: str = "",
        unit: str = "",
        display_base: float = 0.0,
        display_multiplier: float = 1.0,
        display_offset: float = 0.0,
    ) -> Param:
        param = Param(
            min_value=min_value,
            max_value=max_value,
            default=default,
            name=name,
            unit=unit,
            display_base=display_base,
            display_multiplier=display_multiplier,
            display_offset=display_offset,
        )
        self.params[index] = param
        return param

    def config_switch(
        self,
        index: int,
        min_value: float,
        max_value: float,
        default: float,
        name: str = "",
        labels: Sequence[str] = (),
    ) -> Param:
        param = self.config_param(index, min_value, max_value, default, name)
        param.snap = True
        param.labels = tuple(labels)
        return param

    def config_button(self, index: int, name: str = "") -> Param:
        param = self.config_switch(index, 0.0, 1.0, 0.0, name)
        param.randomize_enabled = False
        return param

    def config_input(self, index: int, name: str = "", description: str = "") -> PortInfo:
        info = PortInfo(name, description)
        self.input_infos[index] = info
        return info

    def config_output(self, index: int, name: str = "", description: str = "") -> PortInfo:
        info = PortInfo(name, description)
        self.output_infos[index] = info
        return info

    def config_light(self, index: int, name: str = "") -> Light:
        self.lights[index].name = name
        return self.lights[index]

    def config_bypass(self, input_index: int, output_index: int) -> None:
        """Route an input to an output when the module is bypassed."""
        self.bypass_routes.append((input_index, output_index))

    def process_bypass(self, args: ProcessArgs) -> None:
        """Copy every bypass route's input straight to its output."""
        for input_index, output_index in self.bypass_routes:
            source = self.inputs[input_index]
            target = self.outputs[output_index]
            for c in range(source.channels):
                target.set_voltage(source.get_voltage(c), c)
            target.set_channels(source.channels)

    def process(self, args: ProcessArgs) -> None:
        """Advance one sample; the base module forwards its bypass routes."""
        self.process_bypass(args)

    def reset(self) -> None:
        """Return every param to its default."""
        for param in self.params:
            param.reset()

    def to_json(self) -> dict[str, Any]:
        root: dict[str, Any] = {
            "params": [{"id": i, "value": p.value} for i, p in enumerate(self.params)]
        }
        data = self.data_to_json()
        if data is not None:
            root["data"] = data
        return root

    def from_json(self, data: dict[str, Any]) -> None:
        if "params" in data:
            self.params_from_json(data["params"])
        if data.get("data") is not None:
            self.data_from_json(data["data"])

    def params_from_json(self, data: Iterable[dict[str, Any]]) -> None:
        """Load param values; entries carry "id" (or legacy "paramId"), else their position."""
        for position, entry in enumerate(data):
            param_id = entry.get("id", entry.get("paramId", position))
            if not isinstance(param_id, int) or not 0 <= param_id < len(self.params):
                continue
            if "value" in entry:
                self.params[param_id].value = float(entry["value"])

    def data_to_json(self) -> Any:
        """Internal state to save alongside the params; None when there is none."""
        return None

    def data_from_json(self, data: Any) -> None:
        """Restore internal state; modules without any ignore the data."""
        return None