"""Small signal-processing building blocks shared by the modules."""

from __future__ import annotations

import math
from dataclasses import dataclass


def clamp(x: float, low: float, high: float) -> float:
    return max(min(x, high), low)


def crossfade(a: float, b: float, p: float) -> float:
    """Linear blend from ``a`` (p = 0) to ``b`` (p = 1)."""
    return a + (b - a) * p


_EXP2_COEFFS = (
    1.0,
    0.6931471805599453,
    0.2402265069591007,
    0.05550410866482158,
    0.009618129107628477,
    0.0013333558146428443,
)


def exp2_taylor5(x: float) -> float:
    """Approximate 2**x: exact integer part, 5th-order Taylor series for the fraction."""
    xi = math.floor(x)
    xf = x - xi
    yf = 0.0
    for coefficient in reversed(_EXP2_COEFFS):
        yf = yf * xf + coefficient
    return math.ldexp(yf, int(xi))


@dataclass
class ClockDivider:
    """Returns True once every ``division`` calls to process()."""

    division: int = 1
    clock: int = 0

    def __post_init__(self) -> None:
        if self.division < 1:
            raise ValueError("division must be at least 1")

    def process(self) -> bool:
        self.clock += 1
        if self.clock >= self.division:
            self.clock = 0
            return True
        return False

    def reset(self) -> None:
        self.clock = 0


class SchmittTrigger:
    """Detects rising edges with hysteresis. Starts high so a held signal does not fire."""

    def __init__(self) -> None:
        self.state = True

    def process(self, value: float, low: float = 0.0, high: float = 1.0) -> bool:
        if self.state:
            if value <= low:
                self.state = False
        elif value >= high:
            self.state = True
            return True
        return False

    @property
    def is_high(self) -> bool:
        return self.state

    def reset(self) -> None:
        self.state = True


class BooleanTrigger:
    """Fires when a boolean goes from False to True."""

    def __init__(self) -> None:
        self.state = True

    def process(self, state: bool) -> bool:
        triggered = state and not self.state
        self.state = bool(state)
        return triggered

    def reset(self) -> None:
        self.state = True


class PulseGenerator:
    """Stays high for a given duration after being triggered."""

    def __init__(self) -> None:
        self.remaining = 0.0

    def trigger(self, duration: float = 1e-3) -> None:
        if duration > self.remaining:
            self.remaining = duration

    def process(self, delta_time: float) -> bool:
        if self.remaining > 0.0:
            self.remaining -= delta_time
            return True
        return False

    def reset(self) -> None:
        self.remaining = 0.0


class Timer:
    """Accumulates elapsed time."""

    def __init__(self) -> None:
        self.time = 0.0

    def process(self, delta_time: float) -> float:
        self.time += delta_time
        return self.time

    def reset(self) -> None:
        self.time = 0.0


class RCFilter:
    """First-order RC filter giving both lowpass and highpass outputs."""

    def __init__(self) -> None:
        self.c = 0.0
        self.x_state = 0.0
        self.y_state = 0.0

    def set_cutoff(self, cutoff: float) -> None:
        """Set the cutoff as an angular frequency relative to the sample rate."""
        if cutoff <= 0:
            raise ValueError("cutoff must be positive")
        self.c = 2.0 / cutoff

    def set_cutoff_freq(self, freq: float) -> None:
        """Set the cutoff as a frequency relative to the sample rate."""
        self.set_cutoff(2.0 * math.pi * freq)

    def process(self, x: float) -> None:
        y = (x + self.x_state - self.y_state * (1.0 - self.c)) / (1.0 + self.c)
        self.x_state = x
        self.y_state = y

    def lowpass(self) -> float:
        return self.y_state

    def highpass(self) -> float:
        return self.x_state - self.y_state