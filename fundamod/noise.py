"""Noise: white, pink, red, violet, blue, gray and black noise sources."""

from __future__ import annotations

import math
import random

import numpy as np

from fundamod.engine import Module, ProcessArgs


class PinkNoiseGenerator:
    """Pink noise by the Voss algorithm.

    Each of ``quality`` uniform random values is refreshed at half the rate of
    the one before it, and their sum is returned.
    """

    def __init__(self, quality: int = 8, rng: random.Random | None = None) -> None:
        if quality < 1:
            raise ValueError("quality must be at least 1")
        self.quality = quality
        self.rng = rng if rng is not None else random.Random()
        self.frame = -1
        self.values = [0.0] * quality

    def process(self) -> float:
        last_frame = self.frame
        self.frame += 1
        if self.frame >= 1 << self.quality:
            self.frame = 0
        diff = last_frame ^ self.frame

        for i in range(self.quality):
            if diff & (1 << i):
                self.values[i] = self.rng.random() - 0.5
        return sum(self.values)


class InverseAWeightingFilter:
    """Block FFT filter shaping its input by the inverse A-weighting curve.

    Input is collected in blocks of ``buffer_len`` samples; each full block is
    filtered in the frequency domain and played back during the next block.
    """

    def __init__(self, buffer_len: int = 1024) -> None:
        if buffer_len < 2 or buffer_len % 2:
            raise ValueError("buffer_len must be an even number of at least 2")
        self.buffer_len = buffer_len
        self.input_buffer = np.zeros(buffer_len)
        self.output_buffer = np.zeros(buffer_len)
        self.frame = 0

    @staticmethod
    def _amplitude(f: float) -> float:
        if not 80.0 <= f <= 20000.0:
            return 0.0
        f2 = f * f
        return (
            (424.36 + f2) * math.sqrt((11599.3 + f2) * (544496.0 + f2)) * (148693636.0 + f2)
        ) / (148693636.0 * f2 * f2)

    def _gains(self, delta_time: float) -> np.ndarray:
        n = self.buffer_len
        bins = n // 2 + 1
        gains = np.zeros(bins)
        # Bin k is weighted by the curve at 1 / delta_time / 2 / n * k; the DC
        # and Nyquist bins are always removed.
        for k in range(1, bins - 1):
            gains[k] = self._amplitude(1.0 / delta_time / 2.0 / n * k)
        return gains

    def process(self, delta_time: float, x: float) -> float:
        self.input_buffer[self.frame] = x
        self.frame += 1
        if self.frame >= self.buffer_len:
            self.frame = 0
            spectrum = np.fft.rfft(self.input_buffer)
            spectrum *= self._gains(delta_time)
            self.output_buffer = np.fft.irfft(spectrum, n=self.buffer_len)
        return float(self.output_buffer[self.frame])


class _RedFilter:
    """First-order IIR lowpass: y = b0*x + b1*x[-1] - a1*y[-1]."""

    # Butterworth lowpass with a 20 Hz cutoff at 44.1 kHz.
    B = (0.00425611, 0.00425611)
    A1 = -0.99148778

    def __init__(self) -> None:
        self.x1 = 0.0
        self.y1 = 0.0

    def process(self, x: float) -> float:
        y = self.B[0] * x + self.B[1] * self.x1 - self.A1 * self.y1
        self.x1 = x
        self.y1 = y
        return y


class Noise(Module):
    WHITE_OUTPUT = 0
    PINK_OUTPUT = 1
    RED_OUTPUT = 2
    VIOLET_OUTPUT = 3
    BLUE_OUTPUT = 4
    GRAY_OUTPUT = 5
    BLACK_OUTPUT = 6
    NUM_OUTPUTS = 7

    # Every colour is calibrated to 1 RMS, then scaled to a 5 V sine's RMS.
    GAIN = 5.0 / math.sqrt(2.0)
    PINK_NORM = 0.816
    RED_NORM = 0.0645
    VIOLET_NORM = 1.41
    BLUE_NORM = 0.705
    GRAY_NORM = 1.67

    def __init__(self, seed: int | None = None) -> None:
        super().__init__(0, 0, self.NUM_OUTPUTS, 0)
        self.config_output(self.WHITE_OUTPUT, "White noise", "0 dB/octave power density")
        self.config_output(self.PINK_OUTPUT, "Pink noise", "-3 dB/octave power density")
        self.config_output(self.RED_OUTPUT, "Red noise", "-6 dB/octave power density")
        self.config_output(self.VIOLET_OUTPUT, "Violet noise", "+6 dB/octave power density")
        self.config_output(self.BLUE_OUTPUT, "Blue noise", "+3 dB/octave power density")
        self.config_output(self.GRAY_OUTPUT, "Gray noise", "Psychoacoustic equal loudness")
        self.config_output(self.BLACK_OUTPUT, "Black noise", "Uniform random numbers")

        self.rng = random.Random(seed)
        self.pink_generator = PinkNoiseGenerator(8, self.rng)
        self.red_filter = _RedFilter()
        self.gray_filter = InverseAWeightingFilter()
        self.last_white = 0.0
        self.last_pink = 0.0

    def process(self, args: ProcessArgs) -> None:
        out = self.outputs
        gain = self.GAIN

        if any(out[i].is_connected for i in (self.WHITE_OUTPUT, self.RED_OUTPUT, self.VIOLET_OUTPUT, self.GRAY_OUTPUT)):
            white = self.rng.gauss(0.0, 1.0)
            out[self.WHITE_OUTPUT].set_voltage(white * gain)

            if out[self.RED_OUTPUT].is_connected:
                red = self.red_filter.process(white) / self.RED_NORM
                out[self.RED_OUTPUT].set_voltage(red * gain)

            if out[self.VIOLET_OUTPUT].is_connected:
                violet = (white - self.last_white) / self.VIOLET_NORM
                self.last_white = white
                out[self.VIOLET_OUTPUT].set_voltage(violet * gain)

            if out[self.GRAY_OUTPUT].is_connected:
                gray = self.gray_filter.process(args.sample_time, white) / self.GRAY_NORM
                out[self.GRAY_OUTPUT].set_voltage(gray * gain)

        if out[self.PINK_OUTPUT].is_connected or out[self.BLUE_OUTPUT].is_connected:
            pink = self.pink_generator.process() / self.PINK_NORM
            out[self.PINK_OUTPUT].set_voltage(pink * gain)

            if out[self.BLUE_OUTPUT].is_connected:
                blue = (pink - self.last_pink) / self.BLUE_NORM
                self.last_pink = pink
                out[self.BLUE_OUTPUT].set_voltage(blue * gain)

        # Black noise: uniform random voltages between -5 and 5 V.
        if out[self.BLACK_OUTPUT].is_connected:
            out[self.BLACK_OUTPUT].set_voltage(self.rng.random() * 10.0 - 5.0)