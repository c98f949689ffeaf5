"""Conversion of audio spectra into smoothly moving bar values."""

from __future__ import annotations

import dataclasses
import enum
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .constants import MAX_HUMAN_FREQUENCY, MIN_HUMAN_FREQUENCY
from .cubic_spline import CubicSplineInterpolation
from .interpolation import (
    Interpolator,
    LinearInterpolation,
    NothingInterpolation,
    SupportingPoint,
)
from .sample_processor import SampleProcessor

__all__ = [
    "InterpolationVariant",
    "BarDistribution",
    "BarProcessorConfig",
    "BarProcessor",
    "exp_fun",
    "mel",
    "inv_mel",
]

_U16_MAX = 65_535
_MEL_TOLERANCE = 1e-6


class InterpolationVariant(enum.Enum):
    """How the bars between the supporting bars are filled."""

    NONE = "none"
    """Only the supporting bars are written."""
    LINEAR = "linear"
    """Straight lines between supporting bars."""
    CUBIC_SPLINE = "cubic_spline"
    """A cubic spline; the smoothest choice."""


class BarDistribution(enum.Enum):
    """How the supporting bars are spread over the bars."""

    UNIFORM = "uniform"
    """Spread them so that the spectrum looks natural to a listener."""
    NATURAL = "natural"
    """Keep the physically correct positions."""


def _check_u16_nonzero(name: str, value: int) -> None:
    if not 1 <= value <= _U16_MAX:
        raise ValueError(f"{name} must be between 1 and {_U16_MAX}, got {value}")


@dataclass
class BarProcessorConfig:
    """Options of a :class:`BarProcessor`."""

    amount_bars: int = 30
    """Number of bars per channel."""
    freq_range: tuple[int, int] = (50, 10_000)
    """Frequency range (Hz, start inclusive, end exclusive) the bars cover."""
    interpolation: InterpolationVariant = InterpolationVariant.CUBIC_SPLINE
    """How the bar values are interpolated."""
    sensitivity: float = 2.0
    """How fast falling bars drop; higher values fall faster."""
    bar_distribution: BarDistribution = BarDistribution.UNIFORM
    """How the supporting bars are distributed."""

    def __post_init__(self) -> None:
        _check_u16_nonzero("amount_bars", self.amount_bars)
        start, end = self.freq_range
        _check_u16_nonzero("freq_range start", start)
        _check_u16_nonzero("freq_range end", end)
        self.freq_range = (start, end)


def mel(x: float) -> float:
    """Convert a frequency in Hz to the mel scale."""
    if not MIN_HUMAN_FREQUENCY <= x <= MAX_HUMAN_FREQUENCY:
        raise ValueError(
            f"frequency {x} is outside [{MIN_HUMAN_FREQUENCY}, {MAX_HUMAN_FREQUENCY}]"
        )
    return 2595.0 * math.log10(1.0 + x / 700.0)


def inv_mel(x: float) -> float:
    """Convert a mel value back to a frequency in Hz."""
    min_mel = mel(MIN_HUMAN_FREQUENCY)
    max_mel = mel(MAX_HUMAN_FREQUENCY)
    tolerance = _MEL_TOLERANCE * max_mel
    if not min_mel - tolerance <= x <= max_mel + tolerance:
        raise ValueError(f"mel value {x} is outside [{min_mel}, {max_mel}]")
    return 700.0 * (10.0 ** (x / 2595.0) - 1.0)


def exp_fun(x: float) -> float:
    """Map ``x`` in ``[0, 1]`` onto the audible range, evenly spaced in mel."""
    if not 0.0 <= x <= 1.0:
        raise ValueError(f"x must lie within [0, 1], got {x}")
    max_mel = mel(MAX_HUMAN_FREQUENCY)
    min_mel = mel(MIN_HUMAN_FREQUENCY)
    return inv_mel(x * (max_mel - min_mel) + min_mel)


def _new_interpolation_data(
    config: BarProcessorConfig, sample_rate: int, sample_len: int
) -> tuple[Interpolator, list[range]]:
    amount_bars = config.amount_bars
    weights = [exp_fun((index + 1) / (amount_bars + 1)) for index in range(amount_bars)]

    freq_resolution = sample_rate / sample_len
    bin_start = max(int(config.freq_range[0] / freq_resolution), 1)
    bin_end = math.ceil(config.freq_range[1] / freq_resolution)
    amount_bins = max(bin_end - bin_start, 0)

    supporting_points: list[SupportingPoint] = []
    fft_ranges: list[range] = []

    prev_range = range(0, 0)
    for bar_idx, weight in enumerate(weights):
        end = math.ceil(weight / MAX_HUMAN_FREQUENCY * amount_bins)
        new_range = range(prev_range.stop, end)

        if new_range != prev_range and len(new_range) > 0:
            supporting_points.append(SupportingPoint(x=bar_idx, y=0.0))
            fft_ranges.append(new_range)

        prev_range = new_range

    if config.bar_distribution is BarDistribution.UNIFORM and supporting_points:
        step = amount_bars / len(supporting_points)
        for idx, point in enumerate(supporting_points[:-1]):
            point.x = int(idx * step)

    interpolator_class = {
        InterpolationVariant.NONE: NothingInterpolation,
        InterpolationVariant.LINEAR: LinearInterpolation,
        InterpolationVariant.CUBIC_SPLINE: CubicSplineInterpolation,
    }[config.interpolation]

    return interpolator_class(supporting_points), fft_ranges


class _ChannelState:
    """Interpolator and smoothing state of one audio channel."""

    def __init__(self, config: BarProcessorConfig, sample_rate: int, fft_size: int) -> None:
        self.interpolator, self.fft_ranges = _new_interpolation_data(
            config, sample_rate, fft_size
        )
        self.normalize_factor = 0.1
        self.sensitivity = config.sensitivity

        amount_bars = config.amount_bars
        self.amount_bars = amount_bars
        self.prev = [0.0] * amount_bars
        self.peak = [0.0] * amount_bars
        self.fall = [0.0] * amount_bars
        self.mem = [0.0] * amount_bars

    def update_supporting_points(self, fft_out: np.ndarray) -> None:
        overshoot = False
        is_silent = True

        points = self.interpolator.supporting_points()
        for idx, (point, fft_range) in enumerate(zip(points, self.fft_ranges)):
            normalized_x = point.x / self.amount_bars

            magnitudes = np.abs(fft_out[fft_range.start:fft_range.stop])
            if np.any(magnitudes > 0.0):
                is_silent = False
            raw_bar_val = float(magnitudes.sum()) / len(fft_range)

            # dampen the bass, boost the treble
            correction = normalized_x**2 + 0.05
            next_magnitude = raw_bar_val * self.normalize_factor * correction

            if next_magnitude < self.prev[idx]:
                next_magnitude = self.peak[idx] * (
                    1.0 - self.fall[idx] ** 2 * self.sensitivity
                )
                next_magnitude = max(next_magnitude, 0.0)
                self.fall[idx] += 0.028
            else:
                self.peak[idx] = next_magnitude
                self.fall[idx] = 0.0
            self.prev[idx] = next_magnitude

            point.y = self.mem[idx] * 0.77 + next_magnitude
            self.mem[idx] = point.y

            if point.y > 1.0:
                overshoot = True

        if overshoot:
            self.normalize_factor *= 0.98
        elif not is_silent:
            # ramp up quickly from a low factor so quiet starts fade in fast
            if self.normalize_factor < 0.5:
                self.normalize_factor *= 1.03
            else:
                self.normalize_factor *= 1.002


class BarProcessor:
    """Computes bar values from the spectra of a :class:`SampleProcessor`."""

    def __init__(
        self, processor: SampleProcessor, config: BarProcessorConfig | None = None
    ) -> None:
        self._config = config if config is not None else BarProcessorConfig()
        self._sample_rate = processor.sample_rate()
        self._sample_len = processor.fft_size()
        self._amount_channels = processor.amount_channels()
        self._rebuild()

    def _rebuild(self) -> None:
        self._channels = [
            _ChannelState(self._config, self._sample_rate, self._sample_len)
            for _ in range(self._amount_channels)
        ]
        self._bar_values = [
            np.zeros(self._config.amount_bars, dtype=np.float32)
            for _ in range(self._amount_channels)
        ]

    def process_bars(self, processor: SampleProcessor) -> list[np.ndarray]:
        """Return the bar values per channel: ``result[channel][bar]``."""
        for channel, bars, fft_ctx in zip(
            self._channels, self._bar_values, processor.fft_out()
        ):
            channel.update_supporting_points(fft_ctx.fft_out)
            channel.interpolator.interpolate(bars)
        return self._bar_values

    def config(self) -> BarProcessorConfig:
        """Return the current configuration."""
        return self._config

    def set_amount_bars(self, amount_bars: int) -> None:
        """Change the number of bars per channel; resets the smoothing state."""
        self._config = dataclasses.replace(self._config, amount_bars=amount_bars)
        self._rebuild()

    @property
    def bar_values(self) -> Sequence[np.ndarray]:
        """The bar values of the last call to :meth:`process_bars`."""
        return self._bar_values