"""Tempo detection from bass onsets using spectral flux and autocorrelation."""

from __future__ import annotations

import math
import statistics
from collections import deque
from dataclasses import dataclass

import numpy as np

from .sample_processor import SampleProcessor

__all__ = ["BpmDetectorConfig", "BpmDetector"]

_DEFAULT_BPM = 120.0
_UPDATE_INTERVAL_SECONDS = 15.0


@dataclass
class BpmDetectorConfig:
    """Configuration of a :class:`BpmDetector`."""

    history_seconds: float = 15.0
    """Length of the onset history in seconds."""
    min_bpm: float = 60.0
    """Lowest tempo that is detected."""
    max_bpm: float = 200.0
    """Highest tempo that is detected."""
    estimate_history_size: int = 60
    """Number of estimates the median is taken over."""


class BpmDetector:
    """Estimates the tempo of the audio as the median of periodic estimates."""

    def __init__(self, processor: SampleProcessor, config: BpmDetectorConfig | None = None) -> None:
        self._config = config if config is not None else BpmDetectorConfig()

        sample_rate = float(processor.sample_rate())
        fft_size = processor.fft_size()
        self._frames_per_second = sample_rate / fft_size

        history_frames = int(self._config.history_seconds * self._frames_per_second)
        self._onset_history = np.zeros(history_frames, dtype=np.float64)
        self._onset_write_idx = 0
        self._prev_bass_energy = 0.0

        freq_resolution = sample_rate / fft_size
        self._bass_bin_start = math.ceil(20.0 / freq_resolution)
        self._bass_bin_end = math.ceil(200.0 / freq_resolution)

        self._bpm_estimates: deque[float] = deque(maxlen=self._config.estimate_history_size)
        self._current_bpm = _DEFAULT_BPM
        self._frame_count = 0
        self._frames_between_updates = int(self._frames_per_second * _UPDATE_INTERVAL_SECONDS)

    def process(self, processor: SampleProcessor) -> float:
        """Feed the latest spectrum and return the current tempo estimate."""
        channels = processor.fft_out()
        if not channels:
            return self._current_bpm

        fft_data = channels[0].fft_out
        bin_end = min(self._bass_bin_end, len(fft_data))
        bin_start = min(self._bass_bin_start, bin_end)
        if bin_start >= bin_end:
            return self._current_bpm

        bass_energy = float(np.abs(fft_data[bin_start:bin_end]).sum())
        flux = max(bass_energy - self._prev_bass_energy, 0.0)
        self._prev_bass_energy = bass_energy

        self._onset_history[self._onset_write_idx] = flux
        self._onset_write_idx = (self._onset_write_idx + 1) % len(self._onset_history)

        self._frame_count += 1
        if self._frame_count >= self._frames_between_updates:
            self._frame_count = 0

            detected = self._bpm_from_autocorrelation()
            if self._config.min_bpm <= detected <= self._config.max_bpm:
                self._bpm_estimates.append(detected)

            if self._bpm_estimates:
                self._current_bpm = float(statistics.median(self._bpm_estimates))

        return self._current_bpm

    def bpm(self) -> float:
        """Return the current tempo estimate."""
        return self._current_bpm

    def _bpm_from_autocorrelation(self) -> float:
        min_lag = int(60.0 / self._config.max_bpm * self._frames_per_second)
        max_lag = int(60.0 / self._config.min_bpm * self._frames_per_second)
        max_lag = min(max_lag, len(self._onset_history) // 2)

        if min_lag >= max_lag:
            return self._current_bpm

        best_lag = min_lag
        best_correlation = 0.0
        for lag in range(min_lag, max_lag):
            correlation = self._autocorrelation(lag)
            if correlation > best_correlation:
                best_correlation = correlation
                best_lag = lag

        if best_lag > 0:
            return 60.0 * self._frames_per_second / best_lag
        return self._current_bpm

    def _autocorrelation(self, lag: int) -> float:
        length = len(self._onset_history)
        if lag >= length:
            return 0.0

        # oldest value first
        ordered = np.roll(self._onset_history, -self._onset_write_idx)
        first = ordered[lag:]
        second = np.roll(ordered, -lag)[lag:]
        return float(np.dot(first, second) / (length - lag))