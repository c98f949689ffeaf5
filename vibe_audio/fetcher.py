"""Audio sources ("fetchers") and the sample buffer they fill."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from .constants import DEFAULT_SAMPLE_RATE

__all__ = ["SampleBuffer", "Fetcher", "DummyFetcher"]


def _buffer_factor(sample_rate: int) -> int:
    if sample_rate < 8_125:
        return 1
    if sample_rate <= 16_250:
        return 2
    if sample_rate <= 32_500:
        return 4
    if sample_rate <= 75_000:
        return 8
    if sample_rate <= 150_000:
        return 16
    if sample_rate <= 300_000:
        return 32
    return 64


class SampleBuffer:
    """Holds the most recent audio samples; safe to share between threads."""

    def __init__(self, sample_rate: int) -> None:
        self.sample_rate = sample_rate
        self._buffer = np.zeros(_buffer_factor(sample_rate) * 128, dtype=np.float32)
        self._lock = threading.Lock()

    def push_before(self, data: Sequence[float]) -> None:
        """Write ``data`` to the front of the buffer, moving current values right."""
        incoming = np.asarray(data, dtype=np.float32)
        with self._lock:
            buffer_len = len(self._buffer)
            split = min(buffer_len, len(incoming))
            if split == 0:
                return
            self._buffer[buffer_len - split:] = self._buffer[:split].copy()
            self._buffer[:split] = incoming[:split]

    def capacity(self) -> int:
        """Return the number of samples the buffer holds."""
        return len(self._buffer)

    def snapshot(self) -> np.ndarray:
        """Return a copy of the current buffer contents."""
        with self._lock:
            return self._buffer.copy()

    def __len__(self) -> int:
        return len(self._buffer)


class Fetcher(ABC):
    """Interface for every source of audio samples."""

    @property
    @abstractmethod
    def sample_buffer(self) -> SampleBuffer:
        """The buffer the fetcher writes its samples into."""

    @property
    @abstractmethod
    def channels(self) -> int:
        """The number of audio channels the fetcher provides."""


class DummyFetcher(Fetcher):
    """A fetcher that produces nothing; useful for documentation and tests."""

    def __init__(self, amount_channels: int) -> None:
        self._sample_buffer = SampleBuffer(DEFAULT_SAMPLE_RATE)
        self._amount_channels = amount_channels

    @property
    def sample_buffer(self) -> SampleBuffer:
        return self._sample_buffer

    @property
    def channels(self) -> int:
        return self._amount_channels