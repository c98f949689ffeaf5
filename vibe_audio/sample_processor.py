"""Windowing and FFT of the samples a fetcher collected."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .fetcher import Fetcher

__all__ = ["FftContext", "SampleProcessor"]


@dataclass
class FftContext:
    """FFT input and output of one audio channel."""

    fft_in: np.ndarray
    fft_out: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.complex64))

    @classmethod
    def zeros(cls, fft_size: int) -> FftContext:
        return cls(
            fft_in=np.zeros(fft_size, dtype=np.float32),
            fft_out=np.zeros(fft_size // 2 + 1, dtype=np.complex64),
        )


class SampleProcessor:
    """Prepares the samples of a fetcher for the bar processors."""

    def __init__(self, fetcher: Fetcher) -> None:
        if fetcher.channels < 1:
            raise ValueError("a fetcher needs at least one channel")

        # the fetcher is kept alive so that a running stream is not closed
        self._fetcher = fetcher
        self._sample_buffer = fetcher.sample_buffer
        self._fft_size = self._sample_buffer.capacity()
        self._hann_window = np.hanning(self._fft_size).astype(np.float32)
        self._channels = [FftContext.zeros(self._fft_size) for _ in range(fetcher.channels)]

    def process_next_samples(self) -> None:
        """Take the current samples of the fetcher and compute their spectra."""
        amount_channels = len(self._channels)
        samples = self._sample_buffer.snapshot()
        frames = len(samples) // amount_channels
        interleaved = samples[: frames * amount_channels].reshape(frames, amount_channels)
        window = self._hann_window[:frames]

        for channel_idx, channel in enumerate(self._channels):
            channel.fft_in[:frames] = interleaved[:, channel_idx] * window
            channel.fft_out = np.fft.rfft(channel.fft_in).astype(np.complex64)

    def fft_size(self) -> int:
        """Return the FFT input length."""
        return self._fft_size

    def fft_out(self) -> list[FftContext]:
        """Return the FFT context of every channel."""
        return self._channels

    def sample_rate(self) -> int:
        """Return the sample rate of the fetcher's samples."""
        return self._sample_buffer.sample_rate

    def amount_channels(self) -> int:
        """Return the number of processed channels."""
        return len(self._channels)