"""Frequency and sample-rate constants shared across the package."""

MIN_HUMAN_FREQUENCY: int = 20
"""The lowest frequency (Hz) humans can roughly hear."""

MAX_HUMAN_FREQUENCY: int = 20_000
"""The highest frequency (Hz) humans can roughly hear."""

DEFAULT_SAMPLE_RATE: int = 44_100
"""The default sample rate a fetcher may use for orientation."""