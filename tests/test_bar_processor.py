import math

import numpy as np
import pytest

from vibe_audio.bar_processor import (
    BarDistribution,
    BarProcessor,
    BarProcessorConfig,
    InterpolationVariant,
    exp_fun,
    inv_mel,
    mel,
)
from vibe_audio.fetcher import DummyFetcher
from vibe_audio.sample_processor import SampleProcessor

U16_MAX = 65_535


def _processor(channels):
    return SampleProcessor(DummyFetcher(channels))


def _sine_processor(channels=1, freq=440.0):
    fetcher = DummyFetcher(channels)
    buf = fetcher.sample_buffer
    rate = buf.sample_rate
    frames = buf.capacity() // channels
    t = np.arange(frames) / rate
    mono = np.sin(2 * np.pi * freq * t)
    buf.push_before(np.repeat(mono, channels))
    processor = SampleProcessor(fetcher)
    processor.process_next_samples()
    return processor


def test_one_channel_u16_max_bars():
    processor = _processor(1)
    bar_processor = BarProcessor(processor, BarProcessorConfig(amount_bars=U16_MAX))
    bars = bar_processor.process_bars(processor)
    assert len(bars) == 1
    assert len(bars[0]) == U16_MAX


def test_two_channels_u16_max_bars():
    processor = _processor(2)
    bar_processor = BarProcessor(processor, BarProcessorConfig(amount_bars=U16_MAX))
    bars = bar_processor.process_bars(processor)
    assert len(bars) == 2
    for channel in bars:
        assert len(channel) == U16_MAX


def test_simple_workflow_two_channels_thirty_bars():
    processor = _processor(2)
    bar_processor = BarProcessor(processor, BarProcessorConfig(amount_bars=30))
    processor.process_next_samples()
    bars = bar_processor.process_bars(processor)
    assert len(bars) == 2
    assert len(bars[0]) == 30
    assert len(bars[1]) == 30


def test_multiple_bar_processors():
    processor = _processor(2)
    first = BarProcessor(processor, BarProcessorConfig(amount_bars=20))
    second = BarProcessor(processor, BarProcessorConfig(amount_bars=11))
    processor.process_next_samples()
    bars = first.process_bars(processor)
    bars2 = second.process_bars(processor)
    assert len(bars) == 2
    assert len(bars2) == 2
    assert [len(c) for c in bars] == [20, 20]
    assert [len(c) for c in bars2] == [11, 11]


def test_set_amount_bars():
    processor = _processor(1)
    bar_processor = BarProcessor(processor, BarProcessorConfig(amount_bars=10))
    processor.process_next_samples()
    bars = bar_processor.process_bars(processor)
    assert len(bars) == 1
    assert len(bars[0]) == 10

    bar_processor.set_amount_bars(20)
    bars = bar_processor.process_bars(processor)
    assert len(bars) == 1
    assert len(bars[0]) == 20
    assert bar_processor.config().amount_bars == 20


def test_set_amount_bars_rejects_zero():
    processor = _processor(1)
    bar_processor = BarProcessor(processor)
    with pytest.raises(ValueError):
        bar_processor.set_amount_bars(0)
    assert bar_processor.config().amount_bars == 30


def test_simple_example_default_config():
    processor = _processor(2)
    processor.process_next_samples()
    bar_processor = BarProcessor(processor, BarProcessorConfig())
    bars = bar_processor.process_bars(processor)
    assert [len(c) for c in bars] == [30, 30]


def test_config_defaults():
    config = BarProcessorConfig()
    assert config.amount_bars == 30
    assert config.freq_range == (50, 10_000)
    assert config.interpolation is InterpolationVariant.CUBIC_SPLINE
    assert config.sensitivity == 2.0
    assert config.bar_distribution is BarDistribution.UNIFORM


@pytest.mark.parametrize("amount", [0, -1, U16_MAX + 1])
def test_config_rejects_invalid_amount_bars(amount):
    with pytest.raises(ValueError):
        BarProcessorConfig(amount_bars=amount)


def test_config_rejects_zero_frequency():
    with pytest.raises(ValueError):
        BarProcessorConfig(freq_range=(0, 1000))


@pytest.mark.parametrize(
    "variant",
    [InterpolationVariant.NONE, InterpolationVariant.LINEAR, InterpolationVariant.CUBIC_SPLINE],
)
@pytest.mark.parametrize(
    "distribution", [BarDistribution.UNIFORM, BarDistribution.NATURAL]
)
def test_silence_gives_zero_bars(variant, distribution):
    processor = _processor(2)
    processor.process_next_samples()
    bar_processor = BarProcessor(
        processor,
        BarProcessorConfig(amount_bars=40, interpolation=variant, bar_distribution=distribution),
    )
    for _ in range(3):
        bars = bar_processor.process_bars(processor)
    for channel in bars:
        assert len(channel) == 40
        assert np.all(channel == 0.0)


def test_signal_produces_nonzero_bars():
    processor = _sine_processor(1, 440.0)
    bar_processor = BarProcessor(
        processor, BarProcessorConfig(interpolation=InterpolationVariant.LINEAR)
    )
    bars = bar_processor.process_bars(processor)
    assert float(np.max(bars[0])) > 0.0
    assert float(np.min(bars[0])) >= 0.0


def test_mel_known_values():
    assert mel(700.0) == pytest.approx(2595.0 * math.log10(2.0))


def test_mel_rejects_out_of_range():
    with pytest.raises(ValueError):
        mel(10.0)
    with pytest.raises(ValueError):
        mel(30_000.0)


@pytest.mark.parametrize("freq", [20.0, 100.0, 700.0, 5_000.0, 20_000.0])
def test_mel_round_trip(freq):
    assert inv_mel(mel(freq)) == pytest.approx(freq)


def test_exp_fun_endpoints_and_monotonic():
    assert exp_fun(0.0) == pytest.approx(20.0)
    assert exp_fun(1.0) == pytest.approx(20_000.0)
    values = [exp_fun(i / 10) for i in range(11)]
    assert values == sorted(values)


def test_exp_fun_rejects_out_of_range():
    with pytest.raises(ValueError):
        exp_fun(1.5)
    with pytest.raises(ValueError):
        exp_fun(-0.1)