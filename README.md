# vibe_audio

Turn a stream of audio samples into per-channel frequency "bar" values for
music visualizers. The bar values are roughly kept in the range `[0, 1]`.
The package also includes a simple tempo (BPM) estimator.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## How it works

1. A **fetcher** (`vibe_audio.fetcher`) owns a `SampleBuffer` that holds
   interleaved samples. `SampleBuffer.push_before(data)` writes new samples
   to the front of the buffer and moves the older ones to the right. The
   buffer length is 128 times a factor that grows with the sample rate
   (1024 samples at 44 100 Hz). `DummyFetcher(amount_channels)` supplies a
   silent 44 100 Hz buffer for any number of channels.
2. A `SampleProcessor` (`vibe_audio.sample_processor`) applies a Hann window
   to each channel's samples and runs a real FFT on them. The FFT size is the
   capacity of the fetcher's buffer.
3. A `BarProcessor` (`vibe_audio.bar_processor`) splits the spectrum into
   bars spaced on the mel scale, smooths how they rise and fall, adapts its
   gain to keep values near `[0, 1]`, and interpolates between the bars it
   computed directly.
4. Optionally, a `BpmDetector` (`vibe_audio.bpm_detector`) tracks bass
   onsets (20–200 Hz) and estimates the tempo by autocorrelation.

## Usage

```python
from vibe_audio.fetcher import DummyFetcher
from vibe_audio.sample_processor import SampleProcessor
from vibe_audio.bar_processor import BarProcessor, BarProcessorConfig

sample_processor = SampleProcessor(DummyFetcher(2))
bar_processor = BarProcessor(sample_processor, BarProcessorConfig(amount_bars=30))

sample_processor.process_next_samples()
bars = bar_processor.process_bars(sample_processor)

assert len(bars) == 2        # one numpy array per channel
assert len(bars[0]) == 30    # as many bars as configured
```

Several bar processors with different configurations can share one sample
processor, so the samples only need to be processed once per frame. To
change the number of bars later, call `bar_processor.set_amount_bars(20)`;
this resets the smoothing state.

### Feeding your own samples

Subclass `vibe_audio.fetcher.Fetcher` and provide the `sample_buffer` and
`channels` properties. Push interleaved samples into the buffer with
`push_before`; the next call to `process_next_samples` picks them up:

```python
from vibe_audio.fetcher import Fetcher, SampleBuffer

class MyFetcher(Fetcher):
    def __init__(self):
        self._buffer = SampleBuffer(48_000)

    @property
    def sample_buffer(self):
        return self._buffer

    @property
    def channels(self):
        return 2

fetcher = MyFetcher()
fetcher.sample_buffer.push_before([0.1, -0.1, 0.2, -0.2])
```

### Configuration

`BarProcessorConfig` has these fields:

- `amount_bars`: how many bars to produce, 1 to 65 535. The default is 30.
- `freq_range`: a `(start, end)` pair in Hz, each 1 to 65 535. The default
  is `(50, 10_000)`.
- `interpolation`: an `InterpolationVariant`, one of `NONE`, `LINEAR` or
  `CUBIC_SPLINE`. The default is `CUBIC_SPLINE`.
- `sensitivity`: how fast falling bars drop; higher values fall faster. The
  default is `2.0`.
- `bar_distribution`: a `BarDistribution`, either `UNIFORM` (spread the
  directly computed bars evenly) or `NATURAL` (keep their physical
  positions). The default is `UNIFORM`.

Values out of range raise `ValueError`.

The helpers `mel`, `inv_mel` and `exp_fun` in `vibe_audio.bar_processor`
convert between Hz and mel and map `[0, 1]` onto the audible range
(20 Hz to 20 kHz, see `vibe_audio.constants`).

### Interpolation

The interpolators can also be used on their own. They take a list of
`SupportingPoint(x, y)` with strictly increasing `x` and fill a buffer in
place:

```python
from vibe_audio.interpolation import LinearInterpolation, SupportingPoint

buffer = [0.0] * 5
LinearInterpolation([SupportingPoint(0, 0.0), SupportingPoint(4, 1.0)]).interpolate(buffer)
# buffer == [0.0, 0.25, 0.5, 0.75, 1.0]
```

`NothingInterpolation` writes only the supporting points, and
`vibe_audio.cubic_spline.CubicSplineInterpolation` fills the gaps with a
cubic spline. `build_matrix(section_widths)` returns the spline's system
matrix.

### Tempo detection

```python
from vibe_audio.bpm_detector import BpmDetector, BpmDetectorConfig

detector = BpmDetector(sample_processor, BpmDetectorConfig())
sample_processor.process_next_samples()
bpm = detector.process(sample_processor)
```

The estimate starts at 120 BPM. After every 15 seconds' worth of processed
frames a new estimate between `min_bpm` and `max_bpm` is added, and the
result becomes the median of the last `estimate_history_size` estimates.

## What it does not do

The package does not capture audio from sound cards or system devices, and
it has no command-line program or display. Samples must come from your own
`Fetcher` subclass; the only fetcher included is the silent `DummyFetcher`.