"""Test-signal generators: infinite lazy sine waves and chords."""
import math
from itertools import count, islice, repeat
from typing import Iterable, Iterator, Optional
import numpy as np
from soundlab.audio.models import WavSpec
from soundlab.audio.streaming import SampleStream
from soundlab.audio.wav import PathLike, write_interleaved_samples
from soundlab.core.config import settings
from soundlab.core.errors import ConfigError
from soundlab.core.logging import logger


def sine_wave(frequency: float, sample_rate: Optional[int] = None, amplitude: float = 1.0) -> Iterator[float]:
    """
    Infinite stream of sin(2*pi*f*n / R) * amplitude for n = 0, 1, 2, ...

    Args:
        frequency: Tone frequency in Hz
        sample_rate: Samples per second (defaults to config value)
        amplitude: Peak value of the wave
    """
    if sample_rate is None:
        sample_rate = settings.sample_rate
    if sample_rate <= 0:
        raise ConfigError(f"Sample rate must be > 0, got {sample_rate}")

    step = 2.0 * math.pi * frequency / sample_rate
    return (math.sin(n * step) * amplitude for n in count())


def chord(frequencies: Iterable[float], sample_rate: Optional[int] = None, amplitude: float = 1.0) -> Iterator[float]:
    """Element-wise sum of one sine wave per frequency (zeros for no frequencies)."""
    waves = [sine_wave(freq, sample_rate, amplitude) for freq in frequencies]
    if not waves:
        return repeat(0.0)
    return (sum(values) for values in zip(*waves))


def take(stream: SampleStream, sample_count: int) -> list:
    """First `sample_count` elements of a (possibly infinite) stream."""
    if sample_count < 0:
        raise ConfigError(f"Sample count must be >= 0, got {sample_count}")
    return list(islice(stream, sample_count))


def generate_sinewave(
    path: PathLike,
    frequency: Optional[float] = None,
    seconds: Optional[int] = None,
    sample_rate: Optional[int] = None
) -> WavSpec:
    """
    Write a mono 16-bit sine tone at full int16 scale.

    Args:
        path: Destination WAV file
        frequency: Tone frequency in Hz (defaults to config value)
        seconds: Duration (defaults to config value)
        sample_rate: Samples per second (defaults to config value)

    Returns:
        Spec of the written file
    """
    if frequency is None:
        frequency = settings.sinewave_frequency
    if seconds is None:
        seconds = settings.sinewave_seconds
    if sample_rate is None:
        sample_rate = settings.sample_rate

    spec = WavSpec(channels=1, sample_rate=sample_rate, bit_depth=16)
    amplitude = float(np.iinfo(np.int16).max)
    tone = take(sine_wave(frequency, sample_rate, amplitude), int(seconds * sample_rate))

    # int() truncates toward zero, matching a float -> int16 cast
    write_interleaved_samples(path, spec, [int(value) for value in tone])
    logger.info(f"Generated {seconds}s {frequency}Hz sine wave at {path}")
    return spec
