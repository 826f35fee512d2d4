"""Single-pole low-pass and high-pass filters over lazy sample streams.

Both filters are one-to-one iterators: pulling one output pulls exactly one
input sample, nothing is computed ahead of demand, and iteration ends when
the input ends. They work in a signed 24-bit integer domain; input samples
outside it are saturated to its bounds.
"""
from typing import Iterator
import numpy as np
from soundlab.audio.streaming import Sample, SampleStream, tee
from soundlab.core.errors import ConfigError

FILTER_BIT_DEPTH = 24
I24_MAX = (1 << (FILTER_BIT_DEPTH - 1)) - 1
I24_MIN = -I24_MAX


def saturate(sample: Sample) -> int:
    """Truncate toward zero and clamp into the 24-bit filter domain."""
    value = int(sample)
    if value > I24_MAX:
        return I24_MAX
    if value < I24_MIN:
        return I24_MIN
    return value


def smoothing_ratio(width: int) -> float:
    """
    Weight of the newest sample for a given smoothing order.

    Args:
        width: Positive smoothing order; larger means slower response

    Returns:
        0.1 ** width, strictly between 0 and 1
    """
    if isinstance(width, bool) or not isinstance(width, (int, np.integer)):
        raise ConfigError(f"Filter width must be an integer, got {width!r}")
    if width <= 0:
        raise ConfigError(f"Filter width must be > 0, got {width}")

    ratio = 0.1 ** int(width)
    if not 0.0 < ratio < 1.0:
        # Underflows to 0.0 around width 324
        raise ConfigError(f"Filter width {width} gives a degenerate ratio {ratio}")
    return ratio


def weighted_average(one: int, other: int, ratio: float) -> int:
    """Blend `one` and `other` by `ratio`, truncated toward zero."""
    return int(one * ratio + other * (1.0 - ratio))


class SignalFilter:
    """Base class for stream filters built as `Filter(input_stream, width)`."""

    def __init__(self, input_stream: SampleStream, width: int):
        self.width = width
        self.ratio = smoothing_ratio(width)
        self.input: Iterator[Sample] = iter(input_stream)

    def __iter__(self) -> "SignalFilter":
        return self

    def __next__(self) -> int:
        raise NotImplementedError


class LowPassFilter(SignalFilter):
    """
    Single-pole IIR smoother.

    Each output is `x * ratio + previous * (1 - ratio)` where `previous`
    is the last output (initially 0) and `ratio = 0.1 ** width`.
    """

    def __init__(self, input_stream: SampleStream, width: int):
        super().__init__(input_stream, width)
        self.previous = 0

    def __next__(self) -> int:
        sample = saturate(next(self.input))
        self.previous = weighted_average(sample, self.previous, self.ratio)
        return self.previous


class HighPassFilter(SignalFilter):
    """
    Complement of LowPassFilter: the input minus its low-passed copy.

    The input is split with `tee` into a dry copy and a wet copy that runs
    through a LowPassFilter of the same width. Holds no state of its own.
    """

    def __init__(self, input_stream: SampleStream, width: int):
        super().__init__(input_stream, width)
        self.dry, wet = tee(self.input)
        self.lo_pass = LowPassFilter(wet, width)

    def __next__(self) -> int:
        low = next(self.lo_pass)
        return saturate(next(self.dry)) - low


def low_pass(samples: SampleStream, width: int) -> np.ndarray:
    """Low-pass a finite sequence, returning an int64 array of equal length."""
    return np.fromiter(LowPassFilter(samples, width), dtype=np.int64)


def high_pass(samples: SampleStream, width: int) -> np.ndarray:
    """High-pass a finite sequence, returning an int64 array of equal length."""
    return np.fromiter(HighPassFilter(samples, width), dtype=np.int64)
