"""FFT helpers: centered spectra and their frequency axes."""
import math
from typing import Iterable, Sequence, Tuple
import numpy as np
from soundlab.audio.models import SpectrumPoint
from soundlab.core.errors import ConfigError, EmptyInputError

# Slack for (end - start) / step landing just under an integer, e.g. 0.3 / 0.1
_COUNT_TOLERANCE = 1e-9


def fft_shift(values: Sequence) -> np.ndarray:
    """
    Move the zero-frequency bin to the center of a spectrum.

    The input is split at round(len / 2) (halves rounded up) and the right
    part is placed before the left part:

        fft_shift([0, 1, 2]) -> [2, 0, 1]

    Args:
        values: Spectrum in FFT order (any dtype, including complex)

    Returns:
        Shifted copy as a numpy array
    """
    data = np.asarray(values)
    split = (len(data) + 1) // 2
    return np.concatenate([data[split:], data[:split]])


def frequency_distribution(start: float, end: float, step: float) -> np.ndarray:
    """
    Evenly spaced values over the half-open interval [start, end).

    Produces floor((end - start) / step) terms start, start + step, ...

    Args:
        start: First value
        end: Exclusive upper bound
        step: Spacing, must be > 0

    Returns:
        Float array of axis values
    """
    if step <= 0:
        raise ConfigError(f"step must be > 0, got {step}")

    count = math.floor((end - start) / step + _COUNT_TOLERANCE)
    if count <= 0:
        raise EmptyInputError(f"Empty frequency range [{start}, {end}) with step {step}")

    return np.arange(count, dtype=np.float64) * step + start


def bin_frequencies(length: int, sample_rate: float) -> np.ndarray:
    """
    Physical frequency of each bin of a shifted transform of `length` samples.

    Bin k maps to (k - length // 2) * sample_rate / length, so the DC bin
    that fft_shift places at index length // 2 is labelled 0 for odd lengths too.
    """
    if length <= 0:
        raise EmptyInputError("Cannot label the bins of an empty transform")
    return (np.arange(length, dtype=np.float64) - length // 2) * sample_rate / length


def frequency_axis(length: int, sample_rate: float) -> np.ndarray:
    """
    Frequency axis for a full-buffer fft_of() result.

    Built with frequency_distribution() starting at the lowest shifted bin,
    -(L // 2) * R / L, in steps of R / L; agrees with bin_frequencies() up
    to floating-point rounding.
    """
    if length <= 0:
        raise EmptyInputError("Cannot build a frequency axis for an empty buffer")

    step = sample_rate / length
    start = -(length // 2) * step
    axis = frequency_distribution(start, start + length * step, step)
    return axis[:length]


def fft_of(buffer: Sequence[float]) -> np.ndarray:
    """
    Complex FFT of a real buffer, shifted so DC sits in the center.

    Args:
        buffer: Real samples; the transform has one bin per sample

    Returns:
        Complex array of len(buffer) bins in centered order
    """
    data = np.asarray(buffer, dtype=np.float64)
    if data.size == 0:
        raise EmptyInputError("Cannot transform an empty buffer")
    return fft_shift(np.fft.fft(data))


def magnitude_spectrum(buffer: Sequence[float]) -> np.ndarray:
    """sqrt(re^2 + im^2) of each centered bin."""
    return np.abs(fft_of(buffer))


def phase_spectrum(buffer: Sequence[float]) -> np.ndarray:
    """Phase of each centered bin, in radians."""
    return np.angle(fft_of(buffer))


def spectrum_bounds(points: Iterable[SpectrumPoint]) -> Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]]:
    """
    Ranges of a spectrogram, as needed to scale a chart.

    Returns:
        ((min_window, max_window), (min_freq, max_freq), (min_mag, max_mag))
    """
    data = np.array([tuple(point) for point in points], dtype=np.float64)
    if data.size == 0:
        raise EmptyInputError("Cannot compute bounds of an empty spectrum")

    lows = data.min(axis=0)
    highs = data.max(axis=0)
    return (
        (float(lows[0]), float(highs[0])),
        (float(lows[1]), float(highs[1])),
        (float(lows[2]), float(highs[2])),
    )


def normalize_magnitudes(points: Iterable[SpectrumPoint]) -> np.ndarray:
    """Magnitudes scaled into [0, 1] by the spectrum's peak."""
    points = list(points)
    _, _, (_, peak) = spectrum_bounds(points)
    magnitudes = np.array([point.magnitude for point in points], dtype=np.float64)
    if peak == 0.0:
        # Silence: nothing to scale
        return np.zeros_like(magnitudes)
    return magnitudes / peak
