"""Unit tests for FFT helpers and frequency axes."""
import pytest
import numpy as np
from soundlab.audio.models import SpectrumPoint
from soundlab.core.errors import ConfigError, EmptyInputError
from soundlab.dsp.spectrum import (
    bin_frequencies,
    fft_of,
    fft_shift,
    frequency_axis,
    frequency_distribution,
    magnitude_spectrum,
    normalize_magnitudes,
    phase_spectrum,
    spectrum_bounds,
)


def test_frequency_distribution():
    """Test half-open axis generation."""
    assert frequency_distribution(0.0, 0.3, 0.1) == pytest.approx([0.0, 0.1, 0.2])
    assert frequency_distribution(-0.2, 0.1, 0.1) == pytest.approx([-0.2, -0.1, 0.0])


def test_frequency_distribution_excludes_end():
    """Test that the end value itself is never produced."""
    axis = frequency_distribution(0.0, 5.0, 1.0)
    
    assert list(axis) == [0.0, 1.0, 2.0, 3.0, 4.0]


def test_frequency_distribution_invalid():
    """Test step and range validation."""
    with pytest.raises(ConfigError):
        frequency_distribution(0.0, 1.0, 0.0)
    with pytest.raises(ConfigError):
        frequency_distribution(0.0, 1.0, -0.1)
    with pytest.raises(EmptyInputError):
        frequency_distribution(1.0, 1.0, 0.1)


def test_fft_shift():
    """Test centering for odd and even lengths."""
    assert list(fft_shift([0, 1, 2])) == [2, 0, 1]
    assert list(fft_shift([0, 1, 2, 3, 4, -5, -4, -3, -2, -1])) == [-5, -4, -3, -2, -1, 0, 1, 2, 3, 4]


def test_fft_shift_matches_numpy():
    """Test that the split point agrees with numpy's fftshift."""
    for length in range(1, 12):
        values = np.arange(length)
        assert np.array_equal(fft_shift(values), np.fft.fftshift(values))


def test_fft_of_dc_is_centered():
    """Test that a constant signal puts all energy in the middle bin."""
    spectrum = fft_of([1.0] * 8)
    
    assert spectrum[4] == pytest.approx(8.0)
    assert np.allclose(np.delete(np.abs(spectrum), 4), 0.0)


def test_sine_energy_in_matching_bins():
    """Test that a bin-centered sine peaks at +/- its frequency."""
    sample_rate = 1024
    length = 256
    frequency = 64.0  # exactly bin 16
    t = np.arange(length) / sample_rate
    sine = np.sin(2 * np.pi * frequency * t)
    
    magnitudes = magnitude_spectrum(sine)
    frequencies = frequency_axis(length, sample_rate)
    
    peaks = set(np.argsort(magnitudes)[-2:])
    assert {round(frequencies[i]) for i in peaks} == {-64, 64}
    others = np.delete(magnitudes, list(peaks))
    assert np.all(others < 1e-6 * magnitudes.max())


def test_frequency_axis_matches_bins():
    """Test that the axis labels agree with the bin mapping."""
    for length in [7, 8, 1024]:
        axis = frequency_axis(length, 44100)
        assert len(axis) == length
        assert axis == pytest.approx(bin_frequencies(length, 44100))


def test_phase_spectrum_length():
    """Test that the phase spectrum has one value per sample."""
    assert len(phase_spectrum([0.0, 1.0, 0.0, -1.0])) == 4


def test_empty_buffers_rejected():
    """Test that empty inputs raise instead of producing NaN."""
    with pytest.raises(EmptyInputError):
        fft_of([])
    with pytest.raises(EmptyInputError):
        frequency_axis(0, 44100)
    with pytest.raises(EmptyInputError):
        spectrum_bounds([])
    with pytest.raises(EmptyInputError):
        normalize_magnitudes([])


def test_spectrum_bounds_and_normalize():
    """Test min/max reductions over spectrum points."""
    points = [
        SpectrumPoint(0, -100.0, 2.0),
        SpectrumPoint(64, 50.0, 8.0),
        SpectrumPoint(128, 0.0, 0.0),
    ]
    
    windows, freqs, mags = spectrum_bounds(points)
    assert windows == (0.0, 128.0)
    assert freqs == (-100.0, 50.0)
    assert mags == (0.0, 8.0)
    assert list(normalize_magnitudes(points)) == pytest.approx([0.25, 1.0, 0.0])


def test_normalize_silence():
    """Test that an all-zero spectrum normalizes to zeros, not NaN."""
    points = [SpectrumPoint(1, 0.0, 0.0), SpectrumPoint(1, 1.0, 0.0)]
    
    assert list(normalize_magnitudes(points)) == [0.0, 0.0]


def test_frequency_axis_odd_length_centers_dc():
    """Test that odd-length axes put 0 Hz on the bin fft_shift centers."""
    assert frequency_axis(3, 300) == pytest.approx([-100.0, 0.0, 100.0])
    for length in [3, 5, 7, 9]:
        expected = np.fft.fftshift(np.fft.fftfreq(length, 1.0 / 1000))
        assert frequency_axis(length, 1000) == pytest.approx(expected)
        assert bin_frequencies(length, 1000) == pytest.approx(expected)


def test_odd_length_dc_labelled_zero():
    """Test that a constant odd-length buffer peaks at 0 Hz."""
    magnitudes = magnitude_spectrum([1.0] * 5)
    frequencies = bin_frequencies(5, 1000)
    
    assert frequencies[np.argmax(magnitudes)] == 0.0
