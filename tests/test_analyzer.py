"""Unit tests for the windowed spectral analyzer."""
import math
import pytest
import numpy as np
from soundlab.core.errors import ConfigError
from soundlab.dsp.analyzer import WindowedSpectralAnalyzer, analyze, spectrogram_array


def test_empty_buffer_gives_no_points():
    """Test that an empty buffer produces an empty spectrogram."""
    assert analyze([], window_size=128, sample_rate=44100) == []
    assert spectrogram_array([]).shape == (0, 3)


def test_window_count():
    """Test the number of non-empty windows for a buffer."""
    for length, window in [(1000, 128), (1024, 128), (100, 64), (3, 4)]:
        analyzer = WindowedSpectralAnalyzer(window, 44100)
        windows = list(analyzer.windows(np.zeros(length)))
        assert len(windows) == math.ceil(length / (window // 2)) - 1


def test_short_windows_at_buffer_start():
    """Test that early windows are shorter, not zero-padded."""
    analyzer = WindowedSpectralAnalyzer(8, 44100)
    windows = list(analyzer.windows(np.arange(20, dtype=float)))
    
    assert [index for index, _ in windows] == [4, 8, 12, 16]
    assert list(windows[0][1]) == [0, 1, 2, 3]
    assert list(windows[1][1]) == list(range(8))
    assert list(windows[3][1]) == list(range(8, 16))


def test_point_count_matches_window_lengths():
    """Test one point per bin, using each window's own length."""
    buffer = np.random.RandomState(0).randn(20)
    points = analyze(buffer, window_size=8, sample_rate=44100)
    
    # windows of length 4, 8, 8, 8
    assert len(points) == 4 + 8 + 8 + 8
    assert all(point.magnitude >= 0 for point in points)


def test_short_window_uses_own_bin_spacing():
    """Test that a short window's frequencies follow its own length."""
    points = analyze(np.ones(20), window_size=8, sample_rate=800)
    
    first = sorted(p.frequency_hz for p in points if p.window_index == 4)
    full = sorted(p.frequency_hz for p in points if p.window_index == 8)
    assert first == pytest.approx([-400.0, -200.0, 0.0, 200.0])
    assert full == pytest.approx([-400.0, -300.0, -200.0, -100.0, 0.0, 100.0, 200.0, 300.0])


def test_sine_peaks_at_its_frequency():
    """Test that every full window of a sine peaks at +/- the sine frequency."""
    sample_rate = 44100
    window = 1024
    frequency = 40 * sample_rate / window  # bin-centered
    t = np.arange(window * 8) / sample_rate
    sine = np.sin(2 * np.pi * frequency * t)
    
    data = spectrogram_array(analyze(sine, window_size=window, sample_rate=sample_rate))
    for index in range(window, len(sine), window // 2):
        rows = data[data[:, 0] == index]
        assert len(rows) == window
        peaks = rows[np.argsort(rows[:, 2])[-2:]]
        assert sorted(peaks[:, 1]) == pytest.approx([-frequency, frequency])


def test_parallel_matches_serial():
    """Test that the worker count does not change the result."""
    buffer = np.random.RandomState(1).randn(4096)
    serial = WindowedSpectralAnalyzer(256, 44100, max_workers=1).analyze(buffer)
    parallel = WindowedSpectralAnalyzer(256, 44100, max_workers=8).analyze(buffer)
    
    assert np.allclose(spectrogram_array(serial), spectrogram_array(parallel))


def test_spectrogram_array_sorted():
    """Test that the array form restores time order."""
    data = spectrogram_array(analyze(np.random.RandomState(2).randn(512), window_size=64, sample_rate=44100))
    
    assert np.all(np.diff(data[:, 0]) >= 0)


def test_non_power_of_two_window():
    """Test that any window size >= 2 works."""
    points = analyze(np.ones(30), window_size=6, sample_rate=44100)
    
    assert len(points) > 0


@pytest.mark.parametrize("window_size", [0, 1, -4, 2.5])
def test_invalid_window_size(window_size):
    """Test that window sizes below two are rejected."""
    with pytest.raises(ConfigError):
        WindowedSpectralAnalyzer(window_size, 44100)


def test_odd_window_dc_at_zero_hz():
    """Test that odd-length windows label their DC bin 0 Hz."""
    points = analyze(np.ones(12), window_size=5, sample_rate=1000)
    
    for index in [2, 4, 6, 8, 10]:
        rows = [p for p in points if p.window_index == index]
        peak = max(rows, key=lambda p: p.magnitude)
        assert peak.frequency_hz == 0.0
        assert peak.magnitude == pytest.approx(len(rows))
    
    full = sorted(p.frequency_hz for p in points if p.window_index == 10)
    assert full == pytest.approx([-400.0, -200.0, 0.0, 200.0, 400.0])
