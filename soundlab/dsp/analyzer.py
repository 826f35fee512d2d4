"""Windowed spectral analysis: a parallel sliding-window FFT spectrogram."""
from concurrent.futures import ThreadPoolExecutor, as_completed
import time
from typing import Iterator, List, Optional, Sequence, Tuple
import numpy as np
from soundlab.audio.models import SpectrumPoint
from soundlab.core.config import settings
from soundlab.core.errors import ConfigError
from soundlab.core.logging import logger
from soundlab.dsp.spectrum import bin_frequencies, fft_of


def window_spectrum(window_index: int, window: np.ndarray, sample_rate: float) -> List[SpectrumPoint]:
    """
    Magnitude spectrum of a single window, one point per bin.

    The transform length is the window's own length, which is shorter than
    the nominal window size near the start of a buffer; bin frequencies use
    that same length.

    Args:
        window_index: Time index the window was cut at
        window: Samples of the window (non-empty)
        sample_rate: Source sample rate in Hz

    Returns:
        List of SpectrumPoint, in centered bin order
    """
    magnitudes = np.abs(fft_of(window))
    frequencies = bin_frequencies(len(window), sample_rate)
    return [
        SpectrumPoint(window_index, float(freq), float(mag))
        for freq, mag in zip(frequencies, magnitudes)
    ]


class WindowedSpectralAnalyzer:
    """
    Turns a sample buffer into spectrogram points.

    Windows are cut every window_size // 2 samples (50% overlap). The window
    cut at time index i covers samples [max(0, i - window_size), i), so the
    first windows of a buffer are short rather than zero-padded, and the
    window at index 0 is empty and skipped. Each window's FFT runs as an
    independent task on a thread pool.
    """

    def __init__(
        self,
        window_size: Optional[int] = None,
        sample_rate: Optional[float] = None,
        max_workers: Optional[int] = None
    ):
        """
        Initialize the analyzer.

        Args:
            window_size: Nominal window length in samples (defaults to config value).
                         Any integer >= 2; numpy's FFT is not limited to powers of two.
            sample_rate: Source sample rate in Hz (defaults to config value)
            max_workers: Thread pool size (defaults to config value)
        """
        if window_size is None:
            window_size = settings.fft_window_size
        if sample_rate is None:
            sample_rate = settings.sample_rate
        if max_workers is None:
            max_workers = settings.analyzer_max_workers

        if isinstance(window_size, bool) or not isinstance(window_size, (int, np.integer)):
            raise ConfigError(f"Window size must be an integer, got {window_size!r}")
        if window_size < 2:
            raise ConfigError(f"Window size must be >= 2, got {window_size}")
        if sample_rate <= 0:
            raise ConfigError(f"Sample rate must be > 0, got {sample_rate}")

        self.window_size = int(window_size)
        self.sample_rate = sample_rate
        self.max_workers = max_workers

    @property
    def hop(self) -> int:
        """Distance between consecutive window cuts."""
        return self.window_size // 2

    def windows(self, buffer: Sequence[float]) -> Iterator[Tuple[int, np.ndarray]]:
        """Yield (window_index, window) for every non-empty window of `buffer`."""
        data = np.asarray(buffer, dtype=np.float64)
        for index in range(0, len(data), self.hop):
            window = data[max(0, index - self.window_size):index]
            if len(window) == 0:
                continue
            yield index, window

    def analyze(self, buffer: Sequence[float]) -> List[SpectrumPoint]:
        """
        Compute the spectrogram of `buffer`.

        Points come back in completion order, not time order; use
        `window_index` (or spectrogram_array) to restore time order.

        Args:
            buffer: Finite sample buffer

        Returns:
            List of SpectrumPoint; empty for an empty buffer
        """
        if len(buffer) == 0:
            logger.warning("Spectral analysis of an empty buffer, no windows to transform")
            return []

        start_time = time.time()
        points: List[SpectrumPoint] = []
        window_count = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(window_spectrum, index, window, self.sample_rate)
                for index, window in self.windows(buffer)
            ]
            window_count = len(futures)
            for future in as_completed(futures):
                points.extend(future.result())

        processing_time = (time.time() - start_time) * 1000
        logger.debug(
            f"Analyzed {window_count} windows of {self.window_size} samples "
            f"({len(points)} points) in {processing_time:.2f}ms"
        )
        if processing_time > settings.processing_warn_ms:
            logger.warning(f"Spectral analysis took {processing_time:.2f}ms (target: {settings.processing_warn_ms}ms)")

        return points


def analyze(
    buffer: Sequence[float],
    window_size: Optional[int] = None,
    sample_rate: Optional[float] = None
) -> List[SpectrumPoint]:
    """Spectrogram of `buffer` with a one-off WindowedSpectralAnalyzer."""
    return WindowedSpectralAnalyzer(window_size, sample_rate).analyze(buffer)


def spectrogram_array(points: Sequence[SpectrumPoint]) -> np.ndarray:
    """
    Stack spectrogram points into an (n, 3) float array in time order.

    Rows are (window_index, frequency_hz, magnitude), sorted by window index
    and then by frequency.
    """
    if len(points) == 0:
        return np.empty((0, 3), dtype=np.float64)

    data = np.array([tuple(point) for point in points], dtype=np.float64)
    order = np.lexsort((data[:, 1], data[:, 0]))
    return data[order]
