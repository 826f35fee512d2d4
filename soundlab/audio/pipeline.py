"""Filter pipeline orchestrator and experiment runner."""
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import time
from typing import List, Optional, Sequence
import numpy as np
from soundlab.audio.channels import deinterleave, interleave
from soundlab.audio.models import SpectrumPoint, WavSpec
from soundlab.audio.synthesis import generate_sinewave
from soundlab.audio.wav import PathLike, read_interleaved_samples, wav_channel_as_float, write_interleaved_samples
from soundlab.core.config import settings
from soundlab.core.errors import ConfigError, FormatError
from soundlab.core.logging import logger, setup_logging
from soundlab.dsp.analyzer import WindowedSpectralAnalyzer
from soundlab.dsp.filters import FILTER_BIT_DEPTH, high_pass, low_pass

FILTERS = {
    "low": low_pass,
    "high": high_pass,
}


def filter_interleaved(samples: Sequence[int], channels: int, width: int, kind: str = "low") -> np.ndarray:
    """
    Filter every channel of an interleaved sample sequence.

    The pipeline applies these steps in order:
    1. Deinterleave into one array per channel (partial frames dropped)
    2. Run each channel through its own filter instance, one thread per channel
    3. Re-interleave, each channel back in its own slot

    Args:
        samples: Interleaved samples
        channels: Number of interleaved channels
        width: Filter smoothing order
        kind: "low" or "high"

    Returns:
        Filtered interleaved samples as an int64 array
    """
    if kind not in FILTERS:
        raise ConfigError(f"Unknown filter kind {kind!r}, expected one of {sorted(FILTERS)}")
    apply_filter = FILTERS[kind]

    per_channel = deinterleave(samples, channels)

    # Channels share no state, so each gets its own worker
    with ThreadPoolExecutor(max_workers=channels) as executor:
        filtered: List[np.ndarray] = list(
            executor.map(lambda channel: apply_filter(channel, width), per_channel)
        )

    return np.fromiter(interleave(filtered), dtype=np.int64, count=sum(len(f) for f in filtered))


def filter_file(
    input_path: PathLike,
    output_path: PathLike,
    width: Optional[int] = None,
    kind: Optional[str] = None
) -> WavSpec:
    """
    Read a WAV file, filter all its channels and write the result.

    Args:
        input_path: Source WAV file
        output_path: Destination WAV file, same format as the source
        width: Filter smoothing order (defaults to config value)
        kind: "low" or "high" (defaults to config value)

    Returns:
        Spec of the written file

    Raises:
        FormatError: The input is deeper than the 24-bit filter domain
    """
    if width is None:
        width = settings.filter_width
    if kind is None:
        kind = settings.filter_kind

    start_time = time.time()
    channels, sample_rate, bit_depth, samples = read_interleaved_samples(input_path)
    spec = WavSpec(channels=channels, sample_rate=sample_rate, bit_depth=bit_depth)
    if bit_depth > FILTER_BIT_DEPTH:
        # Filters saturate at 24 bits; deeper samples would be clipped
        raise FormatError(
            f"{input_path}: {bit_depth}-bit PCM exceeds the {FILTER_BIT_DEPTH}-bit filter domain"
        )
    logger.info(f"Applying {kind}-pass filter (width={width}) to {input_path}: {spec}")

    filtered = filter_interleaved(samples, channels, width, kind)
    write_interleaved_samples(output_path, spec, filtered)

    processing_time = (time.time() - start_time) * 1000
    logger.info(f"Wrote {output_path} in {processing_time:.2f}ms")
    if processing_time > settings.processing_warn_ms:
        logger.warning(f"Filtering took {processing_time:.2f}ms (target: {settings.processing_warn_ms}ms)")

    return spec


def run() -> List[SpectrumPoint]:
    """
    Run the experiment sequence from settings.

    1. Generate a sine tone file
    2. Low/high-pass the configured input file
    3. Analyze the first channel of the filtered file

    Any failure aborts the run.

    Returns:
        Spectrogram points of the filtered signal
    """
    output_dir = Path(settings.output_dir)
    try:
        logger.info("1 :: generating sinewave")
        generate_sinewave(output_dir / "generate_sinewave.wav")

        logger.info(f"2 :: applying a {settings.filter_kind} pass filter")
        filtered_path = output_dir / f"after-{settings.filter_kind}-pass.wav"
        spec = filter_file(settings.input_file, filtered_path)

        logger.info(f"3 :: analyzing frequencies (window={settings.fft_window_size})")
        analyzer = WindowedSpectralAnalyzer(settings.fft_window_size, spec.sample_rate)
        points = analyzer.analyze(wav_channel_as_float(filtered_path))
        logger.info(f"Spectrogram has {len(points)} points")
    except Exception as e:
        logger.error(f"Pipeline run failed: {e}", exc_info=True)
        raise

    return points


if __name__ == "__main__":
    setup_logging()
    run()
