"""Reading and writing interleaved integer PCM WAV files."""
import wave
from pathlib import Path
from typing import Sequence, Tuple, Union
import numpy as np
from soundlab.audio.models import AudioClip, WavSpec
from soundlab.audio.channels import deinterleave
from soundlab.core.errors import ConfigError, FormatError
from soundlab.core.logging import logger

PathLike = Union[str, Path]


def _decode_pcm(data: bytes, sample_width: int) -> np.ndarray:
    """Convert little-endian PCM bytes to an int32 array."""
    if sample_width == 1:
        # 8-bit WAV is unsigned, centered on 128
        return np.frombuffer(data, dtype=np.uint8).astype(np.int32) - 128
    if sample_width == 2:
        return np.frombuffer(data, dtype="<i2").astype(np.int32)
    if sample_width == 3:
        raw = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
        values = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
        return np.where(values & 0x800000, values - (1 << 24), values)
    if sample_width == 4:
        return np.frombuffer(data, dtype="<i4").astype(np.int32)
    raise FormatError(f"Unsupported sample width {sample_width} bytes")


def _encode_pcm(samples: np.ndarray, sample_width: int) -> bytes:
    """Convert an integer array to little-endian PCM bytes."""
    if sample_width == 1:
        return (samples + 128).astype(np.uint8).tobytes()
    if sample_width == 2:
        return samples.astype("<i2").tobytes()
    if sample_width == 3:
        values = samples.astype("<i4").view(np.uint8).reshape(-1, 4)
        return values[:, :3].tobytes()
    if sample_width == 4:
        return samples.astype("<i4").tobytes()
    raise FormatError(f"Unsupported sample width {sample_width} bytes")


def read_interleaved_samples(path: PathLike) -> Tuple[int, int, int, np.ndarray]:
    """
    Read every sample of a PCM WAV file.

    Args:
        path: WAV file to read

    Returns:
        (channel_count, sample_rate, bit_depth, interleaved int32 samples)

    Raises:
        OSError: The file is missing or unreadable
        FormatError: The file is not a supported integer PCM WAV
    """
    try:
        with wave.open(str(path), "rb") as wav_file:
            channels = wav_file.getnchannels()
            sample_rate = wav_file.getframerate()
            sample_width = wav_file.getsampwidth()
            frames = wav_file.readframes(wav_file.getnframes())
    except (wave.Error, EOFError) as e:
        raise FormatError(f"{path}: not a supported PCM WAV file ({e})") from e

    if len(frames) % (sample_width * channels) != 0:
        raise FormatError(f"{path}: data size {len(frames)} is not a whole number of frames")

    samples = _decode_pcm(frames, sample_width)
    logger.debug(f"Read {len(samples)} samples from {path} ({channels}ch, {sample_rate}Hz, {sample_width * 8}bit)")
    return channels, sample_rate, sample_width * 8, samples


def write_interleaved_samples(path: PathLike, spec: WavSpec, samples: Sequence[int]) -> None:
    """
    Write interleaved integer samples as a PCM WAV file.

    Samples outside the range of `spec.bit_depth` are clipped.

    Args:
        path: Destination file (parent directories are created)
        spec: Channel count, sample rate and bit depth
        samples: Interleaved samples, a whole number of frames
    """
    data = np.asarray(samples)
    if data.size and not np.issubdtype(data.dtype, np.number):
        raise FormatError(f"Expected numeric samples, got {data.dtype}")
    if len(data) % spec.channels != 0:
        raise FormatError(f"{len(data)} samples is not a multiple of {spec.channels} channels")

    data = np.clip(np.asarray(data, dtype=np.int64), spec.min_sample, spec.max_sample)

    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(spec.channels)
        wav_file.setsampwidth(spec.sample_width)
        wav_file.setframerate(spec.sample_rate)
        wav_file.writeframes(_encode_pcm(data, spec.sample_width))

    logger.debug(f"Wrote {len(data)} samples to {path}")


def read_clip(path: PathLike) -> AudioClip:
    """Read a WAV file into an AudioClip."""
    channels, sample_rate, bit_depth, samples = read_interleaved_samples(path)
    return AudioClip(spec=WavSpec(channels, sample_rate, bit_depth), samples=samples)


def wav_channel_as_float(path: PathLike, channel: int = 0) -> np.ndarray:
    """
    Read one channel of a WAV file as float samples (integer scale).

    Args:
        path: WAV file to read
        channel: Channel to extract, 0 is left

    Returns:
        float64 array of that channel's samples
    """
    clip = read_clip(path)
    if not 0 <= channel < clip.spec.channels:
        raise ConfigError(f"Channel {channel} out of range for {clip.spec.channels}-channel file")
    return deinterleave(clip.samples, clip.spec.channels)[channel].astype(np.float64)
