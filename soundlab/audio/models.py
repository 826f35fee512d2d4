"""Audio data models and structures."""
from dataclasses import dataclass
from typing import NamedTuple
import numpy as np
from soundlab.core.errors import FormatError

SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)


@dataclass(frozen=True)
class WavSpec:
    """Format of an interleaved PCM stream."""
    channels: int
    sample_rate: int
    bit_depth: int
    
    def __post_init__(self):
        """Validate format fields."""
        if self.channels < 1:
            raise FormatError(f"Expected at least one channel, got {self.channels}")
        if self.sample_rate <= 0:
            raise FormatError(f"Expected positive sample rate, got {self.sample_rate}")
        if self.bit_depth not in SUPPORTED_BIT_DEPTHS:
            raise FormatError(f"Unsupported bit depth {self.bit_depth}, expected one of {SUPPORTED_BIT_DEPTHS}")
    
    @property
    def sample_width(self) -> int:
        """Bytes per sample."""
        return self.bit_depth // 8
    
    @property
    def max_sample(self) -> int:
        return (1 << (self.bit_depth - 1)) - 1
    
    @property
    def min_sample(self) -> int:
        return -(1 << (self.bit_depth - 1))


@dataclass
class AudioClip:
    """Interleaved integer PCM samples with their format."""
    spec: WavSpec
    samples: np.ndarray
    
    def __post_init__(self):
        """Validate sample data."""
        if not np.issubdtype(self.samples.dtype, np.integer):
            raise FormatError(f"Expected integer PCM, got {self.samples.dtype}")
        if len(self.samples.shape) != 1:
            raise FormatError(f"Expected interleaved (1D array), got shape {self.samples.shape}")
    
    @property
    def frame_count(self) -> int:
        """Number of complete multi-channel frames."""
        return len(self.samples) // self.spec.channels
    
    @property
    def duration_seconds(self) -> float:
        return self.frame_count / self.spec.sample_rate


class SpectrumPoint(NamedTuple):
    """One cell of a spectrogram: a window, a frequency bin and its magnitude."""
    window_index: int  # time index the window was cut at
    frequency_hz: float
    magnitude: float  # always >= 0
