"""Channel deinterleaving and interleaving."""
from itertools import chain
from typing import Iterator, List, Sequence
import numpy as np
from soundlab.audio.streaming import Sample, SampleStream
from soundlab.core.errors import ConfigError
from soundlab.core.logging import logger


def deinterleave(samples: Sequence[Sample], channels: int) -> List[np.ndarray]:
    """
    Split an interleaved sample sequence into one array per channel.
    
    Channel `c` receives the elements at positions c, c+C, c+2C, ...
    A trailing partial frame is dropped.
    
    Args:
        samples: Interleaved samples (L R L R ... for stereo)
        channels: Number of interleaved channels
        
    Returns:
        List of `channels` arrays of equal length
    """
    if channels <= 0:
        raise ConfigError(f"channels must be > 0, got {channels}")
    
    data = np.asarray(samples)
    usable = len(data) - len(data) % channels
    if usable != len(data):
        logger.warning(f"Dropping {len(data) - usable} trailing samples of a partial {channels}-channel frame")
    
    data = data[:usable]
    return [data[channel::channels] for channel in range(channels)]


def interleave(streams: Sequence[SampleStream]) -> Iterator[Sample]:
    """
    Lazily merge per-channel streams back into one interleaved stream.
    
    Round-robin over `streams`; stops at the end of the shortest one, so a
    partial frame is never emitted.
    """
    if len(streams) == 0:
        raise ConfigError("interleave needs at least one channel stream")
    
    return chain.from_iterable(zip(*streams))
