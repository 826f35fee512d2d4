"""Error types raised by the filter and analysis pipeline.

I/O failures are not wrapped: ``OSError`` and its subclasses from the
standard library propagate unchanged.
"""


class SoundLabError(Exception):
    """Base class for pipeline errors."""


class ConfigError(SoundLabError, ValueError):
    """Invalid parameter: filter width, window size, channel count, step..."""


class EmptyInputError(SoundLabError, ValueError):
    """Zero-length input where at least one sample is required."""


class FormatError(SoundLabError, ValueError):
    """Unsupported or malformed PCM data."""


class TeeOverflowError(SoundLabError, BufferError):
    """A duplicated stream ran further ahead than its lag limit allows."""
