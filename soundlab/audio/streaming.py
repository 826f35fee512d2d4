"""Lazy sample streams and stream duplication (tee)."""
from collections import deque
from typing import Any, Iterable, Iterator, Optional, Tuple, Union
from soundlab.core.config import settings
from soundlab.core.errors import ConfigError, TeeOverflowError

Sample = Union[int, float]
SampleStream = Iterable[Sample]

# Default for tee(): take the lag limit from settings
CONFIGURED_LAG = object()


class _TeeBuffer:
    """
    Shared state behind a pair of TeeStream handles.
    
    Holds the origin iterator, the elements the lagging handle has not
    delivered yet, and one read cursor (an absolute element index) per
    handle. Every element is pulled from the origin exactly once.
    """
    
    def __init__(self, origin: SampleStream, max_lag: Optional[int] = None):
        """
        Initialize the shared buffer.
        
        Args:
            origin: Source stream, consumed lazily
            max_lag: Maximum number of elements one handle may run ahead of
                     the other. None means unbounded (limited by memory).
        """
        if max_lag is not None and max_lag < 1:
            raise ConfigError(f"max_lag must be >= 1 or None, got {max_lag}")
        self._origin: Iterator[Sample] = iter(origin)
        self._pending: deque = deque()
        self._head = 0  # absolute index of _pending[0]
        self._cursors = [0, 0]
        self._exhausted = False
        self.max_lag = max_lag
    
    def pull(self, reader: int) -> Sample:
        """Deliver the next element for handle `reader` (0 or 1)."""
        position = self._cursors[reader]
        offset = position - self._head
        if offset < len(self._pending):
            value = self._pending[offset]
        else:
            if self._exhausted:
                raise StopIteration
            behind = self._cursors[1 - reader]
            if self.max_lag is not None and position + 1 - behind > self.max_lag:
                raise TeeOverflowError(
                    f"Tee handle {reader} would run {position + 1 - behind} elements ahead "
                    f"(max_lag={self.max_lag})"
                )
            try:
                value = next(self._origin)
            except StopIteration:
                self._exhausted = True
                raise
            self._pending.append(value)
        
        self._cursors[reader] = position + 1
        
        # Drop everything both handles have seen
        lowest = min(self._cursors)
        while self._head < lowest:
            self._pending.popleft()
            self._head += 1
        
        return value
    
    def backlog(self, reader: int) -> int:
        """Number of buffered elements handle `reader` has not read yet."""
        return self._head + len(self._pending) - self._cursors[reader]


class TeeStream:
    """One of the two independent cursors returned by `tee`."""
    
    def __init__(self, buffer: _TeeBuffer, reader: int):
        self._buffer = buffer
        self._reader = reader
    
    def __iter__(self) -> "TeeStream":
        return self
    
    def __next__(self) -> Sample:
        return self._buffer.pull(self._reader)
    
    @property
    def backlog(self) -> int:
        """Elements already pulled from the origin but not yet read here."""
        return self._buffer.backlog(self._reader)


def tee(stream: SampleStream, max_lag: Any = CONFIGURED_LAG) -> Tuple[TeeStream, TeeStream]:
    """
    Duplicate a stream into two independent streams.
    
    Both returned streams yield exactly the elements of `stream`, in order,
    whatever the interleaving of pulls between them. Whichever stream is
    behind keeps a backlog that drains as it catches up.
    
    Args:
        stream: Source stream (read once, lazily)
        max_lag: Backlog limit; exceeding it raises TeeOverflowError.
                 None means unbounded. Defaults to settings.tee_max_lag.
        
    Returns:
        Tuple of two TeeStream handles
    """
    if max_lag is CONFIGURED_LAG:
        max_lag = settings.tee_max_lag
    buffer = _TeeBuffer(stream, max_lag=max_lag)
    return TeeStream(buffer, 0), TeeStream(buffer, 1)
