"""Output governor: sink writes, byte accounting, and the size ceiling.

The ceiling is a property of the whole document, so it is checked once
after encoding completes, never per value.
"""

from typing import Any, Optional

from canonjson.kernel.errors import SizeLimitExceeded, WriteFailure


MAX_CANONICAL_SIZE = 65_535


def write_all(sink: Any, data: bytes) -> None:
    """Write every byte of ``data`` to ``sink``.

    Short writes are retried with the remainder. A write that makes no
    progress, or an ``OSError`` from the sink, is a ``WriteFailure``.
    """
    while data:
        try:
            written = sink.write(data)
        except OSError as err:
            raise WriteFailure(f"failed to write to output: {err}") from err
        # Duck-typed sinks often return None after a complete write
        if written is None or written >= len(data):
            return
        if written <= 0:
            raise WriteFailure("failed to write whole buffer")
        data = data[written:]


class OutputGovernor:
    """Writer wrapper that forwards to a sink and counts bytes written."""

    def __init__(self, sink: Any, limit: Optional[int] = MAX_CANONICAL_SIZE):
        self.sink = sink
        self.limit = limit
        self.written = 0

    def write(self, data: bytes) -> int:
        write_all(self.sink, data)
        self.written += len(data)
        return len(data)

    def check(self) -> None:
        """Raise ``SizeLimitExceeded`` if more than ``limit`` bytes were written."""
        if self.limit is not None and self.written > self.limit:
            raise SizeLimitExceeded(self.written, self.limit)
