"""Error code constants for canonjson failures.

These constants prevent stringly-typed error codes and let client code
branch on the kind of failure without matching on exception messages.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Kinds of canonical encoding failure."""

    # The output sink rejected a write
    WRITE_FAILURE = "WRITE_FAILURE"
    # Float, non-string key, or a value the visitor cannot classify
    INVALID_INPUT = "INVALID_INPUT"
    # Encoded document larger than 65,535 bytes
    SIZE_LIMIT_EXCEEDED = "SIZE_LIMIT_EXCEEDED"
    # A value hook failed to produce a value at all
    CUSTOM = "CUSTOM"
