"""Error taxonomy for canonical encoding.

Every error is terminal for the encode call that raised it. Callers can
catch ``CanonicalizationError`` for all of them, or a subclass for one kind.
"""

from canonjson.codes import ErrorCode


class CanonicalizationError(ValueError):
    """Raised when a value cannot be encoded as canonical JSON."""

    code = ErrorCode.CUSTOM

    def __init__(self, message: str, path: str = ""):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message

    def within(self, segment: str) -> "CanonicalizationError":
        """Prefix the path with the container segment the error passed through."""
        if not self.path:
            self.path = segment
        elif self.path.startswith("["):
            self.path = segment + self.path
        else:
            self.path = f"{segment}.{self.path}"
        return self

    @classmethod
    def custom(cls, message) -> "CustomError":
        """Build a ``CustomError`` from any displayable message."""
        return CustomError(str(message))


class WriteFailure(CanonicalizationError):
    """The output sink rejected a write."""

    code = ErrorCode.WRITE_FAILURE


class InvalidInput(CanonicalizationError):
    """A float, a non-string key, or an unclassifiable value was found."""

    code = ErrorCode.INVALID_INPUT

    def __str__(self) -> str:
        return f"Found invalid input: {super().__str__()}"


class SizeLimitExceeded(CanonicalizationError):
    """The encoded document is larger than the canonical size ceiling."""

    code = ErrorCode.SIZE_LIMIT_EXCEEDED

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"canonical JSON larger than {limit:,} bytes is not allowed (got {size:,} bytes)"
        )


class CustomError(CanonicalizationError):
    """A value source failed to produce a value."""

    code = ErrorCode.CUSTOM


def key_must_be_a_string(path: str = "") -> InvalidInput:
    return InvalidInput("key must be a string", path)


def floats_not_allowed(path: str = "") -> InvalidInput:
    return InvalidInput("floats are not allowed", path)
