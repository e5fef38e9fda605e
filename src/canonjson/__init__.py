"""canonjson: canonical JSON encoding for signing and hashing."""

import logging
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("canonjson")
except PackageNotFoundError:
    __version__ = "dev"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API exports
from canonjson.api import (
    CanonicalEncoder,
    canonical_file_sha256,
    canonical_sha256,
    canonicalize_json_file,
    check,
    to_canonical_bytes,
    to_canonical_string,
    to_canonical_writer,
)
from canonjson.codes import ErrorCode
from canonjson.contracts import CheckIssue, CheckResult
from canonjson.kernel.errors import (
    CanonicalizationError,
    CustomError,
    InvalidInput,
    SizeLimitExceeded,
    WriteFailure,
)
from canonjson.kernel.governor import MAX_CANONICAL_SIZE
from canonjson.kernel.variant import Variant

__all__ = [
    "__version__",
    "to_canonical_bytes",
    "to_canonical_string",
    "to_canonical_writer",
    "check",
    "canonical_sha256",
    "canonicalize_json_file",
    "canonical_file_sha256",
    "CanonicalEncoder",
    "CheckIssue",
    "CheckResult",
    "ErrorCode",
    "CanonicalizationError",
    "CustomError",
    "InvalidInput",
    "SizeLimitExceeded",
    "WriteFailure",
    "MAX_CANONICAL_SIZE",
    "Variant",
]
