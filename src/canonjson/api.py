"""Public API for canonjson.

High-level functions that return the canonical encoding of a value, or
raise a ``CanonicalizationError`` subclass. Output is all-or-nothing:
nothing is returned or written to a sink unless the whole document
encoded successfully and fits the size ceiling.
"""

import hashlib
import io
import json
import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Union

from canonjson.contracts import CheckIssue, CheckResult
from canonjson.kernel.errors import CanonicalizationError, SizeLimitExceeded
from canonjson.kernel.governor import OutputGovernor, write_all
from canonjson.kernel.serializer import CanonicalSerializer


logger = logging.getLogger(__name__)


class CanonicalEncoder:
    """Low-level encoder streaming canonical JSON into a caller-owned writer.

    Unlike the top-level functions this does not buffer and does not apply
    the size ceiling, so a failed ``encode`` may leave partial output in
    the writer. ``bytes_written`` counts what reached it.
    """

    def __init__(self, writer: BinaryIO):
        self._governor = OutputGovernor(writer, limit=None)

    @property
    def bytes_written(self) -> int:
        return self._governor.written

    def encode(self, value: Any) -> None:
        CanonicalSerializer(self._governor).serialize(value)


def to_canonical_bytes(value: Any) -> bytes:
    """Encode ``value`` as canonical JSON.

    Rules:
    - Object members sorted by the raw UTF-8 bytes of their keys
    - Arrays keep input order
    - Integers only; floats are rejected wherever they appear
    - Minimal string escaping, raw UTF-8 for non-ASCII text
    - No whitespace
    - At most 65,535 bytes

    Args:
        value: Any value the visitor can classify

    Returns:
        Canonical JSON as UTF-8 bytes

    Raises:
        InvalidInput: Float, non-string key, or unsupported value
        SizeLimitExceeded: Encoded document exceeds 65,535 bytes
        CustomError: A ``__canonical_json__`` hook failed
    """
    buffer = io.BytesIO()
    governor = OutputGovernor(buffer)
    try:
        CanonicalSerializer(governor).serialize(value)
        governor.check()
    except SizeLimitExceeded as err:
        logger.warning("Rejected canonical JSON: %s", err)
        raise
    except CanonicalizationError as err:
        logger.debug("Canonical encoding failed [%s] at %r: %s", err.code.value, err.path, err.message)
        raise
    return buffer.getvalue()


def to_canonical_string(value: Any) -> str:
    """Encode ``value`` as a canonical JSON string. See ``to_canonical_bytes``."""
    # The emitter only ever writes valid UTF-8
    return to_canonical_bytes(value).decode("utf-8")


def to_canonical_writer(sink: BinaryIO, value: Any) -> int:
    """Encode ``value`` and write the whole document to ``sink``.

    Nothing is written unless encoding and the size check succeed.

    Returns:
        Number of bytes written

    Raises:
        WriteFailure: The sink raised ``OSError`` or stopped accepting bytes
        Plus everything ``to_canonical_bytes`` raises
    """
    data = to_canonical_bytes(value)
    try:
        write_all(sink, data)
    except CanonicalizationError as err:
        logger.debug("Canonical output write failed: %s", err)
        raise
    return len(data)


def check(value: Any) -> CheckResult:
    """Check whether ``value`` encodes canonically, without raising.

    Returns:
        CheckResult with the encoded size on success, or the issue found
    """
    try:
        data = to_canonical_bytes(value)
    except CanonicalizationError as err:
        size = err.size if isinstance(err, SizeLimitExceeded) else None
        issue = CheckIssue(code=err.code, message=err.message, path=err.path)
        return CheckResult(ok=False, size=size, issues=[issue])
    return CheckResult(ok=True, size=len(data))


def canonical_sha256(value: Any) -> str:
    """Compute SHA256 of the canonical encoding of ``value``.

    Returns:
        SHA256 hash as hex string (prefixed with "sha256:")
    """
    digest = hashlib.sha256(to_canonical_bytes(value)).hexdigest()
    return f"sha256:{digest}"


def _normalize_path(path: Union[str, os.PathLike, Path]) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def canonicalize_json_file(path: Union[str, os.PathLike, Path]) -> str:
    """Parse a JSON file and return its canonical form.

    Numbers with a fraction or exponent parse as floats and are rejected,
    as are NaN and Infinity literals.
    """
    data = json.loads(_normalize_path(path).read_text(encoding="utf-8"))
    return to_canonical_string(data)


def canonical_file_sha256(path: Union[str, os.PathLike, Path]) -> str:
    """Compute SHA256 of a JSON file's canonical form (prefixed with "sha256:")."""
    digest = hashlib.sha256(canonicalize_json_file(path).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"
