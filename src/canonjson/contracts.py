"""Public result models for canonjson."""

from typing import List, Optional
from pydantic import BaseModel, Field

from canonjson.codes import ErrorCode


class CheckIssue(BaseModel):
    """Why a value cannot be encoded canonically."""
    code: ErrorCode
    message: str
    path: str = ""  # "" for the root value, otherwise e.g. "auth.profile[1].medium"


class CheckResult(BaseModel):
    """Result of a non-raising canonical encoding check."""
    ok: bool
    size: Optional[int] = None  # Encoded size in bytes; None when encoding failed before completion
    issues: List[CheckIssue] = Field(default_factory=list)
