"""Data models for regex-mask."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class MaskPolicy(str, Enum):
    """How a matched span is rewritten."""

    FILL_ASTERISK = "fill_asterisk"
    REPLACE_CHAR = "replace_char"


class MaskError(str, Enum):
    """Failure outcomes of a masking call."""

    NULL_ARGUMENT = "null_argument"
    UNKNOWN_KEY = "unknown_key"
    INVALID_MASK_LENGTH = "invalid_mask_length"
    PATTERN_COMPILE_ERROR = "pattern_compile_error"
    UNINITIALIZED_STATE = "uninitialized_state"

    @property
    def is_operational(self) -> bool:
        """Return True for faults that must be reported to the host."""
        return self in (MaskError.PATTERN_COMPILE_ERROR, MaskError.UNINITIALIZED_STATE)


class LifecycleState(str, Enum):
    """Lifecycle of the pattern cache bound to an execution scope."""

    NOT_PREPARED = "not_prepared"
    PREPARED = "prepared"
    CLOSED = "closed"


@dataclass(frozen=True)
class CatalogEntry:
    """Single catalog entry."""

    key: str
    pattern: str


@dataclass
class ResolveResult:
    """Result from resolving a key in a pattern cache."""

    key: str
    compiled: Any = None  # re.Pattern
    error: Optional[MaskError] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        """Return True if a compiled pattern is available."""
        return self.compiled is not None


@dataclass
class MaskResult:
    """Result from a masking operation."""

    text: Optional[str]
    error: Optional[MaskError] = None
    message: Optional[str] = None
    match_count: int = 0

    @property
    def ok(self) -> bool:
        """Return True if masking produced output."""
        return self.error is None

    @classmethod
    def failure(cls, error: MaskError, message: Optional[str] = None) -> "MaskResult":
        """Build a failed result carrying no text."""
        return cls(text=None, error=error, message=message)
