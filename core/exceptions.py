"""
Unified Exception Hierarchy for the genetic search engine.

All exceptions inherit from SearchError, enabling consistent error handling
for callers consuming a search stream.

Usage:
    from core.exceptions import SearchError, EvaluationFailure, ConfigurationError

    try:
        for record in genetic_train(evaluate, 10, 3, seed_pair):
            ...
    except EvaluationFailure as e:
        # The evaluator raised; the stream is finished
        report(e.error_code, e.context, e.cause)
    except SearchError as e:
        # Catch-all for search errors
        log_error(e)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class SearchError(Exception):
    """
    Base exception for all genetic search errors.

    Attributes:
        error_code: Unique identifier for this error type
        is_recoverable: Whether a caller can reasonably retry with the same inputs
        context: Additional context about the error
        cause: The underlying exception, if any
        timestamp: When the error occurred
    """
    error_code: str = "SEARCH_ERROR"
    is_recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "is_recoverable": self.is_recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": repr(self.cause) if self.cause else None,
        }


# =============================================================================
# SEARCH LOOP ERRORS (fatal - the stream terminates)
# =============================================================================

class SearchLoopError(SearchError):
    """
    Base class for failures raised while a generation is being built.

    Any of these ends the candidate stream. Records emitted before the
    failure remain valid.
    """
    error_code = "SEARCH_LOOP_ERROR"
    is_recoverable = False


class EvaluationFailure(SearchLoopError):
    """
    Raised when the evaluator fails on an offspring.

    The original exception is available as ``cause`` and ``__cause__``.
    """
    error_code = "EVALUATION_FAILED"


class GenerationFailure(SearchLoopError):
    """
    Raised when the mutator or refiner fails to produce an offspring.
    """
    error_code = "GENERATION_FAILED"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(SearchError):
    """Raised when search parameters are invalid. Detected before any iteration."""
    error_code = "CONFIG_ERROR"


class SettingsValidationError(ConfigurationError):
    """Raised when settings fail schema validation."""
    error_code = "SETTINGS_INVALID"


# =============================================================================
# VECTOR ERRORS
# =============================================================================

class VectorLengthError(SearchError, ValueError):
    """
    Raised when fixed-length vectors of different lengths are combined,
    or a vector is built with the wrong number of elements.
    """
    error_code = "VECTOR_LENGTH_MISMATCH"
    is_recoverable = False


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def is_fatal(error: BaseException) -> bool:
    """
    Check if an error ends a search run.

    Args:
        error: The exception to check

    Returns:
        True if the error is non-recoverable
    """
    if isinstance(error, SearchError):
        return not error.is_recoverable
    return False


def get_error_code(error: BaseException) -> str:
    """
    Get the error code for an exception.

    Args:
        error: The exception to get the code for

    Returns:
        Error code string, or "UNKNOWN" for foreign exceptions
    """
    if isinstance(error, SearchError):
        return error.error_code
    return "UNKNOWN"
