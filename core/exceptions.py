"""
Unified Exception Hierarchy for the SRES optimizer.

All exceptions inherit from SRESError, enabling consistent error handling
by callers that embed the optimizer.

Usage:
    from core.exceptions import SRESError, InvalidConfigurationError

    try:
        sres = SRES(objective, lambda_=10, mu=20)
    except InvalidConfigurationError as e:
        # Fatal, raised before any generation runs
        report(e.error_code, e.context)
    except SRESError as e:
        # Catch-all for optimizer errors
        log_error(e)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class SRESError(Exception):
    """
    Base exception for all SRES optimizer errors.

    Attributes:
        error_code: Unique identifier for this error type
        is_recoverable: Whether the caller can meaningfully retry
        context: Additional context about the error
        timestamp: When the error occurred
    """
    error_code: str = "SRES_ERROR"
    is_recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
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
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# CONFIGURATION ERRORS (construction time, fatal)
# =============================================================================

class InvalidConfigurationError(SRESError):
    """
    Raised when the optimizer or the objective is misconfigured.

    Examples:
    - Lower and upper bound arrays of different length
    - upper_i < lower_i for some dimension
    - mu >= lambda, non-positive lambda or mu
    - Settings file failing schema validation
    """
    error_code = "INVALID_CONFIGURATION"
    is_recoverable = False


# =============================================================================
# EVALUATION ERRORS
# =============================================================================

class ObjectiveEvaluationError(SRESError):
    """
    Raised when the user-supplied objective function fails.

    The original exception is kept in `cause` (and chained via `raise ... from`).
    The optimizer never retries a failed evaluation; the run is aborted.
    """
    error_code = "OBJECTIVE_EVALUATION_FAILED"
    is_recoverable = False


class EvaluationStateError(SRESError):
    """
    Raised on lifecycle misuse.

    Examples:
    - Evaluating an individual a second time
    - Ranking a population that has not been evaluated
    - Reading the best solution before the optimizer has run
    """
    error_code = "EVALUATION_STATE"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_error_code(exception: Exception) -> str:
    """
    Get the error code for an exception.

    Args:
        exception: The exception to get code for

    Returns:
        Error code string
    """
    if isinstance(exception, SRESError):
        return exception.error_code
    return "UNKNOWN_ERROR"


__all__ = [
    "SRESError",
    "InvalidConfigurationError",
    "ObjectiveEvaluationError",
    "EvaluationStateError",
    "get_error_code",
]
