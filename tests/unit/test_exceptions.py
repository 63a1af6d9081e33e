"""
Tests for the unified exception hierarchy.

This module tests core/exceptions.py which provides the exception
hierarchy of the SRES optimizer.
"""

import pytest
from datetime import datetime

from core.exceptions import (
    SRESError,
    InvalidConfigurationError,
    ObjectiveEvaluationError,
    EvaluationStateError,
    get_error_code,
)


class TestSRESError:
    """Tests for the base exception class."""

    def test_basic_creation(self):
        """Test basic exception creation."""
        error = SRESError("Test error")
        assert str(error) == "[SRES_ERROR] Test error"
        assert error.message == "Test error"
        assert error.error_code == "SRES_ERROR"
        assert error.is_recoverable is True
        assert error.context == {}
        assert error.cause is None
        assert isinstance(error.timestamp, datetime)

    def test_with_context(self):
        """Test exception with context dictionary."""
        error = SRESError("Test error", context={"lambda": 10, "mu": 20})
        assert "lambda=10" in str(error)
        assert "mu=20" in str(error)
        assert error.context["mu"] == 20

    def test_with_cause(self):
        """Test exception with cause (chained exception)."""
        original = ValueError("Original error")
        error = SRESError("Wrapped error", cause=original)
        assert error.cause is original
        assert str(error.cause) == "Original error"

    def test_to_dict(self):
        """Test serialization to dictionary."""
        error = SRESError("Test error", context={"index": 3})
        d = error.to_dict()
        assert d["error_code"] == "SRES_ERROR"
        assert d["message"] == "Test error"
        assert d["is_recoverable"] is True
        assert d["context"]["index"] == 3
        assert "timestamp" in d
        assert d["cause"] is None


class TestSubclasses:
    """Tests for specific error types."""

    def test_invalid_configuration_is_fatal(self):
        error = InvalidConfigurationError("mu must be smaller than lambda")
        assert error.error_code == "INVALID_CONFIGURATION"
        assert error.is_recoverable is False
        assert isinstance(error, SRESError)

    def test_objective_evaluation_is_fatal(self):
        cause = ZeroDivisionError("division by zero")
        error = ObjectiveEvaluationError("Objective evaluation failed", cause=cause)
        assert error.error_code == "OBJECTIVE_EVALUATION_FAILED"
        assert error.is_recoverable is False
        assert error.to_dict()["cause"] == "division by zero"

    def test_evaluation_state(self):
        error = EvaluationStateError("Individual has already been evaluated.")
        assert error.error_code == "EVALUATION_STATE"
        assert isinstance(error, SRESError)

    def test_catch_by_base(self):
        with pytest.raises(SRESError):
            raise InvalidConfigurationError("bad bounds")


class TestHelpers:
    """Tests for helper functions."""

    def test_get_error_code(self):
        assert get_error_code(InvalidConfigurationError("x")) == "INVALID_CONFIGURATION"
        assert get_error_code(ObjectiveEvaluationError("x")) == "OBJECTIVE_EVALUATION_FAILED"
        assert get_error_code(ValueError("x")) == "UNKNOWN_ERROR"
