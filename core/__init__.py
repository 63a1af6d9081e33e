"""
Core Infrastructure
====================

Foundational components for the SRES optimizer.

Components:
- exceptions: SRESError hierarchy
- random_source: explicitly owned, seeded random stream
"""

from .exceptions import (
    SRESError,
    InvalidConfigurationError,
    ObjectiveEvaluationError,
    EvaluationStateError,
    get_error_code,
)
from .random_source import RandomSource, DEFAULT_SEED

__all__ = [
    # Exceptions
    'SRESError',
    'InvalidConfigurationError',
    'ObjectiveEvaluationError',
    'EvaluationStateError',
    'get_error_code',
    # Random stream
    'RandomSource',
    'DEFAULT_SEED',
]
