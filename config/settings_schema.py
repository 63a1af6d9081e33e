"""
Typed Settings Schema (Pydantic)
================================

Provides typed, validated configuration for the SRES optimizer.
Invalid settings fail closed with InvalidConfigurationError.

Usage:
    from config.settings_schema import load_validated_settings

    settings = load_validated_settings()
    population_size = settings.sres.lambda_
    executor = settings.evaluation.executor
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from config.settings_loader import load_settings
from core.exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)


# ============================================================================
# Schema Definitions
# ============================================================================

class SRESSection(BaseModel):
    """Algorithm parameters."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    lambda_: int = Field(default=200, ge=1, alias="lambda", description="Population size")
    mu: int = Field(default=30, ge=1, description="Number of parents per generation")
    expected_convergence_rate: float = Field(default=1.0, gt=0)
    number_of_sweeps: int = Field(default=200, ge=0)
    ranking_penalization_factor: float = Field(default=0.45, ge=0, le=1)
    seed: Optional[int] = Field(default=51102, description="Random stream seed")
    parent_cycling: Literal["strict", "legacy"] = "strict"
    clip_mutation_rates: bool = True
    bounding_tries: int = Field(default=10, ge=1)
    number_of_generations: int = Field(default=1000, ge=0)

    @model_validator(mode="after")
    def check_mu_below_lambda(self) -> "SRESSection":
        if self.mu >= self.lambda_:
            raise ValueError(f"mu ({self.mu}) must be smaller than lambda ({self.lambda_})")
        return self


class EvaluationSection(BaseModel):
    """Parallel evaluation settings."""
    model_config = ConfigDict(extra="forbid")

    parallel: bool = True
    executor: Literal["thread", "process"] = "thread"
    max_workers: Optional[int] = Field(default=None, ge=1)


class LoggingSection(BaseModel):
    """Progress logging settings."""
    model_config = ConfigDict(extra="forbid")

    verbose: bool = True
    interval: int = Field(default=100, ge=1)


class SRESSettings(BaseModel):
    """Complete settings schema."""
    sres: SRESSection = Field(default_factory=SRESSection)
    evaluation: EvaluationSection = Field(default_factory=EvaluationSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)


# ============================================================================
# Validation Functions
# ============================================================================

def validate_settings(raw: Dict[str, Any]) -> SRESSettings:
    """
    Validate a raw settings dictionary.

    Raises:
        InvalidConfigurationError: If settings are invalid
    """
    try:
        return SRESSettings(**raw)
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        raise InvalidConfigurationError(
            "Settings validation failed",
            context={'errors': e.error_count()},
            cause=e,
        ) from e


def load_validated_settings(path: Optional[Path] = None) -> SRESSettings:
    """
    Load and validate settings from base.yaml (or `path`).

    Returns:
        Validated SRESSettings object

    Raises:
        InvalidConfigurationError: If settings are invalid
    """
    return validate_settings(load_settings(path=path))
