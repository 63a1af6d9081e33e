"""
Objective Function Contract
===========================

The optimizer depends only on the capability defined here: an objective maps a
feature vector to a value and a vector of constraint values. Constraints are
written as ``g_k(x) <= 0``; any positive ``g_k`` is a violation contributing
``g_k^2`` to the penalty.

Users either subclass ``Objective`` and implement ``evaluate`` or wrap a plain
callable in ``FunctionObjective``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Callable, Dict, Sequence, Tuple

import numpy as np

from core.exceptions import InvalidConfigurationError
from core.random_source import RandomSource


@dataclass(frozen=True)
class ObjectiveResult:
    """Result of evaluating the objective and constraints at one point."""
    value: float
    constraint_values: Tuple[float, ...] = ()
    penalty: float = field(init=False)

    def __post_init__(self):
        constraints = tuple(float(c) for c in self.constraint_values)
        object.__setattr__(self, 'value', float(self.value))
        object.__setattr__(self, 'constraint_values', constraints)
        object.__setattr__(self, 'penalty', sum(max(0.0, c) ** 2 for c in constraints))

    @property
    def violated_constraints(self) -> int:
        """Number of constraints with a positive value."""
        return sum(1 for c in self.constraint_values if c > 0)

    @property
    def is_feasible(self) -> bool:
        return self.penalty == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'constraint_values': list(self.constraint_values),
            'penalty': self.penalty,
        }

    def __str__(self) -> str:
        return (
            f"RESULT objective function value is {self.value}, "
            f"constraint values are {list(self.constraint_values)}"
        )


class FeatureSpace:
    """
    Box-bounded real feature space.

    Validates bounds once at construction and provides the operations the
    optimizer needs: uniform sampling, per-dimension bounds checks and the
    initial mutation rates ``(upper_i - lower_i) / sqrt(D)``.
    """

    def __init__(self, lower_bounds: Sequence[float], upper_bounds: Sequence[float]):
        lower = np.asarray(lower_bounds, dtype=float)
        upper = np.asarray(upper_bounds, dtype=float)

        if lower.ndim != 1 or upper.ndim != 1:
            raise InvalidConfigurationError("Bounds must be one-dimensional sequences.")
        if lower.shape != upper.shape:
            raise InvalidConfigurationError(
                "Lengths of upper and lower bounds should match.",
                context={'lower': len(lower), 'upper': len(upper)},
            )
        if lower.size == 0:
            raise InvalidConfigurationError("Feature space must have at least one dimension.")
        if not (np.all(np.isfinite(lower)) and np.all(np.isfinite(upper))):
            raise InvalidConfigurationError("Feature bounds must be finite.")

        for i in range(lower.size):
            if upper[i] < lower[i]:
                raise InvalidConfigurationError(
                    f"Feature upper bound is smaller than lower bound for index {i}.",
                    context={'index': i, 'lower': lower[i], 'upper': upper[i]},
                )
            if upper[i] == lower[i]:
                # zero width gives a zero mutation rate
                raise InvalidConfigurationError(
                    f"Feature bounds have zero width for index {i}.",
                    context={'index': i, 'bound': lower[i]},
                )

        lower.setflags(write=False)
        upper.setflags(write=False)
        self.lower_bounds = lower
        self.upper_bounds = upper

        rates = (upper - lower) / math.sqrt(lower.size)
        rates.setflags(write=False)
        self.initial_mutation_rates = rates

    @property
    def number_of_features(self) -> int:
        return int(self.lower_bounds.size)

    def in_bounds(self, value: float, index: int) -> bool:
        """Check whether a feature value lies in the bounds of dimension `index`."""
        return self.lower_bounds[index] <= value <= self.upper_bounds[index]

    def contains(self, features: Sequence[float]) -> bool:
        x = np.asarray(features, dtype=float)
        return bool(np.all(self.lower_bounds <= x) and np.all(x <= self.upper_bounds))

    def sample(self, random: RandomSource) -> np.ndarray:
        """Draw a feature vector uniformly from the box, one draw per dimension."""
        features = np.empty(self.number_of_features)
        for i in range(self.number_of_features):
            x = random.uniform01()
            features[i] = self.lower_bounds[i] + x * (self.upper_bounds[i] - self.lower_bounds[i])
        return features

    def __repr__(self) -> str:
        return (
            f"FeatureSpace(lower={self.lower_bounds.tolist()}, "
            f"upper={self.upper_bounds.tolist()})"
        )


class Objective(ABC):
    """
    A real multivariate objective function with inequality constraints.

    The feature space and the optimization direction are declared once at
    construction. Implementations must be reentrant: the optimizer may call
    ``evaluate`` concurrently from several workers.
    """

    def __init__(
        self,
        lower_bounds: Sequence[float],
        upper_bounds: Sequence[float],
        maximize: bool = False,
    ):
        self.feature_space = FeatureSpace(lower_bounds, upper_bounds)
        self.maximize = bool(maximize)

    @property
    def number_of_features(self) -> int:
        return self.feature_space.number_of_features

    @abstractmethod
    def evaluate(self, features: np.ndarray) -> ObjectiveResult:
        """
        Compute the objective value and constraint values for `features`.

        May return an ObjectiveResult, a bare number or a
        ``(value, constraint_values)`` pair.
        """


ObjectiveFn = Callable[[np.ndarray], Any]


class FunctionObjective(Objective):
    """
    Objective backed by a plain callable.

    The callable may return a number, a ``(value, constraint_values)`` pair
    or an ``ObjectiveResult``.
    """

    def __init__(
        self,
        fn: ObjectiveFn,
        lower_bounds: Sequence[float],
        upper_bounds: Sequence[float],
        maximize: bool = False,
    ):
        super().__init__(lower_bounds, upper_bounds, maximize)
        self.fn = fn

    def evaluate(self, features: np.ndarray) -> ObjectiveResult:
        return as_result(self.fn(features))


def as_result(raw: Any) -> ObjectiveResult:
    """Normalize a callable's return value into an ObjectiveResult."""
    if isinstance(raw, ObjectiveResult):
        return raw
    if isinstance(raw, (Real, np.floating, np.integer)):
        return ObjectiveResult(float(raw))
    if isinstance(raw, tuple) and len(raw) == 2:
        value, constraints = raw
        return ObjectiveResult(float(value), tuple(np.ravel(constraints)))
    raise TypeError(
        "Objective must return a number, a (value, constraints) pair "
        f"or an ObjectiveResult, got {type(raw).__name__}"
    )


__all__ = [
    'ObjectiveResult',
    'FeatureSpace',
    'Objective',
    'FunctionObjective',
    'as_result',
]
