"""
Benchmark problems with known optima.

Each problem knows the objective value at its solution and can tell whether an
individual solves it up to the requested precision without violating more
constraints than allowed.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from evolution.individual import Individual
from evolution.objective import FunctionObjective, ObjectiveFn, ObjectiveResult


class BenchmarkProblem(FunctionObjective):
    """A FunctionObjective with a known value at its solution."""

    def __init__(
        self,
        fn: ObjectiveFn,
        lower_bounds: Sequence[float],
        upper_bounds: Sequence[float],
        maximize: bool,
        value_at_solution: float,
        allowed_violated_constraints: int = 0,
        absolute_precision: float = 1e-3,
        relative_precision: float = 1e-3,
        name: str = "",
    ):
        super().__init__(fn, lower_bounds, upper_bounds, maximize)
        self.value_at_solution = value_at_solution
        self.allowed_violated_constraints = allowed_violated_constraints
        self.absolute_precision = absolute_precision
        self.relative_precision = relative_precision
        self.name = name or getattr(fn, '__name__', 'problem')

    def is_solved(self, individual: Individual) -> bool:
        """Check the individual's value and constraint violations against the known solution."""
        if individual.result is None:
            return False

        result = individual.result
        absolute_error = abs(self.value_at_solution - result.value)

        if result.violated_constraints > self.allowed_violated_constraints:
            return False
        if absolute_error > self.absolute_precision:
            return False
        if abs(self.value_at_solution) < self.relative_precision:
            return True
        return absolute_error / abs(self.value_at_solution) <= self.relative_precision

    def __repr__(self) -> str:
        return f"BenchmarkProblem({self.name}, D={self.number_of_features})"


def rosenbrock(x: np.ndarray) -> float:
    """2-D Rosenbrock "banana" function, minimum 0 at (1, 1)."""
    a = 1 - x[0]
    b = 10 * (x[1] - x[0] * x[0])
    return a * a + b * b


def chained_rosenbrock(x: np.ndarray) -> float:
    """Chained Rosenbrock averaged over the dimensions, minimum 0 at (1, ..., 1)."""
    a = 1 - x[:-1]
    b = 10 * (x[1:] - x[:-1] * x[:-1])
    return float(np.sum(a * a + b * b)) / len(x)


def g08(x: np.ndarray) -> ObjectiveResult:
    """G08 constrained test problem, maximum 0.095825 at (1.2279713, 4.2453733)."""
    x1, x2 = x[0], x[1]
    f = math.sin(2 * math.pi * x1) ** 3 * math.sin(2 * math.pi * x2) / (x1 ** 3 * (x1 + x2))
    g1 = x1 * x1 - x2 + 1
    g2 = 1 - x1 + (x2 - 4) ** 2
    return ObjectiveResult(f, (g1, g2))


def banana() -> BenchmarkProblem:
    return BenchmarkProblem(rosenbrock, [-10, -10], [10, 10], maximize=False,
                            value_at_solution=0.0, name='banana')


def more_banana(n: int = 10) -> BenchmarkProblem:
    return BenchmarkProblem(chained_rosenbrock, [-10] * n, [10] * n, maximize=False,
                            value_at_solution=0.0, name=f'banana{n}d')


def g08_problem() -> BenchmarkProblem:
    return BenchmarkProblem(g08, [0, 0], [10, 10], maximize=True,
                            value_at_solution=0.095825, name='g08')


__all__ = [
    'BenchmarkProblem',
    'rosenbrock',
    'chained_rosenbrock',
    'g08',
    'banana',
    'more_banana',
    'g08_problem',
]
