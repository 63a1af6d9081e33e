"""
Stochastic Ranking Evolution Strategy.

Provides constrained optimization of real multivariate objective functions:
- Objective contract (bounds, direction, value + constraint values)
- Individuals with self-adaptive log-normal mutation
- Populations with stochastic ranking and (mu, lambda) evolution
- The SRES generation loop and a convenience optimize() function
- Benchmark problems with known optima
"""

from .objective import (
    Objective,
    FunctionObjective,
    FeatureSpace,
    ObjectiveResult,
)
from .individual import Individual, SelfAdaptation
from .population import Population, ParentCycling
from .sres import SRES, GenerationStats, optimize
from .benchmarks import BenchmarkProblem, banana, more_banana, g08_problem

__all__ = [
    # Objective contract
    'Objective',
    'FunctionObjective',
    'FeatureSpace',
    'ObjectiveResult',

    # Evolution
    'Individual',
    'SelfAdaptation',
    'Population',
    'ParentCycling',

    # Engine
    'SRES',
    'GenerationStats',
    'optimize',

    # Benchmarks
    'BenchmarkProblem',
    'banana',
    'more_banana',
    'g08_problem',
]
