"""
Candidate solutions and self-adaptive mutation.

An Individual carries a feature vector and a per-dimension mutation-rate
vector. Offspring are produced with the log-normal step-size update of
evolution strategies; out-of-bounds feature draws are rejected and resampled a
bounded number of times before falling back to the parent's value.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from core.exceptions import EvaluationStateError, ObjectiveEvaluationError
from core.random_source import RandomSource
from evolution.objective import FeatureSpace, Objective, ObjectiveResult, as_result

logger = logging.getLogger(__name__)

DEFAULT_BOUNDING_TRIES = 10


@dataclass(frozen=True, eq=False)
class SelfAdaptation:
    """Learning rates and limits of the mutation-rate self-adaptation."""
    tau: float
    tau_dash: float
    max_mutation_rates: Optional[np.ndarray] = None
    bounding_tries: int = DEFAULT_BOUNDING_TRIES

    @classmethod
    def for_space(
        cls,
        space: FeatureSpace,
        expected_convergence_rate: float = 1.0,
        clip_mutation_rates: bool = True,
        bounding_tries: int = DEFAULT_BOUNDING_TRIES,
    ) -> 'SelfAdaptation':
        n = space.number_of_features
        return cls(
            tau=expected_convergence_rate / math.sqrt(2 * math.sqrt(n)),
            tau_dash=expected_convergence_rate / math.sqrt(2 * n),
            max_mutation_rates=space.initial_mutation_rates if clip_mutation_rates else None,
            bounding_tries=bounding_tries,
        )


@dataclass(eq=False)
class Individual:
    """One candidate solution."""
    features: np.ndarray
    mutation_rates: np.ndarray
    generation: int = 0
    result: Optional[ObjectiveResult] = field(default=None, init=False)
    fitness: Optional[float] = field(default=None, init=False)
    penalty: Optional[float] = field(default=None, init=False)

    def __post_init__(self):
        self.features = np.array(self.features, dtype=float)
        self.mutation_rates = np.array(self.mutation_rates, dtype=float)
        self.features.setflags(write=False)
        self.mutation_rates.setflags(write=False)

    @property
    def is_evaluated(self) -> bool:
        return self.result is not None

    @property
    def value(self) -> Optional[float]:
        """Raw objective value, without the maximize/minimize sign flip."""
        return self.result.value if self.result is not None else None

    @property
    def is_feasible(self) -> bool:
        return self.penalty == 0

    def record(self, result: ObjectiveResult, maximize: bool) -> None:
        """
        Store an evaluation result.

        Fitness is normalized so that larger is always better: the raw value
        for maximization, its negation for minimization.
        """
        if self.result is not None:
            raise EvaluationStateError("Individual has already been evaluated.")
        self.result = result
        self.fitness = result.value if maximize else -result.value
        self.penalty = result.penalty

    def evaluate_against(self, objective: Objective) -> None:
        """Evaluate objective and constraints for this individual."""
        if self.result is not None:
            raise EvaluationStateError("Individual has already been evaluated.")
        try:
            result = as_result(objective.evaluate(self.features))
        except Exception as e:
            logger.error(f"Objective evaluation failed: {e}")
            raise ObjectiveEvaluationError(
                f"Objective evaluation failed: {e}",
                context={'features': self.features.tolist()},
                cause=e,
            ) from e
        self.record(result, objective.maximize)

    def generate_offspring(
        self,
        sampled_mutation_rates: np.ndarray,
        space: FeatureSpace,
        adaptation: SelfAdaptation,
        random: RandomSource,
    ) -> 'Individual':
        """
        Generate an offspring of this individual.

        Mutation rates are recombined with `sampled_mutation_rates` (global
        intermediate recombination) and updated log-normally; features are
        mutated with the new rates. A feature draw that leaves the bounds is
        retried up to `adaptation.bounding_tries` times, after which the
        parent's value is kept.

        Args:
            sampled_mutation_rates: mutation rates sampled from the top mu individuals
            space: feature space providing the bounds
            adaptation: learning rates and mutation-rate limits
            random: the run's random stream

        Returns:
            An unevaluated offspring
        """
        n = space.number_of_features
        features = np.array(self.features, dtype=float)
        rates = np.empty(n)

        global_learning_rate = adaptation.tau_dash * random.gaussian()

        for i in range(n):
            new_rate = (self.mutation_rates[i] + sampled_mutation_rates[i]) / 2 * \
                math.exp(global_learning_rate + adaptation.tau * random.gaussian())
            if adaptation.max_mutation_rates is not None:
                # keeps step sizes from growing without bound
                rates[i] = min(new_rate, adaptation.max_mutation_rates[i])
            else:
                rates[i] = new_rate

            for _ in range(adaptation.bounding_tries):
                candidate = self.features[i] + new_rate * random.gaussian()
                if space.in_bounds(candidate, i):
                    features[i] = candidate
                    break

        return Individual(features=features, mutation_rates=rates, generation=self.generation + 1)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'features': self.features.tolist(),
            'mutation_rates': self.mutation_rates.tolist(),
            'generation': self.generation,
            'fitness': self.fitness,
            'penalty': self.penalty,
            'result': self.result.to_dict() if self.result is not None else None,
        }

    def __str__(self) -> str:
        head = f"SOLUTION {self.features.tolist()}"
        if self.result is None:
            return f"{head}\nOBJECTIVE NOT EVALUATED"
        return f"{head}, fitness is {self.fitness}, penalty is {self.penalty}\n{self.result}"


__all__ = ['Individual', 'SelfAdaptation', 'DEFAULT_BOUNDING_TRIES']
