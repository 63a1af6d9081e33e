"""
Population of candidate solutions.

Owns the three per-generation steps of SRES:

- ``evaluate``: objective evaluation of every individual, optionally fanned out
  over a ``concurrent.futures`` executor
- ``sort``: stochastic ranking, a bounded bubble sort whose comparator uses the
  fitness with probability ``ranking_penalization_factor`` (or when both
  individuals are feasible) and the penalty otherwise
- ``evolve``: the next generation, built from the top ``mu`` individuals
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from enum import Enum
from typing import Dict, Iterator, List, Optional

import numpy as np

from core.exceptions import EvaluationStateError, ObjectiveEvaluationError
from core.random_source import RandomSource
from evolution.individual import Individual, SelfAdaptation
from evolution.objective import FeatureSpace, Objective, ObjectiveResult, as_result

logger = logging.getLogger(__name__)


class ParentCycling(Enum):
    """How the feature-providing parent cycles through the ranked population."""
    STRICT = "strict"   # parents 0..mu-1
    LEGACY = "legacy"   # parents 0..mu+1, reset after the index exceeds mu


def _evaluate_features(objective: Objective, features: np.ndarray) -> ObjectiveResult:
    return as_result(objective.evaluate(features))


class Population:
    """A fixed-size ordered collection of individuals."""

    def __init__(self, individuals: List[Individual], generation: int = 0):
        self.individuals = individuals
        self.generation = generation

    @classmethod
    def initial(cls, space: FeatureSpace, size: int, random: RandomSource) -> 'Population':
        """Generate the initial population by uniform sampling within the bounds."""
        individuals = [
            Individual(features=space.sample(random), mutation_rates=space.initial_mutation_rates)
            for _ in range(size)
        ]
        return cls(individuals, generation=0)

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, index: int) -> Individual:
        return self.individuals[index]

    @property
    def is_evaluated(self) -> bool:
        return all(ind.is_evaluated for ind in self.individuals)

    def evaluate(self, objective: Objective, executor: Optional[Executor] = None) -> None:
        """
        Evaluate objective and constraints for every individual.

        With an executor the evaluations run concurrently and this call blocks
        until all of them have finished; results are recorded on the calling
        thread. The first failing evaluation aborts with ObjectiveEvaluationError;
        a population holding evaluated individuals is refused up front.
        """
        if any(ind.is_evaluated for ind in self.individuals):
            raise EvaluationStateError(
                "Population contains already evaluated individuals.",
                context={'generation': self.generation},
            )

        if executor is None:
            for individual in self.individuals:
                individual.evaluate_against(objective)
            return

        futures = [
            executor.submit(_evaluate_features, objective, ind.features)
            for ind in self.individuals
        ]
        results: List[ObjectiveResult] = []
        for individual, future in zip(self.individuals, futures):
            try:
                results.append(future.result())
            except Exception as e:
                for pending in futures:
                    pending.cancel()
                logger.error(f"Objective evaluation failed: {e}")
                raise ObjectiveEvaluationError(
                    f"Objective evaluation failed: {e}",
                    context={
                        'generation': self.generation,
                        'features': individual.features.tolist(),
                    },
                    cause=e,
                ) from e

        for individual, result in zip(self.individuals, results):
            individual.record(result, objective.maximize)

    def sort(
        self,
        random: RandomSource,
        number_of_sweeps: int,
        ranking_penalization_factor: float,
    ) -> None:
        """Sort individuals in place using stochastic ranking bubble sort."""
        if not self.is_evaluated:
            raise EvaluationStateError(
                "Population must be evaluated before ranking.",
                context={'generation': self.generation},
            )

        solutions = self.individuals
        n = len(solutions)
        for _ in range(number_of_sweeps):
            swapped = False
            draws = random.uniform01(size=n - 1)
            for j in range(n - 1):
                p1 = solutions[j].penalty
                p2 = solutions[j + 1].penalty
                if draws[j] < ranking_penalization_factor or (p1 == 0 and p2 == 0):
                    # fitness comparison, larger is better
                    if solutions[j].fitness < solutions[j + 1].fitness:
                        solutions[j], solutions[j + 1] = solutions[j + 1], solutions[j]
                        swapped = True
                elif p1 > p2:
                    # constraint penalization
                    solutions[j], solutions[j + 1] = solutions[j + 1], solutions[j]
                    swapped = True
            if not swapped:
                break

    def evolve(
        self,
        random: RandomSource,
        mu: int,
        space: FeatureSpace,
        adaptation: SelfAdaptation,
        parent_cycling: ParentCycling = ParentCycling.STRICT,
    ) -> 'Population':
        """
        Build the next generation from the top `mu` ranked individuals.

        For every offspring slot the mutation rates are sampled per dimension
        from random elites, while the parent providing the features cycles
        through the elites in rank order. No evaluation happens here.
        """
        size = len(self.individuals)
        n = space.number_of_features
        offspring: List[Individual] = []

        j = 0
        for _ in range(size):
            sampled_rates = np.empty(n)
            for k in range(n):
                sampled_rates[k] = self.individuals[random.uniform_int(mu)].mutation_rates[k]

            offspring.append(
                self.individuals[j].generate_offspring(sampled_rates, space, adaptation, random)
            )

            if parent_cycling is ParentCycling.LEGACY:
                j = 0 if j > mu else j + 1
            else:
                j = (j + 1) % mu

        return Population(offspring, generation=self.generation + 1)

    def best(self) -> Individual:
        """The first individual, i.e. the best one after ranking."""
        return self.individuals[0]

    def feasible_count(self) -> int:
        return sum(1 for ind in self.individuals if ind.penalty == 0)

    def get_stats(self) -> Dict[str, float]:
        """Get population statistics."""
        fitnesses = [ind.fitness for ind in self.individuals if ind.fitness is not None]
        if not fitnesses:
            return {'best': 0, 'avg': 0, 'worst': 0, 'std': 0, 'penalty': 0, 'feasible': 0}
        best = self.best()
        return {
            'best': best.fitness if best.fitness is not None else max(fitnesses),
            'avg': float(np.mean(fitnesses)),
            'worst': min(fitnesses),
            'std': float(np.std(fitnesses)),
            'penalty': best.penalty if best.penalty is not None else 0,
            'feasible': self.feasible_count(),
        }


__all__ = ['Population', 'ParentCycling']
