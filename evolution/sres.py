"""
Stochastic Ranking Evolution Strategy (SRES)
============================================

An evolutionary algorithm for constrained optimization of real multivariate
objective functions. Each generation the population is evaluated (in
parallel), ranked with stochastic ranking and replaced by offspring of its top
``mu`` individuals.

Reference: Runarsson TP and Yao X. Stochastic Ranking for Constrained
Evolutionary Optimization. IEEE Transactions on Evolutionary Computation, 2000.

Usage:
    from evolution import SRES, FunctionObjective

    objective = FunctionObjective(banana, [-10, -10], [10, 10])
    sres = SRES(objective, seed=42)
    sres.run(100)
    print(sres.best_features, sres.best_value)
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from contextlib import nullcontext
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from config.settings_schema import SRESSettings, load_validated_settings
from core.exceptions import EvaluationStateError, InvalidConfigurationError
from core.random_source import DEFAULT_SEED, RandomSource
from evolution.individual import DEFAULT_BOUNDING_TRIES, Individual, SelfAdaptation
from evolution.objective import FunctionObjective, Objective, ObjectiveFn
from evolution.population import ParentCycling, Population

logger = logging.getLogger(__name__)

DEFAULT_NUMBER_OF_GENERATIONS = 1000
EXECUTOR_KINDS = ('thread', 'process')


@dataclass
class GenerationStats:
    """Statistics of one ranked generation."""
    generation: int
    best_fitness: float
    best_penalty: float
    mean_fitness: float
    worst_fitness: float
    feasible_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SRES:
    """
    Stochastic Ranking Evolution Strategy optimizer.

    Default parameters follow Runarsson and Yao. Configuration is validated at
    construction; an invalid setup raises InvalidConfigurationError before any
    generation runs.
    """

    def __init__(
        self,
        objective: Objective,
        lambda_: int = 200,
        mu: int = 30,
        expected_convergence_rate: float = 1.0,
        number_of_sweeps: int = 200,
        ranking_penalization_factor: float = 0.45,
        random_source: Optional[RandomSource] = None,
        seed: Optional[int] = DEFAULT_SEED,
        parent_cycling: Union[ParentCycling, str] = ParentCycling.STRICT,
        clip_mutation_rates: bool = True,
        bounding_tries: int = DEFAULT_BOUNDING_TRIES,
        parallel: bool = True,
        executor: str = 'thread',
        max_workers: Optional[int] = None,
        verbose: bool = True,
        log_interval: int = 100,
        number_of_generations: int = DEFAULT_NUMBER_OF_GENERATIONS,
    ):
        """
        Initialize the optimizer.

        Args:
            objective: objective function instance
            lambda_: population size
            mu: number of top-ranking individuals producing the next generation
            expected_convergence_rate: scales the self-adaptation learning rates
            number_of_sweeps: maximum bubble-sort sweeps of stochastic ranking
            ranking_penalization_factor: probability, in [0, 1], that a comparison
                ignores the penalty; 1 never penalizes, 0 always penalizes
            random_source: random stream to use; built from `seed` when omitted
            seed: seed of the random stream when `random_source` is omitted
            parent_cycling: 'strict' (mu parents) or 'legacy' (mu + 2 parents)
            clip_mutation_rates: cap mutation rates at their initial values
            bounding_tries: resampling attempts for out-of-bounds features
            parallel: evaluate the population concurrently
            executor: 'thread' or 'process' pool for parallel evaluation
            max_workers: pool size, executor default when None
            verbose: log progress every `log_interval` generations
            log_interval: generations between progress messages
            number_of_generations: generations used by run() when none are given
        """
        if not isinstance(objective, Objective):
            raise InvalidConfigurationError(
                f"objective must be an Objective instance, got {type(objective).__name__}"
            )
        try:
            parent_cycling = ParentCycling(parent_cycling)
        except ValueError as e:
            raise InvalidConfigurationError(
                f"Unknown parent cycling mode: {parent_cycling}", cause=e
            ) from e

        self._validate(
            lambda_, mu, expected_convergence_rate, number_of_sweeps,
            ranking_penalization_factor, parent_cycling, bounding_tries,
            executor, max_workers, log_interval,
        )

        self.objective = objective
        self.space = objective.feature_space
        self.number_of_features = objective.number_of_features
        self.lambda_ = lambda_
        self.mu = mu
        self.expected_convergence_rate = expected_convergence_rate
        self.number_of_sweeps = number_of_sweeps
        self.ranking_penalization_factor = ranking_penalization_factor
        self.parent_cycling = parent_cycling
        self.parallel = parallel
        self.executor = executor
        self.max_workers = max_workers
        self.verbose = verbose
        self.log_interval = log_interval
        self.number_of_generations = number_of_generations

        self.random = random_source if random_source is not None else RandomSource(seed)
        self.adaptation = SelfAdaptation.for_space(
            self.space,
            expected_convergence_rate=expected_convergence_rate,
            clip_mutation_rates=clip_mutation_rates,
            bounding_tries=bounding_tries,
        )

        self.population: Optional[Population] = None
        self.history: List[GenerationStats] = []

        logger.info(
            f"SRES initialized with {self.number_of_features} features, "
            f"lambda={lambda_}, mu={mu}, tau={self.tau:.4f}, tau'={self.tau_dash:.4f}"
        )

    @staticmethod
    def _validate(
        lambda_: int,
        mu: int,
        expected_convergence_rate: float,
        number_of_sweeps: int,
        ranking_penalization_factor: float,
        parent_cycling: ParentCycling,
        bounding_tries: int,
        executor: str,
        max_workers: Optional[int],
        log_interval: int,
    ) -> None:
        errors = []
        if lambda_ <= 0:
            errors.append(f"lambda must be positive, got {lambda_}")
        if mu <= 0:
            errors.append(f"mu must be positive, got {mu}")
        if mu >= lambda_:
            errors.append(f"mu ({mu}) must be smaller than lambda ({lambda_})")
        elif parent_cycling is ParentCycling.LEGACY and mu + 1 >= lambda_:
            errors.append(f"legacy parent cycling needs mu + 1 < lambda, got mu={mu}, lambda={lambda_}")
        if not expected_convergence_rate > 0:
            errors.append(f"expected_convergence_rate must be positive, got {expected_convergence_rate}")
        if number_of_sweeps < 0:
            errors.append(f"number_of_sweeps must be non-negative, got {number_of_sweeps}")
        if not 0 <= ranking_penalization_factor <= 1:
            errors.append(
                f"ranking_penalization_factor must be in [0, 1], got {ranking_penalization_factor}"
            )
        if bounding_tries < 1:
            errors.append(f"bounding_tries must be at least 1, got {bounding_tries}")
        if executor not in EXECUTOR_KINDS:
            errors.append(f"executor must be one of {EXECUTOR_KINDS}, got {executor!r}")
        if max_workers is not None and max_workers < 1:
            errors.append(f"max_workers must be at least 1, got {max_workers}")
        if log_interval < 1:
            errors.append(f"log_interval must be at least 1, got {log_interval}")

        if errors:
            logger.error(f"Invalid SRES configuration: {'; '.join(errors)}")
            raise InvalidConfigurationError(
                "; ".join(errors),
                context={'lambda': lambda_, 'mu': mu},
            )

    @classmethod
    def from_settings(
        cls,
        objective: Objective,
        settings: Optional[SRESSettings] = None,
        **overrides: Any,
    ) -> 'SRES':
        """
        Build an optimizer from validated YAML settings.

        Args:
            objective: objective function instance
            settings: SRESSettings instance; loaded from the config file when None
            **overrides: constructor keyword arguments taking precedence

        Returns:
            Configured SRES instance
        """
        settings = settings or load_validated_settings()
        kwargs: Dict[str, Any] = dict(
            lambda_=settings.sres.lambda_,
            mu=settings.sres.mu,
            expected_convergence_rate=settings.sres.expected_convergence_rate,
            number_of_sweeps=settings.sres.number_of_sweeps,
            ranking_penalization_factor=settings.sres.ranking_penalization_factor,
            seed=settings.sres.seed,
            parent_cycling=settings.sres.parent_cycling,
            clip_mutation_rates=settings.sres.clip_mutation_rates,
            bounding_tries=settings.sres.bounding_tries,
            parallel=settings.evaluation.parallel,
            executor=settings.evaluation.executor,
            max_workers=settings.evaluation.max_workers,
            verbose=settings.logging.verbose,
            log_interval=settings.logging.interval,
            number_of_generations=settings.sres.number_of_generations,
        )
        kwargs.update(overrides)
        return cls(objective, **kwargs)

    @property
    def tau(self) -> float:
        return self.adaptation.tau

    @property
    def tau_dash(self) -> float:
        return self.adaptation.tau_dash

    def _make_executor(self) -> Executor:
        if self.executor == 'process':
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='sres-eval')

    def _record_generation(self, population: Population) -> GenerationStats:
        stats = population.get_stats()
        record = GenerationStats(
            generation=population.generation,
            best_fitness=stats['best'],
            best_penalty=stats['penalty'],
            mean_fitness=stats['avg'],
            worst_fitness=stats['worst'],
            feasible_count=stats['feasible'],
        )
        self.history.append(record)
        return record

    def run(self, number_of_generations: Optional[int] = None) -> Population:
        """
        Run the SRES algorithm for `number_of_generations` generations.

        The last population is evaluated and ranked once more before it is
        returned, so its first individual is the best solution found.

        Args:
            number_of_generations: number of generations to run, defaults to
                the value given at construction

        Returns:
            The final population, sorted from best to worst
        """
        if number_of_generations is None:
            number_of_generations = self.number_of_generations
        if number_of_generations < 0:
            raise InvalidConfigurationError(
                f"number_of_generations must be non-negative, got {number_of_generations}"
            )

        logger.info(f"Starting SRES for {number_of_generations} generations")
        self.history = []
        population = Population.initial(self.space, self.lambda_, self.random)

        pool = self._make_executor() if self.parallel else nullcontext()
        with pool as executor:
            for i in range(number_of_generations):
                population.evaluate(self.objective, executor)
                population.sort(self.random, self.number_of_sweeps, self.ranking_penalization_factor)
                record = self._record_generation(population)

                if self.verbose and i % self.log_interval == 0:
                    logger.info(
                        f"SRES ran for {i} generations, best solution fitness is "
                        f"{record.best_fitness}, penalty is {record.best_penalty}"
                    )

                population = population.evolve(
                    self.random, self.mu, self.space, self.adaptation, self.parent_cycling,
                )

            population.evaluate(self.objective, executor)

        population.sort(self.random, self.number_of_sweeps, self.ranking_penalization_factor)
        self.population = population

        if self.verbose:
            best = population.best()
            logger.info(
                f"SRES finished, best solution fitness is {best.fitness}, penalty is {best.penalty}"
            )
        return population

    @property
    def best_individual(self) -> Individual:
        if self.population is None:
            raise EvaluationStateError("SRES has not been run yet.")
        return self.population.best()

    @property
    def best_features(self) -> np.ndarray:
        return self.best_individual.features

    @property
    def best_fitness(self) -> float:
        return self.best_individual.fitness

    @property
    def best_value(self) -> float:
        return self.best_individual.value

    @property
    def best_penalty(self) -> float:
        return self.best_individual.penalty

    def get_convergence_history(self) -> Dict[str, List[float]]:
        """Get the fitness history over generations."""
        return {
            'best': [s.best_fitness for s in self.history],
            'avg': [s.mean_fitness for s in self.history],
            'penalty': [s.best_penalty for s in self.history],
        }

    def history_frame(self) -> pd.DataFrame:
        """Generation statistics as a DataFrame indexed by generation."""
        columns = [
            'generation', 'best_fitness', 'best_penalty',
            'mean_fitness', 'worst_fitness', 'feasible_count',
        ]
        df = pd.DataFrame([s.to_dict() for s in self.history], columns=columns)
        return df.set_index('generation')


def optimize(
    fn: ObjectiveFn,
    lower_bounds: Sequence[float],
    upper_bounds: Sequence[float],
    maximize: bool = False,
    number_of_generations: int = DEFAULT_NUMBER_OF_GENERATIONS,
    **kwargs: Any,
) -> Tuple[np.ndarray, float, float]:
    """
    Convenience function to optimize a plain callable.

    Args:
        fn: function returning a value, or a (value, constraint_values) pair
        lower_bounds: lower bounds of the feature space
        upper_bounds: upper bounds of the feature space
        maximize: maximize instead of minimize
        number_of_generations: generations to run
        **kwargs: additional SRES arguments

    Returns:
        Tuple of (best_features, best_value, best_penalty)
    """
    objective = FunctionObjective(fn, lower_bounds, upper_bounds, maximize=maximize)
    sres = SRES(objective, **kwargs)
    sres.run(number_of_generations)
    return sres.best_features, sres.best_value, sres.best_penalty


__all__ = ['SRES', 'GenerationStats', 'optimize', 'DEFAULT_NUMBER_OF_GENERATIONS']
