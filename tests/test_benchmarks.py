"""
Convergence tests on benchmark problems with known optima.

The 10-D chained Rosenbrock run takes several minutes and only runs with
SRES_RUN_SLOW=1.
"""
import numpy as np
import pytest

from evolution import SRES, banana, g08_problem, more_banana
from evolution.individual import Individual
from evolution.benchmarks import chained_rosenbrock, g08, rosenbrock


class TestBenchmarkFunctions:
    """Sanity checks of the benchmark definitions."""

    def test_rosenbrock_minimum(self):
        assert rosenbrock(np.array([1.0, 1.0])) == 0
        assert rosenbrock(np.array([0.0, 0.0])) == 1

    def test_chained_rosenbrock_minimum(self):
        assert chained_rosenbrock(np.ones(10)) == 0
        assert chained_rosenbrock(np.zeros(10)) == pytest.approx(9 / 10)

    def test_g08_known_solution(self):
        result = g08(np.array([1.2279713, 4.2453733]))

        assert result.value == pytest.approx(0.095825, rel=1e-4)
        assert result.violated_constraints == 0

    def test_g08_infeasible_point(self):
        result = g08(np.array([0.5, 8.0]))

        assert result.violated_constraints == 1
        assert result.penalty == pytest.approx((1 - 0.5 + 16) ** 2)

    def test_is_solved_needs_evaluation(self):
        problem = banana()
        ind = Individual(features=[1.0, 1.0], mutation_rates=[1.0, 1.0])
        assert not problem.is_solved(ind)

        ind.evaluate_against(problem)
        assert problem.is_solved(ind)


class TestConvergence:
    """SRES reaches the known optima."""

    def test_banana(self):
        problem = banana()
        sres = SRES(problem, lambda_=200, mu=30, verbose=False)
        sres.run(100)

        best = sres.best_individual
        assert problem.is_solved(best), str(best)
        assert sres.best_value == pytest.approx(0, abs=1e-3)
        assert best.features.tolist() == pytest.approx([1, 1], abs=0.1)

    def test_g08(self):
        problem = g08_problem()
        sres = SRES(problem, lambda_=200, mu=30, verbose=False)
        sres.run(200)

        best = sres.best_individual
        assert problem.is_solved(best), str(best)
        assert best.result.violated_constraints == 0
        assert sres.best_value == pytest.approx(0.095825, rel=1e-3)

    @pytest.mark.slow
    def test_more_banana(self):
        problem = more_banana(10)
        sres = SRES(problem, verbose=False)
        sres.run(5000)

        assert problem.is_solved(sres.best_individual), str(sres.best_individual)
