"""
Pytest configuration and shared fixtures for SRES tests.
"""

import os
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.random_source import RandomSource  # noqa: E402
from evolution.objective import FunctionObjective, ObjectiveResult  # noqa: E402


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running convergence test (set SRES_RUN_SLOW=1)")


def pytest_collection_modifyitems(config, items):
    if os.getenv("SRES_RUN_SLOW") == "1":
        return
    skip_slow = pytest.mark.skip(reason="set SRES_RUN_SLOW=1 to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def random_source():
    """Seeded random stream."""
    return RandomSource(seed=42)


@pytest.fixture
def sphere_objective():
    """Unconstrained 3-D sphere, minimum 0 at the origin."""
    return FunctionObjective(
        lambda x: float(np.sum(x * x)),
        lower_bounds=[-5.0, -5.0, -5.0],
        upper_bounds=[5.0, 5.0, 5.0],
    )


@pytest.fixture
def constrained_objective():
    """Maximize x + y subject to x + y <= 1 on [0, 2]^2."""
    def fn(x):
        return ObjectiveResult(float(x[0] + x[1]), (float(x[0] + x[1] - 1),))

    return FunctionObjective(fn, [0.0, 0.0], [2.0, 2.0], maximize=True)
