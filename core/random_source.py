"""
Seeded random stream shared by every randomized decision of a run.

A RandomSource is owned explicitly (by the optimizer or by the caller) and is
never module-level state. Two sources built from the same seed and consumed
with the same call sequence return the same values.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

DEFAULT_SEED = 51102


class RandomSource:
    """Thin wrapper over a PCG64 numpy Generator."""

    def __init__(self, seed: Optional[int] = DEFAULT_SEED):
        self._seed = seed
        self._rng = np.random.Generator(np.random.PCG64(seed))

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def uniform01(self, size: Optional[int] = None):
        """
        Uniform draw(s) in [0, 1).

        `uniform01(size=n)` consumes the stream exactly like n scalar calls.
        """
        if size is None:
            return float(self._rng.random())
        return self._rng.random(size)

    def gaussian(self) -> float:
        """Standard normal deviate."""
        return float(self._rng.standard_normal())

    def uniform_int(self, n: int) -> int:
        """Uniform integer in 0..n-1."""
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        return int(self._rng.integers(n))

    def __repr__(self) -> str:
        return f"RandomSource(seed={self._seed})"


__all__ = ["RandomSource", "DEFAULT_SEED"]
