"""
Seedable random source shared by every stage of the sampler.

Wraps a ``numpy.random.Generator`` so that the sampler never touches
process-wide random state. Two sources built from the same seed and fed
the same call sequence return the same values.
"""

import numpy as np


class RandomSource:
    """Uniform random generator with an explicit seed."""

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
            raise TypeError(f"seed must be an integer, got {type(seed).__name__}")
        self.seed = int(seed)
        self._generator = np.random.default_rng(self.seed)

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self._generator.random())

    def next_int(self, bound: int) -> int:
        """Uniform integer in [0, bound)."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return int(self._generator.integers(bound))

    def uniform_vector(self, size: int) -> np.ndarray:
        """Vector of ``size`` independent floats in [0, 1)."""
        return self._generator.random(size)

    def normal_vector(self, size: int) -> np.ndarray:
        """Vector of ``size`` independent standard normal samples."""
        return self._generator.standard_normal(size)

    def __repr__(self) -> str:
        return f"RandomSource(seed={self.seed})"
