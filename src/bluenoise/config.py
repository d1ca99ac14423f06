"""
Configuration, type definitions and errors for Poisson disk sampling.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Tuple
from enum import Enum

# Type aliases
Point = np.ndarray
CellKey = Tuple[int, ...]
DensityFunction = Callable[[np.ndarray], float]  # normalized position -> [0, 1]


class RadiusMode(Enum):
    """How the minimum separation is chosen at a position."""
    FIXED = "fixed"
    VARIABLE = "variable"


class SamplerState(Enum):
    """Lifecycle of a sampler instance."""
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    SAMPLING = "sampling"
    DONE = "done"


class SamplingError(Exception):
    """Base class for all sampling errors."""


class InvalidConfigurationError(SamplingError, ValueError):
    """Raised when a sampler is constructed with unusable parameters."""


class RadiusContractError(InvalidConfigurationError):
    """Raised when a radius policy or density field returns an invalid value."""


class GridConsistencyError(SamplingError, AssertionError):
    """Raised when a sample lands in an already occupied grid cell."""


@dataclass
class SamplerConfig:
    """
    Configuration parameters for the Poisson disk sampler.

    Basic parameters:
        rejection_limit: Candidates thrown around an active sample before it is retired
        seed: Seed for the random source built when none is passed explicitly

    Output:
        verbose: Print progress while generating
        report_interval: Accepted samples between progress lines
    """
    rejection_limit: int = 30
    seed: int = 1337

    # Output
    verbose: bool = False
    report_interval: int = 250


@dataclass
class SamplingProgress:
    """Tracks the current state of the sampling loop."""
    samples_placed: int = 0
    active_samples: int = 0
    rejected_candidates: int = 0
    retired_samples: int = 0
    state: SamplerState = SamplerState.UNINITIALIZED

    @property
    def acceptance_ratio(self) -> float:
        """Fraction of thrown candidates that were accepted."""
        thrown = self.samples_placed + self.rejected_candidates
        return self.samples_placed / thrown if thrown > 0 else 0.0

    def __str__(self) -> str:
        return (
            f"[{self.state.value}] Placed: {self.samples_placed} | "
            f"Active: {self.active_samples} | Retired: {self.retired_samples} | "
            f"Rejected: {self.rejected_candidates} ({self.acceptance_ratio:.0%} accepted)"
        )
