"""
Grid-accelerated dart throwing (Bridson-style Poisson disk sampling).

One engine drives all three variants:
- fixed radius in 2D          (``uniform_poisson_2d``)
- density-driven radius in 2D (``variable_poisson_2d``)
- fixed radius in N dimensions (``uniform_poisson_nd``)
"""

import math
import time
import numpy as np
from typing import List, Optional, Sequence

from .config import (
    DensityFunction,
    InvalidConfigurationError,
    Point,
    SamplerConfig,
    SamplerState,
    SamplingProgress,
)
from .geometry import DartThrower, Domain, Sample, SpatialGrid
from .radius import RadiusPolicy
from .rng import RandomSource


class PoissonDiskSampler:
    """
    Fills an axis-aligned domain with points that respect a minimum separation.

    The sampler owns its grid, active list and accepted samples. It is
    single-use: construct, call ``generate()`` once, read the samples.
    """

    def __init__(
        self,
        domain: Domain,
        policy: RadiusPolicy,
        rng: Optional[RandomSource] = None,
        config: Optional[SamplerConfig] = None,
        seed_point: Optional[Sequence[float]] = None,
    ):
        self.config = config or SamplerConfig()
        self._validate_config()

        self.domain = domain
        self.policy = policy
        self.rng = rng if rng is not None else RandomSource(self.config.seed)
        self.progress = SamplingProgress()

        dimensions = domain.dimensions
        self.cell_size = policy.min_radius / math.sqrt(dimensions)
        self.grid = SpatialGrid(cell_size=self.cell_size, origin=domain.mins)
        self.thrower = DartThrower(dimensions)

        self.samples: List[Sample] = []
        self._active: List[int] = []
        self._largest_radius = 0.0
        self._elapsed_ms: Optional[float] = None

        self._seed(seed_point)

    def _validate_config(self) -> None:
        limit = self.config.rejection_limit
        if isinstance(limit, bool) or not isinstance(limit, (int, np.integer)) or limit <= 0:
            raise InvalidConfigurationError(f"rejection_limit must be a positive integer, got {limit!r}")
        if self.config.report_interval <= 0:
            raise InvalidConfigurationError(
                f"report_interval must be positive, got {self.config.report_interval}"
            )

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> SamplerState:
        return self.progress.state

    @property
    def dimensions(self) -> int:
        return self.domain.dimensions

    @property
    def rejection_limit(self) -> int:
        return int(self.config.rejection_limit)

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def positions(self) -> np.ndarray:
        """Accepted positions in acceptance order, shape ``(n, D)``."""
        if not self.samples:
            return np.empty((0, self.dimensions))
        return np.array([s.position for s in self.samples])

    @property
    def radii(self) -> np.ndarray:
        """Radius each accepted sample was placed with."""
        return np.array([s.radius for s in self.samples], dtype=float)

    @property
    def grid_dimensions(self) -> np.ndarray:
        """Number of grid cells spanning the domain along each axis."""
        return np.ceil(self.domain.extents / self.cell_size).astype(int)

    @property
    def elapsed_ms(self) -> Optional[float]:
        """Wall time of ``generate()`` in milliseconds, ``None`` before it runs."""
        return self._elapsed_ms

    def _set_state(self, state: SamplerState) -> None:
        self.progress.state = state

    # =========================================================================
    # Sample bookkeeping
    # =========================================================================

    def _seed(self, seed_point: Optional[Sequence[float]]) -> None:
        if seed_point is None:
            position = self.domain.random_point(self.rng)
        else:
            position = np.array(seed_point, dtype=float).reshape(-1)
            if position.size != self.dimensions:
                raise InvalidConfigurationError(
                    f"seed point has {position.size} coordinates, domain has {self.dimensions}"
                )
            if not self.domain.contains_point(position):
                raise InvalidConfigurationError(f"seed point {position.tolist()} lies outside {self.domain}")

        self._accept(position, self.policy.radius_at(position, self.domain))
        self._set_state(SamplerState.SEEDED)

    def _accept(self, position: Point, radius: float) -> Sample:
        sample = Sample(position=position, radius=radius, index=len(self.samples))
        self.grid.insert(sample)
        self.samples.append(sample)
        self._active.append(sample.index)
        self._largest_radius = max(self._largest_radius, radius)

        self.progress.samples_placed += 1
        self.progress.active_samples = len(self._active)
        return sample

    def _retire(self, slot: int) -> None:
        """Drop an active entry by swapping it with the last one."""
        self._active[slot] = self._active[-1]
        self._active.pop()
        self.progress.retired_samples += 1
        self.progress.active_samples = len(self._active)

    # =========================================================================
    # Dart throwing
    # =========================================================================

    def _is_far_enough(self, candidate: Point, radius: float) -> bool:
        """True if no accepted sample is closer than the larger of the two radii."""
        search_radius = max(radius, self._largest_radius)
        neighbors = self.grid.neighbors_within_radius(candidate, search_radius)
        if not neighbors:
            return True

        positions = np.array([s.position for s in neighbors])
        required = np.maximum(np.array([s.radius for s in neighbors]), radius)
        distances_sq = np.sum((positions - candidate) ** 2, axis=1)
        return not np.any(distances_sq < required * required)

    def _spawn_from(self, active: Sample) -> Optional[Sample]:
        """Throw up to ``rejection_limit`` darts around ``active``."""
        for _ in range(self.rejection_limit):
            candidate = self.thrower.throw(active.position, active.radius, self.rng)

            if not self.domain.contains_point(candidate):
                self.progress.rejected_candidates += 1
                continue

            radius = self.policy.radius_at(candidate, self.domain)
            if not self._is_far_enough(candidate, radius):
                self.progress.rejected_candidates += 1
                continue

            return self._accept(candidate, radius)

        return None

    # =========================================================================
    # Main Entry Points
    # =========================================================================

    def generate(self) -> np.ndarray:
        """
        Run the active-list loop until no active samples remain.

        Returns:
            Accepted positions in acceptance order, shape ``(n, D)``.
        """
        if self.state is not SamplerState.SEEDED:
            raise RuntimeError(f"generate() can only run once per sampler (state is {self.state.value})")

        self._set_state(SamplerState.SAMPLING)
        start = time.perf_counter()

        while self._active:
            slot = self.rng.next_int(len(self._active))
            active = self.samples[self._active[slot]]

            placed = self._spawn_from(active)
            if placed is None:
                self._retire(slot)
            elif self.config.verbose and self.progress.samples_placed % self.config.report_interval == 0:
                print(self.progress)

        self._elapsed_ms = (time.perf_counter() - start) * 1000.0
        self._set_state(SamplerState.DONE)

        if self.config.verbose:
            print(f"Done! {self.progress} in {self._elapsed_ms:.2f} ms")

        return self.positions


# =============================================================================
# Variants
# =============================================================================

def uniform_poisson_2d(
    width: float,
    height: float,
    radius: float,
    config: Optional[SamplerConfig] = None,
    rng: Optional[RandomSource] = None,
    seed_point: Optional[Sequence[float]] = None,
) -> PoissonDiskSampler:
    """Fixed-radius sampler over ``[0, width) x [0, height)``."""
    return PoissonDiskSampler(
        Domain.from_size(width, height), RadiusPolicy.fixed(radius), rng, config, seed_point
    )


def variable_poisson_2d(
    width: float,
    height: float,
    min_radius: float,
    max_radius: float,
    density: Optional[DensityFunction] = None,
    config: Optional[SamplerConfig] = None,
    rng: Optional[RandomSource] = None,
    seed_point: Optional[Sequence[float]] = None,
) -> PoissonDiskSampler:
    """Sampler whose radius follows ``density`` over ``[0, width) x [0, height)``."""
    return PoissonDiskSampler(
        Domain.from_size(width, height),
        RadiusPolicy.variable(min_radius, max_radius, density),
        rng,
        config,
        seed_point,
    )


def uniform_poisson_nd(
    extents: Sequence[float],
    radius: float,
    config: Optional[SamplerConfig] = None,
    rng: Optional[RandomSource] = None,
    seed_point: Optional[Sequence[float]] = None,
) -> PoissonDiskSampler:
    """Fixed-radius sampler over a box with one extent per dimension."""
    return PoissonDiskSampler(Domain.from_size(*extents), RadiusPolicy.fixed(radius), rng, config, seed_point)


def random_comparison(count: int, domain: Domain, rng: RandomSource) -> np.ndarray:
    """
    ``count`` independent uniform points in ``domain``, for side-by-side
    comparison with a Poisson disk set of the same size.

    Pass a source seeded independently of the one used for sampling.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count == 0:
        return np.empty((0, domain.dimensions))
    return np.array([domain.random_point(rng) for _ in range(count)])
