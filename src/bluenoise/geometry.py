"""
Geometry utilities for Poisson disk sampling.

Contains:
- Domain: axis-aligned sampling box, containment tests, normalization
- Sample: an accepted position and the radius it was placed with
- SpatialGrid: sparse background grid for neighbor lookups
- DartThrower: candidate generation in the annulus around a sample
"""

import itertools
import math
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .config import CellKey, GridConsistencyError, InvalidConfigurationError, Point
from .rng import RandomSource


class Domain:
    """Axis-aligned box ``[mins, maxs)`` in any number of dimensions."""

    def __init__(self, mins: Sequence[float], maxs: Sequence[float]):
        self.mins = np.array(mins, dtype=float).reshape(-1)
        self.maxs = np.array(maxs, dtype=float).reshape(-1)

        if self.mins.shape != self.maxs.shape or self.mins.size == 0:
            raise InvalidConfigurationError(
                f"domain bounds must be non-empty and of equal length, got {self.mins.size} and {self.maxs.size}"
            )
        if not (np.all(np.isfinite(self.mins)) and np.all(np.isfinite(self.maxs))):
            raise InvalidConfigurationError("domain bounds must be finite")
        if np.any(self.maxs <= self.mins):
            raise InvalidConfigurationError(
                f"domain is empty or degenerate: mins={self.mins.tolist()} maxs={self.maxs.tolist()}"
            )

        self.extents = self.maxs - self.mins

    @classmethod
    def from_size(cls, *extents: float) -> "Domain":
        """Box starting at the origin, e.g. ``Domain.from_size(width, height)``."""
        return cls(np.zeros(len(extents)), extents)

    @property
    def dimensions(self) -> int:
        return int(self.mins.size)

    @property
    def diagonal(self) -> float:
        return float(np.linalg.norm(self.extents))

    def contains_point(self, point: Point) -> bool:
        """Half-open containment test for a single point."""
        return bool(np.all(point >= self.mins) and np.all(point < self.maxs))

    def contains_points(self, points: np.ndarray) -> np.ndarray:
        """Vectorized containment test for an ``(n, D)`` array."""
        points = np.asarray(points, dtype=float).reshape(-1, self.dimensions)
        return np.all((points >= self.mins) & (points < self.maxs), axis=1)

    def normalize(self, point: Point) -> np.ndarray:
        """Map a point in the box to ``[0, 1]^D``."""
        return (np.asarray(point, dtype=float) - self.mins) / self.extents

    def random_point(self, rng: RandomSource) -> np.ndarray:
        """Uniformly random point inside the box."""
        point = self.mins + self.extents * rng.uniform_vector(self.dimensions)
        # Guard against rounding up onto the open upper bound
        return np.minimum(point, np.nextafter(self.maxs, self.mins))

    def __repr__(self) -> str:
        return f"Domain(mins={self.mins.tolist()}, maxs={self.maxs.tolist()})"


@dataclass(frozen=True, eq=False)
class Sample:
    """An accepted point and the radius that was in effect when it was placed."""
    position: Point
    radius: float
    index: int

    def __post_init__(self):
        position = np.array(self.position, dtype=float)
        position.setflags(write=False)
        object.__setattr__(self, "position", position)


@dataclass
class SpatialGrid:
    """Sparse background grid holding at most one sample per cell."""
    cell_size: float
    origin: np.ndarray
    cells: Dict[CellKey, Sample] = field(default_factory=dict)
    cells_examined: int = 0

    _offsets: Dict[int, np.ndarray] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        self.origin = np.asarray(self.origin, dtype=float).reshape(-1)
        if not self.cell_size > 0:
            raise InvalidConfigurationError(f"cell size must be positive, got {self.cell_size}")

    @property
    def dimensions(self) -> int:
        return int(self.origin.size)

    def cell_of(self, position: Point) -> CellKey:
        """Convert a position to its grid cell coordinates."""
        cell_coords = np.floor((np.asarray(position, dtype=float) - self.origin) / self.cell_size)
        return tuple(int(c) for c in cell_coords)

    def cell_span(self, search_radius: float) -> int:
        """Number of cells to search on each side of a query cell."""
        return int(math.ceil(search_radius / self.cell_size))

    def insert(self, sample: Sample) -> CellKey:
        """Record a sample in its cell. The cell must be empty."""
        key = self.cell_of(sample.position)
        occupant = self.cells.get(key)
        if occupant is not None:
            raise GridConsistencyError(
                f"cell {key} already holds sample {occupant.index} at {occupant.position.tolist()}, "
                f"cannot insert sample {sample.index} at {sample.position.tolist()}"
            )
        self.cells[key] = sample
        return key

    def neighbors_within_radius(self, position: Point, search_radius: float) -> List[Sample]:
        """Samples strictly closer than ``search_radius`` to ``position``."""
        position = np.asarray(position, dtype=float)
        center = np.array(self.cell_of(position), dtype=int)

        keys = (center + self._neighbor_offsets(self.cell_span(search_radius))).tolist()
        self.cells_examined += len(keys)
        found = [s for s in map(self.cells.get, map(tuple, keys)) if s is not None]

        if not found:
            return found

        positions = np.array([s.position for s in found])
        distances_sq = np.sum((positions - position) ** 2, axis=1)
        return [s for s, d in zip(found, distances_sq) if d < search_radius * search_radius]

    def _neighbor_offsets(self, span: int) -> np.ndarray:
        offsets = self._offsets.get(span)
        if offsets is None:
            offsets = np.array(list(itertools.product(range(-span, span + 1), repeat=self.dimensions)), dtype=int)
            self._offsets[span] = offsets
        return offsets

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, key: CellKey) -> bool:
        return key in self.cells


class DartThrower:
    """
    Throws candidate points into the annulus ``[r, 2r)`` around a sample.

    Direction is uniform on the unit sphere and the magnitude is drawn so
    that candidates are uniform over the annulus volume, not bunched at the
    inner edge:

        r' = r * (1 + (2^D - 1) * u) ** (1 / D)
    """

    def __init__(self, dimensions: int):
        if dimensions < 1:
            raise InvalidConfigurationError(f"dimensions must be at least 1, got {dimensions}")
        self.dimensions = dimensions
        self._shell_ratio = 2.0 ** dimensions - 1.0

    def direction(self, rng: RandomSource) -> np.ndarray:
        """Unit vector uniform over the sphere."""
        if self.dimensions == 1:
            return np.array([1.0 if rng.next_float() < 0.5 else -1.0])
        if self.dimensions == 2:
            angle = 2 * np.pi * rng.next_float()
            return np.array([np.cos(angle), np.sin(angle)])

        while True:
            vec = rng.normal_vector(self.dimensions)
            norm = np.linalg.norm(vec)
            if norm > 1e-12:
                return vec / norm

    def magnitude(self, radius: float, rng: RandomSource) -> float:
        """Distance in ``[radius, 2 * radius)`` with volume-uniform density."""
        u = rng.next_float()
        return radius * (1.0 + self._shell_ratio * u) ** (1.0 / self.dimensions)

    def throw(self, seed_position: Point, seed_radius: float, rng: RandomSource) -> np.ndarray:
        """Candidate position around a seed. No bounds checking."""
        direction = self.direction(rng)
        return np.asarray(seed_position, dtype=float) + direction * self.magnitude(seed_radius, rng)
