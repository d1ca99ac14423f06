"""
Radius policies and density fields.

A radius policy answers one question: what minimum separation applies at
this position? It is either a constant, or a linear interpolation between
a minimum and maximum radius driven by a density field evaluated at the
normalized position.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional

from .config import DensityFunction, InvalidConfigurationError, Point, RadiusContractError, RadiusMode
from .geometry import Domain


@dataclass(frozen=True)
class RadiusPolicy:
    """
    Minimum separation as a function of position.

    Use the constructors rather than building this directly:
        RadiusPolicy.fixed(10.0)
        RadiusPolicy.variable(2.0, 8.0, density)
    """
    mode: RadiusMode
    min_radius: float
    max_radius: float
    density: Optional[DensityFunction] = None

    def __post_init__(self):
        for name in ("min_radius", "max_radius"):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise InvalidConfigurationError(f"{name} must be positive and finite, got {value}")
        if self.min_radius > self.max_radius:
            raise InvalidConfigurationError(
                f"min_radius ({self.min_radius}) must not exceed max_radius ({self.max_radius})"
            )
        if self.mode is RadiusMode.FIXED and self.min_radius != self.max_radius:
            raise InvalidConfigurationError("a fixed radius policy needs min_radius == max_radius")

    @classmethod
    def fixed(cls, radius: float) -> "RadiusPolicy":
        return cls(RadiusMode.FIXED, float(radius), float(radius))

    @classmethod
    def variable(
        cls, min_radius: float, max_radius: float, density: Optional[DensityFunction] = None
    ) -> "RadiusPolicy":
        """Radius lerped from ``min_radius`` to ``max_radius`` by ``density``.

        Without a density field every position gets ``max_radius``.
        """
        return cls(RadiusMode.VARIABLE, float(min_radius), float(max_radius), density)

    @property
    def is_fixed(self) -> bool:
        return self.mode is RadiusMode.FIXED

    def radius_at(self, position: Point, domain: Domain) -> float:
        """Required separation at ``position``."""
        if self.mode is RadiusMode.FIXED:
            return self.min_radius
        if self.density is None:
            return self.max_radius

        value = float(self.density(domain.normalize(position)))
        if not (0.0 <= value <= 1.0):
            raise RadiusContractError(
                f"density field returned {value} at {np.asarray(position).tolist()}, expected a value in [0, 1]"
            )

        radius = self.min_radius + (self.max_radius - self.min_radius) * value
        if not radius > 0:
            raise RadiusContractError(f"radius policy produced non-positive radius {radius}")
        return radius


class DensityMap:
    """
    Bilinearly sampled 2D density field, e.g. one channel of a texture.

    ``values[row, col]`` with rows along y and columns along x. Lookups take
    normalized ``(u, v)`` coordinates, use texel centres and clamp at the
    edges.
    """

    def __init__(self, values: np.ndarray):
        self.values = np.array(values, dtype=float)
        if self.values.ndim != 2 or self.values.size == 0:
            raise InvalidConfigurationError(f"density map must be a non-empty 2D array, got shape {self.values.shape}")
        if not np.all(np.isfinite(self.values)):
            raise InvalidConfigurationError("density map contains non-finite values")
        if self.values.min() < 0.0 or self.values.max() > 1.0:
            raise InvalidConfigurationError(
                f"density map values must lie in [0, 1], got [{self.values.min()}, {self.values.max()}]"
            )
        self.height, self.width = self.values.shape

    def sample(self, u: float, v: float) -> float:
        """Bilinear lookup at normalized coordinates."""
        x = u * self.width - 0.5
        y = v * self.height - 0.5

        x0 = math.floor(x)
        y0 = math.floor(y)
        tx = x - x0
        ty = y - y0

        x0c, x1c = self._clamp(x0, self.width), self._clamp(x0 + 1, self.width)
        y0c, y1c = self._clamp(y0, self.height), self._clamp(y0 + 1, self.height)

        top = self.values[y0c, x0c] * (1 - tx) + self.values[y0c, x1c] * tx
        bottom = self.values[y1c, x0c] * (1 - tx) + self.values[y1c, x1c] * tx
        # Rounding can push a convex combination of [0, 1] values just past 1
        return min(max(float(top * (1 - ty) + bottom * ty), 0.0), 1.0)

    def __call__(self, uv: np.ndarray) -> float:
        return self.sample(float(uv[0]), float(uv[1]))

    @staticmethod
    def _clamp(index: int, size: int) -> int:
        return min(max(index, 0), size - 1)
