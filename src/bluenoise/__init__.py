"""
bluenoise - Poisson disk sampling with a background acceleration grid.

Usage:
    from bluenoise import SamplerConfig, DensityMap
    from bluenoise import uniform_poisson_2d, variable_poisson_2d, uniform_poisson_nd

    # Fixed radius in 2D
    sampler = uniform_poisson_2d(100, 100, radius=10.0)
    points = sampler.generate()

    # With configuration
    config = SamplerConfig(rejection_limit=30, seed=42, verbose=True)
    sampler = uniform_poisson_2d(100, 100, radius=10.0, config=config)
    points = sampler.generate()

    # Radius driven by a density map (values in [0, 1])
    density = DensityMap(texture[..., 0])
    sampler = variable_poisson_2d(1024, 1024, 10.0, 50.0, density)
    points = sampler.generate()

    # Any number of dimensions
    sampler = uniform_poisson_nd([50, 50, 50], radius=8.0)
    points = sampler.generate()

Every sampler is single-use and draws all randomness from its own
RandomSource, built from ``config.seed`` unless one is passed in.
"""

from .config import (
    SamplerConfig,
    SamplingProgress,
    SamplerState,
    RadiusMode,
    SamplingError,
    InvalidConfigurationError,
    RadiusContractError,
    GridConsistencyError,
    Point,
    CellKey,
)
from .rng import RandomSource
from .geometry import Domain, Sample, SpatialGrid, DartThrower
from .radius import RadiusPolicy, DensityMap
from .sampler import (
    PoissonDiskSampler,
    uniform_poisson_2d,
    variable_poisson_2d,
    uniform_poisson_nd,
    random_comparison,
)

__all__ = [
    "PoissonDiskSampler",
    "uniform_poisson_2d",
    "variable_poisson_2d",
    "uniform_poisson_nd",
    "random_comparison",
    "SamplerConfig",
    "SamplingProgress",
    "SamplerState",
    "RadiusMode",
    "RadiusPolicy",
    "DensityMap",
    "RandomSource",
    "Domain",
    "Sample",
    "SpatialGrid",
    "DartThrower",
    "SamplingError",
    "InvalidConfigurationError",
    "RadiusContractError",
    "GridConsistencyError",
    "Point",
    "CellKey",
]

__version__ = "0.1.0"
