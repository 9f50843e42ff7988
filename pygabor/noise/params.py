"""
Noise configuration and the setup derived from it.

NoiseParams is the user-facing, validated configuration record. GaborSetup
holds everything computed from it once per evaluator: the Gaussian width, the
truncation radius, the cell lattice, the impulse density and the output scale.
Invalid configuration fails here, before any point is evaluated.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from enum import IntEnum

import numpy as np

from .. import constants as cte
from ..errors import GaborConfigError
from ..general_algorithms.linalg import make_orthonormals
from .periodic import clamp_period

logger = logging.getLogger(__name__)


class Orientation(IntEnum):
    """How kernel frequency directions are drawn."""

    ISOTROPIC = 0
    ANISOTROPIC = 1
    HYBRID = 2


def _as_float(value, name):
    if isinstance(value, bool):
        raise GaborConfigError(f"{name} must be a number, got {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise GaborConfigError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(value):
        raise GaborConfigError(f"{name} must be finite, got {value}")
    return value


def _as_vec3(value, name):
    try:
        arr = np.asarray(value, dtype=cte.FLOAT_TYPE_NP)
    except (TypeError, ValueError) as e:
        raise GaborConfigError(f"{name} must be numeric: {e}") from e
    if arr.ndim == 0:
        arr = np.full(3, float(arr))
    if arr.shape != (3,):
        raise GaborConfigError(f"{name} must be a scalar or have 3 components, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise GaborConfigError(f"{name} must be finite")
    return arr


@dataclass(frozen=True)
class NoiseParams:
    """
    Immutable Gabor noise configuration.

    Attributes:
        anisotropic: 0 isotropic, 1 anisotropic (fixed direction), 2 hybrid
                     (random direction in the xy-plane). Booleans are accepted.
        direction: Principal direction; stored normalized
        bandwidth: Bandwidth in octaves (> 0), clamped to [0.01, 100]
        impulses: Mean number of kernels per truncation sphere, clamped to [1, 32]
        filtered: Enable the analytic prefilter
        filter_covariance: Optional 2x2 tangent-space filter covariance; only
                           valid with filtered=True. When filtered is True and
                           this is None, the covariance comes from the position
                           derivatives.
        period: Tiling period per axis in position units (0 disables tiling)
        seed: Integer seed in [-2**31, 2**32 - 1]
        jitter: Radius of the direction perturbation disc (anisotropic only)
    """

    anisotropic: int = 0
    direction: tuple = (1.0, 0.0, 0.0)
    bandwidth: float = 1.0
    impulses: float = cte.DEFAULT_IMPULSES
    filtered: bool = False
    filter_covariance: tuple = None
    period: tuple = field(default=(0.0, 0.0, 0.0))
    seed: int = 0
    jitter: float = 0.0

    def __post_init__(self):
        try:
            mode = Orientation(int(self.anisotropic))
        except (TypeError, ValueError) as e:
            raise GaborConfigError(f"anisotropic must be 0, 1 or 2, got {self.anisotropic!r}") from e
        object.__setattr__(self, "anisotropic", int(mode))

        direction = _as_vec3(self.direction, "direction")
        length = float(np.sqrt(np.dot(direction, direction)))
        if length == 0.0:
            raise GaborConfigError("direction must have non-zero length")
        object.__setattr__(self, "direction", tuple(float(x) for x in direction / length))

        bandwidth = _as_float(self.bandwidth, "bandwidth")
        if bandwidth <= 0.0:
            raise GaborConfigError(f"bandwidth must be > 0, got {bandwidth}")
        object.__setattr__(self, "bandwidth", bandwidth)

        impulses = _as_float(self.impulses, "impulses")
        if impulses <= 0.0:
            raise GaborConfigError(f"impulses must be > 0, got {impulses}")
        object.__setattr__(self, "impulses", impulses)

        jitter = _as_float(self.jitter, "jitter")
        if jitter < 0.0:
            raise GaborConfigError(f"jitter must be >= 0, got {jitter}")
        object.__setattr__(self, "jitter", jitter)

        period = _as_vec3(self.period, "period")
        if np.any(period < 0.0):
            raise GaborConfigError(f"period components must be >= 0, got {tuple(period)}")
        object.__setattr__(self, "period", tuple(float(x) for x in period))

        object.__setattr__(self, "filtered", bool(self.filtered))
        if self.filter_covariance is not None:
            if not self.filtered:
                raise GaborConfigError("filter_covariance is only valid with filtered=True")
            cov = np.asarray(self.filter_covariance, dtype=cte.FLOAT_TYPE_NP)
            if cov.shape != (2, 2) or not np.all(np.isfinite(cov)):
                raise GaborConfigError("filter_covariance must be a finite 2x2 matrix")
            if not np.isclose(cov[0, 1], cov[1, 0]):
                raise GaborConfigError("filter_covariance must be symmetric")
            det = cov[0, 0] * cov[1, 1] - cov[0, 1] * cov[1, 0]
            if cov[0, 0] < 0 or cov[1, 1] < 0 or det < -1e-12:
                raise GaborConfigError("filter_covariance must be positive semi-definite")
            object.__setattr__(self, "filter_covariance", tuple(tuple(float(x) for x in row) for row in cov))

        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
            raise GaborConfigError(f"seed must be an integer, got {self.seed!r}")
        # the cell hash takes one 32-bit word of seed
        if not cte.SEED_MIN <= int(self.seed) <= cte.SEED_MAX:
            raise GaborConfigError(f"seed must lie in [{cte.SEED_MIN}, {cte.SEED_MAX}], got {self.seed}")
        object.__setattr__(self, "seed", int(self.seed))

    @property
    def orientation(self) -> Orientation:
        return Orientation(self.anisotropic)

    @property
    def periodic(self) -> bool:
        return any(p > 0.0 for p in self.period)

    @classmethod
    def from_mapping(cls, mapping):
        """
        Build NoiseParams from a plain mapping (e.g. a parsed JSON file).

        Unknown keys raise GaborConfigError.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(mapping) - known
        if unknown:
            raise GaborConfigError(f"Unknown noise parameters: {sorted(unknown)}")
        return cls(**dict(mapping))

    def to_dict(self) -> dict:
        out = asdict(self)
        out["direction"] = list(self.direction)
        out["period"] = list(self.period)
        if self.filter_covariance is not None:
            out["filter_covariance"] = [list(row) for row in self.filter_covariance]
        return out


# -- Derived quantities ---------------------------------------------------------

def bandwidth_to_a(bandwidth: float, frequency: float = cte.GABOR_FREQUENCY) -> float:
    """
    Gaussian width 'a' for a bandwidth given in octaves.

    a = F0 * (2^B - 1) / (2^B + 1) * sqrt(pi / ln 2)
    """
    two_b = 2.0 ** bandwidth
    return frequency * ((two_b - 1.0) / (two_b + 1.0)) * math.sqrt(math.pi / math.log(2.0))


def truncation_radius(a: float, truncate: float = cte.GABOR_TRUNCATE) -> float:
    """
    Distance at which the envelope exp(-pi a^2 r^2) drops to truncate.

    Solves exp(-pi a^2 r^2) = truncate for r.
    """
    return math.sqrt(-math.log(truncate) / math.pi) / a


def search_reach(radius: float, cell_size) -> np.ndarray:
    """
    Number of neighbour cells to visit on each side, per axis.

    Every cell that can hold a kernel centre within radius of the query point
    is at most ceil(radius / cell_size) cells away from the home cell.
    """
    cell_size = np.asarray(cell_size, dtype=cte.FLOAT_TYPE_NP)
    # tolerance keeps an exact ratio of 1 from rounding up to 2
    return np.maximum(1, np.ceil(radius / cell_size - 1e-9)).astype(np.int64)


def output_scale(a: float) -> float:
    """Scale applied to the kernel sum so the noise roughly spans [-1, 1]."""
    gabor_variance = 1.0 / (4.0 * math.sqrt(2.0) * a ** 3)
    return 0.5 / (3.0 * math.sqrt(gabor_variance))


@dataclass(frozen=True)
class GaborSetup:
    """Read-only values derived from NoiseParams, shared by every lane."""

    params: NoiseParams
    a: float
    radius: float
    radius2: float
    density: float
    cell_size: np.ndarray
    cells_per_period: np.ndarray
    reach: np.ndarray
    mean_impulses: float
    scale: float
    omega: np.ndarray
    basis: tuple

    @property
    def weight(self) -> float:
        return cte.IMPULSE_WEIGHT


def build_setup(params: NoiseParams, extra_reach: int = 0) -> GaborSetup:
    """
    Derive the lattice and kernel constants for a configuration.

    Args:
        params: Validated NoiseParams
        extra_reach: Additional neighbour cells to visit beyond the derived
                     reach (never fewer)

    Returns:
        GaborSetup
    """
    if not isinstance(params, NoiseParams):
        raise GaborConfigError(f"expected NoiseParams, got {type(params).__name__}")
    if extra_reach < 0:
        raise GaborConfigError("extra_reach must be >= 0")

    bandwidth = min(max(params.bandwidth, cte.BANDWIDTH_MIN), cte.BANDWIDTH_MAX)
    impulses = min(max(params.impulses, cte.IMPULSES_MIN), cte.IMPULSES_MAX)
    a = bandwidth_to_a(bandwidth)
    radius = truncation_radius(a)
    density = impulses / (4.0 / 3.0 * math.pi * radius ** 3)

    period = np.asarray(params.period, dtype=cte.FLOAT_TYPE_NP)
    cells_per_period = np.zeros(3, dtype=np.int64)
    cell_size = np.full(3, radius, dtype=cte.FLOAT_TYPE_NP)
    for axis in range(3):
        if period[axis] > 0.0:
            n = int(clamp_period(period[axis] / radius))
            cells_per_period[axis] = n
            cell_size[axis] = period[axis] / n

    reach = search_reach(radius, cell_size) + int(extra_reach)
    mean_impulses = density * float(np.prod(cell_size))
    omega, u, v = make_orthonormals(np.asarray(params.direction, dtype=cte.FLOAT_TYPE_NP))

    setup = GaborSetup(
        params=params,
        a=a,
        radius=radius,
        radius2=radius * radius,
        density=density,
        cell_size=cell_size,
        cells_per_period=cells_per_period,
        reach=reach,
        mean_impulses=mean_impulses,
        scale=output_scale(a),
        omega=omega,
        basis=(u, v),
    )
    logger.debug(
        "gabor setup: a=%.6g radius=%.6g density=%.6g mean/cell=%.6g reach=%s",
        a, radius, density, mean_impulses, reach.tolist(),
    )
    return setup
