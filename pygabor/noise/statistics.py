"""
Closed-form and sampled moments of Gabor noise.

For a Poisson process of intensity lambda with weights of magnitude w and
uniformly random phases, Campbell's theorem gives a zero mean and

    Var = lambda * w^2 * E[cos^2] * integral of exp(-2 pi a^2 |x|^2) d^3x
        = lambda * w^2 / (4 sqrt(2) a^3)

before truncation. Truncating kernels at radius R removes the part of the
squared envelope outside R, a chi-square tail with 3 degrees of freedom.
"""

import math

import numpy as np

from .. import constants as cte
from .params import GaborSetup, NoiseParams, build_setup


def _chi2_3_cdf(x: float) -> float:
    return math.erf(math.sqrt(x / 2.0)) - math.sqrt(2.0 * x / math.pi) * math.exp(-x / 2.0)


def truncated_energy_fraction(truncate: float = cte.GABOR_TRUNCATE) -> float:
    """Fraction of the squared 3D envelope that lies inside the truncation radius."""
    # 4 pi a^2 R^2 = 4 ln(1 / truncate), independent of a
    return _chi2_3_cdf(4.0 * math.log(1.0 / truncate))


def predicted_variance(setup, truncated: bool = True) -> float:
    """
    Variance of the scaled, unfiltered noise.

    Args:
        setup: GaborSetup or NoiseParams
        truncated: Account for the kernels cut at the truncation radius

    Returns:
        float
    """
    if isinstance(setup, NoiseParams):
        setup = build_setup(setup)
    if not isinstance(setup, GaborSetup):
        raise TypeError("setup must be a GaborSetup or NoiseParams")
    variance = setup.density * setup.weight ** 2 / (4.0 * math.sqrt(2.0) * setup.a ** 3)
    variance *= setup.scale ** 2
    if truncated:
        variance *= truncated_energy_fraction()
    return variance


def sample_moments(values):
    """
    Sample mean and (unbiased) variance of noise values.

    Args:
        values: Array of noise values or a Dual

    Returns:
        (mean, variance) as floats
    """
    values = np.asarray(getattr(values, "val", values), dtype=cte.FLOAT_TYPE_NP).ravel()
    if values.size < 2:
        raise ValueError("at least two samples are required")
    return float(values.mean()), float(values.var(ddof=1))
