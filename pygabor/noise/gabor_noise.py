"""
Gabor noise rasters for pygabor.

Samples the noise on a regular 2D grid lying in a plane of constant z. Pixel
spacing is passed on as the position derivatives, so filtered noise is band
limited to the pixel footprint automatically.
"""

import numpy as np

from .. import constants as cte
from ..general_algorithms.dual import Dual
from .evaluator import GaborEvaluator
from .params import NoiseParams


def grid_positions(nx: int, ny: int, spacing: float = 0.05, z: float = 0.0,
                   origin=(0.0, 0.0)) -> Dual:
    """
    Positions of an (ny, nx) pixel grid as a vector Dual in row-major order.

    Derivative slot 0 is the step along x (one pixel), slot 1 the step along y.
    """
    if nx < 1 or ny < 1:
        raise ValueError("nx and ny must be >= 1")
    if spacing <= 0:
        raise ValueError("spacing must be > 0")
    xs = origin[0] + np.arange(nx, dtype=cte.FLOAT_TYPE_NP) * spacing
    ys = origin[1] + np.arange(ny, dtype=cte.FLOAT_TYPE_NP) * spacing
    X, Y = np.meshgrid(xs, ys)
    val = np.stack([X.ravel(), Y.ravel(), np.full(X.size, z)], axis=-1)
    d = np.zeros((2,) + val.shape, dtype=cte.FLOAT_TYPE_NP)
    d[0, :, 0] = spacing
    d[1, :, 1] = spacing
    return Dual(val, d)


def gabor_noise(nx: int, ny: int, spacing: float = 0.05, z: float = 0.0,
                params: NoiseParams = None, amplitude: float = 1.0,
                lane_width: int = 4096, component: int = None,
                return_field: bool = False):
    """
    Generate a 2D raster of Gabor noise.

    Args:
        nx: Number of cells in x direction
        ny: Number of cells in y direction
        spacing: Distance between pixel centres in noise space (default: 0.05)
        z: Height of the sampling plane (default: 0.0)
        params: NoiseParams (default: NoiseParams())
        amplitude: Multiplier applied to the noise (default: 1.0)
        lane_width: Lanes evaluated in lock-step (default: 4096)
        component: None for scalar noise, 0/1/2 for one component of the
                   vector noise
        return_field: If True, return a Taichi field; if False, a numpy array

    Returns:
        numpy.ndarray or taichi.Field of shape (ny, nx)

    Example:
        # Isotropic noise with a narrow bandwidth
        img = gabor_noise(256, 256, spacing=0.02,
                          params=NoiseParams(bandwidth=0.5, seed=3))

        # Tileable anisotropic noise, antialiased
        img = gabor_noise(128, 128, spacing=0.05,
                          params=NoiseParams(anisotropic=1, direction=(1, 1, 0),
                                             period=(6.4, 6.4, 0), filtered=True))
    """
    if component is not None and component not in (0, 1, 2):
        raise ValueError("component must be None, 0, 1 or 2")
    evaluator = GaborEvaluator(params, lane_width=lane_width)
    P = grid_positions(nx, ny, spacing, z)

    if component is None:
        values = evaluator.evaluate(P).val
    else:
        values = evaluator.evaluate_component(P, component).val
    result = (values * amplitude).reshape(ny, nx)

    if not return_field:
        return result

    import taichi as ti

    field = ti.field(ti.f32, shape=(ny, nx))
    field.from_numpy(result.astype(np.float32))
    return field
