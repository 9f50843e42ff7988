"""
Batch evaluation of Gabor noise.

GaborEvaluator validates a configuration once, derives its setup, then runs the
cell accumulator over fixed-width lane blocks. The variant (orientation mode,
filtered or not, scalar or vector output) is chosen per evaluator, never per
lane.

Usage:
    import numpy as np
    import pygabor as pg

    params = pg.noise.NoiseParams(bandwidth=1.0, seed=7)
    P = np.random.rand(1000, 3) * 10.0
    value = pg.noise.gabor(P, params)          # Dual, value.val has shape (1000,)
    vector = pg.noise.gabor3(P, params)        # Dual, vector.val has shape (1000, 3)
"""

from typing import NamedTuple

import numpy as np

from .. import constants as cte
from ..errors import GaborConfigError
from ..general_algorithms.dual import Dual, dual_constant, dual_scale
from ..general_algorithms.lanes import lane_blocks, load, store
from .cell import gabor_grid
from .filtering import setup_filter_frame
from .params import NoiseParams, Orientation, build_setup


class Variant(NamedTuple):
    """Static evaluation variant."""

    orientation: Orientation
    filtered: bool
    vector: bool


def as_position(position, nderivs: int = cte.NDERIVS) -> Dual:
    """
    Coerce positions into a vector Dual of shape (N, 3).

    Plain arrays get zero derivatives. A single point of shape (3,) becomes a
    batch of one.

    Raises:
        ValueError: if the last axis does not have 3 components
    """
    if not isinstance(position, Dual):
        position = dual_constant(position, nderivs)
    val = np.asarray(position.val, dtype=cte.FLOAT_TYPE_NP)
    d = np.asarray(position.d, dtype=cte.FLOAT_TYPE_NP)
    if val.ndim == 1:
        val = val[None, :]
        d = d[:, None, :]
    if val.ndim != 2 or val.shape[-1] != 3:
        raise ValueError(f"positions must have shape (N, 3) or (3,), got {np.shape(position.val)}")
    if d.shape[1:] != val.shape:
        raise ValueError("position derivatives must match the shape of the position")
    return Dual(val, d)


class GaborEvaluator:
    """
    Evaluate Gabor noise for batches of positions.

    Args:
        params: NoiseParams (defaults to NoiseParams())
        lane_width: Number of lanes evaluated in lock-step
        extra_reach: Extra neighbour cells to visit on each axis beyond the
                     reach derived from the truncation radius

    Raises:
        GaborConfigError: on an invalid configuration or lane width
    """

    def __init__(self, params: NoiseParams = None, lane_width: int = cte.DEFAULT_LANE_WIDTH, extra_reach: int = 0):
        if params is None:
            params = NoiseParams()
        if isinstance(lane_width, bool) or not isinstance(lane_width, (int, np.integer)) or lane_width < 1:
            raise GaborConfigError(f"lane_width must be an integer >= 1, got {lane_width!r}")
        self.params = params
        self.lane_width = int(lane_width)
        self.setup = build_setup(params, extra_reach)

    def variant(self, vector: bool = False) -> Variant:
        return Variant(self.params.orientation, self.params.filtered, bool(vector))

    def _evaluate_block(self, block: Dual, active, seed) -> Dual:
        frame = None
        if self.params.filtered:
            frame = setup_filter_frame(block, self.params.filter_covariance)
        total = gabor_grid(self.setup, block, seed, frame, active)
        return dual_scale(total, self.setup.scale)

    def _run(self, position: Dual, seed) -> Dual:
        n = position.shape[0]
        out_val = np.zeros(n, dtype=cte.FLOAT_TYPE_NP)
        out_d = np.zeros((position.nderivs, n), dtype=cte.FLOAT_TYPE_NP)
        for start, count in lane_blocks(n, self.lane_width):
            block, active = load(position, start, count, self.lane_width)
            store(out_val, out_d, self._evaluate_block(block, active, seed), start, count)
        return Dual(out_val, out_d)

    def evaluate(self, position) -> Dual:
        """
        Scalar noise at each position.

        Args:
            position: Array (N, 3) / (3,) or vector Dual

        Returns:
            Dual with val of shape (N,) and the same derivative slots as the input
        """
        position = as_position(position)
        return self._run(position, self.params.seed)

    def evaluate_component(self, position, component: int) -> Dual:
        """One component (0, 1 or 2) of the vector noise."""
        if component not in (0, 1, 2):
            raise ValueError("component must be 0, 1 or 2")
        return self._run(as_position(position), self.params.seed + component)

    def evaluate3(self, position) -> Dual:
        """
        Vector noise: three independent scalar fields (seeds seed, seed+1, seed+2).

        Returns:
            Dual with val of shape (N, 3)
        """
        position = as_position(position)
        parts = [self._run(position, self.params.seed + c) for c in range(3)]
        return Dual(
            np.stack([p.val for p in parts], axis=-1),
            np.stack([p.d for p in parts], axis=-1),
        )


def gabor(position, params: NoiseParams = None, lane_width: int = cte.DEFAULT_LANE_WIDTH) -> Dual:
    """Scalar Gabor noise; see GaborEvaluator.evaluate."""
    return GaborEvaluator(params, lane_width).evaluate(position)


def gabor3(position, params: NoiseParams = None, lane_width: int = cte.DEFAULT_LANE_WIDTH) -> Dual:
    """Vector Gabor noise; see GaborEvaluator.evaluate3."""
    return GaborEvaluator(params, lane_width).evaluate3(position)
