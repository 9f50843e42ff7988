"""
Sparse convolution over the cell lattice.

Kernel centres are scattered by a Poisson process whose realisation inside a
cell is fully determined by (cell coordinates, seed). A query point sums the
kernels of its home cell and of every neighbour cell that can hold a centre
within the truncation radius.

All loops run in lock-step over the lanes of a batch: loop bounds are the
maximum over lanes and lanes that are done are masked out of the accumulation.
"""

import itertools

import numpy as np

from ..general_algorithms import linalg
from ..general_algorithms.dual import (
    Dual,
    dual_add,
    dual_add_const,
    dual_dot_const,
    dual_neg,
    dual_stack,
    dual_where,
    dual_zeros,
)
from .filtering import FilterFrame
from .kernel import TWO_PI, filter_gabor_kernel_2d, gabor_kernel, slice_gabor_kernel_3d
from .params import GaborSetup, Orientation
from .periodic import wrap_cells
from .rng import CellRNG


# -- Orientation samplers ---------------------------------------------------------

def _sample_isotropic(setup: GaborSetup, rng: CellRNG, live):
    # uniform on the sphere, even when the noise is later sliced to 2D
    theta = TWO_PI * rng.next(live)
    cos_p = -1.0 + 2.0 * rng.next(live)
    sin_p = np.sqrt(np.maximum(0.0, 1.0 - cos_p * cos_p))
    omega = np.stack([np.cos(theta) * sin_p, np.sin(theta) * sin_p, cos_p], axis=-1)
    return linalg.normalize(omega)


def _sample_anisotropic(setup: GaborSetup, rng: CellRNG, live):
    omega = np.broadcast_to(setup.omega, live.shape + (3,))
    jitter = setup.params.jitter
    if jitter <= 0.0:
        return omega
    u, v = setup.basis
    theta = TWO_PI * rng.next(live)
    r = jitter * rng.next(live)
    offset = (r * np.cos(theta))[..., None] * u + (r * np.sin(theta))[..., None] * v
    return linalg.normalize(omega + offset)


def _sample_hybrid(setup: GaborSetup, rng: CellRNG, live):
    theta = TWO_PI * rng.next(live)
    zero = np.zeros_like(theta)
    return np.stack([np.cos(theta), np.sin(theta), zero], axis=-1)


ORIENTATION_SAMPLERS = {
    Orientation.ISOTROPIC: _sample_isotropic,
    Orientation.ANISOTROPIC: _sample_anisotropic,
    Orientation.HYBRID: _sample_hybrid,
}


# -- Kernel contributions ------------------------------------------------------------

def _plain_contribution(setup: GaborSetup, weight, omega, phi, x_k: Dual, frame=None) -> Dual:
    return gabor_kernel(weight, omega, phi, setup.a, x_k)


def _filtered_contribution(setup: GaborSetup, weight, omega, phi, x_k: Dual, frame: FilterFrame) -> Dual:
    """
    Slice the 3D kernel against the surface, filter it, evaluate it in 2D.

    Lanes without a usable frame, or whose filtered value is not finite, get
    the unfiltered 3D kernel instead.
    """
    omega_t = np.concatenate([frame.to_tangent(omega), linalg.dot(frame.normal, omega)[..., None]], axis=-1)
    d = dual_neg(dual_dot_const(x_k, frame.normal))
    w_s, omega_s, phi_s = slice_gabor_kernel_3d(d, weight, setup.a, omega_t, phi)
    w_f, a_f, omega_f, phi_f = filter_gabor_kernel_2d(frame.covariance, w_s, setup.a, omega_s, phi_s)

    x_t = dual_stack([dual_dot_const(x_k, frame.tangent), dual_dot_const(x_k, frame.bitangent)])
    with np.errstate(over="ignore", invalid="ignore"):
        filtered = gabor_kernel(w_f, omega_f, phi_f, a_f, x_t)
    finite = np.isfinite(filtered.val) & np.all(np.isfinite(filtered.d), axis=0)

    plain = gabor_kernel(weight, omega, phi, setup.a, x_k)
    return dual_where(frame.usable & finite, filtered, plain)


# -- Cells -----------------------------------------------------------------------------

def cell_near_mask(setup: GaborSetup, cells, p) -> np.ndarray:
    """
    Lanes whose query point p lies within the truncation radius of the cell.

    Args:
        setup: GaborSetup
        cells: Integer cell coordinates (B, 3)
        p: Query points (B, 3)
    """
    lo = cells * setup.cell_size
    hi = lo + setup.cell_size
    gap = np.maximum(np.maximum(lo - p, p - hi), 0.0)
    return linalg.dot(gap, gap) < setup.radius2


def gabor_cell(setup: GaborSetup, cells, position: Dual, seed, frame=None, mask=None) -> Dual:
    """
    Sum the kernels of one cell per lane.

    Args:
        setup: GaborSetup
        cells: Integer cell coordinates (B, 3), unwrapped
        position: Query points, vector Dual (B, 3)
        seed: Seed fed to the cell hash
        frame: FilterFrame for filtered noise, None otherwise
        mask: Lanes to accumulate (default all)

    Returns:
        Scalar Dual (B,) of unscaled kernel sums
    """
    cells = np.asarray(cells, dtype=np.int64)
    rng = CellRNG(wrap_cells(cells, setup.cells_per_period), seed)
    counts = rng.poisson(setup.mean_impulses, mask)

    sampler = ORIENTATION_SAMPLERS[setup.params.orientation]
    contribution = _plain_contribution if frame is None else _filtered_contribution

    total = dual_zeros(position.shape[:-1], position.nderivs)
    n_max = int(counts.max()) if counts.size else 0
    for i in range(n_max):
        live = counts > i
        # offset draws run z, y, x
        oz = rng.next(live)
        oy = rng.next(live)
        ox = rng.next(live)
        omega = sampler(setup, rng, live)
        phi = TWO_PI * rng.next(live)
        weight = setup.weight * np.where(rng.next(live) < 0.5, 1.0, -1.0)

        centre = (cells + np.stack([ox, oy, oz], axis=-1)) * setup.cell_size
        x_k = dual_add_const(position, -centre)
        within = live & (linalg.dot(x_k.val, x_k.val) < setup.radius2)
        if not within.any():
            continue
        value = contribution(setup, weight, omega, phi, x_k, frame)
        total = dual_where(within, dual_add(total, value), total)
    return total


def neighbour_offsets(reach):
    """All integer offsets within reach cells on each axis."""
    rx, ry, rz = (int(r) for r in reach)
    for oz, oy, ox in itertools.product(range(-rz, rz + 1), range(-ry, ry + 1), range(-rx, rx + 1)):
        yield np.array([ox, oy, oz], dtype=np.int64)


def gabor_grid(setup: GaborSetup, position: Dual, seed, frame=None, active=None) -> Dual:
    """
    Sum kernel contributions over the home cell and its neighbours.

    Args:
        setup: GaborSetup
        position: Query points, vector Dual (B, 3)
        seed: Seed fed to the cell hash
        frame: FilterFrame for filtered noise, None otherwise
        active: Lanes holding real data (default all)

    Returns:
        Scalar Dual (B,) of unscaled kernel sums
    """
    p = position.val
    home = np.floor(p / setup.cell_size).astype(np.int64)
    total = dual_zeros(position.shape[:-1], position.nderivs)
    for offset in neighbour_offsets(setup.reach):
        cells = home + offset
        near = cell_near_mask(setup, cells, p)
        if active is not None:
            near = near & active
        if not near.any():
            continue
        total = dual_add(total, gabor_cell(setup, cells, position, seed, frame, near))
    return total
