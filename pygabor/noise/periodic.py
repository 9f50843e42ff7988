"""
Periodic wrapping of lattice coordinates.

Tiled noise wraps its integer cell coordinates before they seed the per-cell
generator, so the kernel layout repeats exactly every `period` cells.
"""

import numpy as np


def clamp_period(period):
    """Periods are whole numbers of cells, at least 1."""
    return np.maximum(1.0, np.floor(period))


def wrap(s, period):
    """
    Wrap s into [0, period).

    The period is floored and clamped to >= 1 first, so wrap(s, 0.5) behaves
    like wrap(s, 1).

    Args:
        s: Scalar or array of coordinates
        period: Scalar or array period (broadcast against s)

    Returns:
        s - period * floor(s / period)
    """
    period = clamp_period(np.asarray(period, dtype=np.float64))
    s = np.asarray(s, dtype=np.float64)
    return s - period * np.floor(s / period)


def wrap_cells(cells, cells_per_period):
    """
    Wrap integer cell coordinates on the tiled axes only.

    Args:
        cells: Integer array of shape (..., 3)
        cells_per_period: Integer array of shape (3,); 0 leaves an axis untouched

    Returns:
        int64 array of the same shape
    """
    cells = np.asarray(cells, dtype=np.int64)
    cells_per_period = np.asarray(cells_per_period, dtype=np.int64)
    tiled = cells_per_period > 0
    if not tiled.any():
        return cells
    wrapped = wrap(cells, np.where(tiled, cells_per_period, 1)).astype(np.int64)
    return np.where(tiled, wrapped, cells)
