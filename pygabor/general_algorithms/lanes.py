"""
Fixed-width lane batches.

Positions are processed in blocks of `width` lanes. The last block of an input
is padded by repeating its final lane; the padded lanes are flagged inactive
and never stored back.
"""

import numpy as np

from .dual import Dual


def lane_blocks(n: int, width: int):
    """
    Yield (start, count) pairs covering n items in blocks of width lanes.

    Args:
        n: Total number of items
        width: Lane width (>= 1)
    """
    if width < 1:
        raise ValueError("lane width must be >= 1")
    for start in range(0, n, width):
        yield start, min(width, n - start)


def _pad(arr: np.ndarray, axis: int, width: int) -> np.ndarray:
    count = arr.shape[axis]
    if count == width:
        return arr
    last = np.take(arr, [count - 1], axis=axis)
    reps = np.repeat(last, width - count, axis=axis)
    return np.concatenate([arr, reps], axis=axis)


def load(position: Dual, start: int, count: int, width: int):
    """
    Load a block of lanes from a vector Dual of shape (N, n).

    Returns:
        (block, active) where block is a Dual with exactly width lanes and
        active is a boolean mask of the lanes holding real data
    """
    val = _pad(position.val[start:start + count], 0, width)
    d = _pad(position.d[:, start:start + count], 1, width)
    active = np.zeros(width, dtype=bool)
    active[:count] = True
    return Dual(val, d), active


def store(out_val: np.ndarray, out_d: np.ndarray, block: Dual, start: int, count: int):
    """Write the first count lanes of block into the output arrays."""
    out_val[start:start + count] = block.val[:count]
    out_d[:, start:start + count] = block.d[:, :count]
