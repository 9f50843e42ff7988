"""
Small vector and matrix helpers operating on lane arrays.

Vectors are arrays of shape (..., 3) or (..., 2); 2x2 matrices are arrays of
shape (..., 2, 2). Everything is elementwise across the leading lane axes.
"""

import numpy as np

from .. import constants as cte


def dot(a, b):
    return np.sum(a * b, axis=-1)


def cross(a, b):
    return np.stack(
        [
            a[..., 1] * b[..., 2] - a[..., 2] * b[..., 1],
            a[..., 2] * b[..., 0] - a[..., 0] * b[..., 2],
            a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0],
        ],
        axis=-1,
    )


def normalize(v):
    """Normalize lanes of v; zero-length lanes are returned unchanged."""
    length = np.sqrt(dot(v, v))[..., None]
    return np.where(length > 0.0, v / np.where(length > 0.0, length, 1.0), v)


def make_orthonormals(v):
    """
    Complete a unit vector into an orthonormal basis.

    The first companion is v x (1,0,0) unless v points roughly along x, in
    which case v x (0,1,0) is used. The second is v x a, which is already unit
    length.

    Args:
        v: Array of shape (..., 3); normalized internally

    Returns:
        (v, a, b) unit vectors of shape (..., 3)
    """
    v = normalize(np.asarray(v, dtype=cte.FLOAT_TYPE_NP))
    zero = np.zeros_like(v[..., 0])
    a_x = np.stack([zero, v[..., 2], -v[..., 1]], axis=-1)
    a_y = np.stack([-v[..., 2], zero, v[..., 0]], axis=-1)
    a = np.where((np.abs(v[..., 0]) < 0.9)[..., None], a_x, a_y)
    a = normalize(a)
    b = cross(v, a)
    return v, a, b


# -- 2x2 matrices -------------------------------------------------------------

def identity2(shape=()):
    eye = np.zeros(tuple(shape) + (2, 2), dtype=cte.FLOAT_TYPE_NP)
    eye[..., 0, 0] = 1.0
    eye[..., 1, 1] = 1.0
    return eye


def det2(m):
    return m[..., 0, 0] * m[..., 1, 1] - m[..., 0, 1] * m[..., 1, 0]


def floor_det(det, floor: float = cte.DET_FLOOR):
    """Push determinants whose magnitude is below floor out to +/-floor."""
    det = np.asarray(det, dtype=cte.FLOAT_TYPE_NP)
    return np.where(np.abs(det) < floor, np.where(det < 0.0, -floor, floor), det)


def inv2(m, floor: float = cte.DET_FLOOR):
    """Inverse of 2x2 matrices through the adjugate, with a floored determinant."""
    m = np.asarray(m, dtype=cte.FLOAT_TYPE_NP)
    det = floor_det(det2(m), floor)
    inv = np.empty(m.shape, dtype=cte.FLOAT_TYPE_NP)
    inv[..., 0, 0] = m[..., 1, 1]
    inv[..., 0, 1] = -m[..., 0, 1]
    inv[..., 1, 0] = -m[..., 1, 0]
    inv[..., 1, 1] = m[..., 0, 0]
    return inv / det[..., None, None]


def matvec2(m, v):
    return np.stack(
        [
            m[..., 0, 0] * v[..., 0] + m[..., 0, 1] * v[..., 1],
            m[..., 1, 0] * v[..., 0] + m[..., 1, 1] * v[..., 1],
        ],
        axis=-1,
    )


def outer_cols2(c0, c1):
    """
    J @ J^T for the 2x2 matrix J whose columns are c0 and c1.

    Args:
        c0, c1: Arrays of shape (..., 2)
    """
    out = np.empty(np.broadcast(c0[..., 0], c1[..., 0]).shape + (2, 2), dtype=cte.FLOAT_TYPE_NP)
    out[..., 0, 0] = c0[..., 0] * c0[..., 0] + c1[..., 0] * c1[..., 0]
    out[..., 0, 1] = c0[..., 0] * c0[..., 1] + c1[..., 0] * c1[..., 1]
    out[..., 1, 0] = out[..., 0, 1]
    out[..., 1, 1] = c0[..., 1] * c0[..., 1] + c1[..., 1] * c1[..., 1]
    return out
