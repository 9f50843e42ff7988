"""
Integer cell hashing.

Bob Jenkins' lookup3 mixing applied to four 32-bit words, vectorised over
lanes with numpy uint32 arithmetic (wrapping modulo 2^32).
"""

import numpy as np

_U32 = np.uint32


def _rot(x, k):
    """Rotate uint32 lanes left by k bits."""
    return (x << _U32(k)) | (x >> _U32(32 - k))


def _mix(a, b, c):
    a = a - c
    a = a ^ _rot(c, 4)
    c = c + b
    b = b - a
    b = b ^ _rot(a, 6)
    a = a + c
    c = c - b
    c = c ^ _rot(b, 8)
    b = b + a
    a = a - c
    a = a ^ _rot(c, 16)
    c = c + b
    b = b - a
    b = b ^ _rot(a, 19)
    a = a + c
    c = c - b
    c = c ^ _rot(b, 4)
    b = b + a
    return a, b, c


def _final(a, b, c):
    c = c ^ b
    c = c - _rot(b, 14)
    a = a ^ c
    a = a - _rot(c, 11)
    b = b ^ a
    b = b - _rot(a, 25)
    c = c ^ b
    c = c - _rot(b, 16)
    a = a ^ c
    a = a - _rot(c, 4)
    b = b ^ a
    b = b - _rot(a, 14)
    c = c ^ b
    c = c - _rot(b, 24)
    return c


def to_uint32(values) -> np.ndarray:
    """
    Reinterpret integer lanes as unsigned 32-bit words.

    Negative values wrap the way a two's complement cast does, so cell -1
    becomes 0xFFFFFFFF.
    """
    arr = np.atleast_1d(np.asarray(values))
    if arr.dtype.kind == "f":
        arr = np.floor(arr)
    return (arr.astype(np.int64) & 0xFFFFFFFF).astype(np.uint32)


def cell_hash(cx, cy, cz, seed) -> np.ndarray:
    """
    Hash integer cell coordinates and a seed into a 32-bit word per lane.

    Args:
        cx, cy, cz: Integer cell coordinates (scalars or lane arrays)
        seed: Integer seed (scalar or lane array)

    Returns:
        numpy.ndarray of dtype uint32, one hash per lane
    """
    k0, k1, k2, k3 = np.broadcast_arrays(
        to_uint32(cx), to_uint32(cy), to_uint32(cz), to_uint32(seed)
    )
    init = _U32((0xDEADBEEF + (4 << 2) + 13) & 0xFFFFFFFF)
    a = k0 + init
    b = k1 + init
    c = k2 + init
    a, b, c = _mix(a, b, c)
    a = a + k3
    return _final(a, b, c)
