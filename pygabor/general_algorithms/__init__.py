"""
General numerical building blocks for pygabor.

- hashing: integer cell hash (lookup3 mixing)
- dual: dual numbers with explicit derivative slots
- lanes: fixed-width lane batches (load/store)
- linalg: vec3 and 2x2 matrix helpers, orthonormal basis construction
"""

from .hashing import cell_hash, to_uint32
from .dual import (
    Dual,
    dual_constant,
    dual_variable,
    lift,
)
from .lanes import lane_blocks, load, store
from .linalg import make_orthonormals, inv2, det2

__all__ = [
    "cell_hash",
    "to_uint32",
    "Dual",
    "dual_constant",
    "dual_variable",
    "lift",
    "lane_blocks",
    "load",
    "store",
    "make_orthonormals",
    "inv2",
    "det2",
]
