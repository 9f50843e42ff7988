"""
Per-cell random number generation.

Each lattice cell owns a tiny multiplicative congruential generator seeded from
the hash of its integer coordinates and a global seed [Borosh & Niederreiter
1983]. The same (cell, seed) pair always replays the same sequence, which is
what lets kernels be regenerated on demand instead of stored.

The generator works on lanes: every method takes an optional boolean mask and
only advances the lanes where it is True, so a lane's sequence does not depend
on what the other lanes in its batch are doing.
"""

import numpy as np

from .. import constants as cte
from ..errors import GaborLimitError
from ..general_algorithms.hashing import cell_hash

_MULT = np.uint32(cte.RNG_MULTIPLIER)


class CellRNG:
    """
    Lane-parallel uniform/Poisson sampler seeded per lattice cell.

    Args:
        cell: Integer cell coordinates, shape (3,) or (B, 3)
        seed: Integer seed (scalar or per lane)
    """

    def __init__(self, cell, seed=0):
        cell = np.asarray(cell)
        state = cell_hash(cell[..., 0], cell[..., 1], cell[..., 2], seed)
        # zero is a fixed point of the multiplicative update
        self.state = np.where(state == 0, np.uint32(1), state).astype(np.uint32)

    @property
    def width(self) -> int:
        return self.state.shape[0]

    def next(self, mask=None) -> np.ndarray:
        """
        Draw one uniform value in [0, 1) per lane.

        Args:
            mask: Optional boolean lane mask; lanes where it is False keep
                  their state (their returned value is meaningless)

        Returns:
            numpy.ndarray of float64, one value per lane
        """
        new_state = self.state * _MULT
        if mask is None:
            self.state = new_state
        else:
            self.state = np.where(mask, new_state, self.state)
        return new_state.astype(cte.FLOAT_TYPE_NP) / float(cte.UINT_MAX)

    def poisson(self, mean, mask=None, max_iterations: int = cte.POISSON_MAX_ITERATIONS) -> np.ndarray:
        """
        Draw a Poisson-distributed count per lane (Knuth's product method).

        Lanes with a mean of 0 return 0 without consuming a draw.

        Args:
            mean: Poisson mean (scalar or per lane, >= 0)
            mask: Optional boolean lane mask; masked-out lanes return 0 and
                  consume nothing
            max_iterations: Hard iteration cap

        Returns:
            numpy.ndarray of int64 counts

        Raises:
            GaborLimitError: if a lane is still running after max_iterations
        """
        mean = np.broadcast_to(np.asarray(mean, dtype=cte.FLOAT_TYPE_NP), self.state.shape)
        active = mean > 0.0
        if mask is not None:
            active = active & mask
        counts = np.zeros(self.state.shape, dtype=np.int64)
        if not active.any():
            return counts

        g = np.exp(-mean)
        t = self.next(active)
        running = active & (t > g)
        iterations = 0
        while running.any():
            if iterations >= max_iterations:
                raise GaborLimitError(
                    f"Poisson sampling exceeded {max_iterations} iterations (mean={float(mean.max())})"
                )
            counts += running
            t = np.where(running, t * self.next(running), t)
            running = running & (t > g)
            iterations += 1
        return counts
