"""
Dual numbers with explicit derivative slots.

A Dual carries a value array and one derivative array per independent surface
parameter. Every function below applies the chain rule exactly; none of them
rely on operator overloading so the propagation stays visible at the call site.

Shapes:
    scalar lanes: val (B,),   d (K, B)
    vector lanes: val (B, n), d (K, B, n)

Plain numpy arrays can be mixed in through the *_const helpers, which treat them
as constants (zero derivatives).
"""

from dataclasses import dataclass

import numpy as np

from .. import constants as cte


@dataclass(frozen=True)
class Dual:
    """Value paired with its partial derivatives."""

    val: np.ndarray
    d: np.ndarray

    @property
    def nderivs(self) -> int:
        return self.d.shape[0]

    @property
    def shape(self):
        return self.val.shape

    def dx(self, k: int = 0) -> np.ndarray:
        """Derivative with respect to surface parameter k."""
        return self.d[k]


def dual_constant(val, nderivs: int = cte.NDERIVS) -> Dual:
    """Lift a plain array into a Dual with zero derivatives."""
    val = np.asarray(val, dtype=cte.FLOAT_TYPE_NP)
    return Dual(val, np.zeros((nderivs,) + val.shape, dtype=cte.FLOAT_TYPE_NP))


def dual_variable(val, derivs) -> Dual:
    """
    Build a Dual from a value and a sequence of derivative arrays.

    Args:
        val: Value array
        derivs: Sequence of arrays, each of the same shape as val

    Returns:
        Dual
    """
    val = np.asarray(val, dtype=cte.FLOAT_TYPE_NP)
    d = np.stack([np.broadcast_to(np.asarray(x, dtype=cte.FLOAT_TYPE_NP), val.shape) for x in derivs])
    return Dual(val, d)


def lift(x, nderivs: int = cte.NDERIVS, shape=None) -> Dual:
    """
    Return x unchanged if it is already a Dual, else a constant Dual.

    When shape is given the constant is broadcast to it, so scalars can be
    combined with lane Duals.
    """
    if isinstance(x, Dual):
        return x
    if shape is not None:
        x = np.broadcast_to(np.asarray(x, dtype=cte.FLOAT_TYPE_NP), tuple(shape))
    return dual_constant(x, nderivs)


def dual_zeros(shape, nderivs: int = cte.NDERIVS) -> Dual:
    shape = tuple(shape)
    return Dual(
        np.zeros(shape, dtype=cte.FLOAT_TYPE_NP),
        np.zeros((nderivs,) + shape, dtype=cte.FLOAT_TYPE_NP),
    )


# -- Arithmetic ------------------------------------------------------------

def dual_add(a: Dual, b: Dual) -> Dual:
    return Dual(a.val + b.val, a.d + b.d)


def dual_sub(a: Dual, b: Dual) -> Dual:
    return Dual(a.val - b.val, a.d - b.d)


def dual_neg(a: Dual) -> Dual:
    return Dual(-a.val, -a.d)


def dual_mul(a: Dual, b: Dual) -> Dual:
    """Product rule: (ab)' = a'b + ab'."""
    return Dual(a.val * b.val, a.d * b.val + a.val * b.d)


def dual_div(a: Dual, b: Dual) -> Dual:
    """Quotient rule: (a/b)' = (a'b - ab') / b^2."""
    inv = 1.0 / b.val
    return Dual(a.val * inv, (a.d * b.val - a.val * b.d) * (inv * inv))


def dual_add_const(a: Dual, c) -> Dual:
    """a + c for a constant array c."""
    return Dual(a.val + c, a.d)


def dual_scale(a: Dual, s) -> Dual:
    """a * s for a constant array s broadcastable against a.val."""
    return Dual(a.val * s, a.d * s)


# -- Elementary functions ----------------------------------------------------

def dual_exp(a: Dual) -> Dual:
    e = np.exp(a.val)
    return Dual(e, a.d * e)


def dual_cos(a: Dual) -> Dual:
    return Dual(np.cos(a.val), -np.sin(a.val) * a.d)


def dual_sqrt(a: Dual) -> Dual:
    """Square root; derivatives are zero where the value is zero."""
    s = np.sqrt(a.val)
    safe = np.where(s > 0.0, s, 1.0)
    return Dual(s, np.where(s > 0.0, a.d / (2.0 * safe), 0.0))


# -- Vector helpers ------------------------------------------------------------

def dual_dot(a: Dual, b: Dual) -> Dual:
    """Dot product over the last axis of two vector Duals."""
    return Dual(
        np.sum(a.val * b.val, axis=-1),
        np.sum(a.d * b.val + a.val * b.d, axis=-1),
    )


def dual_dot_const(a: Dual, c) -> Dual:
    """Dot product of a vector Dual with a constant vector array."""
    c = np.asarray(c)
    return Dual(np.sum(a.val * c, axis=-1), np.sum(a.d * c, axis=-1))


def dual_component(a: Dual, i: int) -> Dual:
    return Dual(a.val[..., i], a.d[..., i])


def dual_stack(parts) -> Dual:
    """Stack scalar Duals into a vector Dual along a new last axis."""
    return Dual(
        np.stack([p.val for p in parts], axis=-1),
        np.stack([p.d for p in parts], axis=-1),
    )


def dual_matvec_const(m, a: Dual) -> Dual:
    """
    Multiply a vector Dual by a constant matrix per lane.

    Args:
        m: Matrix array of shape (n, n) or (B, n, n)
        a: Vector Dual with val (B, n)

    Returns:
        Vector Dual m @ a
    """
    m = np.asarray(m)
    val = (m @ a.val[..., None])[..., 0]
    d = (m @ a.d[..., None])[..., 0]
    return Dual(val, d)


def dual_where(mask, a: Dual, b: Dual) -> Dual:
    """Lane select: a where mask is True, b elsewhere."""
    mask = np.asarray(mask)
    mask_v = mask.reshape(mask.shape + (1,) * (a.val.ndim - mask.ndim))
    return Dual(np.where(mask_v, a.val, b.val), np.where(mask_v, a.d, b.d))
