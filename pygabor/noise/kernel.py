"""
Gabor kernel evaluation, slicing and analytic filtering.

The Gabor kernel is a cosine harmonic modulated by a Gaussian envelope, with a
random phase per [Lagae et al. 2011]:

    g(x) = w * exp(-pi a^2 |x|^2) * cos(2 pi <omega, x> + phi)

slice_gabor_kernel_3d integrates a 3D kernel against the surface plane to get
an equivalent 2D kernel, and filter_gabor_kernel_2d convolves a 2D kernel with
a Gaussian filter in closed form [Lagae et al. 2009, eq. 10].

All functions work on lanes. Quantities that carry derivatives are Duals, the
rest are plain numpy arrays.
"""

import numpy as np

from .. import constants as cte
from ..general_algorithms import linalg
from ..general_algorithms.dual import (
    Dual,
    dual_add,
    dual_cos,
    dual_dot,
    dual_dot_const,
    dual_exp,
    dual_mul,
    dual_scale,
    lift,
)

TWO_PI = 2.0 * np.pi


def gabor_kernel(weight, omega, phi, a, x: Dual) -> Dual:
    """
    Evaluate the harmonic-Gaussian kernel at x.

    Args:
        weight: Kernel weight (Dual or array broadcastable to the lanes)
        omega: Frequency vector, array of shape (B, n) or (n,)
        phi: Phase (Dual or array)
        a: Gaussian width (scalar or per lane)
        x: Position relative to the kernel centre, vector Dual (B, n)

    Returns:
        Scalar Dual of shape (B,)
    """
    k = x.nderivs
    lanes = x.val.shape[:-1]
    a = np.asarray(a, dtype=cte.FLOAT_TYPE_NP)
    g = dual_exp(dual_scale(dual_dot(x, x), -np.pi * a * a))
    h = dual_cos(dual_add(dual_scale(dual_dot_const(x, omega), TWO_PI), lift(phi, k, lanes)))
    return dual_mul(dual_mul(lift(weight, k, lanes), g), h)


def slice_gabor_kernel_3d(d: Dual, w, a, omega, phi):
    """
    Slice a 3D kernel to a 2D one at signed distance d from its centre.

    w' = w exp(-pi a^2 d^2), omega' = (omega.x, omega.y),
    phi' = phi - 2 pi d omega.x

    Args:
        d: Signed distance along the sliced axis, scalar Dual (B,)
        w: Kernel weight (array or Dual)
        a: Gaussian width
        omega: 3D frequency, array (B, 3)
        phi: Phase (array or Dual)

    Returns:
        (w_s, omega_s, phi_s) with w_s and phi_s Duals and omega_s (B, 2)
    """
    k = d.nderivs
    w_s = dual_mul(lift(w, k, d.shape), dual_exp(dual_scale(dual_mul(d, d), -np.pi * a * a)))
    omega_s = np.asarray(omega)[..., :2]
    phi_s = dual_add(lift(phi, k, d.shape), dual_scale(d, -TWO_PI * np.asarray(omega)[..., 0]))
    return w_s, omega_s, phi_s


def filter_gabor_kernel_2d(filter_cov, w, a, omega, phi):
    """
    Convolve a 2D Gabor kernel with a Gaussian filter in closed form.

    In the frequency domain the kernel is a Gaussian of covariance
    Sigma_G = a^2 / (2 pi) I centred on omega, and a spatial Gaussian filter of
    covariance S has the transfer function exp(-1/2 w^T P w) with
    P = 4 pi^2 S. Their product is again a Gaussian:

        Sigma_GF = (Sigma_G^-1 + P)^-1
        omega_f  = Sigma_GF Sigma_G^-1 omega
        w_f      = w / sqrt(det(I + Sigma_G P))
                     * exp(-1/2 omega^T (Sigma_G + P^-1)^-1 omega)
        a_f      = sqrt(2 pi sqrt(det Sigma_GF))

    (Sigma_G + P^-1)^-1 is evaluated as P (I + Sigma_G P)^-1 so S itself is
    never inverted; S = 0 gives back w, a, omega unchanged. The phase is not
    affected by filtering.

    Args:
        filter_cov: Filter covariance, array (2, 2) or (B, 2, 2)
        w: Kernel weight (Dual or array)
        a: Gaussian width
        omega: 2D frequency, array (B, 2)
        phi: Phase (Dual or array)

    Returns:
        (w_f, a_f, omega_f, phi_f)
    """
    omega = np.asarray(omega, dtype=cte.FLOAT_TYPE_NP)
    a = np.asarray(a, dtype=cte.FLOAT_TYPE_NP)
    sigma_g = (a * a / TWO_PI) * np.ones(omega.shape[:-1])
    p = (4.0 * np.pi * np.pi) * np.asarray(filter_cov, dtype=cte.FLOAT_TYPE_NP)

    eye = linalg.identity2()
    precision = p + (1.0 / sigma_g)[..., None, None] * eye
    sigma_gf = linalg.inv2(precision)
    omega_f = linalg.matvec2(sigma_gf, omega / sigma_g[..., None])

    i_gp = eye + sigma_g[..., None, None] * p
    det_i_gp = linalg.floor_det(linalg.det2(i_gp))
    quad = linalg.dot(omega, linalg.matvec2(p, linalg.matvec2(linalg.inv2(i_gp), omega)))
    amplitude = np.exp(-0.5 * quad) / np.sqrt(det_i_gp)

    k = w.nderivs if isinstance(w, Dual) else cte.NDERIVS
    w_f = dual_scale(lift(w, k, sigma_g.shape), amplitude)
    det_gf = np.maximum(linalg.det2(sigma_gf), 0.0)
    a_f = np.sqrt(TWO_PI * np.sqrt(det_gf))
    return w_f, a_f, omega_f, lift(phi, k, sigma_g.shape)
