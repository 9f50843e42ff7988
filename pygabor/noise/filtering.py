"""
Per-lane filter frames for the anisotropic projector.

The surface is described by the position derivatives dP/dx and dP/dy. Their
cross product is the normal used to slice 3D kernels; the orthonormal basis
around it gives the tangent plane the filtered 2D kernels live in. When no
covariance is configured, the filter is the pixel footprint J J^T, with J the
screen-to-tangent Jacobian.
"""

from dataclasses import dataclass

import numpy as np

from .. import constants as cte
from ..general_algorithms import linalg
from ..general_algorithms.dual import Dual


@dataclass(frozen=True)
class FilterFrame:
    """
    Slice/filter frame for a batch of lanes.

    Attributes:
        normal, tangent, bitangent: Unit vectors, arrays (B, 3)
        covariance: Tangent-space filter covariance, array (B, 2, 2)
        usable: Boolean mask of the lanes the filtered kernel applies to
    """

    normal: np.ndarray
    tangent: np.ndarray
    bitangent: np.ndarray
    covariance: np.ndarray
    usable: np.ndarray

    def to_tangent(self, v):
        """Components of constant vectors v (B, 3) along tangent and bitangent."""
        return np.stack([linalg.dot(self.tangent, v), linalg.dot(self.bitangent, v)], axis=-1)


def surface_derivatives(position: Dual):
    """dP/dx and dP/dy of a vector Dual; zero when fewer than two slots exist."""
    zeros = np.zeros_like(position.val)
    dpdx = position.d[0] if position.nderivs > 0 else zeros
    dpdy = position.d[1] if position.nderivs > 1 else zeros
    return dpdx, dpdy


def setup_filter_frame(position: Dual, filter_covariance=None) -> FilterFrame:
    """
    Build the filter frame of every lane in a batch.

    Args:
        position: Vector Dual of shape (B, 3)
        filter_covariance: Optional fixed 2x2 covariance for all lanes

    Returns:
        FilterFrame

    Lanes whose derivatives are degenerate (|dP/dx x dP/dy|^2 < 1e-6) have no
    frame of their own. With a fixed covariance they use the xy-plane frame and
    stay usable; with a footprint covariance they are flagged unusable.
    """
    dpdx, dpdy = surface_derivatives(position)
    n = linalg.cross(dpdx, dpdy)
    has_frame = linalg.dot(n, n) >= cte.DEGENERATE_NORMAL_EPS

    z_axis = np.broadcast_to(np.array([0.0, 0.0, 1.0]), n.shape)
    n = np.where(has_frame[..., None], n, z_axis)
    normal, tangent, bitangent = linalg.make_orthonormals(n)

    if filter_covariance is not None:
        cov = np.broadcast_to(
            np.asarray(filter_covariance, dtype=cte.FLOAT_TYPE_NP), n.shape[:-1] + (2, 2)
        )
        usable = np.ones(n.shape[:-1], dtype=bool)
    else:
        j_x = np.stack([linalg.dot(tangent, dpdx), linalg.dot(bitangent, dpdx)], axis=-1)
        j_y = np.stack([linalg.dot(tangent, dpdy), linalg.dot(bitangent, dpdy)], axis=-1)
        cov = linalg.outer_cols2(j_x, j_y)
        usable = has_frame

    return FilterFrame(
        normal=normal,
        tangent=tangent,
        bitangent=bitangent,
        covariance=cov,
        usable=usable,
    )
