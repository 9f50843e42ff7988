"""
Gabor noise module for pygabor.

Sparse convolution noise built from randomly placed, randomly oriented
harmonic-Gaussian kernels. Kernels are regenerated on demand from a per-cell
random process, so evaluation is a pure function of its inputs.

Features:
- Isotropic, anisotropic and hybrid kernel orientations
- Exact first derivatives through dual numbers
- Closed-form Gaussian prefiltering for antialiasing
- Per-axis tiling
- Lock-step evaluation over fixed-width lane batches

Usage:
    import pygabor as pg

    params = pg.noise.NoiseParams(bandwidth=1.0, impulses=16, seed=42)

    # Point evaluation with derivatives
    value = pg.noise.gabor(positions, params)

    # Raster generation
    img = pg.noise.gabor_noise(256, 256, spacing=0.02, params=params)

    # Tileable, antialiased, anisotropic
    params = pg.noise.NoiseParams(anisotropic=1, direction=(1, 1, 0),
                                  filtered=True, period=(5.12, 5.12, 0))
    img = pg.noise.gabor_noise(256, 256, spacing=0.02, params=params)
"""

from .params import NoiseParams, Orientation, GaborSetup, build_setup
from .rng import CellRNG
from .kernel import gabor_kernel, slice_gabor_kernel_3d, filter_gabor_kernel_2d
from .periodic import wrap, wrap_cells
from .filtering import FilterFrame, setup_filter_frame
from .cell import gabor_cell, gabor_grid
from .evaluator import GaborEvaluator, Variant, as_position, gabor, gabor3
from .statistics import predicted_variance, sample_moments
from .gabor_noise import gabor_noise, grid_positions

__all__ = [
    "NoiseParams", "Orientation", "GaborSetup", "build_setup",
    "CellRNG",
    "gabor_kernel", "slice_gabor_kernel_3d", "filter_gabor_kernel_2d",
    "wrap", "wrap_cells",
    "FilterFrame", "setup_filter_frame",
    "gabor_cell", "gabor_grid",
    "GaborEvaluator", "Variant", "as_position", "gabor", "gabor3",
    "predicted_variance", "sample_moments",
    "gabor_noise", "grid_positions",
]
