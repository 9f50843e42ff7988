"""
Numerical constants shared by the Gabor noise modules.
"""

import numpy as np

# Floating point type used for every lane array
FLOAT_TYPE_NP = np.float64

# Number of independent surface parameters carried by dual values
NDERIVS = 2

# Default number of lanes evaluated in lock-step
DEFAULT_LANE_WIDTH = 16

# Frequency used to turn a bandwidth in octaves into the Gaussian width 'a'
GABOR_FREQUENCY = 2.0

# Magnitude of every impulse (the sign is drawn per kernel)
IMPULSE_WEIGHT = 1.0

# Envelope fraction of the peak below which a kernel is ignored
GABOR_TRUNCATE = 0.02

# Bandwidth (octaves) and impulse count clamps
BANDWIDTH_MIN = 0.01
BANDWIDTH_MAX = 100.0
IMPULSES_MIN = 1.0
IMPULSES_MAX = 32.0
DEFAULT_IMPULSES = 16.0

# Per-cell generator: Borosh-Niederreiter multiplier
RNG_MULTIPLIER = 3039177861
UINT_MAX = 0xFFFFFFFF

# Seeds must fit a 32-bit word, signed or unsigned
SEED_MIN = -(2 ** 31)
SEED_MAX = 2 ** 32 - 1

# Hard cap on Poisson sampling iterations
POISSON_MAX_ITERATIONS = 1024

# Determinants are floored to this before any 2x2 inversion
DET_FLOOR = 1.0e-18

# |dP/dx x dP/dy|^2 below this means no usable tangent frame
DEGENERATE_NORMAL_EPS = 1.0e-6
