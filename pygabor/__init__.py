"""
pygabor: band-limited, tileable Gabor noise with exact derivatives.

Sub-packages:
- noise: Gabor kernels, per-cell sampling, filtering and batch evaluation
- general_algorithms: cell hash, dual numbers, lane batches, small linear algebra
- cli: command line tools (imported lazily)
"""

__version__ = "0.0.1"

from . import constants
from . import errors
from . import general_algorithms
from . import noise
from .errors import GaborConfigError, GaborLimitError


def __getattr__(name):
    if name == "cli":
        import importlib

        mod = importlib.import_module(".cli", __name__)
        globals()[name] = mod
        return mod
    raise AttributeError(name)


__all__ = [
    "__version__",
    "constants",
    "errors",
    "general_algorithms",
    "noise",
    "cli",
    "GaborConfigError",
    "GaborLimitError",
]
