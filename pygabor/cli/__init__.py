"""
Command Line Interface for pygabor

Available Commands:
- gabor2png: Render a Gabor noise raster to PNG
- gabor_stats: Compare sampled moments with the closed-form variance
"""

_CLI_SUBMODULES = {
    "gabor2png": (".gabor2png_commands", "gabor2png"),
    "gabor_stats": (".stats_commands", "gabor_stats"),
}

__all__ = list(_CLI_SUBMODULES.keys())


def __getattr__(name):
    info = _CLI_SUBMODULES.get(name)
    if info is None:
        raise AttributeError(name)
    pkg, attr = info
    import importlib
    mod = importlib.import_module(pkg, __package__)
    obj = getattr(mod, attr)
    globals()[name] = obj
    return obj
