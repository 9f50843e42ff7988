"""
Exceptions raised by pygabor.
"""


class GaborConfigError(ValueError):
    """Invalid noise configuration, raised before anything is evaluated."""


class GaborLimitError(RuntimeError):
    """An internal iteration limit was hit during evaluation."""
