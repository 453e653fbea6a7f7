"""
cuttings/errors.py
==================
Exceptions and warnings raised by the cuttings mixing model.

Every error is raised at the call that detects it; nothing is recovered
silently.
"""


class MixingModelError(Exception):
    """Base class for all mixing model errors."""


class ConfigurationError(MixingModelError, ValueError):
    """Bad model parameters: window length, ensemble size, bed/zone ranges."""


class InsufficientPopulationError(MixingModelError, ValueError):
    """A without-replacement draw asks for more fragments than a depth holds."""


class OutOfRangeError(MixingModelError, IndexError):
    """Depth outside the model axis, or shallower than a full mixing window."""


class BedOverlapWarning(RuntimeWarning):
    """Two bed definitions overlap; the later one wins."""
