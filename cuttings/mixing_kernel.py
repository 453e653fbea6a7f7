"""
cuttings/mixing_kernel.py
=========================
Linear Vertical Mixing Kernel
Drill Cuttings Mixing Model

Cuttings recovered at depth x are a blend of material generated over the
interval (x - v, x].  Contributions decay linearly uphole, from a maximum
at the base of the interval (in-situ material) to zero at its top:

    ∫ from (x - v) to x of  m·dx  = 1

where v is the vertical mixing interval and m the linear mixing gradient.
Sampled at v whole metres this gives  K = linspace(0, 2/v, v).

Usage:
    from cuttings.mixing_kernel import build_kernel, draw_counts
    K      = build_kernel(20)
    counts = draw_counts(K, n=10000)    # fragments pulled from each depth
"""

import numpy as np

from cuttings.errors import ConfigurationError


# ─────────────────────────────────────────────────────────────────────────────
# MODEL PARAMETERS
# ─────────────────────────────────────────────────────────────────────────────

DEPTH_MAX    = 250      # total model depth (m), depths 1..DEPTH_MAX
MIX_INTERVAL = 20       # interval over which mixing occurs (m)
N_CUTTINGS   = 10000    # simulated fragments produced at each depth
DEFAULT_SEED = 12345


# ─────────────────────────────────────────────────────────────────────────────
# KERNEL
# ─────────────────────────────────────────────────────────────────────────────

def _check_positive_int(value, name: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return int(value)


def build_kernel(window_length: int = MIX_INTERVAL) -> np.ndarray:
    """
    Linear mixing kernel over `window_length` depths.

    K[0] is the shallowest depth of the window (weight 0), K[-1] the
    current depth (weight 2/v).  The weights sum to 1.

    Parameters
    ----------
    window_length : mixing interval v in metres (positive integer)

    Returns
    -------
    K : float ndarray of shape (window_length,)
    """
    v = _check_positive_int(window_length, 'window_length')
    if v == 1:
        return np.ones(1)
    return np.linspace(0.0, 2.0 / v, v)


def draw_counts(kernel: np.ndarray, n: int = N_CUTTINGS) -> np.ndarray:
    """
    Number of fragments drawn from each depth of the window.

    round(K·n), halves rounded away from zero.  For the documented
    20 m kernel and n = 10000 the counts add up to exactly n.
    """
    n = _check_positive_int(n, 'n')
    kernel = np.asarray(kernel, dtype=float)
    if kernel.ndim != 1 or kernel.size == 0:
        raise ConfigurationError(f"kernel must be a non-empty 1-D array, got shape {kernel.shape}")
    if np.any(kernel < 0):
        raise ConfigurationError("kernel weights must be non-negative")
    counts = np.floor(kernel * n + 0.5).astype(int)
    if counts.sum() == 0:
        raise ConfigurationError(
            f"n={n} is too small for a {kernel.size} m window: every draw rounds to 0")
    return counts
