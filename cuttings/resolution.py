"""
cuttings/resolution.py
======================
Observation Resolution Downsampler
Drill Cuttings Mixing Model

Cuttings are rarely described at every metre.  `downsample` keeps only
the depths a shipboard team would actually sample, counted from the first
valid mixed depth:

    depth ≥ start_depth  and  (depth - start_depth) % stride == 0

Modes:
    'zero-fill' : same shape as the input, unsampled depths set to 0
                  (stacked % occurrence bars)
    'sparse'    : only the sampled depths and their values
                  (point markers on a wt% track)

Usage:
    from cuttings.resolution import downsample
    every_10m          = downsample(mixed_pct, 10, start_depth=20)
    depths, values     = downsample(mixed_wt, 10, mode='sparse', start_depth=20)
"""

import numpy as np
import pandas as pd

from cuttings.errors import ConfigurationError


MODES = ('zero-fill', 'sparse')


def _check_stride(stride) -> int:
    if isinstance(stride, (bool, np.bool_)) or not isinstance(stride, (int, np.integer)):
        raise ConfigurationError(f"stride must be an integer, got {stride!r}")
    if stride <= 0:
        raise ConfigurationError(f"stride must be positive, got {stride}")
    return int(stride)


def sample_mask(depth: np.ndarray, stride: int, start_depth: int = 1) -> np.ndarray:
    """Boolean mask of the depths retained at the given stride."""
    depth = np.asarray(depth)
    return (depth >= start_depth) & ((depth - start_depth) % stride == 0)


def _downsample_frame(df: pd.DataFrame, stride: int, mode: str,
                      start_depth: int) -> pd.DataFrame:
    if 'DEPTH' not in df.columns:
        raise ConfigurationError("DataFrame profiles need a DEPTH column")
    keep = sample_mask(df['DEPTH'].values, stride, start_depth)
    if mode == 'sparse':
        return df.loc[keep].reset_index(drop=True)

    out  = df.copy()
    cols = [c for c in out.columns if c != 'DEPTH']
    out.loc[~keep, cols] = 0.0
    return out


def downsample(profile, stride: int, mode: str = 'zero-fill',
               start_depth: int = 1):
    """
    Simulate observing a mixed profile every `stride` metres.

    Parameters
    ----------
    profile     : 1-D values, 2-D (depth, ...) array, or DataFrame with DEPTH
                  (arrays are indexed so that row d-1 is depth d)
    stride      : observation spacing in metres
    mode        : 'zero-fill' or 'sparse'
    start_depth : first depth with valid mixed data

    Returns
    -------
    zero-fill : copy of `profile` with unsampled depths zeroed
    sparse    : (depths, values) for arrays, the retained rows for DataFrames
    """
    stride = _check_stride(stride)
    if mode not in MODES:
        raise ConfigurationError(f"unknown mode {mode!r}; choose from {list(MODES)}")
    if start_depth < 1:
        raise ConfigurationError(f"start_depth must be ≥ 1, got {start_depth}")

    if isinstance(profile, pd.DataFrame):
        return _downsample_frame(profile, stride, mode, start_depth)

    values = np.asarray(profile)
    if values.ndim not in (1, 2):
        raise ConfigurationError(
            f"profile must be 1-D or 2-D, got shape {values.shape}")

    depth = np.arange(1, values.shape[0] + 1)
    keep  = sample_mask(depth, stride, start_depth)
    if mode == 'sparse':
        return depth[keep], values[keep].copy()

    out = values.copy()
    out[~keep] = 0
    return out
