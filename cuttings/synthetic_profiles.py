"""
cuttings/synthetic_profiles.py
==============================
Synthetic Downhole Truth Profiles
Drill Cuttings Mixing Model

Builds the hypothetical "known" downhole compositions that the mixing
engines turn into recovered-cuttings observations.  Plots follow those in
IODP Exp 338, 348 and 358 reports.

Scenarios:
  Lithology : background fine silty claystone punctuated by discrete sand
              beds of 1–20 m thickness, then paired silty clay / sand beds.
  Fault     : fault zones marked by cuttings with scaley fabric, loosely
              mimicking IODP Site C0002 (2450–2850 mbsf).  Zones where every
              fragment carries fabric (fabric spacing < cuttings diameter)
              and zones where only 30% do (spacing > cuttings diameter),
              plus a distributed zone of three 3 m shear zones
              (Rowe et al., 2013, Geology).
  Clay wt%  : three 40 m graded beds, high at the top grading to low at the
              base, followed by 10 m and 5 m alternating beds.  Bulk
              averaging follows Exp 358 XRD / XRF methods.

Usage:
    from cuttings.synthetic_profiles import lithology_scenario, graded_beds, Ramp
"""

import warnings
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from cuttings.errors import BedOverlapWarning, ConfigurationError, OutOfRangeError
from cuttings.mixing_kernel import DEPTH_MAX, N_CUTTINGS


# ─────────────────────────────────────────────────────────────────────────────
# CLASS LABELS
# ─────────────────────────────────────────────────────────────────────────────

FINE_SILTY_CLAYSTONE = 1
SILTY_CLAYSTONE      = 2
SANDSTONE            = 3

NO_FAULT_ROCK = 0
SCALEY_FABRIC = 1

# stacking order of the % occurrence bars
LITHOLOGY_CLASSES = {
    SANDSTONE           : 'Sandstone',
    SILTY_CLAYSTONE     : 'Silty Claystone',
    FINE_SILTY_CLAYSTONE: 'Fine Silty Claystone',
}

FAULT_CLASSES = {
    SCALEY_FABRIC: 'Scaley Fabric',
}


# ─────────────────────────────────────────────────────────────────────────────
# EXAMPLE SCENARIO DEFINITIONS   (start_m, end_m inclusive)
# ─────────────────────────────────────────────────────────────────────────────

LITHOLOGY_BEDS = [
    (26,  26,  SANDSTONE),          # 1 m sand bed
    (50,  52,  SANDSTONE),          # 3 m
    (81,  88,  SANDSTONE),          # 8 m
    (116, 130, SANDSTONE),          # 15 m
    (156, 175, SANDSTONE),          # 20 m
    (201, 201, SILTY_CLAYSTONE),    # paired 1 m silty clay / sand
    (202, 202, SANDSTONE),
    (225, 227, SILTY_CLAYSTONE),    # paired 3 m silty clay / sand
    (228, 230, SANDSTONE),
]

# Zones 1–3 each put ~10% fault rock in a 20 m window, zones 4–6 ~30%.
# The 30% zone at 160–179 m is the extent actually applied in the source
# model; its accompanying note reads "20m wide ... from Z=110-113".
FAULT_ZONES = [
    (20,  20,  1.0),
    (50,  51,  1.0),
    (80,  84,  0.3),
    (120, 124, 1.0),
    (160, 179, 0.3),
    (210, 212, 1.0),                # distributed zone: three shear zones
    (220, 222, 1.0),
    (230, 232, 1.0),
]


# ─────────────────────────────────────────────────────────────────────────────
# CONTINUOUS SEGMENTS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Run:
    value : float
    length: int        # m

    def values(self) -> np.ndarray:
        return np.full(self.length, float(self.value))


@dataclass(frozen=True)
class Ramp:
    start : float      # value at the top of the bed
    end   : float      # value at the base
    length: int        # m

    def values(self) -> np.ndarray:
        return np.linspace(self.start, self.end, self.length)


@dataclass(frozen=True)
class Alternating:
    levels  : Sequence[float]
    lengths : Union[int, Sequence[int]]
    repeat  : int = 1

    def run_lengths(self) -> list:
        if np.ndim(self.lengths) == 0:
            return [int(self.lengths)] * len(self.levels)
        return [int(x) for x in self.lengths]

    def values(self) -> np.ndarray:
        one = np.concatenate([np.full(l, float(v))
                              for v, l in zip(self.levels, self.run_lengths())])
        return np.tile(one, self.repeat)


CLAY_WT_PCT_SEGMENTS = [
    Run(12, 23),
    Ramp(12, 8, 40),
    Ramp(14, 7, 40),
    Ramp(17, 4, 40),
    Alternating((4, 17, 3, 13, 8), (20, 10, 10, 10, 10)),     # ~10 m beds
    Alternating((8, 17, 3, 13, 6, 10), (7, 5, 5, 5, 5, 6)),   # ~5 m beds
    Run(10, 14),
]


# ─────────────────────────────────────────────────────────────────────────────
# INTERNAL HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _check_size(value, name: str) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)) \
            or value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def _check_range(start, end, n_depths: int):
    if start > end:
        raise ConfigurationError(f"bed range {start}–{end} m starts deeper than it ends")
    if start < 1 or end > n_depths:
        raise OutOfRangeError(
            f"bed range {start}–{end} m outside model axis [1, {n_depths}]")


def _paint(profile, ranges, n_depths: int, apply):
    """Apply `apply(rows, item)` per range, warning when ranges overlap."""
    painted = np.zeros(n_depths, dtype=bool)
    for item in ranges:
        start, end = item[0], item[1]
        _check_range(start, end, n_depths)
        rows = slice(start - 1, end)
        if painted[rows].any():
            warnings.warn(
                f"range {start}–{end} m overlaps an earlier definition; "
                f"the later one wins",
                BedOverlapWarning, stacklevel=3)
        painted[rows] = True
        apply(rows, item)
    return profile


# ─────────────────────────────────────────────────────────────────────────────
# GENERATORS
# ─────────────────────────────────────────────────────────────────────────────

def discrete_beds(n_depths: int, n: int, background: int,
                  beds) -> np.ndarray:
    """
    Fragment ensembles of a uniform background with discrete beds.

    beds : iterable of (start_m, end_m, label), inclusive, applied in order
           so later beds overwrite earlier ones.

    Returns
    -------
    (n_depths, n) int8 label array
    """
    n_depths = _check_size(n_depths, 'n_depths')
    n        = _check_size(n, 'n')
    profile  = np.full((n_depths, n), background, dtype=np.int8)

    def _set(rows, bed):
        profile[rows, :] = bed[2]

    return _paint(profile, beds, n_depths, _set)


def fault_zones(n_depths: int, n: int, zones,
                label: int = SCALEY_FABRIC) -> np.ndarray:
    """
    Fragment ensembles with fault-fabric zones in unfaulted rock.

    zones : iterable of (start_m, end_m, fraction); the first
            floor(fraction·n) fragments of every depth in the zone get
            `label`.
    """
    n_depths = _check_size(n_depths, 'n_depths')
    n        = _check_size(n, 'n')
    profile  = np.full((n_depths, n), NO_FAULT_ROCK, dtype=np.int8)
    zones    = list(zones)

    for start, end, fraction in zones:
        if not 0.0 <= fraction <= 1.0:
            raise ConfigurationError(
                f"fault fraction for {start}–{end} m must be in [0, 1], got {fraction}")

    def _set(rows, zone):
        k = int(np.floor(zone[2] * n + 1e-9))
        profile[rows, :]  = NO_FAULT_ROCK
        profile[rows, :k] = label

    return _paint(profile, zones, n_depths, _set)


def graded_beds(segments, n_depths: int = None) -> np.ndarray:
    """
    Concatenate Run / Ramp / Alternating segments into a 1 m profile.

    If `n_depths` is given the segments must fill it exactly.
    """
    parts = []
    for seg in segments:
        lengths = seg.run_lengths() if isinstance(seg, Alternating) else [seg.length]
        if isinstance(seg, Alternating):
            if len(lengths) != len(seg.levels):
                raise ConfigurationError(
                    f"{len(seg.levels)} alternating levels but {len(lengths)} lengths")
            _check_size(seg.repeat, 'repeat')
        for l in lengths:
            _check_size(l, 'segment length')
        parts.append(seg.values())

    if not parts:
        raise ConfigurationError("no segments given")
    profile = np.concatenate(parts)
    if n_depths is not None and len(profile) != n_depths:
        raise ConfigurationError(
            f"segments span {len(profile)} m but the model is {n_depths} m deep")
    return profile


# ─────────────────────────────────────────────────────────────────────────────
# EXAMPLE SCENARIOS
# ─────────────────────────────────────────────────────────────────────────────

def lithology_scenario(n: int = N_CUTTINGS, n_depths: int = DEPTH_MAX) -> np.ndarray:
    return discrete_beds(n_depths, n, FINE_SILTY_CLAYSTONE, LITHOLOGY_BEDS)


def fault_scenario(n: int = N_CUTTINGS, n_depths: int = DEPTH_MAX) -> np.ndarray:
    return fault_zones(n_depths, n, FAULT_ZONES)


def clay_wt_pct_scenario(n_depths: int = DEPTH_MAX) -> np.ndarray:
    return graded_beds(CLAY_WT_PCT_SEGMENTS, n_depths)


def generate_all_scenarios(n: int = N_CUTTINGS) -> dict:
    """
    Returns dict of all truth profiles:
        { 'lithology': (D, n), 'fault': (D, n), 'clay': (D,) }
    """
    return {
        'lithology': lithology_scenario(n),
        'fault'    : fault_scenario(n),
        'clay'     : clay_wt_pct_scenario(),
    }
