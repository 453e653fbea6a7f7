"""
cuttings/mixing_engine.py
=========================
Vertical Mixing Engines
Drill Cuttings Mixing Model

Implements:
    Categorical mixing   : weighted random resampling of fragment ensembles
                           (lithology classes, fault-fabric presence)
    Continuous mixing    : kernel-weighted sum of a scalar profile
                           (bulk wt% from XRF / XRD on amalgamated cuttings)
    Percent occurrence   : per-depth class percentages of an ensemble
    Scenario runner      : truth → mixed → 1 m / 10 m observations for the
                           three example scenarios

Depth d lives in row d-1.  Mixed values only exist from the first depth
with a full window above it (d ≥ v); shallower categorical rows stay zero
and shallower continuous values are NaN.

Usage:
    from cuttings.mixing_engine import CuttingsMixingModel
    model   = CuttingsMixingModel(seed=7)
    results = model.run()
"""

import numpy as np
import pandas as pd
from scipy.signal import convolve

from cuttings.errors import ConfigurationError, InsufficientPopulationError, OutOfRangeError
from cuttings.mixing_kernel import (
    DEPTH_MAX, MIX_INTERVAL, N_CUTTINGS, DEFAULT_SEED,
    build_kernel, draw_counts,
)
from cuttings.resolution import downsample
from cuttings.synthetic_profiles import (
    LITHOLOGY_CLASSES, FAULT_CLASSES,
    lithology_scenario, fault_scenario, clay_wt_pct_scenario,
)


# ─────────────────────────────────────────────────────────────────────────────
# VALIDATION HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _as_ensemble(truth) -> np.ndarray:
    truth = np.asarray(truth)
    if truth.ndim != 2 or truth.shape[1] == 0:
        raise ConfigurationError(
            f"categorical truth must be a (depth, n) array, got shape {truth.shape}")
    return truth


def _check_window(kernel, n_depths: int) -> int:
    v = len(kernel)
    if v == 0:
        raise ConfigurationError("kernel is empty")
    if v > n_depths:
        raise ConfigurationError(
            f"mixing interval ({v} m) exceeds the model depth ({n_depths} m)")
    return v


def _check_depth(depth: int, v: int, n_depths: int):
    if depth < 1 or depth > n_depths:
        raise OutOfRangeError(f"depth {depth} outside model axis [1, {n_depths}]")
    if depth < v:
        raise OutOfRangeError(
            f"depth {depth} has no full {v} m mixing window above it "
            f"(first mixed depth is {v})")


def _check_population(counts: np.ndarray, available: int):
    worst = int(counts.max())
    if worst > available:
        k = int(np.argmax(counts))
        raise InsufficientPopulationError(
            f"kernel position {k} draws {worst} fragments but each depth only "
            f"holds {available}")


# ─────────────────────────────────────────────────────────────────────────────
# CATEGORICAL MIXING
# ─────────────────────────────────────────────────────────────────────────────

def _pull_cuttings(truth, depth, counts, rng) -> np.ndarray:
    v     = len(counts)
    rows  = range(depth - v, depth)
    draws = [rng.choice(truth[r], size=c, replace=False)
             for r, c in zip(rows, counts)]
    return np.concatenate(draws)


def mix_depth_categorical(truth, kernel, depth: int,
                          counts: np.ndarray = None,
                          rng=DEFAULT_SEED) -> np.ndarray:
    """
    Mixed cuttings ensemble recovered at a single depth.

    `counts[k]` fragments are drawn without replacement from depth
    depth - v + 1 + k.  Pass a shared `np.random.Generator` when calling
    this in a loop; an integer seed restarts the stream on every call.
    """
    truth    = _as_ensemble(truth)
    n_depths = truth.shape[0]
    v        = _check_window(kernel, n_depths)
    _check_depth(depth, v, n_depths)

    counts = draw_counts(kernel, truth.shape[1]) if counts is None \
        else np.asarray(counts, dtype=int)
    if len(counts) != v:
        raise ConfigurationError(
            f"{len(counts)} draw counts given for a {v} m kernel")
    _check_population(counts, truth.shape[1])

    return _pull_cuttings(truth, depth, counts, np.random.default_rng(rng))


def mix_categorical(truth, kernel, n: int = None,
                    rng=DEFAULT_SEED) -> np.ndarray:
    """
    Simulate recovered cuttings at every depth of a categorical profile.

    Parameters
    ----------
    truth  : (depth, n_truth) label array, the fragments produced downhole
    kernel : mixing kernel from build_kernel()
    n      : fragments per recovered sample (default n_truth);
             draw counts are round(K·n)
    rng    : integer seed or np.random.Generator

    Returns
    -------
    mixed : (depth, sum(counts)) label array; rows above the first full
            window are left at 0
    """
    truth    = _as_ensemble(truth)
    n_depths = truth.shape[0]
    v        = _check_window(kernel, n_depths)
    counts   = draw_counts(kernel, truth.shape[1] if n is None else n)
    _check_population(counts, truth.shape[1])

    rng   = np.random.default_rng(rng)
    mixed = np.zeros((n_depths, int(counts.sum())), dtype=truth.dtype)
    for depth in range(v, n_depths + 1):
        mixed[depth - 1] = _pull_cuttings(truth, depth, counts, rng)
    return mixed


def percent_by_class(ensemble, classes) -> dict:
    """% of fragments in `ensemble` carrying each label in `classes`."""
    ensemble = np.asarray(ensemble).ravel()
    if ensemble.size == 0:
        raise ConfigurationError("cannot tabulate an empty ensemble")
    return {c: np.count_nonzero(ensemble == c) * 100.0 / ensemble.size
            for c in classes}


def percent_profile(profile, class_names: dict,
                    start_depth: int = 1) -> pd.DataFrame:
    """
    Tabulate % occurrence of each class at every depth.

    Row-wise percent_by_class().  Returns a DataFrame with DEPTH plus one
    column per class name (in the order of `class_names`).  Depths above
    `start_depth` are NaN.
    """
    profile = _as_ensemble(profile)
    depth   = np.arange(1, profile.shape[0] + 1)
    rows    = [percent_by_class(row, class_names) for row in profile]

    df = pd.DataFrame({'DEPTH': depth})
    for label, name in class_names.items():
        df[name] = [pct[label] for pct in rows]
    df.loc[df['DEPTH'] < start_depth, list(class_names.values())] = np.nan
    return df


# ─────────────────────────────────────────────────────────────────────────────
# CONTINUOUS MIXING
# ─────────────────────────────────────────────────────────────────────────────

def mix_depth_continuous(truth, kernel, depth: int) -> float:
    """Kernel-weighted composition of the window ending at `depth`."""
    truth = np.asarray(truth, dtype=float)
    v     = _check_window(kernel, len(truth))
    _check_depth(depth, v, len(truth))
    return float(np.dot(truth[depth - v:depth], kernel))


def mix_continuous(truth, kernel) -> np.ndarray:
    """
    Bulk-averaged composition of recovered cuttings at every depth.

        mixed[i] = Σ_k truth[i-v+k] · K[k]

    The expectation of the categorical resampling, evaluated as a
    discrete convolution.  Depths above the first full window are NaN.
    """
    truth = np.asarray(truth, dtype=float)
    if truth.ndim != 1:
        raise ConfigurationError(
            f"continuous truth must be 1-D, got shape {truth.shape}")
    kernel = np.asarray(kernel, dtype=float)
    v      = _check_window(kernel, len(truth))

    mixed        = np.full(len(truth), np.nan)
    mixed[v - 1:] = convolve(truth, kernel[::-1], mode='valid', method='direct')
    return mixed


# ─────────────────────────────────────────────────────────────────────────────
# SCENARIO RUNNER
# ─────────────────────────────────────────────────────────────────────────────

SCENARIOS = ('lithology', 'fault', 'clay')

# independent random streams per scenario so run order does not matter
_STREAM_KEYS = {'lithology': 1, 'fault': 2}


class CuttingsMixingModel:
    """
    Runs the example truth scenarios through the vertical mixing model.

    Parameters
    ----------
    interval : mixing interval v (m)
    n        : fragments produced per depth
    seed     : base seed for the categorical draws
    strides  : observation spacings (m) to report, e.g. (1, 10)
    verbose  : print progress
    """

    def __init__(self,
                 interval: int   = MIX_INTERVAL,
                 n       : int   = N_CUTTINGS,
                 seed    : int   = DEFAULT_SEED,
                 strides : tuple = (1, 10),
                 verbose : bool  = False):
        self.n_depths = DEPTH_MAX
        self.interval = interval
        self.n        = n
        self.seed     = seed
        self.strides  = tuple(strides)
        self.verbose  = verbose
        self._built   = False

    # ── Kernel ───────────────────────────────────────────────────────────

    def _setup(self):
        self.kernel = build_kernel(self.interval)
        _check_window(self.kernel, self.n_depths)
        self.counts = draw_counts(self.kernel, self.n)
        self.depth  = np.arange(1, self.n_depths + 1)
        if self.verbose:
            print(f"     kernel : {self.interval} m linear ramp, "
                  f"{self.counts.sum()} fragments per sample")
        self._built = True

    def _rng(self, scenario: str) -> np.random.Generator:
        return np.random.default_rng([self.seed, _STREAM_KEYS[scenario]])

    # ── Categorical scenarios ────────────────────────────────────────────

    def _categorical(self, scenario: str, truth: np.ndarray,
                     class_names: dict) -> dict:
        if not self._built:
            self._setup()

        mixed     = mix_categorical(truth, self.kernel, n=self.n,
                                    rng=self._rng(scenario))
        truth_pct = percent_profile(truth, class_names)
        mixed_pct = percent_profile(mixed, class_names,
                                    start_depth=self.interval)
        observed  = {s: downsample(mixed_pct, s, start_depth=self.interval)
                     for s in self.strides}
        if self.verbose:
            print(f"     {scenario:<10}: mixed {len(self.depth) - self.interval + 1} depths")

        return {
            'scenario'   : scenario,
            'kind'       : 'categorical',
            'truth'      : truth,
            'mixed'      : mixed,
            'truth_pct'  : truth_pct,
            'mixed_pct'  : mixed_pct,
            'observed'   : observed,
            'class_names': dict(class_names),
            'interval'   : self.interval,
        }

    def lithology(self) -> dict:
        """Discrete sand / silty clay beds in fine silty claystone."""
        truth = lithology_scenario(self.n, self.n_depths)
        return self._categorical('lithology', truth, LITHOLOGY_CLASSES)

    def fault(self) -> dict:
        """Fault zones of varying thickness and scaley-fabric density."""
        truth = fault_scenario(self.n, self.n_depths)
        return self._categorical('fault', truth, FAULT_CLASSES)

    # ── Continuous scenario ──────────────────────────────────────────────

    def clay_wt_pct(self) -> dict:
        """Graded and alternating beds of total clay wt%."""
        if not self._built:
            self._setup()

        truth    = clay_wt_pct_scenario(self.n_depths)
        mixed    = mix_continuous(truth, self.kernel)
        observed = {s: downsample(mixed, s, mode='sparse',
                                  start_depth=self.interval)
                    for s in self.strides}
        if self.verbose:
            print(f"     {'clay':<10}: wt% range {np.nanmin(mixed):.2f}"
                  f"–{np.nanmax(mixed):.2f} after mixing")

        return {
            'scenario': 'clay',
            'kind'    : 'continuous',
            'depth'   : self.depth,
            'truth'   : truth,
            'mixed'   : mixed,
            'observed': observed,
            'interval': self.interval,
        }

    # ── Full run ─────────────────────────────────────────────────────────

    def run(self, scenarios=SCENARIOS) -> dict:
        """
        Run the requested scenarios.

        Returns
        -------
        dict keyed by scenario name ('lithology', 'fault', 'clay')
        """
        unknown = [s for s in scenarios if s not in SCENARIOS]
        if unknown:
            raise ConfigurationError(
                f"unknown scenario(s) {unknown}; choose from {list(SCENARIOS)}")

        if not self._built:
            self._setup()

        runners = {'lithology': self.lithology,
                   'fault'    : self.fault,
                   'clay'     : self.clay_wt_pct}
        return {s: runners[s]() for s in scenarios}


# ─────────────────────────────────────────────────────────────────────────────
# TRUTH vs OBSERVED SUMMARY
# ─────────────────────────────────────────────────────────────────────────────

def mixing_summary(results: dict) -> pd.DataFrame:
    """
    Deviation of observed cuttings from the true composition.

    One row per scenario, quantity and observation stride, comparing the
    mixed values against the truth at the depths actually observed.
    """
    rows = []
    for scenario, res in results.items():
        v = res['interval']
        if res['kind'] == 'categorical':
            truth = res['truth_pct'].set_index('DEPTH')
            mixed = res['mixed_pct'].set_index('DEPTH')
            for stride in res['observed']:
                depths, _ = downsample(truth.index.values, stride,
                                       mode='sparse', start_depth=v)
                for name in res['class_names'].values():
                    diff = (mixed.loc[depths, name] - truth.loc[depths, name]).abs()
                    rows.append({'Scenario': scenario, 'Quantity': name,
                                 'Stride_m': stride, 'Samples': len(depths),
                                 'Mean_abs_diff': round(diff.mean(), 3),
                                 'Max_abs_diff' : round(diff.max(), 3)})
        else:
            for stride, (depths, values) in res['observed'].items():
                diff = np.abs(values - res['truth'][depths - 1])
                rows.append({'Scenario': scenario, 'Quantity': 'Clay wt%',
                             'Stride_m': stride, 'Samples': len(depths),
                             'Mean_abs_diff': round(float(diff.mean()), 3),
                             'Max_abs_diff' : round(float(diff.max()), 3)})
    return pd.DataFrame(rows).set_index(['Scenario', 'Quantity', 'Stride_m'])
