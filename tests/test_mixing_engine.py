from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from cuttings.errors import ConfigurationError, InsufficientPopulationError, OutOfRangeError
from cuttings.mixing_engine import (
    CuttingsMixingModel,
    mix_categorical,
    mix_continuous,
    mix_depth_categorical,
    mix_depth_continuous,
    mixing_summary,
    percent_by_class,
    percent_profile,
)
from cuttings.mixing_kernel import build_kernel, draw_counts
from cuttings.synthetic_profiles import (
    LITHOLOGY_CLASSES,
    clay_wt_pct_scenario,
    lithology_scenario,
)


# ──────────────────────────────────────────────────────────────────────────────
# Categorical engine
# ──────────────────────────────────────────────────────────────────────────────

def test_mix_categorical_is_reproducible_for_a_seed(random_truth: np.ndarray) -> None:
    kernel = build_kernel(10)
    a = mix_categorical(random_truth, kernel, rng=3)
    b = mix_categorical(random_truth, kernel, rng=3)
    c = mix_categorical(random_truth, kernel, rng=4)
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)


def test_mix_categorical_accepts_a_generator(random_truth: np.ndarray) -> None:
    kernel = build_kernel(10)
    a = mix_categorical(random_truth, kernel, rng=np.random.default_rng(11))
    b = mix_categorical(random_truth, kernel, rng=11)
    np.testing.assert_array_equal(a, b)


def test_rows_above_first_full_window_stay_zero(random_truth: np.ndarray) -> None:
    kernel = build_kernel(10)
    mixed = mix_categorical(random_truth, kernel, rng=0)
    assert mixed.shape == (60, draw_counts(kernel, 200).sum())
    assert not mixed[:9].any()
    assert mixed[9:].any()


def test_draws_come_from_the_window_in_kernel_proportions(
        depth_labelled_truth: np.ndarray, kernel: np.ndarray) -> None:
    counts = draw_counts(kernel, 1000)
    ensemble = mix_depth_categorical(depth_labelled_truth, kernel, depth=40,
                                     rng=np.random.default_rng(1))
    assert ensemble.size == counts.sum()
    assert ensemble.min() >= 22          # depth 21 has zero weight
    assert ensemble.max() == 40
    for k, source in enumerate(range(21, 41)):
        assert np.count_nonzero(ensemble == source) == counts[k]


def test_documented_kernel_never_exhausts_a_depth(kernel: np.ndarray) -> None:
    truth = lithology_scenario(n=1000)
    mixed = mix_categorical(truth, kernel, rng=0)
    assert mixed.shape == (250, 1000)


def test_oversized_draw_raises_insufficient_population(kernel: np.ndarray) -> None:
    truth = np.ones((40, 50), dtype=np.int8)
    with pytest.raises(InsufficientPopulationError):
        mix_categorical(truth, kernel, n=1000)
    with pytest.raises(InsufficientPopulationError):
        mix_depth_categorical(truth, kernel, depth=30, counts=np.full(20, 51))


def test_ensemble_too_small_for_any_draw_is_a_configuration_error(
        kernel: np.ndarray) -> None:
    truth = np.ones((40, 5), dtype=np.int8)
    with pytest.raises(ConfigurationError, match="too small"):
        mix_categorical(truth, kernel, n=1)
    with pytest.raises(ConfigurationError, match="too small"):
        CuttingsMixingModel(n=1).lithology()


def test_window_longer_than_profile_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        mix_categorical(np.ones((10, 100), dtype=np.int8), build_kernel(20))


@pytest.mark.parametrize("depth", [0, 5, 19, 251])
def test_single_depth_mixing_needs_full_window_on_axis(
        depth_labelled_truth: np.ndarray, kernel: np.ndarray, depth: int) -> None:
    with pytest.raises(OutOfRangeError):
        mix_depth_categorical(depth_labelled_truth, kernel, depth=depth)


def test_percent_by_class() -> None:
    pct = percent_by_class([1, 1, 2, 3], classes={1, 2, 3})
    assert pct == {1: 50.0, 2: 25.0, 3: 25.0}
    assert percent_by_class([0, 0], classes=[1]) == {1: 0.0}
    with pytest.raises(ConfigurationError):
        percent_by_class([], classes=[1])


def test_percent_profile_masks_unset_rows() -> None:
    truth = lithology_scenario(n=100)
    df = percent_profile(truth, LITHOLOGY_CLASSES, start_depth=20)
    assert list(df.columns) == ['DEPTH', 'Sandstone', 'Silty Claystone',
                                'Fine Silty Claystone']
    assert df.loc[:18, 'Sandstone'].isna().all()
    assert df.loc[19:, 'Fine Silty Claystone'].notna().all()


def test_percent_profile_rows_match_percent_by_class(random_truth: np.ndarray) -> None:
    classes = {0: 'zero', 1: 'one', 2: 'two'}
    df = percent_profile(random_truth, classes)
    for depth in (1, 30, 60):
        pct = percent_by_class(random_truth[depth - 1], classes)
        row = df.loc[df['DEPTH'] == depth].iloc[0]
        assert [row[name] for name in classes.values()] == [pct[c] for c in classes]


def test_mixed_percentages_sum_to_100(model_results: dict) -> None:
    pct = model_results['lithology']['mixed_pct']
    totals = pct[pct['DEPTH'] >= 20].drop(columns='DEPTH').sum(axis=1)
    np.testing.assert_allclose(totals, 100.0, atol=0.1)


# ──────────────────────────────────────────────────────────────────────────────
# Continuous engine
# ──────────────────────────────────────────────────────────────────────────────

def test_step_profile_becomes_monotonic_ramp(kernel: np.ndarray) -> None:
    depth = np.arange(1, 251)
    truth = np.where(depth >= 50, 100.0, 0.0)
    mixed = mix_continuous(truth, kernel)

    assert np.isnan(mixed[:19]).all()
    assert mixed[49 - 1] == pytest.approx(0.0)
    assert mixed[50 - 1] == pytest.approx(10.0)
    ramp = mixed[49 - 1:68]                     # depths 49..68
    assert np.all(np.diff(ramp) > 0)
    assert mixed[67 - 1] < 100.0 - 1e-6
    np.testing.assert_allclose(mixed[68 - 1:], 100.0)


def test_continuous_values_bounded_by_window(kernel: np.ndarray) -> None:
    truth = clay_wt_pct_scenario()
    mixed = mix_continuous(truth, kernel)
    for d in range(20, 251):
        window = truth[d - 20:d]
        assert window.min() - 1e-9 <= mixed[d - 1] <= window.max() + 1e-9


def test_single_depth_matches_full_profile(kernel: np.ndarray) -> None:
    truth = clay_wt_pct_scenario()
    mixed = mix_continuous(truth, kernel)
    for d in (20, 63, 150, 250):
        assert mix_depth_continuous(truth, kernel, d) == pytest.approx(mixed[d - 1])
        assert mixed[d - 1] == pytest.approx(np.dot(truth[d - 20:d], kernel))
    with pytest.raises(OutOfRangeError):
        mix_depth_continuous(truth, kernel, 10)


def test_continuous_rejects_2d_truth(kernel: np.ndarray) -> None:
    with pytest.raises(ConfigurationError):
        mix_continuous(np.ones((250, 2)), kernel)


def test_categorical_mixing_of_uniform_beds_matches_its_expectation(
        model_results: dict) -> None:
    res = model_results['lithology']
    counts = draw_counts(build_kernel(20), 1000)
    truth_sand = res['truth_pct']['Sandstone'].values
    expected = mix_continuous(truth_sand, counts / counts.sum())
    np.testing.assert_allclose(res['mixed_pct']['Sandstone'].values[19:],
                               expected[19:], atol=1e-9)


# ──────────────────────────────────────────────────────────────────────────────
# Scenario runner
# ──────────────────────────────────────────────────────────────────────────────

def test_run_returns_every_scenario(model_results: dict) -> None:
    assert set(model_results) == {'lithology', 'fault', 'clay'}
    for res in model_results.values():
        assert set(res['observed']) == {1, 10}

    depths, values = model_results['clay']['observed'][10]
    np.testing.assert_array_equal(depths, np.arange(20, 251, 10))
    assert len(values) == 24


def test_scenario_streams_do_not_depend_on_run_order() -> None:
    model = CuttingsMixingModel(n=500, seed=21)
    alone = model.fault()['mixed']
    both = CuttingsMixingModel(n=500, seed=21).run(['lithology', 'fault'])
    np.testing.assert_array_equal(alone, both['fault']['mixed'])


def test_run_rejects_unknown_scenarios() -> None:
    with pytest.raises(ConfigurationError):
        CuttingsMixingModel(n=100).run(['lithology', 'porosity'])


def test_interval_deeper_than_model_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        CuttingsMixingModel(interval=300, n=100).clay_wt_pct()


def test_mixing_summary_compares_truth_and_observed(model_results: dict) -> None:
    summary = mixing_summary(model_results)
    assert isinstance(summary, pd.DataFrame)
    assert summary.index.names == ['Scenario', 'Quantity', 'Stride_m']
    assert summary.loc[('clay', 'Clay wt%', 1), 'Samples'] == 231
    assert summary.loc[('clay', 'Clay wt%', 10), 'Samples'] == 24
    assert summary.loc[('fault', 'Scaley Fabric', 1), 'Max_abs_diff'] > 50
    assert (summary['Mean_abs_diff'] >= 0).all()
