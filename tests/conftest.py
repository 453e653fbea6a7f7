"""
conftest.py: shared pytest fixtures for the cuttings mixing model tests.
"""

from __future__ import annotations

import numpy as np
import pytest

from cuttings.mixing_engine import CuttingsMixingModel
from cuttings.mixing_kernel import MIX_INTERVAL, build_kernel


# ──────────────────────────────────────────────────────────────────────────────
# Kernel and small ensembles
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def kernel() -> np.ndarray:
    """The documented 20 m linear kernel."""
    return build_kernel(MIX_INTERVAL)


@pytest.fixture
def random_truth() -> np.ndarray:
    """60 depths x 200 fragments of random labels 0..2."""
    return np.random.default_rng(0).integers(0, 3, size=(60, 200)).astype(np.int8)


@pytest.fixture
def depth_labelled_truth() -> np.ndarray:
    """Every fragment at depth d carries label d, so draws reveal their source."""
    depth = np.arange(1, 251, dtype=np.int16)
    return np.repeat(depth[:, None], 1000, axis=1)


# ──────────────────────────────────────────────────────────────────────────────
# Full scenario run (reduced ensemble size)
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def model_results() -> dict:
    """All three scenarios with 1000 fragments per depth. Do not mutate."""
    return CuttingsMixingModel(n=1000, seed=7).run()
