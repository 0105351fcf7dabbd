from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from scipy.integrate import trapezoid

from uncertainty.stats_helpers import (
    describe_draws,
    hop_order,
    interval_bands,
    interval_coverage,
    kde_curve,
    prob_at_most,
)


def test_describe_draws_basic_summary() -> None:
    out = describe_draws([1.0, 2.0, 3.0, 4.0, 5.0])

    assert out["count"] == 5
    assert out["mean"] == pytest.approx(3.0)
    assert out["median"] == pytest.approx(3.0)
    assert out["q05"] < out["median"] < out["q95"]


def test_describe_draws_single_value_has_zero_spread() -> None:
    assert describe_draws([7.0])["std"] == 0.0


def test_interval_bands_are_nested_and_keep_the_index() -> None:
    index = pd.date_range("2025-01-05", periods=3, freq="W")
    paths = pd.DataFrame(np.random.RandomState(0).normal(size=(3, 500)), index=index)

    bands = interval_bands(paths, levels=(0.5, 0.95))

    assert list(bands.columns) == ["median", "lower_50", "upper_50", "lower_95", "upper_95"]
    assert bands.index.equals(index)
    assert np.all(bands["lower_95"] <= bands["lower_50"])
    assert np.all(bands["lower_50"] <= bands["median"])
    assert np.all(bands["median"] <= bands["upper_50"])
    assert np.all(bands["upper_50"] <= bands["upper_95"])


def test_interval_bands_accept_plain_arrays() -> None:
    bands = interval_bands(np.tile(np.arange(11.0), (2, 1)), levels=(0.8,))

    assert bands["median"].tolist() == pytest.approx([5.0, 5.0])
    assert bands["lower_80"].tolist() == pytest.approx([1.0, 1.0])
    assert bands["upper_80"].tolist() == pytest.approx([9.0, 9.0])


def test_kde_curve_integrates_to_about_one() -> None:
    sample = np.random.RandomState(3).normal(size=2000)

    grid, density = kde_curve(sample, grid_size=400, padding=0.5)

    assert len(grid) == len(density) == 400
    assert trapezoid(density, grid) == pytest.approx(1.0, abs=0.02)


def test_kde_curve_degenerate_sample_is_a_spike() -> None:
    grid, density = kde_curve([2.0, 2.0, 2.0])

    assert grid.tolist() == [2.0]
    assert density.tolist() == [1.0]


def test_interval_coverage_counts_inclusive_bounds() -> None:
    assert interval_coverage([1, 2, 3, 4], [1, 0, 4, 0], [1, 1, 5, 10]) == pytest.approx(0.5)


def test_prob_at_most_is_share_of_dots() -> None:
    dots = np.arange(1, 21)

    assert prob_at_most(dots, 5) == pytest.approx(0.25)
    assert prob_at_most(dots, 0) == 0.0
    assert prob_at_most(dots, 20) == 1.0


def test_hop_order_is_seeded_and_without_repeats_when_possible() -> None:
    first = hop_order(50, 20, seed=7)
    second = hop_order(50, 20, seed=7)

    assert first.tolist() == second.tolist()
    assert len(set(first.tolist())) == 20
    assert hop_order(50, 20, seed=8).tolist() != first.tolist()


def test_hop_order_repeats_when_frames_exceed_draws() -> None:
    order = hop_order(3, 10, seed=1)

    assert len(order) == 10
    assert set(order.tolist()) <= {0, 1, 2}
