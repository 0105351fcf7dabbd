from __future__ import annotations

import numpy as np
import pytest

from uncertainty.dotplot import (
    InvalidArgument,
    QuantileFunction,
    build_from_quantile_function,
    build_from_samples,
    plotting_positions,
    stack_dots,
)


def test_plotting_positions_are_half_step_offsets() -> None:
    assert plotting_positions(4) == pytest.approx([0.125, 0.375, 0.625, 0.875])
    assert plotting_positions(1) == pytest.approx([0.5])


@pytest.mark.parametrize("size", [1, 2, 7, 50])
@pytest.mark.parametrize("dot_count", [1, 3, 20, 100])
def test_build_from_samples_returns_n_sorted_dots(size: int, dot_count: int) -> None:
    rng = np.random.RandomState(size * 1000 + dot_count)
    sample = rng.normal(size=size)

    dots = build_from_samples(sample, dot_count)

    assert len(dots) == dot_count
    assert np.all(np.diff(dots) >= 0)
    assert dots.min() >= sample.min()
    assert dots.max() <= sample.max()


def test_build_from_samples_mean_tracks_uniform_mean() -> None:
    sample = np.random.RandomState(0).uniform(0, 10, size=20_000)

    dots = build_from_samples(sample, 1000)

    assert dots.mean() == pytest.approx(5.0, abs=0.1)


def test_single_point_sample_repeats_the_point() -> None:
    assert build_from_samples([3.5], 7).tolist() == [3.5] * 7


def test_more_dots_than_draws_is_allowed() -> None:
    dots = build_from_samples([1.0, 2.0], 10)

    assert len(dots) == 10
    assert dots.min() >= 1.0 and dots.max() <= 2.0


def test_more_dots_than_draws_repeats_tied_order_statistics() -> None:
    dots = build_from_samples([4.0, 4.0, 4.0], 12)

    assert dots.tolist() == [4.0] * 12


def test_more_dots_than_draws_repeats_end_order_statistics() -> None:
    dots = build_from_samples([0.0, 10.0], 4)

    assert dots.tolist() == pytest.approx([0.0, 2.5, 7.5, 10.0])
    assert len(np.unique(dots)) < len(dots)


def test_equal_weights_give_the_same_dots_as_no_weights() -> None:
    rng = np.random.RandomState(7)
    sample = rng.normal(size=13)

    for dot_count in (5, 13, 40):
        unweighted = build_from_samples(sample, dot_count)
        weighted = build_from_samples(sample, dot_count, weights=np.full(13, 2.0))

        assert weighted == pytest.approx(unweighted)


def test_unsorted_sample_matches_sorted_sample() -> None:
    sample = [5.0, 1.0, 3.0, 2.0, 4.0]

    assert build_from_samples(sample, 9) == pytest.approx(build_from_samples(sorted(sample), 9))


def test_equal_weights_match_the_spread_of_the_values() -> None:
    values = np.arange(10, dtype=float)

    dots = build_from_samples(values, 10, weights=np.ones(10))

    # each value owns a 1/10 slice, so 10 dots land exactly on the values
    assert dots == pytest.approx(values)


def test_heavy_weight_pulls_dots_toward_that_value() -> None:
    values = [0.0, 10.0]

    dots = build_from_samples(values, 20, weights=[1.0, 9.0])

    assert np.sum(dots == 10.0) > np.sum(dots == 0.0)
    assert dots.mean() > 5.0


def test_zero_weight_values_are_ignored() -> None:
    dots = build_from_samples([1.0, 100.0, 2.0], 5, weights=[1.0, 0.0, 1.0])

    assert dots.max() <= 2.0


@pytest.mark.parametrize("weights", [[1.0], [-1.0, 2.0], [0.0, 0.0], [np.nan, 1.0]])
def test_bad_weights_are_rejected(weights: list[float]) -> None:
    with pytest.raises(InvalidArgument):
        build_from_samples([1.0, 2.0], 5, weights=weights)


@pytest.mark.parametrize("dot_count", [0, -1, -20])
def test_non_positive_dot_count_is_rejected(dot_count: int) -> None:
    with pytest.raises(InvalidArgument):
        build_from_samples([1.0, 2.0], dot_count)
    with pytest.raises(InvalidArgument):
        build_from_quantile_function(lambda p: p, dot_count)


@pytest.mark.parametrize("dot_count", [2.5, "20", True, None])
def test_non_integer_dot_count_is_rejected(dot_count: object) -> None:
    with pytest.raises(InvalidArgument):
        build_from_samples([1.0, 2.0], dot_count)


def test_numpy_integer_dot_count_is_accepted() -> None:
    assert len(build_from_samples([1.0, 2.0], np.int64(4))) == 4


def test_empty_sample_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        build_from_samples([], 10)


def test_nan_in_sample_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        build_from_samples([1.0, np.nan], 10)


def test_invalid_argument_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        build_from_samples([], 1)


def test_identity_quantile_function_gives_plotting_positions() -> None:
    dots = build_from_quantile_function(lambda p: p, 4)

    assert dots == pytest.approx([0.125, 0.375, 0.625, 0.875])


def test_non_monotonic_quantile_function_is_rejected() -> None:
    with pytest.raises(InvalidArgument, match="monotonic"):
        build_from_quantile_function(lambda p: np.sin(4 * np.pi * p), 20)


def test_nan_from_quantile_function_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        build_from_quantile_function(lambda p: np.nan, 5)


def test_non_callable_quantile_function_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        build_from_quantile_function([0.1, 0.2], 5)


def test_control_point_quantile_function_passes_through_points() -> None:
    qf = QuantileFunction.from_control_points([0.0, 0.5, 1.0], [0.0, 4.0, 10.0])

    assert qf(0.0) == pytest.approx(0.0)
    assert qf(0.5) == pytest.approx(4.0)
    assert qf(1.0) == pytest.approx(10.0)
    grid = qf(np.linspace(0, 1, 101))
    assert np.all(np.diff(grid) >= -1e-12)


def test_quantile_function_clips_probabilities_outside_unit_interval() -> None:
    qf = QuantileFunction.from_control_points([0.0, 1.0], [2.0, 3.0])

    assert qf(-0.5) == pytest.approx(2.0)
    assert qf(1.5) == pytest.approx(3.0)


@pytest.mark.parametrize(
    "probs, values",
    [
        ([0.0], [1.0]),
        ([0.0, 0.5, 0.5], [1.0, 2.0, 3.0]),
        ([0.0, 0.5, 1.0], [1.0, 3.0, 2.0]),
        ([-0.1, 1.0], [1.0, 2.0]),
        ([0.0, 1.0], [1.0]),
    ],
)
def test_bad_control_points_are_rejected(probs: list[float], values: list[float]) -> None:
    with pytest.raises(InvalidArgument):
        QuantileFunction.from_control_points(probs, values)


def test_histogram_quantile_function_hits_edges_at_cumulative_shares() -> None:
    # uneven bins: 0-1, 1-5, 5-6 with counts 1, 2, 1
    qf = QuantileFunction.from_histogram([0, 1, 5, 6], [1, 2, 1])

    assert qf(0.0) == pytest.approx(0.0)
    assert qf(0.25) == pytest.approx(1.0)
    assert qf(0.75) == pytest.approx(5.0)
    assert qf(1.0) == pytest.approx(6.0)


def test_histogram_empty_bins_collapse() -> None:
    qf = QuantileFunction.from_histogram([0, 1, 2, 3, 4], [2, 0, 0, 2])

    assert qf.probabilities.tolist() == pytest.approx([0.0, 0.5, 1.0])
    assert qf.values.tolist() == pytest.approx([0.0, 1.0, 4.0])


def test_histogram_dots_are_sorted_and_inside_range() -> None:
    qf = QuantileFunction.from_histogram([0, 2, 4, 6, 8, 10, 12, 15, 20, 30], [3, 9, 17, 21, 16, 11, 9, 8, 6])

    dots = build_from_quantile_function(qf, 20)

    assert len(dots) == 20
    assert np.all(np.diff(dots) >= 0)
    assert 0 < dots.min() and dots.max() < 30


@pytest.mark.parametrize(
    "edges, counts",
    [
        ([0, 1, 2], [1]),
        ([0, 2, 1], [1, 1]),
        ([0, 1, 2], [-1, 2]),
        ([0, 1, 2], [0, 0]),
    ],
)
def test_bad_histograms_are_rejected(edges: list[float], counts: list[float]) -> None:
    with pytest.raises(InvalidArgument):
        QuantileFunction.from_histogram(edges, counts)


def test_stack_dots_counts_up_within_bins() -> None:
    out = stack_dots([1.0, 1.1, 1.2, 5.0], binwidth=1.0)

    assert out["stack"].tolist() == [1, 2, 3, 1]
    assert out["x"].iloc[:3].tolist() == pytest.approx([1.1, 1.1, 1.1])
    assert out["x"].iloc[3] == pytest.approx(5.0)
    assert out["quantile"].tolist() == pytest.approx([0.125, 0.375, 0.625, 0.875])


def test_stack_dots_default_binwidth_keeps_every_dot() -> None:
    dots = build_from_samples(np.random.RandomState(1).normal(size=500), 20)

    out = stack_dots(dots)

    assert len(out) == 20
    assert out["stack"].min() == 1
    # the default gives ceil(sqrt(20)) = 5 columns at most
    assert out["x"].nunique() <= 5


def test_stack_dots_degenerate_range_is_one_column() -> None:
    out = stack_dots([2.0] * 6)

    assert out["stack"].tolist() == [1, 2, 3, 4, 5, 6]
    assert out["x"].unique().tolist() == [2.0]


def test_stack_dots_rejects_non_positive_binwidth() -> None:
    with pytest.raises(InvalidArgument):
        stack_dots([1.0, 2.0], binwidth=0)


def test_stack_dots_empty_input() -> None:
    assert stack_dots([]).empty
