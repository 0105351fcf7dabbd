from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from uncertainty.models import (
    count_metrics,
    fit_poisson_regression,
    fit_structural_model,
    forecast_paths,
    poisson_predictive_draws,
    predict_counts,
    prepare_count_data,
)


@pytest.fixture(scope="module")
def count_frame() -> pd.DataFrame:
    rng = np.random.RandomState(0)
    humidity = rng.uniform(20, 100, size=600)
    mu = np.exp(-3.0 + 0.04 * humidity)
    return pd.DataFrame({"relative_humidity_pct": humidity, "precipitation_hours": rng.poisson(mu)})


@pytest.fixture(scope="module")
def poisson_results(count_frame: pd.DataFrame):
    return fit_poisson_regression(count_frame[["relative_humidity_pct"]], count_frame["precipitation_hours"])


@pytest.fixture(scope="module")
def weekly() -> pd.Series:
    rng = np.random.RandomState(1)
    index = pd.date_range("2023-01-01", periods=90, freq="W")
    level = 15 + np.cumsum(rng.normal(scale=0.3, size=90))
    season = 5 * np.sin(2 * np.pi * np.arange(90) / 13)
    return pd.Series(level + season + rng.normal(scale=0.5, size=90), index=index, name="temperature_c")


def test_prepare_count_data_drops_missing_rows_and_splits(count_frame: pd.DataFrame) -> None:
    frame = count_frame.copy()
    frame.loc[:9, "relative_humidity_pct"] = np.nan

    X_train, X_test, y_train, y_test = prepare_count_data(
        frame, ["relative_humidity_pct"], "precipitation_hours", test_size=0.25, seed=3
    )

    assert len(X_train) + len(X_test) == len(frame) - 10
    assert len(X_test) == pytest.approx(0.25 * (len(frame) - 10), abs=1)
    assert X_train.index.equals(y_train.index)


def test_poisson_fit_recovers_coefficients(poisson_results) -> None:
    params = poisson_results.params

    assert list(params.index) == ["const", "relative_humidity_pct"]
    assert params["relative_humidity_pct"] == pytest.approx(0.04, abs=0.01)


def test_predict_counts_is_positive(poisson_results) -> None:
    X = pd.DataFrame({"relative_humidity_pct": [20.0, 60.0, 100.0]})

    mu = np.asarray(predict_counts(poisson_results, X))

    assert np.all(mu > 0)
    assert np.all(np.diff(mu) > 0)


def test_poisson_predictive_draws_shape_and_values(poisson_results) -> None:
    X_new = pd.DataFrame({"relative_humidity_pct": [30.0, 90.0]})

    draws = poisson_predictive_draws(poisson_results, X_new, n_draws=400, seed=5)

    assert list(draws.columns) == ["row", "draw", "mu", "count"]
    assert len(draws) == 2 * 400
    assert draws["count"].min() >= 0
    assert np.issubdtype(draws["count"].dtype, np.integer)
    means = draws.groupby("row")["count"].mean()
    assert means[1] > means[0]


def test_poisson_predictive_draws_are_reproducible(poisson_results) -> None:
    X_new = pd.DataFrame({"relative_humidity_pct": [50.0]})

    first = poisson_predictive_draws(poisson_results, X_new, n_draws=50, seed=11)
    second = poisson_predictive_draws(poisson_results, X_new, n_draws=50, seed=11)

    pd.testing.assert_frame_equal(first, second)


def test_poisson_predictive_draws_reject_non_positive_size(poisson_results) -> None:
    with pytest.raises(ValueError):
        poisson_predictive_draws(poisson_results, pd.DataFrame({"relative_humidity_pct": [50.0]}), n_draws=0)


def test_count_metrics_perfect_prediction() -> None:
    y = np.array([1.0, 2.0, 3.0])

    out = count_metrics(y, y)

    assert out["mae"] == 0.0
    assert out["poisson_deviance"] == pytest.approx(0.0)


def test_forecast_paths_shape_and_future_index(weekly: pd.Series) -> None:
    results = fit_structural_model(weekly)

    paths = forecast_paths(results, steps=6, n_paths=25, seed=2)

    assert paths.shape == (6, 25)
    assert paths.index[0] > weekly.index[-1]
    assert np.all(np.isfinite(paths.to_numpy()))


def test_forecast_paths_with_seasonal_term_are_reproducible(weekly: pd.Series) -> None:
    results = fit_structural_model(weekly, seasonal_period=13, harmonics=1)

    first = forecast_paths(results, steps=4, n_paths=10, seed=9)
    second = forecast_paths(results, steps=4, n_paths=10, seed=9)

    pd.testing.assert_frame_equal(first, second)


def test_forecast_paths_reject_non_positive_sizes(weekly: pd.Series) -> None:
    results = fit_structural_model(weekly)

    with pytest.raises(ValueError):
        forecast_paths(results, steps=0, n_paths=10)
    with pytest.raises(ValueError):
        forecast_paths(results, steps=5, n_paths=0)
