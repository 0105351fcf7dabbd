"""Model fitting wrappers that hand back predictive draws instead of point estimates."""
import numpy as np
import pandas as pd
import streamlit as st
import statsmodels.api as sm
from statsmodels.tsa.statespace.structural import UnobservedComponents
from sklearn.model_selection import train_test_split
from sklearn.metrics import mean_absolute_error, mean_poisson_deviance


def prepare_count_data(df, features, target, test_size=0.2, seed=42):
    """Drop incomplete rows and split into train/test sets for a count model."""
    clean = df[features + [target]].dropna()
    X = clean[features]
    y = clean[target]
    return train_test_split(X, y, test_size=test_size, random_state=seed)


def fit_poisson_regression(X, y):
    """Fit a Poisson GLM with a log link and an intercept."""
    exog = sm.add_constant(X, has_constant="add")
    return sm.GLM(y, exog, family=sm.families.Poisson()).fit()


def _design(results, X):
    return sm.add_constant(X, has_constant="add")[results.model.exog_names]


def predict_counts(results, X):
    """Expected count (mu) for each row of ``X``."""
    return results.predict(_design(results, X))


def poisson_predictive_draws(results, X_new, n_draws=200, seed=42):
    """Posterior predictive draws of counts for each row of ``X_new``.

    Coefficients are drawn from the normal approximation to the posterior
    (MLE and its covariance, i.e. a flat prior), then one Poisson count is
    drawn per coefficient draw. Returns a long frame with columns
    ``row``, ``draw``, ``mu`` and ``count``.
    """
    if n_draws <= 0:
        raise ValueError(f"n_draws must be positive, got {n_draws}")
    rng = np.random.RandomState(seed)

    exog = _design(results, X_new)
    beta = rng.multivariate_normal(
        np.asarray(results.params), np.asarray(results.cov_params()), size=n_draws
    )
    mu = np.exp(exog.to_numpy(dtype=float) @ beta.T)
    counts = rng.poisson(mu)

    n_rows = len(exog)
    return pd.DataFrame({
        "row": np.repeat(np.arange(n_rows), n_draws),
        "draw": np.tile(np.arange(n_draws), n_rows),
        "mu": mu.ravel(),
        "count": counts.ravel(),
    })


def count_metrics(y_true, y_pred):
    """Compute count-model metrics."""
    return {
        "poisson_deviance": mean_poisson_deviance(y_true, y_pred),
        "mae": mean_absolute_error(y_true, y_pred),
    }


def fit_structural_model(series, seasonal_period=None, harmonics=2):
    """Fit a local linear trend model, optionally with a trigonometric seasonal term."""
    freq_seasonal = None
    if seasonal_period:
        freq_seasonal = [{"period": seasonal_period, "harmonics": harmonics}]
    model = UnobservedComponents(
        series, level="local linear trend", freq_seasonal=freq_seasonal,
    )
    return model.fit(disp=False)


def forecast_paths(results, steps, n_paths=100, seed=42):
    """Simulate ``n_paths`` future trajectories of ``steps`` periods each.

    Paths start from the predicted state just past the end of the sample
    and accumulate state and observation shocks from there. Rows are future periods,
    columns are path numbers.
    """
    if steps <= 0 or n_paths <= 0:
        raise ValueError(f"steps and n_paths must be positive, got {steps} and {n_paths}")
    sims = results.simulate(
        nsimulations=steps, repetitions=n_paths, anchor="end", random_state=seed,
    )
    values = np.asarray(sims, dtype=float).reshape(steps, -1)
    index = results.get_forecast(steps=steps).predicted_mean.index
    return pd.DataFrame(values, index=index, columns=range(values.shape[1]))


@st.cache_resource
def train_poisson(X, y):
    """Fit and cache a Poisson regression."""
    return fit_poisson_regression(X, y)


@st.cache_resource
def train_structural(series, seasonal_period=None, harmonics=2):
    """Fit and cache a structural time series model."""
    return fit_structural_model(series, seasonal_period, harmonics)
