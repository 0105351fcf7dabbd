"""Reusable helpers for summarizing predictive draws."""
import numpy as np
import pandas as pd
from scipy import stats


def describe_draws(draws):
    """Summarize a 1-D set of draws."""
    draws = np.asarray(draws, dtype=float)
    return {
        "count": draws.size,
        "mean": draws.mean(),
        "median": np.median(draws),
        "std": draws.std(ddof=1) if draws.size > 1 else 0.0,
        "q05": np.quantile(draws, 0.05),
        "q95": np.quantile(draws, 0.95),
    }


def interval_bands(paths, levels=(0.5, 0.8, 0.95)):
    """Equal-tailed intervals per row of a (periods x draws) frame.

    Columns are ``median`` plus ``lower_<pct>`` / ``upper_<pct>`` for each
    level, e.g. ``lower_80``.
    """
    values = np.asarray(paths, dtype=float)
    index = paths.index if hasattr(paths, "index") else None
    bands = pd.DataFrame({"median": np.median(values, axis=1)}, index=index)
    for level in levels:
        tail = (1 - level) / 2
        pct = int(round(level * 100))
        bands[f"lower_{pct}"] = np.quantile(values, tail, axis=1)
        bands[f"upper_{pct}"] = np.quantile(values, 1 - tail, axis=1)
    return bands


def kde_curve(sample, grid_size=200, padding=0.1):
    """Gaussian KDE evaluated on a padded grid; returns (grid, density)."""
    sample = np.asarray(sample, dtype=float)
    lo, hi = sample.min(), sample.max()
    if hi == lo:
        # no spread to smooth over
        return np.array([lo]), np.array([1.0])
    pad = (hi - lo) * padding
    grid = np.linspace(lo - pad, hi + pad, grid_size)
    return grid, stats.gaussian_kde(sample)(grid)


def interval_coverage(y_true, lower, upper):
    """Fraction of observations that fall inside [lower, upper]."""
    y_true = np.asarray(y_true, dtype=float)
    inside = (y_true >= np.asarray(lower)) & (y_true <= np.asarray(upper))
    return inside.mean()


def prob_at_most(dots, threshold):
    """Share of dots at or below ``threshold``, i.e. the dotplot's CDF there."""
    dots = np.asarray(dots, dtype=float)
    return (dots <= threshold).mean()


def hop_order(n_draws, n_frames, seed=42):
    """Random order of draw indices for a hypothetical outcome plot.

    Draws are taken without replacement while there are enough of them.
    """
    rng = np.random.RandomState(seed)
    return rng.choice(n_draws, size=n_frames, replace=n_frames > n_draws)
