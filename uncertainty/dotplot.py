"""Quantile dotplot construction: representative draws from samples or quantile functions."""
import numbers

import numpy as np
import pandas as pd
from scipy.interpolate import PchipInterpolator


class InvalidArgument(ValueError):
    """Bad dot count, empty sample, or non-monotonic quantile function."""


def _check_dot_count(dot_count):
    if isinstance(dot_count, bool) or not isinstance(dot_count, numbers.Integral):
        raise InvalidArgument(f"dot_count must be a positive integer, got {dot_count!r}")
    if dot_count <= 0:
        raise InvalidArgument(f"dot_count must be a positive integer, got {dot_count}")
    return int(dot_count)


def plotting_positions(n):
    """Return the n cumulative probabilities (i - 0.5) / n, i = 1..n."""
    n = _check_dot_count(n)
    return (np.arange(1, n + 1) - 0.5) / n


def _weighted_quantiles(values, weights, probs):
    weights = np.asarray(weights, dtype=float).ravel()
    if weights.shape != values.shape:
        raise InvalidArgument(
            f"weights must match the sample length ({len(values)}), got {len(weights)}"
        )
    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        raise InvalidArgument("weights must be finite and non-negative")
    total = weights.sum()
    if total <= 0:
        raise InvalidArgument("weights must have a positive total")

    order = np.argsort(values, kind="mergesort")
    values, weights = values[order], weights[order]
    # each value sits at the midpoint of its own slice of probability mass
    positions = (np.cumsum(weights) - 0.5 * weights) / total
    keep = weights > 0
    return np.interp(probs, positions[keep], values[keep])


def build_from_samples(sample, dot_count, weights=None):
    """Build a sorted set of ``dot_count`` dots from a sample of draws.

    Each dot is the empirical quantile of ``sample`` at a plotting position
    (i - 0.5) / dot_count, interpolated linearly between order statistics
    placed at (k - 0.5) / n and clamped to the smallest and largest draw.
    ``weights`` turns the sample into (value, weight) pairs, e.g. bin
    midpoints and counts from a histogram.

    Asking for more dots than there are draws is fine; the end order
    statistics repeat.
    """
    dot_count = _check_dot_count(dot_count)
    values = np.asarray(sample, dtype=float).ravel()
    if values.size == 0:
        raise InvalidArgument("sample must contain at least one value")
    if not np.all(np.isfinite(values)):
        raise InvalidArgument("sample must not contain NaN or infinite values")

    probs = plotting_positions(dot_count)
    if weights is None:
        dots = np.quantile(values, probs, method="hazen")
    else:
        dots = _weighted_quantiles(values, weights, probs)
    return np.sort(dots)


def build_from_quantile_function(qf, dot_count):
    """Build a sorted set of ``dot_count`` dots by evaluating ``qf`` at plotting positions.

    ``qf`` must be non-decreasing on [0, 1]. Its output is checked, not
    sorted: a decrease anywhere means ``qf`` is not a quantile function.
    """
    dot_count = _check_dot_count(dot_count)
    if not callable(qf):
        raise InvalidArgument("qf must be callable")

    probs = plotting_positions(dot_count)
    dots = np.array([float(qf(p)) for p in probs])
    if np.any(np.isnan(dots)):
        raise InvalidArgument("quantile function returned NaN")
    if np.any(np.diff(dots) < 0):
        raise InvalidArgument("quantile function is not monotonic (non-decreasing) on [0, 1]")
    return dots


class QuantileFunction:
    """Monotone cubic (PCHIP) quantile function over (probability, value) control points."""

    def __init__(self, probabilities, values):
        probabilities = np.asarray(probabilities, dtype=float).ravel()
        values = np.asarray(values, dtype=float).ravel()
        if probabilities.shape != values.shape:
            raise InvalidArgument("probabilities and values must have the same length")
        if probabilities.size < 2:
            raise InvalidArgument("need at least two control points")
        if not (np.all(np.isfinite(probabilities)) and np.all(np.isfinite(values))):
            raise InvalidArgument("control points must be finite")
        if probabilities[0] < 0 or probabilities[-1] > 1:
            raise InvalidArgument("control probabilities must lie in [0, 1]")
        if np.any(np.diff(probabilities) <= 0):
            raise InvalidArgument("control probabilities must be strictly increasing")
        if np.any(np.diff(values) < 0):
            raise InvalidArgument("control values must be non-decreasing")

        self.probabilities = probabilities
        self.values = values
        self._interp = PchipInterpolator(probabilities, values, extrapolate=False)

    @classmethod
    def from_control_points(cls, probabilities, values):
        """Build from sparse (cumulative probability, value) pairs, e.g. quantiles read off a chart."""
        return cls(probabilities, values)

    @classmethod
    def from_histogram(cls, bin_edges, counts):
        """Approximate the quantile function of a binned histogram.

        Bins may have unequal widths (a hand-digitized chart, say). Each
        edge becomes a control point at the cumulative share of counts
        below it. Runs of empty bins collapse onto their first edge.
        """
        edges = np.asarray(bin_edges, dtype=float).ravel()
        counts = np.asarray(counts, dtype=float).ravel()
        if edges.size != counts.size + 1:
            raise InvalidArgument("need exactly one more bin edge than counts")
        if np.any(np.diff(edges) <= 0):
            raise InvalidArgument("bin edges must be strictly increasing")
        if np.any(counts < 0) or counts.sum() <= 0:
            raise InvalidArgument("counts must be non-negative with a positive total")

        running = np.cumsum(counts)
        cum = np.concatenate([[0.0], running / running[-1]])
        keep = np.concatenate([[True], np.diff(cum) > 0])
        return cls(cum[keep], edges[keep])

    def __call__(self, p):
        lo, hi = self.probabilities[0], self.probabilities[-1]
        out = self._interp(np.clip(p, lo, hi))
        if np.ndim(out) == 0:
            return float(out)
        return out


def stack_dots(dots, binwidth=None):
    """Lay out dots for a dotplot: one column per bin, stacked upward.

    Returns a DataFrame with the original ``value``, the column position
    ``x`` (mean of the dots sharing the bin), the ``stack`` height starting
    at 1, and the ``quantile`` each dot stands for.
    """
    values = np.sort(np.asarray(dots, dtype=float).ravel())
    n = values.size
    if n == 0:
        return pd.DataFrame(columns=["value", "x", "stack", "quantile"])

    span = values[-1] - values[0]
    max_bin = None
    if binwidth is None:
        n_bins = int(np.ceil(np.sqrt(n)))
        binwidth = span / n_bins if span > 0 else 1.0
        max_bin = n_bins - 1
    elif binwidth <= 0:
        raise InvalidArgument(f"binwidth must be positive, got {binwidth}")

    bins = np.floor((values - values[0]) / binwidth).astype(int)
    if max_bin is not None:
        # the maximum sits exactly on the last edge
        bins = np.minimum(bins, max_bin)
    out = pd.DataFrame({"value": values, "bin": bins, "quantile": plotting_positions(n)})
    out["x"] = out.groupby("bin")["value"].transform("mean")
    out["stack"] = out.groupby("bin").cumcount() + 1
    return out[["value", "x", "stack", "quantile"]]
