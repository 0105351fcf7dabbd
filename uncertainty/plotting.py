"""Shared Plotly helpers for uncertainty displays."""
import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from uncertainty.constants import DOT_COLOR, HIGHLIGHT_COLOR, PLOT_TEMPLATE, RIBBON_COLOR
from uncertainty.dotplot import stack_dots
from uncertainty.stats_helpers import hop_order, interval_bands, kde_curve


def apply_common_layout(fig, title=None, height=500, template=PLOT_TEMPLATE):
    """Apply common layout settings to a Plotly figure."""
    fig.update_layout(
        template=template,
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=40, l=60, r=40),
    )
    return fig


def _set_frame_duration(fig, frame_ms):
    if fig.layout.updatemenus:
        fig.layout.updatemenus[0].buttons[0].args[1]["frame"]["duration"] = frame_ms
        fig.layout.updatemenus[0].buttons[0].args[1].setdefault("transition", {})["duration"] = 0
    return fig


def quantile_dotplot_chart(dots, binwidth=None, color=DOT_COLOR, title=None, x_label="",
                           threshold=None, height=350, template=PLOT_TEMPLATE):
    """Draw a quantile dotplot; dots at or below ``threshold`` are highlighted."""
    layout = stack_dots(dots, binwidth)
    colors = color
    if threshold is not None:
        colors = np.where(layout["value"] <= threshold, HIGHLIGHT_COLOR, color)

    fig = go.Figure(go.Scatter(
        x=layout["x"], y=layout["stack"], mode="markers",
        marker=dict(size=16, color=colors, line=dict(width=1, color="white")),
        customdata=np.column_stack([layout["value"], layout["quantile"]]),
        hovertemplate="value %{customdata[0]:.2f}<br>quantile %{customdata[1]:.3f}<extra></extra>",
        showlegend=False,
    ))
    if threshold is not None:
        fig.add_vline(x=threshold, line_dash="dash", line_color=HIGHLIGHT_COLOR)

    top = layout["stack"].max() if len(layout) else 1
    fig.update_yaxes(visible=False, range=[0.3, top + 0.7])
    fig.update_xaxes(title=x_label)
    return apply_common_layout(fig, title, height, template)


def histogram_chart(values, nbins=30, color=DOT_COLOR, title=None, x_label="",
                    height=350, template=PLOT_TEMPLATE):
    """Plain histogram for side-by-side comparison with a dotplot."""
    fig = go.Figure(go.Histogram(x=np.asarray(values), nbinsx=nbins, marker_color=color, opacity=0.8))
    fig.update_layout(xaxis_title=x_label, yaxis_title="Count", bargap=0.05)
    return apply_common_layout(fig, title, height, template)


def hop_chart(draws, x, y, frame="draw", kind="bar", color=DOT_COLOR, title=None,
              labels=None, frame_ms=400, height=450, template=PLOT_TEMPLATE):
    """Animate one hypothetical outcome per frame.

    Axis ranges are fixed across frames so that only the outcome moves.
    """
    y_max = draws[y].max()
    y_min = min(0, draws[y].min())
    pad = 0.05 * (y_max - y_min or 1)
    kwargs = dict(
        x=x, y=y, animation_frame=frame, labels=labels or {},
        range_y=[y_min - pad if y_min < 0 else 0, y_max + pad],
        color_discrete_sequence=[color],
    )
    if kind == "bar":
        fig = px.bar(draws, **kwargs)
    else:
        fig = px.scatter(draws, **kwargs)
        fig.update_traces(marker=dict(size=12))
    _set_frame_duration(fig, frame_ms)
    return apply_common_layout(fig, title, height, template)


def hop_paths_chart(history, paths, n_frames=30, seed=42, color=DOT_COLOR, title=None,
                    y_label="", frame_ms=300, height=500, template=PLOT_TEMPLATE):
    """Animate simulated forecast paths one at a time after the observed history."""
    order = hop_order(paths.shape[1], n_frames, seed)
    long = pd.concat(
        [
            pd.DataFrame({"date": paths.index, "value": paths.iloc[:, col].to_numpy(), "frame": i})
            for i, col in enumerate(order)
        ],
        ignore_index=True,
    )
    lo = min(history.min(), long["value"].min())
    hi = max(history.max(), long["value"].max())
    pad = 0.05 * (hi - lo or 1)

    fig = px.line(
        long, x="date", y="value", animation_frame="frame",
        range_y=[lo - pad, hi + pad],
        range_x=[history.index.min(), paths.index.max()],
        color_discrete_sequence=[color],
    )
    fig.add_trace(go.Scatter(
        x=history.index, y=history.values, mode="lines", name="Observed",
        line=dict(color="#264653"),
    ))
    fig.update_layout(yaxis_title=y_label, xaxis_title="")
    _set_frame_duration(fig, frame_ms)
    return apply_common_layout(fig, title, height, template)


def _band_trace(x, lower, upper, alpha, name, showlegend=True):
    return go.Scatter(
        x=list(x) + list(x[::-1]),
        y=list(upper) + list(lower[::-1]),
        fill="toself", fillcolor=f"rgba({RIBBON_COLOR},{alpha:.3f})",
        line=dict(width=0), name=name, showlegend=showlegend, hoverinfo="skip",
    )


def ribbon_chart(history, paths, levels=(0.5, 0.8, 0.95), title=None, y_label="",
                 height=500, template=PLOT_TEMPLATE):
    """Nested interval ribbons around the median forecast, widest first."""
    bands = interval_bands(paths, levels)
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=history.index, y=history.values, mode="lines", name="Observed",
        line=dict(color="#264653"),
    ))
    for i, level in enumerate(sorted(levels, reverse=True)):
        pct = int(round(level * 100))
        fig.add_trace(_band_trace(
            bands.index, bands[f"lower_{pct}"].to_numpy(), bands[f"upper_{pct}"].to_numpy(),
            alpha=0.2 + 0.2 * i, name=f"{pct}% interval",
        ))
    fig.add_trace(go.Scatter(
        x=bands.index, y=bands["median"], mode="lines", name="Median",
        line=dict(color="#1B4F72", width=2),
    ))
    fig.update_layout(yaxis_title=y_label)
    return apply_common_layout(fig, title, height, template)


def gradient_chart(history, paths, n_bands=20, title=None, y_label="",
                   height=500, template=PLOT_TEMPLATE):
    """Stack many faint nested intervals so opacity tracks predictive density."""
    levels = np.linspace(0.05, 0.95, n_bands)
    bands = interval_bands(paths, levels)
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=history.index, y=history.values, mode="lines", name="Observed",
        line=dict(color="#264653"),
    ))
    alpha = min(0.9, 1.5 / n_bands)
    for level in levels[::-1]:
        pct = int(round(level * 100))
        fig.add_trace(_band_trace(
            bands.index, bands[f"lower_{pct}"].to_numpy(), bands[f"upper_{pct}"].to_numpy(),
            alpha=alpha, name="Forecast", showlegend=False,
        ))
    fig.update_layout(yaxis_title=y_label)
    return apply_common_layout(fig, title, height, template)


def density_chart(samples, colors=None, title=None, x_label="", height=400,
                  template=PLOT_TEMPLATE):
    """KDE curve for each named sample in ``samples``."""
    fig = go.Figure()
    for name, values in samples.items():
        grid, density = kde_curve(values)
        line = dict(width=2)
        if colors and name in colors:
            line["color"] = colors[name]
        fig.add_trace(go.Scatter(x=grid, y=density, mode="lines", fill="tozeroy", name=name, line=line))
    fig.update_layout(xaxis_title=x_label, yaxis_title="Density")
    return apply_common_layout(fig, title, height, template)
