"""Chapter 4: Structural Time Series -- forecast paths, ribbons, gradients and dots."""
import streamlit as st
import numpy as np
import pandas as pd

from uncertainty.constants import CITY_LIST, FEATURE_LABELS, INTERVAL_LEVELS
from uncertainty.data_loader import load_data, sidebar_filters, weekly_series
from uncertainty.dotplot import build_from_samples
from uncertainty.models import forecast_paths, train_structural
from uncertainty.plotting import (
    gradient_chart, hop_paths_chart, quantile_dotplot_chart, ribbon_chart,
)
from uncertainty.stats_helpers import describe_draws, interval_bands, interval_coverage, prob_at_most
from uncertainty.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, seed_control, dot_count_control,
)

chapter_header(4, "Structural Time Series", part="II")

st.markdown(
    "A structural time series model says a series is a sum of parts you can name: a level "
    "that wanders, a slope that wanders more slowly, a seasonal cycle, and noise. Because "
    "every part is random, the model does not produce *a* forecast. It produces a cloud of "
    "possible futures, and the real question of this chapter is how to draw that cloud so "
    "people do not just read the middle of it."
)

df = load_data()
fdf = sidebar_filters(df)

st.sidebar.subheader("Forecast Settings")
city = st.sidebar.selectbox("City", CITY_LIST, key="sts_city")
horizon = st.sidebar.slider("Forecast horizon (weeks)", 4, 52, 26, key="sts_horizon")
seasonal = st.sidebar.checkbox("Yearly seasonal term", value=True, key="sts_seasonal")
n_paths = st.sidebar.slider("Simulated paths", 50, 1000, 300, step=50, key="sts_paths")
dot_count = dot_count_control("sts_dots")
seed = seed_control("sts_seed")

formula_box(
    "Local Linear Trend + Seasonal",
    r"y_t = \underbrace{\mu_t}_{\text{level}} + \underbrace{\gamma_t}_{\text{season}} + \varepsilon_t, \quad "
    r"\mu_{t+1} = \mu_t + \underbrace{\beta_t}_{\text{slope}} + \eta_t, \quad \beta_{t+1} = \beta_t + \zeta_t",
    "Each Greek noise term has its own variance, estimated from the data. The seasonal term "
    "is a pair of sine/cosine waves with a period of one year (about 52.18 weeks).",
)

series = weekly_series(fdf, city, "temperature_c")
if len(series) < 20:
    st.warning("Need at least 20 weeks of data; widen the date range.")
    st.stop()

n_holdout = min(horizon, len(series) // 5)
train = series.iloc[:-n_holdout]
test = series.iloc[-n_holdout:]

# ── 4.1 Fit ──────────────────────────────────────────────────────────────────
st.header(f"4.1  Fitting Weekly Temperature for {city}")

season_period = 52.18 if seasonal and len(train) >= 2 * 52 else None
if seasonal and season_period is None:
    st.info("Less than two years of training data, so the seasonal term is left out.")

try:
    with st.spinner("Fitting structural model..."):
        results = train_structural(train, seasonal_period=season_period)
        paths = forecast_paths(results, steps=n_holdout + horizon, n_paths=n_paths, seed=seed)
    model_fitted = True
except Exception as e:
    st.error(f"Model fitting failed: {e}. Try a different city or date range.")
    model_fitted = False

if model_fitted:
    col1, col2, col3 = st.columns(3)
    col1.metric("AIC", f"{results.aic:.1f}")
    col2.metric("Training weeks", f"{len(train)}")
    col3.metric("Held-out weeks", f"{n_holdout}")

    with st.expander("Model Summary"):
        st.text(str(results.summary()))

    history = train.iloc[-104:]
    y_label = FEATURE_LABELS["temperature_c"]

# ── 4.2 Ribbon ───────────────────────────────────────────────────────────────
if model_fitted:
    st.header("4.2  Ribbons: Nested Intervals")

    st.markdown(
        "The standard picture: median line, with bands for the central "
        + ", ".join(f"{int(level * 100)}%" for level in INTERVAL_LEVELS)
        + " of simulated paths. Several bands are better than one, because a single 95% "
        "band invites people to treat its edge as a wall."
    )
    st.plotly_chart(
        ribbon_chart(history, paths, levels=INTERVAL_LEVELS, y_label=y_label,
                     title="Forecast with 50/80/95% intervals"),
        use_container_width=True,
    )

    bands = interval_bands(paths.iloc[:n_holdout], levels=(0.8,))
    coverage = interval_coverage(test.to_numpy(), bands["lower_80"].to_numpy(), bands["upper_80"].to_numpy())
    st.metric("Held-out weeks inside the 80% band", f"{coverage:.0%}")

# ── 4.3 Gradient ─────────────────────────────────────────────────────────────
if model_fitted:
    st.header("4.3  Gradients: No Edges at All")

    st.markdown(
        "Take the ribbon idea to its limit: twenty faint nested intervals stacked on top of "
        "each other. The darkness at any point tracks how many intervals cover it, which is "
        "roughly how likely that value is. There is no edge to mistake for a boundary."
    )
    n_bands = st.slider("Number of bands", 5, 40, 20, key="sts_bands")
    st.plotly_chart(
        gradient_chart(history, paths, n_bands=n_bands, y_label=y_label, title="Gradient forecast"),
        use_container_width=True,
    )

# ── 4.4 HOPs ─────────────────────────────────────────────────────────────────
if model_fitted:
    st.header("4.4  Forecast Paths as Hypothetical Outcomes")

    st.markdown(
        "Ribbons summarize each week separately, which hides something important: a path "
        "that runs warm in week 3 tends to stay warm in week 4. The animation shows whole "
        "paths, one per frame, so that persistence is visible."
    )
    st.plotly_chart(
        hop_paths_chart(history, paths, n_frames=40, seed=seed, y_label=y_label,
                        title="One simulated future per frame"),
        use_container_width=True,
    )

    warning_box(
        "Reading a single frame as 'the forecast'. Any one path is as likely as any other; "
        "the information is in how they vary, which only shows over many frames."
    )

# ── 4.5 Dotplot at a horizon ─────────────────────────────────────────────────
if model_fitted:
    st.header("4.5  One Week Out of the Cloud: A Dotplot")

    future = paths.index[n_holdout:]
    week = st.select_slider(
        "Forecast week", options=list(future), value=future[min(3, len(future) - 1)],
        format_func=lambda d: pd.Timestamp(d).strftime("%Y-%m-%d"), key="sts_week",
    )
    week_draws = paths.loc[week].to_numpy()
    dots = build_from_samples(week_draws, dot_count)

    cold = st.slider(
        "Cold week threshold (°C)",
        float(np.floor(week_draws.min())), float(np.ceil(week_draws.max())),
        float(np.round(np.median(week_draws))), key="sts_cold",
    )
    st.plotly_chart(
        quantile_dotplot_chart(dots, threshold=cold, x_label=y_label,
                               title=f"Week of {pd.Timestamp(week).strftime('%b %d, %Y')}"),
        use_container_width=True,
    )
    stats = describe_draws(week_draws)
    c1, c2, c3 = st.columns(3)
    c1.metric("Median", f"{stats['median']:.1f} °C")
    c2.metric("90% range", f"{stats['q05']:.1f} to {stats['q95']:.1f} °C")
    c3.metric("Dots at or below threshold", f"{round(prob_at_most(dots, cold) * dot_count)} of {dot_count}")

    insight_box(
        "The dotplot is a vertical slice through the gradient above, turned sideways and "
        "made countable. The same simulated paths feed every chart on this page; only the "
        "encoding changes."
    )

concept_box(
    "Why Simulate Instead of Using the Formula?",
    "For this model the forecast distribution is Gaussian and has a closed form, so the "
    "ribbon could come straight from the forecast variance. Simulation earns its keep the "
    "moment you want anything else: whole paths for HOPs, the chance of three cold weeks "
    "in a row, or the warmest week in the next quarter. All of those are one line of pandas "
    "over the simulated paths."
)

code_example("""
from statsmodels.tsa.statespace.structural import UnobservedComponents

model = UnobservedComponents(
    weekly, level="local linear trend",
    freq_seasonal=[{"period": 52.18, "harmonics": 2}],
)
results = model.fit(disp=False)

# 300 simulated futures, 26 weeks each
paths = results.simulate(nsimulations=26, repetitions=300, anchor="end", random_state=42)
""")

quiz(
    "Which display shows that a warm week tends to be followed by another warm week?",
    ["Ribbon chart", "Gradient chart", "Path HOPs", "Quantile dotplot for one week"],
    correct_idx=2,
    explanation="Only whole paths carry the week-to-week dependence; the others summarize weeks one at a time.",
    key="sts_quiz",
)

takeaways([
    "Structural models decompose a series into level, slope, season and noise, all random.",
    "Simulated paths are the common currency: ribbons, gradients, HOPs and dotplots all come from them.",
    "Multiple nested bands or a gradient avoid the false wall of a single interval edge.",
    "Only path-level displays show persistence from one period to the next.",
])

navigation(prev_label="Poisson Regression", prev_page="03_Poisson_Regression.py")
