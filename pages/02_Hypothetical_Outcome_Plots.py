"""Chapter 2: Hypothetical Outcome Plots -- uncertainty you watch instead of read."""
import streamlit as st
import pandas as pd
import plotly.graph_objects as go

from uncertainty.constants import CITY_COLORS, CITY_LIST, FEATURE_LABELS
from uncertainty.data_loader import load_data, sidebar_filters
from uncertainty.plotting import apply_common_layout, hop_chart
from uncertainty.stats_helpers import describe_draws, hop_order
from uncertainty.ui_components import (
    chapter_header, concept_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, seed_control,
)

chapter_header(2, "Hypothetical Outcome Plots", part="I")

st.markdown(
    "Error bars have a reading problem. Show two bars with overlapping intervals and ask "
    "'how often is A bigger than B?', and most people answer by looking at whether the "
    "intervals overlap, which is the wrong question. A **hypothetical outcome plot** (HOP) "
    "skips the summary altogether: it shows one possible outcome per frame and lets the "
    "animation run. You answer 'how often is A bigger?' by watching how often A is bigger."
)

df = load_data()
fdf = sidebar_filters(df)

st.sidebar.subheader("HOP Settings")
seed = seed_control("hop_seed")
n_frames = st.sidebar.slider("Frames", 10, 100, 50, key="hop_frames")
frame_ms = st.sidebar.slider("Milliseconds per frame", 100, 1500, 500, step=100, key="hop_speed")

concept_box(
    "Frequency Framing, Animated",
    "Each frame is a draw from the joint distribution of everything on screen. Nothing is "
    "summarized, so nothing is lost: correlations, skew and ties all show up in the "
    "sequence. The cost is time. A single frame is one anecdote; you need to watch a "
    "few dozen before the pattern is trustworthy."
)

# ── 2.1 Static summary ───────────────────────────────────────────────────────
st.header("2.1  The Static Version")

months = sorted(fdf["month"].dropna().unique().astype(int))
if not months:
    st.warning("No data in the selected range.")
    st.stop()
month = st.selectbox(
    "Month", months, index=len(months) // 2, key="hop_month",
    format_func=lambda m: pd.Timestamp(2024, m, 1).month_name(),
)
month_df = fdf[fdf["month"] == month]
cities = [c for c in CITY_LIST if c in set(month_df["city"])]

summary = pd.DataFrame([
    {"city": c, **describe_draws(month_df.loc[month_df["city"] == c, "temperature_c"].dropna())}
    for c in cities
])

fig_static = go.Figure()
fig_static.add_trace(go.Bar(
    x=summary["city"], y=summary["mean"],
    marker_color=[CITY_COLORS[c] for c in summary["city"]],
    error_y=dict(
        type="data", symmetric=False,
        array=summary["q95"] - summary["mean"], arrayminus=summary["mean"] - summary["q05"],
    ),
))
fig_static.update_layout(yaxis_title=FEATURE_LABELS["temperature_c"])
apply_common_layout(fig_static, "Mean daily temperature with 90% range of days", 450)
st.plotly_chart(fig_static, use_container_width=True)

# ── 2.2 HOP ──────────────────────────────────────────────────────────────────
st.header("2.2  The Same Data as Outcomes")

st.markdown(
    "Now each frame picks one random day of the month for every city (the same calendar "
    "day, so a cold front that hits Dallas also hits Austin in that frame). Press play."
)

days = month_df.pivot_table(index="date", columns="city", values="temperature_c").dropna()
if days.empty:
    st.warning("Not enough overlapping days across cities for this month.")
    st.stop()

order = hop_order(len(days), n_frames, seed)
draws = (
    days.iloc[order]
    .reset_index(drop=True)
    .rename_axis("draw")
    .reset_index()
    .melt(id_vars="draw", var_name="city", value_name="temperature_c")
)

st.plotly_chart(
    hop_chart(draws, x="city", y="temperature_c", frame="draw", frame_ms=frame_ms,
              labels=FEATURE_LABELS, title="One random day per frame"),
    use_container_width=True,
)

# ── 2.3 Reading comparisons ──────────────────────────────────────────────────
st.header("2.3  Reading a Comparison Off the Animation")

if len(cities) >= 2:
    col1, col2 = st.columns(2)
    a = col1.selectbox("City A", cities, index=0, key="hop_a")
    b = col2.selectbox("City B", cities, index=1, key="hop_b")
    if a in days.columns and b in days.columns:
        wins = (days.iloc[order][a] > days.iloc[order][b]).mean()
        st.metric(f"Frames where {a} is warmer than {b}", f"{wins:.0%}")
        st.markdown(
            f"That number is what you should be *feeling* after watching the animation: "
            f"{a} wins in about {wins:.0%} of frames. Try to get the same number from the "
            f"error bars above. You mostly cannot, because the bars throw away the fact that "
            f"the two cities' weather moves together."
        )

insight_box(
    "Intervals that overlap a lot can still belong to outcomes where one side wins almost "
    "every time, if the two are strongly correlated. HOPs keep the correlation because each "
    "frame is a joint draw. Static error bars are marginal summaries and cannot."
)

warning_box(
    "Running HOPs too fast. Below roughly 300 ms per frame people stop registering individual "
    "outcomes and start seeing a blur, which is just a worse error bar."
)

code_example("""
import plotly.express as px

# draws: long frame with columns draw, city, temperature_c
fig = px.bar(draws, x="city", y="temperature_c", animation_frame="draw",
             range_y=[0, draws["temperature_c"].max() * 1.05])
""")

quiz(
    "Why does a HOP fix the y-axis range across frames?",
    [
        "To make the animation smaller",
        "So only the outcome moves and frames stay comparable",
        "Plotly requires it",
        "To hide outliers",
    ],
    correct_idx=1,
    explanation="If the axis rescaled every frame, the same bar height would mean different values.",
    key="hop_quiz",
)

takeaways([
    "A HOP shows one joint outcome per frame and lets the viewer count.",
    "Joint draws preserve correlation that side-by-side error bars discard.",
    "Fix the axes, seed the frame order, and keep frames slow enough to register.",
])

navigation(
    prev_label="Quantile Dotplots", prev_page="01_Quantile_Dotplots.py",
    next_label="Poisson Regression", next_page="03_Poisson_Regression.py",
)
