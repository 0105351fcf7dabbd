"""Chapter 1: Quantile Dotplots -- counting dots instead of reading densities."""
import streamlit as st
import numpy as np
import pandas as pd
import plotly.graph_objects as go

from uncertainty.constants import (
    BUS_ARRIVAL_COUNTS, BUS_ARRIVAL_EDGES, CITY_LIST, DOT_COLOR, FEATURE_LABELS,
)
from uncertainty.data_loader import load_data, sidebar_filters, get_city_data
from uncertainty.dotplot import (
    InvalidArgument, QuantileFunction, build_from_quantile_function, build_from_samples,
    plotting_positions,
)
from uncertainty.plotting import (
    apply_common_layout, density_chart, histogram_chart, quantile_dotplot_chart,
)
from uncertainty.stats_helpers import prob_at_most
from uncertainty.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, quiz, takeaways, navigation, seed_control, dot_count_control,
)

# ── Header ───────────────────────────────────────────────────────────────────
chapter_header(1, "Quantile Dotplots", part="I")
st.markdown(
    "Suppose I tell you the temperature tomorrow has a normal distribution with mean 22 "
    "and standard deviation 3. Quick: what is the chance it goes above 26? Unless you have "
    "a z-table tattooed somewhere, you are guessing. Now suppose I show you twenty dots and "
    "say each dot is an equally likely tomorrow, and three of them sit above 26. The answer "
    "is *three in twenty*. You counted. That is the whole idea of a **quantile dotplot**."
)

# ── Load data ────────────────────────────────────────────────────────────────
df = load_data()
fdf = sidebar_filters(df)

st.sidebar.subheader("Dotplot Settings")
dot_count = dot_count_control("qd_dots")
seed = seed_control("qd_seed")

concept_box(
    "One Dot, One Equal Slice of Probability",
    "A quantile dotplot with N dots places dot i at the quantile for cumulative "
    "probability (i - 0.5) / N. Every dot therefore owns exactly 1/N of the probability. "
    "Stack dots that land close together and you get something shaped like a histogram, "
    "except every mark now has a meaning you can count: <b>k dots out of N is a k/N chance</b>."
)

formula_box(
    "Plotting Positions",
    r"p_i = \frac{i - 0.5}{N}, \qquad \text{dot}_i = \underbrace{F^{-1}(p_i)}_{\text{quantile function}}, \qquad i = 1, \ldots, N",
    "The half-step offset keeps dots away from probability 0 and 1, where heavy-tailed "
    "distributions have infinite quantiles. It also makes the dotplot symmetric.",
)

st.dataframe(
    pd.DataFrame({"dot": np.arange(1, 5), "p_i (N = 4)": plotting_positions(4)}),
    use_container_width=False, hide_index=True,
)

# ── 1.1 From a sample ────────────────────────────────────────────────────────
st.header("1.1  From a Sample: Daily Temperature")

st.markdown(
    "The easiest source of dots is a pile of draws. Here the draws are the observed daily "
    "mean temperatures for one city. With thousands of draws, a histogram looks great, but "
    "ask someone to read a probability off it and they squint. Same data, twenty dots:"
)

city = st.selectbox("City", CITY_LIST, key="qd_city")
temps = get_city_data(fdf, city)["temperature_c"].dropna().to_numpy()

if len(temps) == 0:
    st.warning("No data for this city in the selected date range.")
    st.stop()

dots = build_from_samples(temps, dot_count)
threshold = st.slider(
    "Highlight days at or below (°C)",
    float(np.floor(temps.min())), float(np.ceil(temps.max())),
    float(np.round(np.median(temps))), key="qd_threshold",
)

col1, col2 = st.columns(2)
with col1:
    fig_hist = histogram_chart(temps, nbins=40, title=f"Histogram of {len(temps):,} days",
                               x_label=FEATURE_LABELS["temperature_c"])
    fig_hist.add_vline(x=threshold, line_dash="dash", line_color="#E63946")
    st.plotly_chart(fig_hist, use_container_width=True)
with col2:
    fig_dots = quantile_dotplot_chart(
        dots, title=f"{dot_count}-dot quantile dotplot",
        x_label=FEATURE_LABELS["temperature_c"], threshold=threshold,
    )
    st.plotly_chart(fig_dots, use_container_width=True)

c1, c2 = st.columns(2)
c1.metric("Dots at or below threshold", f"{round(prob_at_most(dots, threshold) * dot_count)} of {dot_count}")
c2.metric("Exact share of days", f"{(temps <= threshold).mean():.1%}")

insight_box(
    "The dot count and the exact share almost never agree perfectly, and that is fine. "
    "The dotplot rounds probability to the nearest 1/N. People are bad at reading "
    "probabilities finer than that from any chart anyway, so you give up precision you "
    "were not going to get and gain a number people can actually say out loud."
)

# ── 1.2 Dot count ────────────────────────────────────────────────────────────
st.header("1.2  How Many Dots?")

st.markdown(
    "Fewer dots are easier to count; more dots follow the shape more closely. Below, the "
    "same sample is summarized with 10, 20, 50 and 100 dots. Past about 50 you stop counting "
    "and start reading area again, which defeats the purpose."
)

tabs = st.tabs(["10 dots", "20 dots", "50 dots", "100 dots"])
for tab, n in zip(tabs, [10, 20, 50, 100]):
    with tab:
        st.plotly_chart(
            quantile_dotplot_chart(build_from_samples(temps, n), x_label=FEATURE_LABELS["temperature_c"]),
            use_container_width=True,
        )

warning_box(
    "Treating the dot positions as raw data points. They are quantiles, not observations: "
    "with 20 dots from 1,000 days, no dot is 'a day'. Asking for more dots than you have "
    "draws is allowed: the smallest and largest draws simply repeat at the ends."
)

# ── 1.3 From a quantile function ─────────────────────────────────────────────
st.header("1.3  From a Hand-Digitized Histogram: When Is My Bus?")

st.markdown(
    "Sometimes there is no sample. All you have is a chart someone printed: a histogram of "
    "how many minutes until the next bus, drawn with narrow bins near the middle and lazy wide "
    "bins in the tail. You cannot take quantiles of a picture, but you *can* turn the bin edges "
    "into a cumulative curve and interpolate it with a monotone cubic (PCHIP), which never "
    "overshoots and so never goes backwards. That curve is a quantile function, and dots come "
    "straight out of it."
)

bus_qf = QuantileFunction.from_histogram(BUS_ARRIVAL_EDGES, BUS_ARRIVAL_COUNTS)
widths = np.diff(BUS_ARRIVAL_EDGES)
density = np.asarray(BUS_ARRIVAL_COUNTS) / widths / np.sum(BUS_ARRIVAL_COUNTS)

col1, col2 = st.columns(2)
with col1:
    fig_bins = go.Figure(go.Bar(
        x=np.asarray(BUS_ARRIVAL_EDGES[:-1]) + widths / 2, y=density, width=widths,
        marker_color=DOT_COLOR, opacity=0.7,
    ))
    fig_bins.update_layout(xaxis_title="Minutes until bus", yaxis_title="Density")
    apply_common_layout(fig_bins, "Digitized histogram (uneven bins)", 350)
    st.plotly_chart(fig_bins, use_container_width=True)
with col2:
    grid = np.linspace(0, 1, 201)
    fig_qf = go.Figure()
    fig_qf.add_trace(go.Scatter(x=grid, y=bus_qf(grid), mode="lines", name="PCHIP quantile function"))
    fig_qf.add_trace(go.Scatter(
        x=bus_qf.probabilities, y=bus_qf.values, mode="markers", name="Bin edges",
        marker=dict(size=9, color="#E63946"),
    ))
    fig_qf.update_layout(xaxis_title="Cumulative probability", yaxis_title="Minutes")
    apply_common_layout(fig_qf, "Quantile function", 350)
    st.plotly_chart(fig_qf, use_container_width=True)

walk = st.slider("Minutes it takes you to walk to the stop", 0, 30, 8, key="qd_walk")
try:
    bus_dots = build_from_quantile_function(bus_qf, dot_count)
except InvalidArgument as e:
    st.error(f"Could not build dots: {e}")
    st.stop()

# the bus leaves before you arrive when it shows up sooner than your walk
missed = prob_at_most(bus_dots, walk)
st.plotly_chart(
    quantile_dotplot_chart(bus_dots, binwidth=2, threshold=walk, x_label="Minutes until bus",
                           title="Red dots: buses you miss"),
    use_container_width=True,
)
st.metric("Chance you miss it", f"{round(missed * dot_count)} in {dot_count}")

# ── 1.4 A random sample vs. quantile dots ────────────────────────────────────
st.header("1.4  Why Not Just Draw N Random Samples?")

st.markdown(
    "You could show N random draws instead of N quantiles. The trouble is that random draws "
    "are noisy: with 20 of them, the tail might hold zero dots or five. Quantile dots are the "
    "*expected* spread, the same every time. Change the seed and watch only one of these move."
)

rng = np.random.RandomState(seed)
random_dots = rng.choice(temps, size=dot_count, replace=True)
col1, col2 = st.columns(2)
with col1:
    st.plotly_chart(quantile_dotplot_chart(np.sort(random_dots), title=f"{dot_count} random draws (seed {seed})",
                                           x_label=FEATURE_LABELS["temperature_c"]),
                    use_container_width=True)
with col2:
    st.plotly_chart(quantile_dotplot_chart(dots, title=f"{dot_count} quantile dots",
                                           x_label=FEATURE_LABELS["temperature_c"]),
                    use_container_width=True)

st.plotly_chart(
    density_chart({"All days": temps, "Quantile dots": dots}, x_label=FEATURE_LABELS["temperature_c"],
                  title="Density of the data vs. density of the dots"),
    use_container_width=True,
)

code_example("""
from uncertainty.dotplot import QuantileFunction, build_from_samples, build_from_quantile_function

# From draws
dots = build_from_samples(temps, 20)

# From a histogram with uneven bins
qf = QuantileFunction.from_histogram([0, 2, 4, 6, 8, 10, 12, 15, 20, 30],
                                     [3, 9, 17, 21, 16, 11, 9, 8, 6])
bus_dots = build_from_quantile_function(qf, 20)
""")

quiz(
    "A 20-dot quantile dotplot has 4 dots left of your threshold. What is the chance of an outcome below it?",
    ["4%", "20%", "40%", "Cannot tell without the density"],
    correct_idx=1,
    explanation="Each dot is 1/20 = 5% of probability, so 4 dots is 20%.",
    key="qd_quiz",
)

takeaways([
    "A quantile dotplot turns probability into a count: k of N dots is a k/N chance.",
    "Dots sit at the (i - 0.5)/N quantiles, which avoids infinite tails and keeps the plot symmetric.",
    "Any monotone quantile function works as a source, including one interpolated from a rough histogram.",
    "Quantile dots do not jitter between renders the way random draws do.",
])

navigation(next_label="Hypothetical Outcome Plots", next_page="02_Hypothetical_Outcome_Plots.py")
