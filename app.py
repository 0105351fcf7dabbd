"""Uncertainty Pedagogy App — Main Entry Point."""
import streamlit as st

st.set_page_config(
    page_title="Showing Uncertainty",
    page_icon="🎲",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("Showing Uncertainty")
st.subheader("Four short chapters on drawing predictions so people read the uncertainty too")

st.markdown("""
Most forecasts get shown as a line. Maybe a line with a gray band around it, if someone was feeling
generous. And most people, handed that line, read it as *the* answer and ignore the band entirely.
This is not a character flaw. Intervals are abstract, and abstract things are easy to skip.

These chapters are about encodings that make uncertainty harder to skip: **quantile dotplots**, where
every dot is an equally likely outcome you can count; **hypothetical outcome plots**, where you watch
outcomes happen one at a time; and **ribbons and gradients**, which at least make the band look like
it means something.

### The Dataset

Daily weather summaries for **6 US cities** (Dallas, San Antonio, Houston, Austin, NYC and Los Angeles)
from the Open-Meteo archive: mean temperature, mean humidity, max wind speed and hours of
precipitation. Run `python fetch_data.py` once to download it.

### How to Use This App

1. **Navigate** via the sidebar. Chapter 1 introduces the dotplot the later chapters lean on
2. **Change the seed** in the sidebar to see a different set of random draws. Everything random is
   seeded, so the same seed always gives the same picture
3. **Change the dot count** and watch how coarse or fine the dotplot gets

### Chapters
""")

chapters = {
    "Chapter 1: Quantile Dotplots": "twenty dots instead of a density, and the bus you might miss",
    "Chapter 2: Hypothetical Outcome Plots": "uncertainty as animation",
    "Chapter 3: Poisson Regression": "how many hours of rain tomorrow, as a distribution",
    "Chapter 4: Structural Time Series": "forecast paths, ribbons and gradients",
}

for chapter, desc in chapters.items():
    st.markdown(f"**{chapter}** -- {desc}")

st.divider()

st.subheader("Dataset Preview")
from uncertainty.data_loader import load_data
df = load_data()
st.dataframe(df.head(20), use_container_width=True)

col1, col2, col3 = st.columns(3)
col1.metric("Total Rows", f"{len(df):,}")
col2.metric("Cities", df["city"].nunique())
col3.metric("Date Range", f"{df['date'].min().strftime('%Y-%m-%d')} to {df['date'].max().strftime('%Y-%m-%d')}")
