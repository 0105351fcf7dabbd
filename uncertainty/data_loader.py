"""Cached data loading, filtering and series preparation."""
import streamlit as st
import pandas as pd
import os

DATA_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "daily_weather.csv")


def add_calendar_columns(df):
    """Add month, season and day-of-year columns derived from ``date``."""
    from uncertainty.constants import SEASONS
    df = df.copy()
    df["month"] = df["date"].dt.month
    df["day_of_year"] = df["date"].dt.dayofyear
    df["year"] = df["date"].dt.year
    df["season"] = df["month"].map(SEASONS)
    return df


@st.cache_data
def load_data(path=DATA_PATH):
    """Load the daily weather dataset with date parsing and derived columns."""
    if not os.path.exists(path):
        st.error(
            f"Data file not found at `{path}`. Run `python fetch_data.py` once to "
            "download it from the Open-Meteo archive."
        )
        st.stop()
    df = pd.read_csv(path, parse_dates=["date"])
    return add_calendar_columns(df)


def sidebar_filters(df):
    """Render sidebar city and date filters; return filtered DataFrame."""
    from uncertainty.constants import CITY_LIST
    st.sidebar.header("Filters")
    if "selected_cities" not in st.session_state:
        st.session_state.selected_cities = CITY_LIST.copy()
    selected = st.sidebar.multiselect(
        "Cities", CITY_LIST,
        default=st.session_state.selected_cities,
        key="city_filter"
    )
    st.session_state.selected_cities = selected

    min_date = df["date"].min().date()
    max_date = df["date"].max().date()
    date_range = st.sidebar.date_input(
        "Date range", value=(min_date, max_date),
        min_value=min_date, max_value=max_date,
        key="date_filter"
    )
    if len(date_range) == 2:
        start, end = date_range
    else:
        start, end = min_date, max_date

    mask = (
        df["city"].isin(selected) &
        (df["date"].dt.date >= start) &
        (df["date"].dt.date <= end)
    )
    return df[mask].copy()


def get_city_data(df, city):
    """Filter DataFrame to a single city."""
    return df[df["city"] == city].copy()


def weekly_series(df, city, column="temperature_c"):
    """Weekly mean of ``column`` for one city, on a regular weekly index.

    Gaps are filled by linear interpolation so state-space models see an
    evenly spaced series.
    """
    city_df = get_city_data(df, city)
    series = (
        city_df.set_index("date")[column]
        .sort_index()
        .resample("W")
        .mean()
        .interpolate(method="linear")
    )
    series.name = column
    return series


def slider_range(values):
    """Return (min, max, median) for a slider over ``values``.

    A constant column gets max = min + 1 so the slider still has a range.
    """
    values = pd.Series(values).dropna()
    lo, hi = float(values.min()), float(values.max())
    if hi <= lo:
        hi = lo + 1.0
    return lo, hi, float(values.median())
