"""Shared constants: colors, labels, defaults for seeds, dots and intervals."""

CITY_COLORS = {
    "Dallas": "#E63946",
    "San Antonio": "#F4A261",
    "Houston": "#2A9D8F",
    "Austin": "#264653",
    "NYC": "#7209B7",
    "Los Angeles": "#FB8500",
}

CITY_LIST = list(CITY_COLORS.keys())

FEATURE_COLS = ["temperature_c", "relative_humidity_pct", "wind_speed_kmh"]
COUNT_TARGET = "precipitation_hours"

FEATURE_LABELS = {
    "temperature_c": "Mean Temperature (°C)",
    "relative_humidity_pct": "Mean Relative Humidity (%)",
    "wind_speed_kmh": "Max Wind Speed (km/h)",
    "precipitation_hours": "Hours of Precipitation",
}

SEASONS = {
    12: "Winter", 1: "Winter", 2: "Winter",
    3: "Spring", 4: "Spring", 5: "Spring",
    6: "Summer", 7: "Summer", 8: "Summer",
    9: "Fall", 10: "Fall", 11: "Fall",
}

# Reproducible rendering; pages expose both as sidebar controls.
DEFAULT_SEED = 42
DEFAULT_DOT_COUNT = 20

INTERVAL_LEVELS = (0.5, 0.8, 0.95)

PLOT_TEMPLATE = "plotly_white"
DOT_COLOR = "#2E86C1"
HIGHLIGHT_COLOR = "#E63946"
RIBBON_COLOR = "38,70,83"  # rgb triple, alpha is set per band

# Minutes until the next bus, digitized by hand from a printed arrival
# histogram. Bins are deliberately uneven: the tail was drawn coarsely.
BUS_ARRIVAL_EDGES = [0, 2, 4, 6, 8, 10, 12, 15, 20, 30]
BUS_ARRIVAL_COUNTS = [3, 9, 17, 21, 16, 11, 9, 8, 6]

PART_TITLES = {
    "I": "Encodings",
    "II": "Models",
}
