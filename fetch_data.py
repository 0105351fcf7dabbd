import os
import requests
import csv
import time
from datetime import datetime, timedelta

# Cities with their coordinates
CITIES = {
    "Dallas":      (32.7767, -96.7970),
    "San Antonio": (29.4241, -98.4936),
    "Houston":     (29.7604, -95.3698),
    "Austin":      (30.2672, -97.7431),
    "NYC":         (40.7128, -74.0060),
    "Los Angeles": (34.0522, -118.2437),
}

# Date range: last 3 years, enough for a yearly seasonal term on weekly data
END_DATE = datetime(2026, 10, 1)
START_DATE = END_DATE - timedelta(days=3 * 365)

# Open-Meteo archive API (free, no key needed)
ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

DAILY_VARS = (
    "temperature_2m_mean,relative_humidity_2m_mean,"
    "wind_speed_10m_max,precipitation_hours"
)

OUT_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "daily_weather.csv")

FIELDNAMES = [
    "city", "date", "temperature_c", "relative_humidity_pct",
    "wind_speed_kmh", "precipitation_hours",
]


def fetch_city_data(city_name, lat, lon):
    """Fetch daily weather summaries for a city from the archive API."""
    params = {
        "latitude": lat,
        "longitude": lon,
        "start_date": START_DATE.strftime("%Y-%m-%d"),
        "end_date": END_DATE.strftime("%Y-%m-%d"),
        "daily": DAILY_VARS,
        "timezone": "auto",
    }
    print(f"  Fetching daily data for {city_name} ({params['start_date']} to {params['end_date']})...")
    resp = requests.get(ARCHIVE_URL, params=params, timeout=120)
    resp.raise_for_status()
    daily = resp.json()["daily"]

    rows = []
    for i, day in enumerate(daily["time"]):
        rows.append({
            "city": city_name,
            "date": day,
            "temperature_c": daily["temperature_2m_mean"][i],
            "relative_humidity_pct": daily["relative_humidity_2m_mean"][i],
            "wind_speed_kmh": daily["wind_speed_10m_max"][i],
            "precipitation_hours": daily["precipitation_hours"][i],
        })
    return rows


def main(out_path=OUT_PATH):
    all_rows = []
    for city_name, (lat, lon) in CITIES.items():
        print(f"\n[{city_name}]")
        city_rows = fetch_city_data(city_name, lat, lon)
        all_rows.extend(city_rows)
        print(f"  -> {len(city_rows):,} daily records")
        time.sleep(1)  # be polite to the free API

    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(all_rows)

    print(f"\nDone! Wrote {len(all_rows):,} rows to {out_path}")


if __name__ == "__main__":
    main()
