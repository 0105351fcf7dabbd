"""Chapter 3: Poisson Regression -- predicting hours of rain as a distribution."""
import streamlit as st
import numpy as np
import pandas as pd

from uncertainty.constants import CITY_LIST, COUNT_TARGET, FEATURE_COLS, FEATURE_LABELS
from uncertainty.data_loader import load_data, sidebar_filters, get_city_data, slider_range
from uncertainty.dotplot import build_from_samples
from uncertainty.models import (
    count_metrics, poisson_predictive_draws, predict_counts, prepare_count_data, train_poisson,
)
from uncertainty.plotting import density_chart, hop_chart, quantile_dotplot_chart
from uncertainty.stats_helpers import interval_coverage, prob_at_most
from uncertainty.ui_components import (
    chapter_header, concept_box, formula_box, insight_box, warning_box,
    code_example, takeaways, navigation, seed_control, dot_count_control,
)

chapter_header(3, "Poisson Regression", part="II")

st.markdown(
    "Hours of rain in a day is a count: 0, 1, 2, up to 24, never 2.7 and never negative. "
    "A linear regression will happily predict -1.3 hours for a dry day, which is the kind "
    "of answer that erodes trust. **Poisson regression** models the log of the expected "
    "count instead, so predictions stay positive and uncertainty grows with the mean, the "
    "way it does for real counts. Then we do the interesting part: show the prediction as "
    "dots instead of a number."
)

df = load_data()
fdf = sidebar_filters(df)

st.sidebar.subheader("Model Settings")
city = st.sidebar.selectbox("City", CITY_LIST, key="pois_city")
features = st.sidebar.multiselect(
    "Predictors", FEATURE_COLS,
    default=["relative_humidity_pct", "temperature_c"], key="pois_features",
)
dot_count = dot_count_control("pois_dots")
n_draws = st.sidebar.slider("Predictive draws", 100, 2000, 500, step=100, key="pois_draws")
seed = seed_control("pois_seed")

formula_box(
    "Poisson Regression",
    r"\underbrace{Y_i}_{\text{rain hours}} \sim \text{Poisson}(\mu_i), \qquad "
    r"\log \mu_i = \beta_0 + \underbrace{\beta_1 \cdot \text{humidity}_i + \beta_2 \cdot \text{temp}_i}_{\text{predictors}}",
    "Each coefficient is a multiplicative effect: exp(beta_1) is how much the expected count "
    "is multiplied by for one more percentage point of humidity.",
)

if not features:
    st.warning("Pick at least one predictor in the sidebar.")
    st.stop()

city_df = get_city_data(fdf, city)
if len(city_df.dropna(subset=features + [COUNT_TARGET])) < 30:
    st.warning("Not enough days for this city and date range to fit a model.")
    st.stop()

# ── 3.1 Fit ──────────────────────────────────────────────────────────────────
st.header(f"3.1  Fitting the Model for {city}")

X_train, X_test, y_train, y_test = prepare_count_data(city_df, features, COUNT_TARGET, seed=seed)

try:
    results = train_poisson(X_train, y_train)
    model_fitted = True
except Exception as e:
    st.error(f"Model fitting failed: {e}. Try a different set of predictors.")
    model_fitted = False

if model_fitted:
    coef = pd.DataFrame({
        "coefficient": results.params,
        "std error": results.bse,
        "multiplier exp(beta)": np.exp(results.params),
    }).round(4)
    st.dataframe(coef, use_container_width=True)

    pred_test = predict_counts(results, X_test)
    metrics = count_metrics(y_test, pred_test)
    c1, c2, c3 = st.columns(3)
    c1.metric("Test mean Poisson deviance", f"{metrics['poisson_deviance']:.2f}")
    c2.metric("Test MAE", f"{metrics['mae']:.2f} h")
    c3.metric("Training days", f"{len(X_train):,}")

    with st.expander("Model Summary"):
        st.text(str(results.summary()))

# ── 3.2 One scenario as dots ────────────────────────────────────────────────
if model_fitted:
    st.header("3.2  A Forecast You Can Count")

    st.markdown(
        "Pick the conditions for a hypothetical day. The model gives an expected count, but "
        "the expected count is not what happens: what happens is a draw. We draw coefficients "
        "from their approximate posterior, then a Poisson count from each, and summarize the "
        "pile of counts with a quantile dotplot."
    )

    scenario = {}
    cols = st.columns(len(features))
    for col, feat in zip(cols, features):
        lo, hi, mid = slider_range(city_df[feat])
        scenario[feat] = col.slider(
            FEATURE_LABELS[feat], lo, hi, mid, key=f"pois_{feat}",
        )
    X_new = pd.DataFrame([scenario])[features]

    draws = poisson_predictive_draws(results, X_new, n_draws=n_draws, seed=seed)
    dots = build_from_samples(draws["count"], dot_count)

    hours = st.slider("Plans ruined if it rains at least this many hours", 1, 24, 3, key="pois_hours")
    ruined = 1 - prob_at_most(dots, hours - 0.5)

    st.plotly_chart(
        quantile_dotplot_chart(dots, binwidth=1, threshold=hours - 0.5,
                               x_label=FEATURE_LABELS[COUNT_TARGET],
                               title="Predicted hours of rain (highlighted dots: your plans survive)"),
        use_container_width=True,
    )
    c1, c2 = st.columns(2)
    c1.metric("Expected hours", f"{draws['mu'].mean():.2f}")
    c2.metric("Dots at or above the threshold", f"{round(ruined * dot_count)} of {dot_count}")

    insight_box(
        "The expected count can be 1.5 hours while most dots sit at zero. That is the "
        "normal shape of rain: usually nothing, occasionally a lot. A single predicted "
        "number hides it completely; the dots make it obvious."
    )

# ── 3.3 HOPs of scenarios ───────────────────────────────────────────────────
if model_fitted:
    st.header("3.3  Dry vs. Humid Days as Outcomes")

    base = city_df[features].median()
    scenarios = pd.DataFrame([base, base, base])[features].reset_index(drop=True)
    focus = features[0]
    scenarios[focus] = city_df[focus].quantile([0.1, 0.5, 0.9]).to_numpy()
    labels = [f"low {FEATURE_LABELS[focus].lower()}", "typical", f"high {FEATURE_LABELS[focus].lower()}"]

    scen_draws = poisson_predictive_draws(results, scenarios, n_draws=60, seed=seed)
    scen_draws["scenario"] = scen_draws["row"].map(dict(enumerate(labels)))

    st.plotly_chart(
        hop_chart(scen_draws, x="scenario", y="count", frame="draw",
                  labels={"count": FEATURE_LABELS[COUNT_TARGET], "scenario": ""},
                  title="One hypothetical day per frame"),
        use_container_width=True,
    )

    st.plotly_chart(
        density_chart(
            {label: scen_draws.loc[scen_draws["row"] == i, "mu"] for i, label in enumerate(labels)},
            x_label="Expected hours (mu)", title="Uncertainty in the expected count",
        ),
        use_container_width=True,
    )

    warning_box(
        "Confusing the two densities. The curves above show uncertainty in the *average* "
        "(mu). The animation shows single days, which vary far more. Prediction intervals "
        "must be built from the counts, not from mu."
    )

# ── 3.4 Calibration ─────────────────────────────────────────────────────────
if model_fitted:
    st.header("3.4  Do the Dots Tell the Truth?")

    st.markdown(
        "A dotplot is only as honest as the model behind it. Check on held-out days: if we "
        "take the central 80% of each day's predictive draws, about 80% of actual outcomes "
        "should land inside. Counts are discrete, so expect a little over-coverage."
    )

    test_draws = poisson_predictive_draws(results, X_test, n_draws=200, seed=seed)
    bounds = test_draws.groupby("row")["count"].quantile([0.1, 0.9]).unstack()
    coverage = interval_coverage(y_test.to_numpy(), bounds[0.1].to_numpy(), bounds[0.9].to_numpy())
    st.metric("Held-out days inside their 80% interval", f"{coverage:.0%}")

    concept_box(
        "Over-dispersion",
        "If coverage is well below 80%, the data vary more than a Poisson allows (rain "
        "tends to arrive in long storms or not at all). The usual fix is a negative binomial "
        "model, which adds a dispersion parameter. The dotplot code does not change; only "
        "the draws do."
    )

code_example("""
import numpy as np
import statsmodels.api as sm

results = sm.GLM(y, sm.add_constant(X), family=sm.families.Poisson()).fit()

rng = np.random.RandomState(42)
beta = rng.multivariate_normal(results.params, results.cov_params(), size=500)
mu = np.exp(sm.add_constant(X_new, has_constant="add") @ beta.T)
counts = rng.poisson(mu)

dots = build_from_samples(counts.ravel(), 20)
""")

takeaways([
    "Poisson regression keeps count predictions positive and lets spread grow with the mean.",
    "Predictive draws combine coefficient uncertainty with the Poisson noise of a single day.",
    "A dotplot of predicted counts answers 'what are the chances' questions directly.",
    "Check interval coverage on held-out data before trusting any uncertainty display.",
])

navigation(
    prev_label="Hypothetical Outcome Plots", prev_page="02_Hypothetical_Outcome_Plots.py",
    next_label="Structural Time Series", next_page="04_Structural_Time_Series.py",
)
