import numpy as np
import pandas as pd
import pytest

from fieldstats.data_processing import prepare_palmetto
from fieldstats.stats import ConvergenceError, fit_logistic

FULL = ("height", "length", "width", "green_lvs")
REDUCED = ("height", "width", "green_lvs")


def test_full_and_reduced_models_fit(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL)
    full = fit_logistic(data, FULL, "is_positive")
    reduced = fit_logistic(data, REDUCED, "is_positive")

    assert list(full.params.index) == ["const", *FULL]
    assert list(reduced.params.index) == ["const", *REDUCED]
    assert full.n == reduced.n == len(data)
    assert full.log_likelihood >= reduced.log_likelihood
    table = full.coefficient_table()
    assert table["p_value"].between(0, 1).all()
    assert (table["std_error"] > 0).all()
    # shorter plants with wider canopies are more likely the positive species
    assert full.params["height"] < 0
    assert full.params["width"] > 0


def test_predicted_probabilities_are_valid(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL)
    fit = fit_logistic(data, FULL, "is_positive")
    p = fit.predict_proba(data)
    assert p.shape == (len(data),)
    assert np.all((p >= 0) & (p <= 1))
    assert np.all(fit.odds_ratios() > 0)


def test_missing_predictor_values_raise(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL)
    data.loc[3, "width"] = np.nan
    with pytest.raises(ValueError, match="missing values"):
        fit_logistic(data, FULL, "is_positive")


def test_single_class_label_raises():
    df = pd.DataFrame({"x": [1.0, 2.0, 3.0, 4.0], "y": [1, 1, 1, 1]})
    with pytest.raises(ValueError):
        fit_logistic(df, ["x"], "y")


def test_perfect_separation_raises_convergence_error():
    df = pd.DataFrame(
        {
            "x": np.arange(1.0, 11.0),
            "y": [0, 0, 0, 0, 0, 1, 1, 1, 1, 1],
        }
    )
    with pytest.raises(ConvergenceError):
        fit_logistic(df, ["x"], "y")
