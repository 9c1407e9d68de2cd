import math

import numpy as np
import pytest

from fieldstats.data_processing import prepare_lizards, select_subset
from fieldstats.stats import (
    AllometricGuess,
    ConvergenceError,
    compare_rmse,
    fit_allometric,
    initial_guess,
    rmse,
)


def test_guess_matches_closed_form_log_log_ols():
    rng = np.random.default_rng(3)
    length = rng.uniform(5.0, 50.0, 25)
    weight = 0.3 * length**2.7 * rng.lognormal(0.0, 0.05, 25)

    x = np.log(length)
    y = np.log(weight)
    slope = np.sum((x - x.mean()) * (y - y.mean())) / np.sum((x - x.mean()) ** 2)
    intercept = y.mean() - slope * x.mean()

    guess = initial_guess(length, weight)
    assert np.isclose(guess.slope, slope)
    assert np.isclose(guess.intercept, intercept)
    assert np.isclose(guess.b, slope)
    assert np.isclose(guess.a, math.exp(intercept / slope))


def test_exact_power_law_recovers_parameters():
    length = np.array([10.0, 20.0, 40.0])
    weight = 2.0 * length**3

    fit = fit_allometric(length, weight)
    assert np.isclose(fit.a, 2.0, rtol=1e-5)
    assert np.isclose(fit.b, 3.0, rtol=1e-5)
    assert rmse(fit.predict(length), weight) <= 1e-6 * weight.max()


def test_training_rmse_is_finite_and_non_negative(lizard_df):
    data = prepare_lizards(lizard_df)
    fit = fit_allometric(data["SV_length"], data["weight"])
    value = rmse(fit.predict(data["SV_length"]), data["weight"])
    assert np.isfinite(value)
    assert value > 0


def test_parameter_table_layout():
    length = np.array([10.0, 15.0, 20.0, 30.0, 40.0])
    weight = 2.0 * length**3 * np.array([1.01, 0.99, 1.0, 1.02, 0.98])
    table = fit_allometric(length, weight).parameter_table()
    assert table["term"].to_list() == ["a", "b"]
    assert set(table.columns) == {"term", "estimate", "std_error", "statistic", "p_value"}
    assert (table["std_error"] > 0).all()
    assert table["p_value"].between(0, 1).all()


def test_specialized_model_beats_general_on_its_subset(lizard_df):
    data = prepare_lizards(lizard_df)
    guess = initial_guess(data["SV_length"], data["weight"])
    general = fit_allometric(data["SV_length"], data["weight"], guess=guess)
    subset = select_subset(data, "CNTE", "M")
    specialized = fit_allometric(subset["SV_length"], subset["weight"], guess=guess)

    assert specialized.guess == general.guess
    table = compare_rmse(
        {"general": general, "specialized": specialized},
        subset["SV_length"],
        subset["weight"],
    ).set_index("model")
    assert table.loc["specialized", "rmse"] <= table.loc["general", "rmse"]
    assert np.isclose(specialized.b, 2.6, atol=0.1)


@pytest.mark.parametrize("bad", [0.0, -1.0, np.nan])
def test_non_positive_inputs_raise(bad):
    length = np.array([10.0, 20.0, bad])
    weight = np.array([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        initial_guess(length, weight)
    with pytest.raises(ValueError):
        fit_allometric(weight, length)


def test_solver_failure_is_raised_not_suppressed():
    length = np.array([10.0, 20.0, 30.0, 40.0])
    weight = 2.0 * length**3
    poor = AllometricGuess(a=500.0, b=0.2, slope=0.2, intercept=0.0)
    with pytest.raises(ConvergenceError):
        fit_allometric(length, weight, guess=poor, max_nfev=2)


def test_two_row_fit_passes_through_both_points():
    length = np.array([10.0, 20.0])
    weight = 2.0 * length**3

    fit = fit_allometric(length, weight)
    assert np.isclose(fit.a, 2.0, rtol=1e-5)
    assert np.isclose(fit.b, 3.0, rtol=1e-5)
    assert fit.dof == 0
    assert math.isnan(fit.se_a) and math.isnan(fit.se_b)
    assert math.isnan(fit.p_a) and math.isnan(fit.p_b)
    assert math.isnan(fit.residual_se)


def test_guess_that_overflows_is_a_value_error():
    with pytest.raises(ValueError, match="overflows"):
        initial_guess([10.0, 20.0, 40.0], [30000.0, 30100.0, 30200.0])
