"""Nonlinear least-squares fits of the allometric weight-length model.

Model form:
    ``W = a * L^b`` where ``L`` is snout-vent length (mm) and ``W`` is weight
    (g). ``b`` near 3 indicates isometric growth.

Workflow:
    1. ``initial_guess`` linearizes the model with ``log W = log a + b log L``
       and fits a straight line to the log data.
    2. ``fit_allometric`` hands that guess to ``scipy.optimize.curve_fit``
       (Levenberg-Marquardt) to minimise ``sum((W - a L^b)^2)`` on the raw
       scale.

A subset model is fitted by calling ``fit_allometric`` again on the filtered
rows with the guess computed from the full table.
"""

from __future__ import annotations

import logging
import math
import warnings
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy.optimize import OptimizeWarning, curve_fit
from scipy.stats import t as student_t

from .exceptions import ConvergenceError
from .regression import linear_regression

logger = logging.getLogger(__name__)

DEFAULT_MAX_NFEV = 5000
PARAMETER_NAMES = ("a", "b")
_MAX_LOG_FLOAT = math.log(np.finfo(float).max)


def allometric_weight(length, a: float, b: float):
    """Return predicted weight ``a * length**b`` for scalar or array input."""
    return a * np.power(length, b)


def _positive_pairs(length, weight) -> tuple[np.ndarray, np.ndarray]:
    length_arr = np.asarray(length, dtype=float)
    weight_arr = np.asarray(weight, dtype=float)
    if length_arr.shape != weight_arr.shape:
        raise ValueError("Length and weight arrays must have the same shape.")
    if length_arr.size == 0:
        raise ValueError("No observations supplied.")
    for name, arr in (("length", length_arr), ("weight", weight_arr)):
        bad = ~np.isfinite(arr) | (arr <= 0)
        if bad.any():
            raise ValueError(
                f"{int(bad.sum())} {name} values are non-positive or missing; "
                f"the log-log guess is undefined."
            )
    return length_arr, weight_arr


@dataclass(frozen=True)
class AllometricGuess:
    """Starting values derived from the log-log OLS line.

    ``slope`` and ``intercept`` are the OLS coefficients of ``log W`` on
    ``log L``; ``a`` and ``b`` are the values handed to the solver.
    """

    a: float
    b: float
    slope: float
    intercept: float

    def as_p0(self) -> tuple[float, float]:
        return (self.a, self.b)


def initial_guess(length, weight) -> AllometricGuess:
    """Compute NLS starting values from a log-log linear regression.

    Args:
        length: Lengths, strictly positive.
        weight: Weights, strictly positive, aligned with ``length``.

    Returns:
        AllometricGuess: ``b = slope`` and ``a = exp(intercept / slope)``.

    Raises:
        ValueError: If any value is non-positive or non-finite, fewer than two
            observations are given, all lengths are equal, or
            ``exp(intercept / slope)`` is too large to represent.
    """
    length_arr, weight_arr = _positive_pairs(length, weight)
    reg = linear_regression(np.log(length_arr), np.log(weight_arr), min_points=2)
    slope = float(reg["m"])
    intercept = float(reg["b"])
    if slope == 0:
        raise ValueError("Log-log slope is zero; cannot derive a starting value for a.")
    exponent = intercept / slope
    if not math.isfinite(exponent) or exponent > _MAX_LOG_FLOAT:
        raise ValueError(
            f"Starting value for a overflows: intercept/slope = {exponent:.4g} "
            f"(intercept {intercept:.4g}, slope {slope:.4g})."
        )
    guess = AllometricGuess(
        a=float(math.exp(exponent)),
        b=slope,
        slope=slope,
        intercept=intercept,
    )
    logger.info("Log-log guess: a=%.4g b=%.4f", guess.a, guess.b)
    return guess


@dataclass(frozen=True)
class AllometricFit:
    """Result of one NLS fit. Immutable once returned."""

    a: float
    b: float
    se_a: float
    se_b: float
    t_a: float
    t_b: float
    p_a: float
    p_b: float
    n: int
    dof: int
    residual_se: float
    guess: AllometricGuess
    n_evaluations: int

    def predict(self, length) -> np.ndarray:
        return allometric_weight(np.asarray(length, dtype=float), self.a, self.b)

    def parameter_table(self) -> pd.DataFrame:
        """Return estimates as a tidy frame with one row per parameter."""
        return pd.DataFrame(
            {
                "term": list(PARAMETER_NAMES),
                "estimate": [self.a, self.b],
                "std_error": [self.se_a, self.se_b],
                "statistic": [self.t_a, self.t_b],
                "p_value": [self.p_a, self.p_b],
            }
        )


def _t_tests(estimates: np.ndarray, se: np.ndarray, dof: int):
    if dof <= 0:
        undefined = np.full(len(estimates), np.nan)
        return undefined, undefined.copy()
    with np.errstate(divide="ignore", invalid="ignore"):
        t_stats = np.where(se > 0, estimates / se, np.copysign(np.inf, estimates))
    p_values = 2.0 * student_t.sf(np.abs(t_stats), dof)
    return t_stats, p_values


def fit_allometric(
    length,
    weight,
    guess: AllometricGuess | None = None,
    max_nfev: int = DEFAULT_MAX_NFEV,
) -> AllometricFit:
    r"""Fit ``W = a * L^b`` by nonlinear least squares.

    Args:
        length: Lengths, strictly positive.
        weight: Observed weights, strictly positive.
        guess: Starting values. Computed from ``length``/``weight`` when
            omitted; pass the general-model guess to seed a subset fit.
        max_nfev: Maximum number of model evaluations for the solver.

    Returns:
        AllometricFit: Estimates, Jacobian-based standard errors, t statistics
        and two-sided p-values on ``n - 2`` degrees of freedom. With exactly
        two rows the curve passes through both points and the standard
        errors, residual SE and p-values are NaN.

    Raises:
        ValueError: On non-positive or missing inputs, or fewer than two rows.
        ConvergenceError: If the solver stops without converging, returns
            non-finite estimates, or cannot estimate the covariance when
            there are more rows than parameters.
    """
    length_arr, weight_arr = _positive_pairs(length, weight)
    n = int(length_arr.size)
    if n < len(PARAMETER_NAMES):
        raise ValueError(f"At least {len(PARAMETER_NAMES)} observations are required.")
    if guess is None:
        guess = initial_guess(length_arr, weight_arr)

    with warnings.catch_warnings():
        # No residual degrees of freedom: covariance is undefined, not a failure.
        if n > len(PARAMETER_NAMES):
            warnings.simplefilter("error", OptimizeWarning)
        else:
            warnings.simplefilter("ignore", OptimizeWarning)
        try:
            popt, pcov, infodict, _, _ = curve_fit(
                allometric_weight,
                length_arr,
                weight_arr,
                p0=guess.as_p0(),
                method="lm",
                maxfev=max_nfev,
                full_output=True,
            )
        except (RuntimeError, OptimizeWarning) as exc:
            raise ConvergenceError(
                f"Allometric NLS fit did not converge from a={guess.a:.4g}, "
                f"b={guess.b:.4g}: {exc}"
            ) from exc

    if not np.all(np.isfinite(popt)):
        raise ConvergenceError(f"Allometric NLS fit returned non-finite estimates {popt}.")

    dof = n - len(PARAMETER_NAMES)
    resid = weight_arr - allometric_weight(length_arr, *popt)
    residual_se = float(np.sqrt(np.sum(resid**2) / dof)) if dof > 0 else math.nan
    if dof > 0:
        se = np.sqrt(np.clip(np.diag(pcov), 0.0, None))
    else:
        se = np.full(len(PARAMETER_NAMES), np.nan)
    t_stats, p_values = _t_tests(popt, se, dof)

    fit = AllometricFit(
        a=float(popt[0]),
        b=float(popt[1]),
        se_a=float(se[0]),
        se_b=float(se[1]),
        t_a=float(t_stats[0]),
        t_b=float(t_stats[1]),
        p_a=float(p_values[0]),
        p_b=float(p_values[1]),
        n=n,
        dof=dof,
        residual_se=residual_se,
        guess=guess,
        n_evaluations=int(infodict.get("nfev", 0)),
    )
    logger.info(
        "NLS fit on %d rows: a=%.4g (SE %.2g), b=%.4f (SE %.2g)",
        n,
        fit.a,
        fit.se_a,
        fit.b,
        fit.se_b,
    )
    return fit
