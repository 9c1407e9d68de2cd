"""Binomial logistic regression by maximum likelihood.

The log-odds of the positive class are modelled as a linear combination of
the predictors plus an intercept. Fitting is done by ``statsmodels`` ``Logit``
(Newton-Raphson); any sign that the optimizer did not reach a proper maximum
is raised as ``ConvergenceError`` instead of returning coefficients that only
look plausible.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.tools.sm_exceptions import (
    ConvergenceWarning,
    PerfectSeparationError,
    PerfectSeparationWarning,
)

from .exceptions import ConvergenceError

logger = logging.getLogger(__name__)

INTERCEPT = "const"
DEFAULT_MAXITER = 100


def _design_matrix(df: pd.DataFrame, predictors: Sequence[str]) -> pd.DataFrame:
    missing_cols = [col for col in predictors if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Predictor columns missing from table: {missing_cols}")
    X = df[list(predictors)].apply(pd.to_numeric, errors="coerce").astype(float)
    incomplete = X.isna().any(axis=1)
    if incomplete.any():
        cols = [col for col in predictors if X[col].isna().any()]
        raise ValueError(
            f"{int(incomplete.sum())} rows have missing values in {cols}; "
            f"drop incomplete rows before fitting."
        )
    return sm.add_constant(X, has_constant="add")


def _labels(df: pd.DataFrame, label_col: str) -> pd.Series:
    if label_col not in df.columns:
        raise ValueError(f"Label column '{label_col}' missing from table.")
    y = pd.to_numeric(df[label_col], errors="coerce")
    if y.isna().any():
        raise ValueError(f"Label column '{label_col}' has missing values.")
    if not y.isin([0, 1]).all():
        raise ValueError(f"Label column '{label_col}' must be coded 0/1.")
    if y.nunique() < 2:
        raise ValueError(f"Label column '{label_col}' contains a single class.")
    return y.astype(int)


@dataclass(frozen=True)
class LogisticFit:
    """Fitted logistic model; coefficients are indexed by term name."""

    predictors: tuple[str, ...]
    params: pd.Series
    std_errors: pd.Series
    z_values: pd.Series
    p_values: pd.Series
    n: int
    log_likelihood: float
    aic: float
    iterations: int

    def linear_predictor(self, df: pd.DataFrame) -> np.ndarray:
        X = _design_matrix(df, self.predictors)
        return X.to_numpy(dtype=float) @ self.params[X.columns].to_numpy(dtype=float)

    def predict_proba(self, df: pd.DataFrame) -> np.ndarray:
        """Return the fitted probability of the positive class per row."""
        eta = self.linear_predictor(df)
        return 1.0 / (1.0 + np.exp(-eta))

    def odds_ratios(self) -> pd.Series:
        return np.exp(self.params)

    def coefficient_table(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "term": list(self.params.index),
                "estimate": self.params.to_numpy(dtype=float),
                "std_error": self.std_errors.to_numpy(dtype=float),
                "statistic": self.z_values.to_numpy(dtype=float),
                "p_value": self.p_values.to_numpy(dtype=float),
            }
        )


def fit_logistic(
    df: pd.DataFrame,
    predictors: Sequence[str],
    label_col: str,
    maxiter: int = DEFAULT_MAXITER,
) -> LogisticFit:
    """Fit a binomial logistic regression of ``label_col`` on ``predictors``.

    Args:
        df: Observation table with complete predictor and label columns.
        predictors: Predictor column names; an intercept is always added.
        label_col: Column holding the 0/1 class label.
        maxiter: Newton iteration limit.

    Returns:
        LogisticFit: Coefficients with standard errors, Wald z statistics and
        p-values, plus log-likelihood and AIC.

    Raises:
        ValueError: If predictors or labels are missing, non-numeric, or the
            label has a single class.
        ConvergenceError: On perfect separation, a singular Hessian, or when
            the optimizer reports non-convergence.
    """
    predictors = tuple(predictors)
    X = _design_matrix(df, predictors)
    y = _labels(df, label_col)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            result = sm.Logit(y, X).fit(disp=0, maxiter=maxiter)
        except (PerfectSeparationError, np.linalg.LinAlgError) as exc:
            raise ConvergenceError(f"Logistic fit on {list(predictors)} failed: {exc}") from exc

    for record in caught:
        if issubclass(record.category, (ConvergenceWarning, PerfectSeparationWarning)):
            raise ConvergenceError(
                f"Logistic fit on {list(predictors)} did not converge: {record.message}"
            )
        warnings.warn_explicit(
            record.message, record.category, record.filename, record.lineno
        )

    if not result.mle_retvals.get("converged", False):
        raise ConvergenceError(f"Logistic fit on {list(predictors)} did not converge.")
    if not np.all(np.isfinite(result.params)) or not np.all(np.isfinite(result.bse)):
        raise ConvergenceError(
            f"Logistic fit on {list(predictors)} produced non-finite estimates."
        )

    fit = LogisticFit(
        predictors=predictors,
        params=result.params.copy(),
        std_errors=result.bse.copy(),
        z_values=result.tvalues.copy(),
        p_values=result.pvalues.copy(),
        n=int(result.nobs),
        log_likelihood=float(result.llf),
        aic=float(result.aic),
        iterations=int(result.mle_retvals.get("iterations", 0)),
    )
    logger.debug(
        "Logistic fit on %s (n=%d): AIC=%.2f", list(predictors), fit.n, fit.aic
    )
    return fit
