"""
Statistical model fitting and evaluation.

This subpackage wraps library optimizers for the two report models and the
metrics used to judge them. All functions operate on arrays or DataFrames;
no file I/O or plotting is done here.

Modules:
    regression:
        Ordinary least-squares line with standard errors, used to seed the
        nonlinear allometric fit from log-log data.

    nls:
        Allometric ``W = a * L^b`` nonlinear least squares via SciPy.

    logistic:
        Binomial logistic regression via statsmodels, with convergence
        problems raised as ``ConvergenceError``.

    metrics:
        RMSE, the 0.5-threshold classification rule, and per-class
        confusion accounting.

    validation:
        Seeded repeated stratified k-fold cross-validation of logistic models.

Design Principle:
    This subpackage has no dependencies on plotting/ or the report drivers.
"""

from .exceptions import ConvergenceError
from .logistic import LogisticFit, fit_logistic
from .metrics import accuracy, classify, compare_rmse, confusion_by_class, rmse
from .nls import (
    AllometricFit,
    AllometricGuess,
    allometric_weight,
    fit_allometric,
    initial_guess,
)
from .regression import linear_regression
from .validation import repeated_cv_accuracy, summarise_cv

__all__ = [
    "ConvergenceError",
    "LogisticFit",
    "fit_logistic",
    "accuracy",
    "classify",
    "compare_rmse",
    "confusion_by_class",
    "rmse",
    "AllometricFit",
    "AllometricGuess",
    "allometric_weight",
    "fit_allometric",
    "initial_guess",
    "linear_regression",
    "repeated_cv_accuracy",
    "summarise_cv",
]
