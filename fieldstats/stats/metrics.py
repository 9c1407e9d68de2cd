"""Prediction error and classification accounting."""

from __future__ import annotations

import logging
from typing import Mapping

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.5


def rmse(predicted, observed) -> float:
    """Root-mean-square error ``sqrt(mean((predicted - observed)^2))``.

    Raises:
        ValueError: If the inputs differ in length, are empty, or contain
            non-finite values.
    """
    pred = np.asarray(predicted, dtype=float)
    obs = np.asarray(observed, dtype=float)
    if pred.shape != obs.shape:
        raise ValueError(f"Shape mismatch: predicted {pred.shape} vs observed {obs.shape}.")
    if pred.size == 0:
        raise ValueError("RMSE of an empty sample is undefined.")
    if not (np.all(np.isfinite(pred)) and np.all(np.isfinite(obs))):
        raise ValueError("RMSE inputs must be finite.")
    return float(np.sqrt(np.mean((pred - obs) ** 2)))


def compare_rmse(fits: Mapping[str, object], length, observed) -> pd.DataFrame:
    """Tabulate RMSE of several fitted models on the same observations.

    Args:
        fits: Mapping of model label to a fitted object exposing
            ``predict(length)``.
        length: Predictor values of the evaluation rows.
        observed: Observed responses of the evaluation rows.

    Returns:
        pandas.DataFrame: ``model``, ``n``, ``rmse`` per entry, in mapping order.

    Note:
        The comparison is descriptive; no test of the RMSE difference is made.
    """
    rows = []
    for label, fit in fits.items():
        value = rmse(fit.predict(length), observed)
        rows.append({"model": label, "n": int(np.size(observed)), "rmse": value})
        logger.info("RMSE of %s model: %.4f", label, value)
    return pd.DataFrame(rows)


def classify(probability, threshold: float = DEFAULT_THRESHOLD) -> np.ndarray:
    """Apply the decision rule ``positive iff p > threshold``.

    A probability exactly equal to ``threshold`` goes to the negative class.

    Returns:
        numpy.ndarray: Integer labels, 1 for positive and 0 for negative.

    Raises:
        ValueError: If any probability lies outside ``[0, 1]`` or is NaN.
    """
    p = np.asarray(probability, dtype=float)
    if np.any(~np.isfinite(p)) or np.any((p < 0) | (p > 1)):
        raise ValueError("Probabilities must be finite and within [0, 1].")
    return (p > threshold).astype(int)


def accuracy(predicted_labels, true_labels) -> float:
    pred = np.asarray(predicted_labels)
    true = np.asarray(true_labels)
    if pred.shape != true.shape or pred.size == 0:
        raise ValueError("Label arrays must be non-empty and of equal length.")
    return float(np.mean(pred == true))


def confusion_by_class(true_labels, predicted_labels) -> pd.DataFrame:
    """Count correct and incorrect classifications for each true class.

    Args:
        true_labels: Observed class per row (any hashable labels).
        predicted_labels: Predicted class per row, same label space.

    Returns:
        pandas.DataFrame: One row per true class with ``correct``,
        ``incorrect``, ``n`` and ``pct_correct`` (a fraction in [0, 1]).
    """
    true = pd.Series(np.asarray(true_labels), name="true")
    pred = pd.Series(np.asarray(predicted_labels), name="predicted")
    if len(true) != len(pred):
        raise ValueError("Label arrays must be of equal length.")
    hits = (true == pred).rename("hit")
    grouped = pd.concat([true, hits], axis=1).groupby("true", sort=True)["hit"]
    table = pd.DataFrame(
        {
            "correct": grouped.sum().astype(int),
            "incorrect": (grouped.count() - grouped.sum()).astype(int),
        }
    )
    table["n"] = table["correct"] + table["incorrect"]
    table["pct_correct"] = table["correct"] / table["n"]
    return table.reset_index().rename(columns={"true": "class"})
