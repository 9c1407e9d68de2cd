"""Repeated stratified k-fold cross-validation of logistic classifiers.

Fold assignment is driven by an explicit ``random_state`` so repeated runs on
the same table reproduce the same folds without touching global RNG state.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

import numpy as np
import pandas as pd
from sklearn.model_selection import RepeatedStratifiedKFold

from .logistic import fit_logistic
from .metrics import DEFAULT_THRESHOLD, accuracy, classify

logger = logging.getLogger(__name__)


def repeated_cv_accuracy(
    df: pd.DataFrame,
    predictors: Sequence[str],
    label_col: str,
    n_splits: int = 10,
    n_repeats: int = 10,
    random_state: int | np.random.RandomState = 123,
    threshold: float = DEFAULT_THRESHOLD,
) -> pd.DataFrame:
    """Estimate classification accuracy by repeated stratified k-fold CV.

    Each training split is fitted with ``fit_logistic``; the held-out split is
    classified with ``classify`` and scored by accuracy.

    Args:
        df: Complete observation table.
        predictors: Predictor columns for the model.
        label_col: 0/1 label column.
        n_splits: Number of folds per repeat.
        n_repeats: Number of repeats.
        random_state: Seed or ``RandomState`` controlling fold assignment.
        threshold: Classification threshold.

    Returns:
        pandas.DataFrame: One row per (repeat, fold) with ``repeat``, ``fold``,
        ``n_train``, ``n_test`` and ``accuracy`` in [0, 1].

    Raises:
        ValueError: If a class has fewer members than ``n_splits``.
        ConvergenceError: If any fold's fit fails to converge.
    """
    y = df[label_col].to_numpy()
    counts = pd.Series(y).value_counts()
    if counts.min() < n_splits or len(counts) < 2:
        raise ValueError(
            f"Each class needs at least {n_splits} rows for {n_splits}-fold CV; "
            f"got {counts.to_dict()}."
        )

    splitter = RepeatedStratifiedKFold(
        n_splits=n_splits, n_repeats=n_repeats, random_state=random_state
    )
    rows = []
    for i, (train_idx, test_idx) in enumerate(splitter.split(np.zeros(len(y)), y)):
        train = df.iloc[train_idx]
        test = df.iloc[test_idx]
        fit = fit_logistic(train, predictors, label_col)
        predicted = classify(fit.predict_proba(test), threshold=threshold)
        rows.append(
            {
                "repeat": i // n_splits + 1,
                "fold": i % n_splits + 1,
                "n_train": len(train_idx),
                "n_test": len(test_idx),
                "accuracy": accuracy(predicted, test[label_col].to_numpy()),
            }
        )
    result = pd.DataFrame(rows)
    logger.info(
        "CV on %s: mean accuracy %.4f over %d folds",
        list(predictors),
        result["accuracy"].mean(),
        len(result),
    )
    return result


def summarise_cv(cv_results: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """Summarise per-fold accuracy for each model label.

    Returns:
        pandas.DataFrame: ``model``, ``folds``, ``mean_accuracy``,
        ``sd_accuracy``, ``min_accuracy``, ``max_accuracy``.
    """
    rows = []
    for label, frame in cv_results.items():
        acc = frame["accuracy"].to_numpy(dtype=float)
        rows.append(
            {
                "model": label,
                "folds": int(acc.size),
                "mean_accuracy": float(np.mean(acc)),
                "sd_accuracy": float(np.std(acc, ddof=1)) if acc.size > 1 else np.nan,
                "min_accuracy": float(np.min(acc)),
                "max_accuracy": float(np.max(acc)),
            }
        )
    return pd.DataFrame(rows)
