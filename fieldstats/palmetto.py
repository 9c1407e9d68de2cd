"""
Palmetto species classification report.

Fits full and reduced binomial logistic regressions predicting species from
plant height, canopy length, canopy width and green-leaf count, compares them
by repeated stratified k-fold cross-validation accuracy, and tabulates how
many plants of each species the full model classifies correctly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from .config import PalmettoReportConfig
from .data_processing import load_table, prepare_palmetto
from .output import save_tables_to_csv
from .plotting import plot_height_vs_width, plot_predictor_boxplots
from .reporting import accuracy_report, cv_report, parameter_report
from .schema import PALMETTO
from .stats import (
    LogisticFit,
    classify,
    confusion_by_class,
    fit_logistic,
    repeated_cv_accuracy,
    summarise_cv,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PalmettoReport:
    data: pd.DataFrame
    fits: Dict[str, LogisticFit]
    coefficients: pd.DataFrame
    cv_folds: pd.DataFrame
    cv_summary: pd.DataFrame
    confusion: pd.DataFrame
    accuracy_table: pd.DataFrame
    figures: Dict[str, str] = field(default_factory=dict)
    tables: Dict[str, str] = field(default_factory=dict)


def all_predictors(models: Dict[str, tuple]) -> list[str]:
    seen: list[str] = []
    for predictors in models.values():
        for col in predictors:
            if col not in seen:
                seen.append(col)
    return seen


def classify_rows(
    df: pd.DataFrame, fit: LogisticFit, threshold: float = 0.5
) -> pd.DataFrame:
    """Return a copy of ``df`` with fitted probability and predicted species.

    Added columns: ``probability``, ``predicted_label`` and
    ``predicted_species`` (name looked up from the observed label/name pairs).
    """
    for col in ("probability", "predicted_label", "predicted_species"):
        if col in df.columns:
            raise ValueError(f"Prediction column '{col}' already exists.")
    out = df.copy()
    out["probability"] = fit.predict_proba(out)
    out["predicted_label"] = classify(out["probability"], threshold=threshold)
    names = (
        out[[PALMETTO.label, PALMETTO.species_name]]
        .drop_duplicates()
        .set_index(PALMETTO.label)[PALMETTO.species_name]
    )
    out["predicted_species"] = out["predicted_label"].map(names)
    return out


def analyze_palmetto(df: pd.DataFrame, config: PalmettoReportConfig):
    """Fit, cross-validate and score every configured model.

    Returns:
        tuple: Prepared data, fits by model label, per-fold CV frame (with a
        ``model`` column), and the full model's per-species confusion table.

    Raises:
        ValueError: On missing predictors/labels or too few rows per class.
        ConvergenceError: If any fit fails to converge.
    """
    data = prepare_palmetto(
        df, all_predictors(config.models), positive_code=config.positive_code
    )
    logger.info(
        "Palmetto rows by species: %s", data[PALMETTO.species_name].value_counts().to_dict()
    )

    fits = {}
    cv_frames = []
    for label, predictors in config.models.items():
        fits[label] = fit_logistic(data, predictors, PALMETTO.label)
        logger.info("%s model AIC: %.2f", label, fits[label].aic)
        folds = repeated_cv_accuracy(
            data,
            predictors,
            PALMETTO.label,
            n_splits=config.n_splits,
            n_repeats=config.n_repeats,
            random_state=config.random_state,
            threshold=config.threshold,
        )
        folds.insert(0, "model", label)
        cv_frames.append(folds)
    cv_folds = pd.concat(cv_frames, ignore_index=True)

    primary = next(iter(config.models))
    classified = classify_rows(data, fits[primary], threshold=config.threshold)
    confusion = confusion_by_class(
        classified[PALMETTO.species_name], classified["predicted_species"]
    )
    return classified, fits, cv_folds, confusion


def run_palmetto_report(config: PalmettoReportConfig | None = None) -> PalmettoReport:
    """Load the palmetto data, run the analysis, and export tables and figures."""
    config = config or PalmettoReportConfig()
    raw = load_table(config.data_path)
    data, fits, cv_folds, confusion = analyze_palmetto(raw, config)

    coefficients = pd.concat(
        [parameter_report(fit.coefficient_table(), model=label) for label, fit in fits.items()],
        ignore_index=True,
    )
    cv_summary = cv_report(
        summarise_cv({label: frame for label, frame in cv_folds.groupby("model", sort=False)})
    )
    accuracy_table = accuracy_report(confusion)

    output_dir = str(config.output_dir)
    figures = {}
    if config.make_plots:
        figures["predictor_boxplots"] = plot_predictor_boxplots(
            data, all_predictors(config.models), output_dir
        )
        figures["height_vs_width"] = plot_height_vs_width(data, output_dir)

    tables = save_tables_to_csv(
        {
            "logistic_coefficients": coefficients,
            "cv_folds": cv_folds,
            "cv_summary": cv_summary,
            "classification_accuracy": accuracy_table,
        },
        output_dir=os.path.join(output_dir, "tables"),
    )

    for _, row in cv_summary.iterrows():
        logger.info(
            "%s model CV accuracy: %s", row["model"], row["mean_accuracy (reported)"]
        )

    return PalmettoReport(
        data=data,
        fits=fits,
        coefficients=coefficients,
        cv_folds=cv_folds,
        cv_summary=cv_summary,
        confusion=confusion,
        accuracy_table=accuracy_table,
        figures=figures,
        tables=tables,
    )
