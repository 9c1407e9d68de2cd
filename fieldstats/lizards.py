"""
Lizard allometry report.

Fits ``W = a * L^b`` to every lizard (general model), re-fits it to one
species/sex subset seeded with the same log-log starting values (specialized
model), and compares both models on that subset by RMSE. The comparison is
descriptive: the lower RMSE is reported, no test of the difference is made.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from .config import LizardReportConfig
from .data_processing import load_table, prepare_lizards, select_subset
from .output import save_tables_to_csv
from .plotting import plot_subset_models, plot_weight_by_length
from .reporting import parameter_report, rmse_report
from .schema import LIZARD
from .stats import AllometricFit, compare_rmse, fit_allometric, initial_guess

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LizardReport:
    data: pd.DataFrame
    subset: pd.DataFrame
    general: AllometricFit
    specialized: AllometricFit
    parameters: pd.DataFrame
    rmse: pd.DataFrame
    figures: Dict[str, str] = field(default_factory=dict)
    tables: Dict[str, str] = field(default_factory=dict)

    @property
    def better_model(self) -> str:
        """Label of the model with the lower subset RMSE."""
        return str(self.rmse.sort_values("rmse").iloc[0]["model"])


def add_predictions(df: pd.DataFrame, fits: Dict[str, AllometricFit]) -> pd.DataFrame:
    """Return a copy of ``df`` with one ``predicted_weight_<label>`` column per fit."""
    out = df.copy()
    for label, fit in fits.items():
        col = f"{LIZARD.predicted}_{label}"
        if col in out.columns:
            raise ValueError(f"Prediction column '{col}' already exists.")
        out[col] = fit.predict(out[LIZARD.length])
    return out


def analyze_lizards(
    df: pd.DataFrame, species: str, sex: str
) -> tuple[pd.DataFrame, pd.DataFrame, AllometricFit, AllometricFit, pd.DataFrame]:
    """Run the fitting and evaluation steps on a raw lizard table.

    Returns:
        tuple: Prepared table, subset with prediction columns, general fit,
        specialized fit, and the RMSE comparison table.

    Raises:
        ValueError: On invalid measurements or an empty subset.
        ConvergenceError: If either NLS fit fails.
    """
    data = prepare_lizards(df)
    guess = initial_guess(data[LIZARD.length], data[LIZARD.weight])
    general = fit_allometric(data[LIZARD.length], data[LIZARD.weight], guess=guess)

    subset = select_subset(data, species, sex)
    logger.info("Subset %s/%s has %d rows", species, sex, len(subset))
    specialized = fit_allometric(
        subset[LIZARD.length], subset[LIZARD.weight], guess=guess
    )

    fits = {"general": general, "specialized": specialized}
    subset = add_predictions(subset, fits)
    rmse_table = compare_rmse(fits, subset[LIZARD.length], subset[LIZARD.weight])
    return data, subset, general, specialized, rmse_table


def run_lizard_report(config: LizardReportConfig | None = None) -> LizardReport:
    """Load the lizard data, fit both models, and export tables and figures."""
    config = config or LizardReportConfig()
    raw = load_table(config.data_path, na_values=config.na_values)
    data, subset, general, specialized, rmse_table = analyze_lizards(
        raw, config.species, config.sex
    )

    parameters = pd.concat(
        [
            parameter_report(general.parameter_table(), model="general"),
            parameter_report(specialized.parameter_table(), model="specialized"),
        ],
        ignore_index=True,
    )
    rmse_table = rmse_report(rmse_table)

    output_dir = str(config.output_dir)
    figures = {}
    if config.make_plots:
        figures["weight_by_length"] = plot_weight_by_length(data, general, output_dir)
        figures["subset_models"] = plot_subset_models(
            subset,
            {"general": general, "specialized": specialized},
            output_dir,
            title=f"{config.species} ({config.sex}) weight by snout-vent length",
        )

    tables = save_tables_to_csv(
        {
            "nls_parameters": parameters,
            "rmse_comparison": rmse_table,
            "subset_predictions": subset,
        },
        output_dir=os.path.join(output_dir, "tables"),
    )

    report = LizardReport(
        data=data,
        subset=subset,
        general=general,
        specialized=specialized,
        parameters=parameters,
        rmse=rmse_table,
        figures=figures,
        tables=tables,
    )
    logger.info("Lower subset RMSE: %s model", report.better_model)
    return report
