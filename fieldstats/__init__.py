"""
A Python package for two field-ecology statistical reports.

Fits allometric weight-length models to lizard measurements and logistic
species classifiers to palmetto morphology, with held-out error estimates.

Modules:
    - data_processing: Loads CSV files, drops incomplete rows, derives columns.
    - stats: NLS and logistic fits, RMSE, classification, cross-validation.
    - lizards: General vs. species/sex-specific allometric model report.
    - palmetto: Full vs. reduced logistic classifier report.
    - plotting: Scatterplots and box plots for both reports.
    - reporting / output: Formatted tables and CSV export.
"""

__version__ = "1.0.0"

from .config import LizardReportConfig, PalmettoReportConfig
from .data_processing import load_table, prepare_lizards, prepare_palmetto
from .lizards import LizardReport, analyze_lizards, run_lizard_report
from .palmetto import PalmettoReport, analyze_palmetto, run_palmetto_report
from .stats import ConvergenceError

__all__ = [
    # Configuration
    "LizardReportConfig",
    "PalmettoReportConfig",
    # Data processing
    "load_table",
    "prepare_lizards",
    "prepare_palmetto",
    # Reports
    "LizardReport",
    "analyze_lizards",
    "run_lizard_report",
    "PalmettoReport",
    "analyze_palmetto",
    "run_palmetto_report",
    "ConvergenceError",
]
