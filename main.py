#!/usr/bin/env python3
"""
Main script for running the lizard and palmetto reports.
"""

# Pipeline overview:
# 1) Lizards: load measurements, drop incomplete rows, seed NLS from a
#    log-log OLS line, fit W = a * L^b to all lizards and to one species/sex
#    subset, compare subset RMSE of both fits.
# 2) Palmetto: load morphology, drop incomplete rows, fit full and reduced
#    logistic classifiers, run seeded 10 x 10 repeated CV, tabulate per-species
#    accuracy of the full model.
# Each report writes figures and CSV tables under output/<report>/.

import argparse
import logging
import os
import sys
import time
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("fieldstats.log", mode="w"),
    ],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fieldstats.config import (
    DATA_DIR,
    DEFAULT_FOLDS,
    DEFAULT_REPEATS,
    DEFAULT_SEED,
    DEFAULT_SEX,
    DEFAULT_SPECIES,
    LIZARD_FILE,
    OUTPUT_DIR,
    PALMETTO_FILE,
    LizardReportConfig,
    PalmettoReportConfig,
)
from fieldstats.lizards import run_lizard_report
from fieldstats.palmetto import run_palmetto_report
from fieldstats.stats import ConvergenceError


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for report generation."""
    parser = argparse.ArgumentParser(
        description="Lizard allometry and palmetto classification reports."
    )
    parser.add_argument(
        "report",
        nargs="?",
        choices=("lizards", "palmetto", "all"),
        default="all",
        help="Report to run (default: all).",
    )
    parser.add_argument(
        "--data-dir",
        default=str(DATA_DIR),
        help=f"Directory holding {LIZARD_FILE} and {PALMETTO_FILE} (default: {DATA_DIR}).",
    )
    parser.add_argument(
        "--output-dir",
        default=str(OUTPUT_DIR),
        help=f"Output directory (default: {OUTPUT_DIR}).",
    )
    parser.add_argument("--species", default=DEFAULT_SPECIES, help="Lizard species code for the subset model.")
    parser.add_argument("--sex", default=DEFAULT_SEX, help="Lizard sex code for the subset model.")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Cross-validation seed.")
    parser.add_argument("--folds", type=int, default=DEFAULT_FOLDS, help="Cross-validation folds.")
    parser.add_argument("--repeats", type=int, default=DEFAULT_REPEATS, help="Cross-validation repeats.")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure rendering.")
    return parser


def main(argv=None):
    """Run the requested reports; return a process exit code."""
    args = _build_arg_parser().parse_args(argv)
    data_dir = Path(args.data_dir)
    output_dir = Path(args.output_dir)

    start_time = time.time()
    logging.info("Initializing report pipeline: %s", args.report)
    failures = 0

    if args.report in ("lizards", "all"):
        config = LizardReportConfig(
            data_path=data_dir / LIZARD_FILE,
            output_dir=output_dir / "lizards",
            species=args.species,
            sex=args.sex,
            make_plots=not args.no_plots,
        )
        step_start = time.time()
        try:
            report = run_lizard_report(config)
        except (ValueError, ConvergenceError, OSError):
            logging.exception("Lizard report failed")
            failures += 1
        else:
            logging.info(
                "Lizard report completed in %.2f seconds", time.time() - step_start
            )
            for _, row in report.rmse.iterrows():
                logging.info("  RMSE (%s): %s", row["model"], row["rmse (reported)"])

    if args.report in ("palmetto", "all"):
        config = PalmettoReportConfig(
            data_path=data_dir / PALMETTO_FILE,
            output_dir=output_dir / "palmetto",
            n_splits=args.folds,
            n_repeats=args.repeats,
            random_state=args.seed,
            make_plots=not args.no_plots,
        )
        step_start = time.time()
        try:
            report = run_palmetto_report(config)
        except (ValueError, ConvergenceError, OSError):
            logging.exception("Palmetto report failed")
            failures += 1
        else:
            logging.info(
                "Palmetto report completed in %.2f seconds", time.time() - step_start
            )
            for _, row in report.accuracy_table.iterrows():
                logging.info(
                    "  %s: %s correctly classified",
                    row["Species"],
                    row["% correctly classified"],
                )

    logging.info("Total execution time: %.2f seconds", time.time() - start_time)
    if failures:
        logging.error("%d report(s) failed", failures)
        return 1
    logging.info("Report pipeline completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
