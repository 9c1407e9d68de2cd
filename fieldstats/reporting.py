"""Format fitted-model and metric tables for presentation.

This module is used after model fitting to give exported tables consistent
precision: estimates are rounded to the decimal place implied by their
standard error, p-values are floored at ``< 0.001`` and accuracies are shown
as percentages. Numeric columns are always kept next to the formatted ones.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

P_VALUE_FLOOR = 0.001


def _round_standard_error(std_error: float) -> tuple[float, int]:
    """Round a standard error to one significant figure (two if leading 1).

    Args:
        std_error (float): Standard error of an estimate.

    Returns:
        tuple[float, int]: Rounded standard error and decimal places used.

    Raises:
        ValueError: If the standard error is non-finite or non-positive.
    """
    u = float(std_error)
    if not np.isfinite(u) or u <= 0:
        raise ValueError(f"Standard error must be finite and > 0, got {std_error!r}")

    exponent = int(np.floor(np.log10(abs(u))))
    leading = abs(u) / (10**exponent)
    sig_figs = 2 if 1.0 <= leading < 2.0 else 1
    ndigits = sig_figs - 1 - exponent
    rounded_u = round(abs(u), ndigits)
    return float(rounded_u), int(max(0, ndigits))


def standard_error_decimal_places(std_error: float) -> int:
    """Return decimal places implied by a rounded standard error.

    Args:
        std_error (float): Standard error of the reported estimate.

    Returns:
        int: Number of decimal places the paired estimate should use.
    """
    rounded_u, ndigits = _round_standard_error(std_error)
    if ndigits <= 0:
        return 0
    txt = f"{rounded_u:.12f}".rstrip("0")
    if "." not in txt:
        return 0
    return len(txt.split(".", 1)[1])


def format_estimate(value: float, std_error: float) -> str:
    """Format an estimate using decimal places implied by its standard error.

    Falls back to four significant figures when the standard error is zero
    or unavailable (for example an exact fit).
    """
    se = float(std_error)
    if not np.isfinite(se) or se <= 0:
        return f"{float(value):.4g}"
    dp = standard_error_decimal_places(se)
    return f"{float(value):.{dp}f}"


def format_standard_error(std_error: float) -> str:
    se = float(std_error)
    if not np.isfinite(se):
        return ""
    if se <= 0:
        return "0"
    rounded, _ = _round_standard_error(se)
    return f"{rounded:.{standard_error_decimal_places(se)}f}"


def format_p_value(p_value: float, floor: float = P_VALUE_FLOOR) -> str:
    """Return ``"< 0.001"`` below ``floor``, otherwise three decimals."""
    p = float(p_value)
    if not np.isfinite(p):
        return ""
    if p < floor:
        return f"< {floor:g}"
    return f"{p:.3f}"


def format_percent(fraction: float, decimals: int = 1) -> str:
    f = float(fraction)
    if not np.isfinite(f):
        return ""
    return f"{100.0 * f:.{decimals}f}%"


def validate_estimate_columns(
    df: pd.DataFrame, value_se_pairs: Iterable[tuple[str, str]]
) -> None:
    """Check that each estimate column has a paired standard-error column.

    Raises:
        KeyError: If a value or standard-error column is missing.
        ValueError: If a finite estimate has a missing or negative standard
            error.
    """
    for value_col, se_col in value_se_pairs:
        if value_col not in df.columns:
            raise KeyError(f"Missing value column '{value_col}' for reporting format.")
        if se_col not in df.columns:
            raise KeyError(
                f"Missing standard error column '{se_col}' required for '{value_col}'."
            )
        values = pd.to_numeric(df[value_col], errors="coerce")
        ses = pd.to_numeric(df[se_col], errors="coerce")
        bad = values.notna() & (~np.isfinite(ses) | (ses < 0))
        if bool(bad.any()):
            bad_rows = list(df.index[bad][:5])
            raise ValueError(
                "Standard error missing/invalid for estimates in "
                f"'{value_col}' (standard error '{se_col}'). "
                f"Example row indices: {bad_rows}."
            )


def add_formatted_estimate_columns(
    df: pd.DataFrame,
    value_se_pairs: Iterable[tuple[str, str]] = (("estimate", "std_error"),),
    suffix: str = " (reported)",
) -> pd.DataFrame:
    """Add string columns with estimates rounded to their standard errors.

    Returns:
        pandas.DataFrame: Copy of ``df`` with ``<col><suffix>`` columns added.
    """
    value_se_pairs = list(value_se_pairs)
    out = df.copy()
    validate_estimate_columns(out, value_se_pairs)
    for value_col, se_col in value_se_pairs:
        values = pd.to_numeric(out[value_col], errors="coerce")
        ses = pd.to_numeric(out[se_col], errors="coerce")
        out[f"{value_col}{suffix}"] = [
            format_estimate(v, s) if np.isfinite(v) else ""
            for v, s in zip(values, ses)
        ]
        out[f"{se_col}{suffix}"] = [format_standard_error(s) for s in ses]
    return out


def parameter_report(table: pd.DataFrame, model: str | None = None) -> pd.DataFrame:
    """Format a tidy ``term/estimate/std_error/statistic/p_value`` table."""
    out = add_formatted_estimate_columns(table)
    out["p_value (reported)"] = [format_p_value(p) for p in out["p_value"]]
    if model is not None:
        out.insert(0, "model", model)
    return out


def rmse_report(table: pd.DataFrame, decimals: int = 3) -> pd.DataFrame:
    out = table.copy()
    out["rmse (reported)"] = [f"{v:.{decimals}f}" for v in out["rmse"]]
    return out


def cv_report(summary: pd.DataFrame) -> pd.DataFrame:
    """Add percentage strings to a cross-validation summary."""
    out = summary.copy()
    for col in ("mean_accuracy", "min_accuracy", "max_accuracy"):
        out[f"{col} (reported)"] = [format_percent(v, 2) for v in out[col]]
    return out


def accuracy_report(confusion: pd.DataFrame) -> pd.DataFrame:
    """Present per-class confusion counts with readable labels.

    Args:
        confusion: Output of ``fieldstats.stats.confusion_by_class``; its
            ``class`` column already holds species names.

    Returns:
        pandas.DataFrame: ``Species``, ``Correctly classified``,
        ``Incorrectly classified``, ``% correctly classified``.
    """
    return pd.DataFrame(
        {
            "Species": confusion["class"].astype(str).to_numpy(),
            "Correctly classified": confusion["correct"].to_numpy(),
            "Incorrectly classified": confusion["incorrect"].to_numpy(),
            "% correctly classified": [
                format_percent(v, 2) for v in confusion["pct_correct"]
            ],
        }
    )
