"""Tests for table formatting."""

import numpy as np
import pandas as pd
import pytest

from fieldstats.output import sanitize_filename, save_tables_to_csv
from fieldstats.reporting import (
    accuracy_report,
    add_formatted_estimate_columns,
    format_estimate,
    format_p_value,
    format_percent,
    parameter_report,
    standard_error_decimal_places,
)


def test_standard_error_decimal_places():
    assert standard_error_decimal_places(0.02) == 2
    assert standard_error_decimal_places(0.3) == 1
    assert standard_error_decimal_places(1.0) == 0
    assert standard_error_decimal_places(0.015) == 3


def test_format_estimate_matches_standard_error():
    assert format_estimate(4.5678, 0.02) == "4.57"
    assert format_estimate(12.345, 0.1) == "12.3"
    assert format_estimate(2.0, 0.0) == "2"


def test_format_p_value_and_percent():
    assert format_p_value(1e-9) == "< 0.001"
    assert format_p_value(0.04321) == "0.043"
    assert format_p_value(np.nan) == ""
    assert format_percent(0.9234) == "92.3%"


def test_formatted_columns_fail_on_missing_standard_error():
    df = pd.DataFrame({"estimate": [1.0, 2.0], "std_error": [0.1, None]})
    with pytest.raises(ValueError, match="Standard error missing/invalid"):
        add_formatted_estimate_columns(df)


def test_parameter_report_adds_model_and_strings():
    table = pd.DataFrame(
        {
            "term": ["a", "b"],
            "estimate": [0.0123, 2.873],
            "std_error": [0.002, 0.04],
            "statistic": [6.1, 71.8],
            "p_value": [0.0004, 1e-20],
        }
    )
    out = parameter_report(table, model="general")
    assert out.columns[0] == "model"
    assert out.loc[1, "estimate (reported)"] == "2.87"
    assert out.loc[1, "p_value (reported)"] == "< 0.001"
    assert out.loc[0, "std_error (reported)"] == "0.002"


def test_accuracy_report_labels():
    confusion = pd.DataFrame(
        {"class": ["Sabal etonia"], "correct": [9], "incorrect": [1], "n": [10], "pct_correct": [0.9]}
    )
    out = accuracy_report(confusion)
    assert out.loc[0, "Species"] == "Sabal etonia"
    assert out.loc[0, "% correctly classified"] == "90.00%"


def test_save_tables_to_csv(tmp_path):
    paths = save_tables_to_csv({"RMSE comparison": pd.DataFrame({"x": [1]})}, str(tmp_path))
    assert paths["RMSE comparison"].endswith("RMSE_comparison.csv")
    assert pd.read_csv(paths["RMSE comparison"])["x"].tolist() == [1]
    assert sanitize_filename("  ") == "table"
