import numpy as np
import pandas as pd
import pytest

from fieldstats.data_processing import (
    add_log_columns,
    add_species_columns,
    drop_incomplete,
    load_table,
    prepare_lizards,
    prepare_palmetto,
    select_subset,
)


def test_load_table_treats_dot_as_missing(tmp_path):
    path = tmp_path / "lizards.csv"
    path.write_text("spp,sex,SV_length,weight\nCNTE,M,60,.\nCNTE,F,55,8\n")
    df = load_table(path, na_values=(".",))
    assert df["weight"].isna().sum() == 1


def test_drop_incomplete_coerces_and_drops():
    df = pd.DataFrame({"a": [1, "x", 3, None], "b": [1.0, 2.0, np.nan, 4.0]})
    out = drop_incomplete(df, ["a", "b"])
    assert len(out) == 1
    assert out.index.tolist() == [0]
    assert len(df) == 4


def test_drop_incomplete_missing_column_raises():
    with pytest.raises(ValueError, match="Required columns missing"):
        drop_incomplete(pd.DataFrame({"a": [1]}), ["a", "b"])


def test_add_log_columns_appends_without_mutating():
    df = pd.DataFrame({"SV_length": [1.0, np.e], "weight": [np.e, 1.0]})
    out = add_log_columns(df)
    assert np.allclose(out["log_length"], [0.0, 1.0])
    assert np.allclose(out["log_weight"], [1.0, 0.0])
    assert "log_length" not in df.columns
    with pytest.raises(ValueError, match="already exists"):
        add_log_columns(out)


def test_add_log_columns_rejects_non_positive():
    df = pd.DataFrame({"SV_length": [1.0, 0.0], "weight": [2.0, 3.0]})
    with pytest.raises(ValueError, match="non-positive"):
        add_log_columns(df)


def test_prepare_lizards_drops_missing_and_rejects_zero(lizard_df):
    raw = lizard_df.copy()
    raw.loc[0, "weight"] = np.nan
    prepared = prepare_lizards(raw)
    assert len(prepared) == len(raw) - 1
    assert {"log_length", "log_weight"} <= set(prepared.columns)

    raw.loc[1, "SV_length"] = 0.0
    with pytest.raises(ValueError):
        prepare_lizards(raw)


def test_select_subset(lizard_df):
    data = prepare_lizards(lizard_df)
    subset = select_subset(data, "CNTE", "M")
    assert len(subset) == 40
    assert set(subset["spp"]) == {"CNTE"}
    with pytest.raises(ValueError, match="No rows"):
        select_subset(data, "XXXX", "M")


def test_species_columns_and_labels():
    df = pd.DataFrame({"species": [1, 2, 2]})
    out = add_species_columns(df, positive_code=2)
    assert out["species_name"].tolist() == ["Serenoa repens", "Sabal etonia", "Sabal etonia"]
    assert out["is_positive"].tolist() == [0, 1, 1]


def test_species_columns_reject_unknown_codes():
    with pytest.raises(ValueError, match="Unrecognized"):
        add_species_columns(pd.DataFrame({"species": [1, 3]}))


def test_prepare_palmetto_drops_missing_predictors(palmetto_df):
    raw = palmetto_df.copy()
    raw.loc[[0, 5], "length"] = np.nan
    out = prepare_palmetto(raw, ["height", "length", "width", "green_lvs"])
    assert len(out) == len(raw) - 2
    assert out[["height", "length", "width", "green_lvs"]].notna().all().all()
