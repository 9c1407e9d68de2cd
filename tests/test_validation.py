import pytest

from fieldstats.data_processing import prepare_palmetto
from fieldstats.stats import repeated_cv_accuracy, summarise_cv

FULL = ("height", "length", "width", "green_lvs")


def test_every_fold_accuracy_in_unit_interval(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL)
    folds = repeated_cv_accuracy(
        data, FULL, "is_positive", n_splits=10, n_repeats=10, random_state=123
    )
    assert len(folds) == 100
    assert folds["accuracy"].between(0, 1).all()
    assert sorted(folds["repeat"].unique()) == list(range(1, 11))
    assert (folds.groupby("repeat")["n_test"].sum() == len(data)).all()


def test_seeded_folds_are_reproducible(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL)
    first = repeated_cv_accuracy(data, FULL, "is_positive", n_splits=5, n_repeats=2, random_state=9)
    second = repeated_cv_accuracy(data, FULL, "is_positive", n_splits=5, n_repeats=2, random_state=9)
    assert first["accuracy"].to_list() == second["accuracy"].to_list()


def test_too_few_rows_per_class_raises(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL).iloc[140:160]
    with pytest.raises(ValueError):
        repeated_cv_accuracy(data, FULL, "is_positive", n_splits=15, n_repeats=1)


def test_summarise_cv(palmetto_df):
    data = prepare_palmetto(palmetto_df, FULL)
    folds = repeated_cv_accuracy(data, FULL, "is_positive", n_splits=5, n_repeats=2, random_state=1)
    summary = summarise_cv({"full": folds})
    row = summary.iloc[0]
    assert row["model"] == "full"
    assert row["folds"] == 10
    assert row["min_accuracy"] <= row["mean_accuracy"] <= row["max_accuracy"]
