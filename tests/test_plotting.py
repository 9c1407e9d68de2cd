"""Verify plotting writes figure bundles and leaves inputs untouched."""

import os

import numpy as np
import pandas.testing as pdt

from fieldstats.data_processing import prepare_lizards, prepare_palmetto, select_subset
from fieldstats.plotting import (
    plot_height_vs_width,
    plot_predictor_boxplots,
    plot_subset_models,
    plot_weight_by_length,
)
from fieldstats.stats import fit_allometric


def test_lizard_plots(tmp_path, lizard_df):
    data = prepare_lizards(lizard_df)
    snapshot = data.copy()
    fit = fit_allometric(data["SV_length"], data["weight"])
    subset = select_subset(data, "CNTE", "M")
    sub_fit = fit_allometric(subset["SV_length"], subset["weight"], guess=fit.guess)

    out = plot_weight_by_length(data, fit, output_dir=str(tmp_path))
    assert out.endswith("weight_by_length.png")
    assert os.path.exists(out)
    assert os.path.exists(out.replace(".png", ".pdf"))

    out = plot_subset_models(subset, {"general": fit, "specialized": sub_fit}, str(tmp_path))
    assert os.path.exists(out)
    pdt.assert_frame_equal(data, snapshot)


def test_palmetto_plots(tmp_path, palmetto_df):
    predictors = ["height", "length", "width", "green_lvs"]
    data = prepare_palmetto(palmetto_df, predictors)
    out = plot_predictor_boxplots(data, predictors, output_dir=str(tmp_path))
    assert out.endswith("predictor_boxplots.png")
    assert os.path.exists(out)
    out = plot_height_vs_width(data, output_dir=str(tmp_path))
    assert os.path.exists(out)
    assert np.isfinite(data["height"]).all()
