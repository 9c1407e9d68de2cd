"""Render exploratory palmetto figures: predictor box plots and a scatterplot."""

from __future__ import annotations

import os
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..schema import PALMETTO
from .style import (
    MARKER_SIZES,
    STYLE,
    clean_axis,
    color_for_group,
    fig_size,
    save_figure_bundle,
    set_global_style,
)

PREDICTOR_LABELS = {
    PALMETTO.height: "Height / cm",
    PALMETTO.length: "Canopy length / cm",
    PALMETTO.width: "Canopy width / cm",
    PALMETTO.green_lvs: "Green leaves / count",
}


def plot_predictor_boxplots(
    df: pd.DataFrame,
    predictors: Sequence[str],
    output_dir: str = "output",
    group_col: str = PALMETTO.species_name,
) -> str:
    """Draw one box plot panel per predictor, split by species.

    Args:
        df (pandas.DataFrame): Prepared palmetto table.
        predictors (Sequence[str]): Predictor columns, one panel each.
        output_dir (str): Directory for the PNG/PDF/SVG bundle.
        group_col (str): Grouping column for the boxes.

    Returns:
        str: Path to the saved PNG file.
    """
    missing = (set(predictors) | {group_col}) - set(df.columns)
    if missing:
        raise KeyError(f"palmetto table missing required columns: {missing}")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    n_panels = len(predictors)
    ncols = 2 if n_panels > 1 else 1
    nrows = int(np.ceil(n_panels / ncols))
    fig, axes = plt.subplots(nrows, ncols, figsize=fig_size("grid_2x2"), squeeze=False)

    groups = sorted(df[group_col].dropna().unique())
    for ax, col in zip(axes.flat, predictors):
        data = [df.loc[df[group_col] == g, col].to_numpy(dtype=float) for g in groups]
        box = ax.boxplot(data, patch_artist=True, widths=0.5)
        ax.set_xticks(range(1, len(groups) + 1))
        ax.set_xticklabels(groups)
        for i, patch in enumerate(box["boxes"]):
            patch.set_facecolor(color_for_group(i))
            patch.set_alpha(STYLE.ALPHA_POINTS)
        ax.set_ylabel(PREDICTOR_LABELS.get(col, col))
        clean_axis(ax)
    for ax in list(axes.flat)[n_panels:]:
        ax.axis("off")

    fig.tight_layout()
    return save_figure_bundle(fig, os.path.join(output_dir, "predictor_boxplots.png"))


def plot_height_vs_width(
    df: pd.DataFrame,
    output_dir: str = "output",
    group_col: str = PALMETTO.species_name,
) -> str:
    """Scatter plant height against canopy width, coloured by species."""
    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=fig_size("single"))

    for i, (group, sub) in enumerate(df.groupby(group_col, sort=True)):
        ax.scatter(
            sub[PALMETTO.width],
            sub[PALMETTO.height],
            s=MARKER_SIZES["point"],
            alpha=STYLE.ALPHA_POINTS,
            color=color_for_group(i),
            label=str(group),
        )
    ax.set_xlabel(PREDICTOR_LABELS[PALMETTO.width])
    ax.set_ylabel(PREDICTOR_LABELS[PALMETTO.height])
    ax.legend(loc="upper left")
    clean_axis(ax, grid_axis="both")

    return save_figure_bundle(fig, os.path.join(output_dir, "height_vs_width.png"))
