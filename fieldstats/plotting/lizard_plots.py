"""Render weight-length scatterplots with fitted allometric curves.

All functions receive fitted models and prepared tables; no fitting happens
here.
"""

from __future__ import annotations

import os
from typing import Mapping

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ..schema import LIZARD
from .style import (
    LABEL_LENGTH,
    LABEL_WEIGHT,
    MARKER_SIZES,
    MODEL_LINE_STYLES,
    STYLE,
    clean_axis,
    color_for_group,
    fig_size,
    save_figure_bundle,
    set_global_style,
)


def _length_grid(lengths: np.ndarray, n: int = 200) -> np.ndarray:
    lo = float(np.min(lengths))
    hi = float(np.max(lengths))
    return np.linspace(lo, hi, n)


def plot_weight_by_length(
    df: pd.DataFrame,
    fit,
    output_dir: str = "output",
    group_col: str = LIZARD.sex,
) -> str:
    """Scatter weight against length for all lizards with the general curve.

    Args:
        df (pandas.DataFrame): Prepared lizard table with ``SV_length`` and
            ``weight``.
        fit: General ``AllometricFit``.
        output_dir (str): Directory for the PNG/PDF/SVG bundle.
        group_col (str): Column used to colour points.

    Returns:
        str: Path to the saved PNG file.

    Raises:
        KeyError: If required columns are missing from ``df``.
    """
    required = {LIZARD.length, LIZARD.weight, group_col}
    missing = required - set(df.columns)
    if missing:
        raise KeyError(f"lizard table missing required columns: {missing}")

    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=fig_size("single"))

    for i, (group, sub) in enumerate(df.groupby(group_col, sort=True)):
        ax.scatter(
            sub[LIZARD.length],
            sub[LIZARD.weight],
            s=MARKER_SIZES["point"],
            alpha=STYLE.ALPHA_POINTS,
            color=color_for_group(i),
            label=f"{group_col} = {group}",
        )

    grid = _length_grid(df[LIZARD.length].to_numpy(dtype=float))
    ax.plot(
        grid,
        fit.predict(grid),
        label=rf"$W = {fit.a:.3g}\,L^{{{fit.b:.3f}}}$",
        **MODEL_LINE_STYLES["general"],
    )
    ax.set_xlabel(LABEL_LENGTH)
    ax.set_ylabel(LABEL_WEIGHT)
    ax.set_title("Lizard weight by snout-vent length")
    ax.legend(loc="upper left")
    clean_axis(ax)

    return save_figure_bundle(fig, os.path.join(output_dir, "weight_by_length.png"))


def plot_subset_models(
    subset: pd.DataFrame,
    fits: Mapping[str, object],
    output_dir: str = "output",
    title: str = "Subset weight by snout-vent length",
) -> str:
    """Scatter the subset with one curve per fitted model.

    ``fits`` maps a model label (``general`` / ``specialized``) to a fitted
    model; labels without a preset line style fall back to grey.
    """
    set_global_style()
    os.makedirs(output_dir, exist_ok=True)
    fig, ax = plt.subplots(figsize=fig_size("single"))

    ax.scatter(
        subset[LIZARD.length],
        subset[LIZARD.weight],
        s=MARKER_SIZES["highlight"],
        alpha=STYLE.ALPHA_POINTS,
        color=color_for_group(0),
        label="Observed",
    )
    grid = _length_grid(subset[LIZARD.length].to_numpy(dtype=float))
    for label, fit in fits.items():
        style = MODEL_LINE_STYLES.get(label, {"color": "0.4", "linestyle": ":"})
        ax.plot(grid, fit.predict(grid), label=f"{label.capitalize()} model", **style)

    ax.set_xlabel(LABEL_LENGTH)
    ax.set_ylabel(LABEL_WEIGHT)
    ax.set_title(title)
    ax.legend(loc="upper left")
    clean_axis(ax)

    return save_figure_bundle(fig, os.path.join(output_dir, "subset_models.png"))
