"""
Figures for the lizard and palmetto reports.

All plotting functions accept prepared tables and fitted models and do not
fit anything themselves.

Modules:
    lizard_plots:
        Weight vs. snout-vent length scatterplots with the general allometric
        curve, and a subset scatterplot comparing general and specialized
        curves.

    palmetto_plots:
        Box plots of each morphological predictor by species and a height vs.
        canopy width scatterplot.

Styling:
    STIX serif fonts, 300 DPI PNG plus PDF/SVG bundles, top/right spines
    suppressed.
"""

from .lizard_plots import plot_subset_models, plot_weight_by_length
from .palmetto_plots import plot_height_vs_width, plot_predictor_boxplots
from .style import save_figure_bundle, set_global_style

__all__ = [
    "plot_weight_by_length",
    "plot_subset_models",
    "plot_predictor_boxplots",
    "plot_height_vs_width",
    "save_figure_bundle",
    "set_global_style",
]
