"""Pytest configuration for repository-relative imports and synthetic data."""

import os
import sys

import matplotlib
import numpy as np
import pandas as pd
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")


@pytest.fixture
def lizard_df():
    """Two species following distinct power laws with mild noise."""
    rng = np.random.default_rng(7)
    rows = []
    for spp, a, b in (("CNTE", 0.5, 2.6), ("UTST", 0.2, 3.0)):
        for sex in ("M", "F"):
            lengths = rng.uniform(2.0, 10.0, 40)
            noise = rng.normal(1.0, 0.03, lengths.size)
            weights = a * lengths**b * noise
            for L, W in zip(lengths, weights):
                rows.append({"spp": spp, "sex": sex, "SV_length": L, "weight": W})
    return pd.DataFrame(rows)


@pytest.fixture
def palmetto_df():
    """Overlapping species: Sabal etonia plants are shorter with wider canopies."""
    rng = np.random.default_rng(11)
    frames = []
    for code, height, length, width, leaves in ((1, 110.0, 120.0, 90.0, 8.0), (2, 90.0, 125.0, 105.0, 6.0)):
        n = 150
        frames.append(
            pd.DataFrame(
                {
                    "species": code,
                    "height": rng.normal(height, 20.0, n),
                    "length": rng.normal(length, 25.0, n),
                    "width": rng.normal(width, 20.0, n),
                    "green_lvs": rng.poisson(leaves, n),
                }
            )
        )
    return pd.concat(frames, ignore_index=True)
