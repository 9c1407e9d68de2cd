"""Write report tables to reproducible CSV files.

This module is the output boundary between in-memory results and the
tabular artifacts consumed by the written reports.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Dict, Mapping

import pandas as pd

logger = logging.getLogger(__name__)


def sanitize_filename(name: str) -> str:
    """Normalize a filename component into a stable, filesystem-safe token."""
    text = re.sub(r"\s+", "_", str(name).strip())
    text = re.sub(r"[^A-Za-z0-9._-]+", "_", text)
    text = re.sub(r"_+", "_", text).strip("._")
    return text or "table"


def save_tables_to_csv(
    tables: Mapping[str, pd.DataFrame], output_dir: str = "output"
) -> Dict[str, str]:
    """Save each named table as ``<output_dir>/<name>.csv``.

    Args:
        tables (Mapping[str, pandas.DataFrame]): Table name to frame.
        output_dir (str): Directory where CSV outputs are written.

    Returns:
        dict[str, str]: Table name to written path.
    """
    os.makedirs(output_dir, exist_ok=True)
    paths = {}
    for name, table in tables.items():
        path = os.path.join(output_dir, f"{sanitize_filename(name)}.csv")
        table.to_csv(path, index=False)
        logger.info("Saved %s to %s", name, path)
        paths[name] = path
    return paths
