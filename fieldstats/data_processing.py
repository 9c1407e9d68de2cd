"""
Handles CSV loading, missing-value filtering and derived columns.
"""

# Every helper returns a new DataFrame; derived columns are appended, never
# overwritten, so the raw measurements stay available for plotting and export.

import logging

import numpy as np
import pandas as pd

from .schema import LIZARD, PALMETTO, PALMETTO_SPECIES_NAMES

logger = logging.getLogger(__name__)


def load_table(filepath, na_values=None):
    """
    Load a delimited data file.

    Args:
        filepath (str | Path): Path to the CSV file.
        na_values (Iterable[str], optional): Extra strings treated as missing.

    Returns:
        pd.DataFrame: Loaded DataFrame.
    """
    df = pd.read_csv(filepath, na_values=list(na_values) if na_values else None)
    logger.info("Loaded %d rows from %s", len(df), filepath)
    return df


def require_columns(df, columns):
    """Raise ``ValueError`` naming any of ``columns`` absent from ``df``."""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"Required columns missing from table: {missing}")


def drop_incomplete(df, columns):
    """Coerce ``columns`` to numeric and drop rows missing any of them.

    Non-numeric entries (for example a ``.`` placeholder that slipped past
    ``na_values``) become NaN and are dropped with the rest.

    Args:
        df: Observation table.
        columns: Names of the numeric columns every kept row must have.

    Returns:
        pd.DataFrame: Copy of ``df`` restricted to complete rows, with a fresh
        ``RangeIndex``.
    """
    require_columns(df, columns)
    out = df.copy()
    for col in columns:
        out[col] = pd.to_numeric(out[col], errors="coerce")
    kept = out.dropna(subset=list(columns)).reset_index(drop=True)
    dropped = len(out) - len(kept)
    if dropped:
        logger.info("Dropped %d of %d rows missing %s", dropped, len(out), list(columns))
    return kept


def _append_column(df, name, values):
    if name in df.columns:
        raise ValueError(f"Derived column '{name}' already exists; refusing to overwrite.")
    out = df.copy()
    out[name] = values
    return out


def add_log_columns(df, length_col=LIZARD.length, weight_col=LIZARD.weight):
    """Append natural-log length and weight columns.

    Raises:
        ValueError: If any length or weight is non-positive or non-finite, since
            the log transform is undefined there.
    """
    require_columns(df, [length_col, weight_col])
    for col in (length_col, weight_col):
        values = pd.to_numeric(df[col], errors="coerce").to_numpy(dtype=float)
        bad = ~np.isfinite(values) | (values <= 0)
        if bad.any():
            raise ValueError(
                f"Column '{col}' has {int(bad.sum())} non-positive or missing "
                f"values; log transform is undefined."
            )
    out = _append_column(df, LIZARD.log_length, np.log(df[length_col].astype(float)))
    return _append_column(out, LIZARD.log_weight, np.log(df[weight_col].astype(float)))


def prepare_lizards(df):
    """Return the lizard table with complete, positive length/weight and logs."""
    require_columns(df, [LIZARD.species, LIZARD.sex, LIZARD.length, LIZARD.weight])
    out = drop_incomplete(df, [LIZARD.length, LIZARD.weight])
    nonpositive = (out[LIZARD.length] <= 0) | (out[LIZARD.weight] <= 0)
    if nonpositive.any():
        raise ValueError(
            f"{int(nonpositive.sum())} lizard rows have non-positive "
            f"{LIZARD.length} or {LIZARD.weight}."
        )
    out[LIZARD.species] = out[LIZARD.species].astype(str).str.strip()
    out[LIZARD.sex] = out[LIZARD.sex].astype(str).str.strip()
    return add_log_columns(out)


def select_subset(df, species, sex):
    """Return rows matching one species code and one sex code."""
    mask = (df[LIZARD.species] == species) & (df[LIZARD.sex] == sex)
    subset = df[mask].reset_index(drop=True)
    if subset.empty:
        raise ValueError(f"No rows for species '{species}' and sex '{sex}'.")
    return subset


def add_species_columns(df, positive_code=2, names=None):
    """Append the species name and a 0/1 label for the positive species.

    Args:
        df: Palmetto table with an integer ``species`` column.
        positive_code: Species code modelled as the positive class.
        names: Mapping of species code to display name.

    Returns:
        pd.DataFrame: Copy with ``species_name`` and ``is_positive`` columns.

    Raises:
        ValueError: If a species code has no name or ``positive_code`` does not
            occur in the data.
    """
    names = PALMETTO_SPECIES_NAMES if names is None else names
    require_columns(df, [PALMETTO.species])
    codes = pd.to_numeric(df[PALMETTO.species], errors="coerce")
    unknown = sorted(set(codes.dropna().astype(int)) - set(names))
    if unknown or codes.isna().any():
        raise ValueError(f"Unrecognized species codes: {unknown or 'missing'}")
    if positive_code not in set(codes.astype(int)):
        raise ValueError(f"Positive species code {positive_code} not present in data.")
    out = _append_column(df, PALMETTO.species_name, codes.astype(int).map(names))
    return _append_column(out, PALMETTO.label, (codes.astype(int) == positive_code).astype(int))


def prepare_palmetto(df, predictors, positive_code=2):
    """Return the palmetto table with complete predictors and species labels."""
    out = drop_incomplete(df, list(predictors) + [PALMETTO.species])
    return add_species_columns(out, positive_code=positive_code)
