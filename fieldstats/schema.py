"""Define standardized column names for the field datasets and result tables."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LizardColumns:
    """Column labels for the lizard pitfall-trap measurements.

    Attributes:
        species: Four-letter species code (for example ``CNTE``).
        sex: Sex code, ``M`` or ``F``; other codes are kept but never matched
            by a subset filter.
        length: Snout-vent length in mm. Must be strictly positive to enter
            the log-log initial-guess regression.
        weight: Body weight in g. Must be strictly positive for the same
            reason.
        log_length: Derived natural log of ``length``.
        log_weight: Derived natural log of ``weight``.
        predicted: Prefix for prediction columns appended per model.
    """

    species: str = "spp"
    sex: str = "sex"
    length: str = "SV_length"
    weight: str = "weight"
    log_length: str = "log_length"
    log_weight: str = "log_weight"
    predicted: str = "predicted_weight"


@dataclass(frozen=True)
class PalmettoColumns:
    """Column labels for the palmetto morphology survey.

    Attributes:
        species: Integer species code (1 = Serenoa repens, 2 = Sabal etonia).
        height: Maximum plant height in cm.
        length: Widest canopy length in cm.
        width: Canopy width perpendicular to ``length`` in cm.
        green_lvs: Count of green leaves.
        species_name: Derived binomial name recoded from ``species``.
        label: Derived 0/1 class label (1 = positive class).
    """

    species: str = "species"
    height: str = "height"
    length: str = "length"
    width: str = "width"
    green_lvs: str = "green_lvs"
    species_name: str = "species_name"
    label: str = "is_positive"


LIZARD = LizardColumns()
PALMETTO = PalmettoColumns()

PALMETTO_SPECIES_NAMES = {1: "Serenoa repens", 2: "Sabal etonia"}
