"""Report configuration.

Each report reads one frozen config object; defaults reproduce the published
analysis (male CNTE lizards; 10 x 10 repeated cross-validation with seed 123).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .schema import PALMETTO

DATA_DIR = Path("data")
OUTPUT_DIR = Path("output")

LIZARD_FILE = "lizards.csv"
PALMETTO_FILE = "palmetto.csv"

DEFAULT_SPECIES = "CNTE"
DEFAULT_SEX = "M"

DEFAULT_SEED = 123
DEFAULT_FOLDS = 10
DEFAULT_REPEATS = 10
DEFAULT_THRESHOLD = 0.5

FULL_PREDICTORS: tuple[str, ...] = (
    PALMETTO.height,
    PALMETTO.length,
    PALMETTO.width,
    PALMETTO.green_lvs,
)
REDUCED_PREDICTORS: tuple[str, ...] = (
    PALMETTO.height,
    PALMETTO.width,
    PALMETTO.green_lvs,
)


@dataclass(frozen=True)
class LizardReportConfig:
    data_path: Path = DATA_DIR / LIZARD_FILE
    output_dir: Path = OUTPUT_DIR / "lizards"
    species: str = DEFAULT_SPECIES
    sex: str = DEFAULT_SEX
    na_values: tuple[str, ...] = (".", "", "NA")
    make_plots: bool = True


@dataclass(frozen=True)
class PalmettoReportConfig:
    """Settings for the palmetto classification report.

    ``positive_code`` selects which species code is modelled as the positive
    class; the other code becomes the negative class.
    """

    data_path: Path = DATA_DIR / PALMETTO_FILE
    output_dir: Path = OUTPUT_DIR / "palmetto"
    models: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: {
            "full": FULL_PREDICTORS,
            "reduced": REDUCED_PREDICTORS,
        }
    )
    positive_code: int = 2
    n_splits: int = DEFAULT_FOLDS
    n_repeats: int = DEFAULT_REPEATS
    random_state: int = DEFAULT_SEED
    threshold: float = DEFAULT_THRESHOLD
    make_plots: bool = True
