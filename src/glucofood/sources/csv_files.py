"""Lectura de los CSV de glucosa y comidas."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from glucofood.sources.base import DataSource, RawRow, SourcePaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CsvPaths(SourcePaths):
    """Paths for the glucose and food CSV exports."""

    # root: folder containing both CSV files
    glucose_name: str = "Glucose.csv"
    food_name: str = "Food.csv"

    @property
    def glucose_csv(self) -> Path:
        return self.root / self.glucose_name

    @property
    def food_csv(self) -> Path:
        return self.root / self.food_name


class CsvSource(DataSource):
    """Glucose + food CSV source. Rows are returned as raw text fields."""

    _paths: CsvPaths

    def __init__(self, paths: CsvPaths) -> None:
        super().__init__(paths)

    def validate(self) -> None:
        """Validate that the data directory and both CSV files exist."""
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))
        for path in (self._paths.glucose_csv, self._paths.food_csv):
            if not path.is_file():
                raise FileNotFoundError(str(path))

    def load_glucose_rows(self) -> list[RawRow]:
        """Read the glucose CSV as a list of text rows."""
        return _read_rows(self._paths.glucose_csv)

    def load_food_rows(self) -> list[RawRow]:
        """Read the food CSV as a list of text rows."""
        return _read_rows(self._paths.food_csv)


def _read_rows(path: Path) -> list[RawRow]:
    """Lee un CSV sin convertir tipos ni NA; limpia espacios en cabeceras."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df = df.rename(columns={c: c.strip() for c in df.columns})
    logger.info("Columns in %s: %s", path.name, list(df.columns))
    return [
        {str(k): str(v) for k, v in record.items()}
        for record in df.to_dict(orient="records")
    ]
