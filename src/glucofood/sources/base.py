"""Contrato de las fuentes de filas crudas (glucosa y comidas)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

RawRow = dict[str, str]


@dataclass(frozen=True)
class SourcePaths:
    """Container for the source directory."""

    root: Path


class DataSource(ABC):
    """Abstract source of raw glucose and food rows.

    Rows are mappings of column name to untouched text; parsing and
    coercion belong to the pipeline.
    """

    def __init__(self, paths: SourcePaths) -> None:
        """Create a data source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    @abstractmethod
    def validate(self) -> None:
        """Validate that required folders/files exist.

        Raises:
            FileNotFoundError: If required files are missing.
        """

    @abstractmethod
    def load_glucose_rows(self) -> list[RawRow]:
        """Return the glucose rows in source order."""

    @abstractmethod
    def load_food_rows(self) -> list[RawRow]:
        """Return the food rows in source order."""
