"""Configuración del gráfico diario."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo

from dateutil import tz

DEFAULT_TARGET_DATE = date(2020, 2, 14)
DEFAULT_SMOOTHING_ALPHA = 0.3
DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class ChartConfig:
    """Configuration for one day of the glucose/food chart.

    Attributes:
        target_date: Calendar day to keep.
        smoothing_alpha: Exponential smoothing factor in (0, 1].
        timezone: IANA zone used to parse timestamps and cut hours.
    """

    target_date: date = DEFAULT_TARGET_DATE
    smoothing_alpha: float = DEFAULT_SMOOTHING_ALPHA
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        if not 0 < self.smoothing_alpha <= 1:
            raise ValueError(
                f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}"
            )
        resolve_timezone(self.timezone)

    @property
    def tzinfo(self) -> tzinfo:
        """Resolve the configured timezone.

        Raises:
            ValueError: If the zone name is unknown.
        """
        return resolve_timezone(self.timezone)


def resolve_timezone(name: str) -> tzinfo:
    """Devuelve el tzinfo para un nombre IANA; ValueError si no existe."""
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone
