"""Modelos tipados para lecturas de glucosa, comidas y series derivadas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class GlucoseReading:
    """One glucose measurement event (timestamped)."""

    timestamp: datetime
    glucose_value: float


@dataclass(frozen=True)
class FoodEvent:
    """One food intake event with its nutrient amounts."""

    timestamp: datetime
    calories: float
    protein: float
    carb: float
    sugar: float


@dataclass(frozen=True)
class SmoothedPoint:
    """Exponentially smoothed glucose value at a reading's timestamp."""

    timestamp: datetime
    smoothed_value: float


@dataclass(frozen=True)
class HourBucket:
    """Sum of one nutrient over the events of a single hour."""

    hour_start: datetime
    total: float


@dataclass(frozen=True)
class DayData:
    """Everything the chart needs for one day, computed once."""

    target_date: date
    glucose_readings: tuple[GlucoseReading, ...] = ()
    smoothed_series: tuple[SmoothedPoint, ...] = ()
    food_events: tuple[FoodEvent, ...] = ()
    calories_by_hour: tuple[HourBucket, ...] = ()
    protein_by_hour: tuple[HourBucket, ...] = ()
    carb_by_hour: tuple[HourBucket, ...] = ()
    sugar_by_hour: tuple[HourBucket, ...] = ()

    @property
    def has_glucose(self) -> bool:
        return bool(self.glucose_readings)

    @property
    def has_food(self) -> bool:
        return bool(self.food_events)
