"""Preparación de datos del día: parseo, filtro, suavizado y agregado horario."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime, time, timezone, tzinfo
from typing import Protocol, TypeVar

import pandas as pd
from dateutil import parser as date_parser

from glucofood.config import ChartConfig
from glucofood.model import (
    DayData,
    FoodEvent,
    GlucoseReading,
    HourBucket,
    SmoothedPoint,
)

logger = logging.getLogger(__name__)

GLUCOSE_TIMESTAMP_FIELD = "Timestamp (YYYY-MM-DDThh:mm:ss)"
GLUCOSE_VALUE_FIELD = "Glucose Value (mg/dL)"
FOOD_TIMESTAMP_FIELD = "time_begin"
FOOD_CALORIES_FIELD = "calorie"
FOOD_PROTEIN_FIELD = "protein"
FOOD_CARB_FIELD = "total_carb"
FOOD_SUGAR_FIELD = "sugar"

# Sorts before any real day, so day filtering always drops it.
INVALID_INSTANT = datetime.min.replace(tzinfo=timezone.utc)

NUTRIENT_SELECTORS: dict[str, Callable[[FoodEvent], float]] = {
    "calories": lambda e: e.calories,
    "protein": lambda e: e.protein,
    "carb": lambda e: e.carb,
    "sugar": lambda e: e.sugar,
}

Row = Mapping[str, object]


class _Timestamped(Protocol):
    @property
    def timestamp(self) -> datetime: ...


T = TypeVar("T", bound=_Timestamped)


def coerce_number(value: object) -> float:
    """Parse a numeric field, defaulting to 0.0.

    Missing, empty, non-numeric and non-finite values all become 0.0, as
    do digit-grouped literals such as "1_000".
    """
    if value is None:
        return 0.0
    text = str(value).strip()
    if "_" in text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_timestamp(text: object, zone: tzinfo | None = None) -> datetime:
    """Parse a free-text date/time into an aware datetime.

    Args:
        text: Raw field value.
        zone: Zone applied to naive values and used for aware ones.
            Defaults to UTC.

    Returns:
        The parsed instant, or ``INVALID_INSTANT`` if it cannot be parsed.
    """
    zone = zone or timezone.utc
    if not isinstance(text, str) or not text.strip():
        return INVALID_INSTANT
    try:
        parsed = date_parser.parse(text.strip())
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=zone)
        # shifting into the zone can leave the datetime range
        return parsed.astimezone(zone)
    except (ValueError, OverflowError):
        return INVALID_INSTANT


def parse_glucose(
    raw_rows: Iterable[Row], zone: tzinfo | None = None
) -> list[GlucoseReading]:
    """Convert raw glucose rows into readings, one per row, in order."""
    return [
        GlucoseReading(
            timestamp=parse_timestamp(row.get(GLUCOSE_TIMESTAMP_FIELD), zone),
            glucose_value=coerce_number(row.get(GLUCOSE_VALUE_FIELD)),
        )
        for row in raw_rows
    ]


def parse_food(
    raw_rows: Iterable[Row], zone: tzinfo | None = None
) -> list[FoodEvent]:
    """Convert raw food rows into events, one per row, in order."""
    return [
        FoodEvent(
            timestamp=parse_timestamp(row.get(FOOD_TIMESTAMP_FIELD), zone),
            calories=coerce_number(row.get(FOOD_CALORIES_FIELD)),
            protein=coerce_number(row.get(FOOD_PROTEIN_FIELD)),
            carb=coerce_number(row.get(FOOD_CARB_FIELD)),
            sugar=coerce_number(row.get(FOOD_SUGAR_FIELD)),
        )
        for row in raw_rows
    ]


def day_bounds(
    target_date: date, zone: tzinfo | None = None
) -> tuple[datetime, datetime]:
    """Return the inclusive [00:00:00, 23:59:59] bounds of a calendar day."""
    zone = zone or timezone.utc
    start = datetime.combine(target_date, time(0, 0, 0), tzinfo=zone)
    end = datetime.combine(target_date, time(23, 59, 59), tzinfo=zone)
    return start, end


def filter_to_day(
    items: Iterable[T], day_start: datetime, day_end: datetime
) -> list[T]:
    """Keep items whose timestamp lies in [day_start, day_end], preserving order."""
    return [item for item in items if day_start <= item.timestamp <= day_end]


def exponential_smooth(
    readings: Sequence[GlucoseReading], alpha: float
) -> list[SmoothedPoint]:
    """Exponentially smooth a glucose trace.

    The running value is seeded with the first raw value and then updated
    for every reading, the first one included, so the first point equals
    the first raw value.

    Args:
        readings: Readings in chronological order.
        alpha: Weight of the newest value, in (0, 1].

    Returns:
        One smoothed point per reading; empty when there are no readings.

    Raises:
        ValueError: If alpha is outside (0, 1].
    """
    if not 0 < alpha <= 1:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    if not readings:
        return []

    running = readings[0].glucose_value
    out: list[SmoothedPoint] = []
    for reading in readings:
        running = alpha * reading.glucose_value + (1 - alpha) * running
        out.append(
            SmoothedPoint(timestamp=reading.timestamp, smoothed_value=running)
        )
    return out


def truncate_to_hour(ts: datetime) -> datetime:
    """Trunca minutos, segundos y microsegundos."""
    return ts.replace(minute=0, second=0, microsecond=0)


def aggregate_by_hour(
    events: Iterable[FoodEvent], selector: Callable[[FoodEvent], float]
) -> list[HourBucket]:
    """Sum one nutrient per hour.

    Buckets come out in the order their hour first appears in ``events``.
    """
    totals: dict[datetime, float] = {}
    for event in events:
        key = truncate_to_hour(event.timestamp)
        totals[key] = totals.get(key, 0.0) + selector(event)
    return [HourBucket(hour_start=k, total=v) for k, v in totals.items()]


def prepare_day(
    glucose_rows: Iterable[Row],
    food_rows: Iterable[Row],
    config: ChartConfig,
) -> DayData:
    """Run the full pipeline for the configured day.

    Empty sources for the day are not errors; they are logged and leave the
    corresponding fields of the result empty.
    """
    zone = config.tzinfo
    day_start, day_end = day_bounds(config.target_date, zone)

    glucose = filter_to_day(parse_glucose(glucose_rows, zone), day_start, day_end)
    food = filter_to_day(parse_food(food_rows, zone), day_start, day_end)

    if not glucose:
        logger.info("No glucose data found for %s", config.target_date.isoformat())
    if not food:
        logger.info("No food data found for %s", config.target_date.isoformat())

    smoothed = exponential_smooth(glucose, config.smoothing_alpha)
    buckets = {
        name: tuple(aggregate_by_hour(food, selector))
        for name, selector in NUTRIENT_SELECTORS.items()
    }
    logger.debug(
        "Prepared %s: %d glucose readings, %d food events, %d hours with food",
        config.target_date.isoformat(),
        len(glucose),
        len(food),
        len(buckets["calories"]),
    )
    return DayData(
        target_date=config.target_date,
        glucose_readings=tuple(glucose),
        smoothed_series=tuple(smoothed),
        food_events=tuple(food),
        calories_by_hour=buckets["calories"],
        protein_by_hour=buckets["protein"],
        carb_by_hour=buckets["carb"],
        sugar_by_hour=buckets["sugar"],
    )


def glucose_to_frame(day: DayData) -> pd.DataFrame:
    """Raw and smoothed glucose side by side, ordered by time."""
    rows = [
        {
            "datetime": r.timestamp,
            "glucose_mg_dl": r.glucose_value,
            "smoothed_mg_dl": s.smoothed_value,
        }
        for r, s in zip(day.glucose_readings, day.smoothed_series)
    ]
    df = pd.DataFrame(rows, columns=["datetime", "glucose_mg_dl", "smoothed_mg_dl"])
    if df.empty:
        return df
    return df.sort_values("datetime", kind="stable").reset_index(drop=True)


def hourly_nutrients_frame(day: DayData) -> pd.DataFrame:
    """One row per hour with food, one column per nutrient total."""
    columns = ["hour", "calories", "protein", "carb", "sugar"]
    per_nutrient = {
        "calories": day.calories_by_hour,
        "protein": day.protein_by_hour,
        "carb": day.carb_by_hour,
        "sugar": day.sugar_by_hour,
    }
    rows: dict[datetime, dict[str, object]] = {}
    for name, buckets in per_nutrient.items():
        for bucket in buckets:
            row = rows.setdefault(bucket.hour_start, {"hour": bucket.hour_start})
            row[name] = bucket.total
    if not rows:
        return pd.DataFrame(columns=columns)
    out = pd.DataFrame(list(rows.values()), columns=columns)
    return out.sort_values("hour").reset_index(drop=True)
