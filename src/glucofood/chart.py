"""Gráfico interactivo del día: glucosa a la izquierda, nutrientes a la derecha."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from glucofood.model import DayData
from glucofood.pipeline import day_bounds

_HOUR_MS = 3_600_000
_BAR_OPACITY = 0.7

Points = tuple[list[datetime], list[float]]


@dataclass(frozen=True)
class SeriesSpec:
    """How one data series is drawn and toggled.

    Attributes:
        series_id: Key into the day data (see ``_EXTRACTORS``).
        axis_side: "left" for the glucose axis, "right" for nutrients.
        color: Trace color.
        legend_label: Legend entry, also used as the axis title.
        kind: "line", "line+markers" or "bar".
        unit: Unit shown on hover.
        visible: Whether the series starts shown. Hidden series stay in
            the legend and can be toggled on.
    """

    series_id: str
    axis_side: str
    color: str
    legend_label: str
    kind: str
    unit: str
    visible: bool = False


SERIES: tuple[SeriesSpec, ...] = (
    SeriesSpec(
        "smoothed_glucose", "left", "blue", "Smoothed glucose", "line", "mg/dL", True
    ),
    SeriesSpec("raw_glucose", "left", "red", "Raw glucose", "line+markers", "mg/dL"),
    SeriesSpec("calories", "right", "orange", "Calories (Kcal)", "bar", "Kcal"),
    SeriesSpec("protein", "right", "green", "Protein (g)", "bar", "g"),
    SeriesSpec("carb", "right", "purple", "Carb (g)", "bar", "g"),
    SeriesSpec("sugar", "right", "brown", "Sugar (g)", "bar", "g"),
)


def _wall(ts: datetime) -> datetime:
    # plotly.js ignores offsets; draw in the zone the data was parsed in
    return ts.replace(tzinfo=None)


def _smoothed_points(day: DayData) -> Points:
    return (
        [_wall(p.timestamp) for p in day.smoothed_series],
        [p.smoothed_value for p in day.smoothed_series],
    )


def _raw_points(day: DayData) -> Points:
    return (
        [_wall(r.timestamp) for r in day.glucose_readings],
        [r.glucose_value for r in day.glucose_readings],
    )


def _bucket_points(attr: str) -> Callable[[DayData], Points]:
    def extract(day: DayData) -> Points:
        buckets = getattr(day, attr)
        return [_wall(b.hour_start) for b in buckets], [b.total for b in buckets]

    return extract


_EXTRACTORS: dict[str, Callable[[DayData], Points]] = {
    "smoothed_glucose": _smoothed_points,
    "raw_glucose": _raw_points,
    "calories": _bucket_points("calories_by_hour"),
    "protein": _bucket_points("protein_by_hour"),
    "carb": _bucket_points("carb_by_hour"),
    "sugar": _bucket_points("sugar_by_hour"),
}


def _make_trace(
    spec: SeriesSpec, x: list[datetime], y: list[float]
) -> go.BaseTraceType:
    """Crea la traza plotly según el tipo de serie."""
    visible: bool | str = True if spec.visible else "legendonly"
    if spec.kind == "bar":
        return go.Bar(
            x=x,
            y=y,
            name=spec.legend_label,
            marker_color=spec.color,
            opacity=_BAR_OPACITY,
            xperiod=_HOUR_MS,
            xperiodalignment="middle",
            visible=visible,
            hovertemplate=(
                f"Hour: %{{x|%H:%M}}<br>{spec.legend_label}: %{{y}}<extra></extra>"
            ),
        )
    if spec.kind not in ("line", "line+markers"):
        raise ValueError(f"Unknown series kind: {spec.kind}")
    return go.Scatter(
        x=x,
        y=y,
        mode="lines" if spec.kind == "line" else "lines+markers",
        name=spec.legend_label,
        line=dict(color=spec.color, width=2),
        marker=dict(size=8, color=spec.color),
        visible=visible,
        hovertemplate=(
            f"Time: %{{x|%H:%M}}<br>Glucose: %{{y:.0f}} {spec.unit}<extra></extra>"
        ),
    )


def _no_data_messages(day: DayData) -> list[str]:
    date_txt = day.target_date.isoformat()
    messages = []
    if not day.has_glucose:
        messages.append(f"No glucose data found for {date_txt}")
    if not day.has_food:
        messages.append(f"No food data found for {date_txt}")
    return messages


def build_figure(day: DayData, series: Sequence[SeriesSpec] = SERIES) -> go.Figure:
    """Build the interactive day chart.

    Glucose series use the left axis and nutrient series the right one.
    Clicking a legend entry toggles that series.

    Args:
        day: Prepared day data.
        series: Declarative table of series to draw.

    Returns:
        Plotly figure. Missing sources are annotated, never an error.
    """
    fig = make_subplots(specs=[[{"secondary_y": True}]])

    for spec in series:
        extractor = _EXTRACTORS.get(spec.series_id)
        if extractor is None:
            raise ValueError(f"Unknown series id: {spec.series_id}")
        x, y = extractor(day)
        fig.add_trace(_make_trace(spec, x, y), secondary_y=spec.axis_side == "right")

    day_start, day_end = day_bounds(day.target_date)
    fig.update_xaxes(
        title_text="Time of Day",
        range=[_wall(day_start), _wall(day_end)],
        dtick=_HOUR_MS,
        tickformat="%H:%M",
    )
    fig.update_yaxes(title_text="Glucose (mg/dL)", secondary_y=False)
    right_labels = [s.legend_label for s in series if s.axis_side == "right"]
    fig.update_yaxes(
        title_text=" / ".join(right_labels),
        secondary_y=True,
        rangemode="tozero",
        showgrid=False,
    )
    fig.update_layout(
        title=f"Glucose vs food intake, {day.target_date.isoformat()}",
        barmode="group",
        hovermode="closest",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
        width=1000,
        height=600,
    )

    for i, message in enumerate(_no_data_messages(day)):
        fig.add_annotation(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5 - i * 0.08,
            showarrow=False,
            font=dict(size=16, color="gray"),
        )
    return fig


def write_chart_html(fig: go.Figure, out_path: Path) -> None:
    """Write the figure as a standalone HTML page (plotly.js from CDN)."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_path, include_plotlyjs="cdn", full_html=True)
