from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from glucofood.chart import SERIES, SeriesSpec, build_figure, write_chart_html
from glucofood.config import ChartConfig
from glucofood.model import DayData
from glucofood.pipeline import prepare_day
from glucofood.sources.csv_files import CsvPaths, CsvSource


@pytest.fixture
def day(data_dir: Path) -> DayData:
    src = CsvSource(CsvPaths(root=data_dir))
    return prepare_day(src.load_glucose_rows(), src.load_food_rows(), ChartConfig())


def test_one_trace_per_series(day: DayData) -> None:
    fig = build_figure(day)
    assert [t.name for t in fig.data] == [s.legend_label for s in SERIES]


def test_initial_visibility_and_axes(day: DayData) -> None:
    fig = build_figure(day)
    by_name = {t.name: t for t in fig.data}

    smoothed = by_name["Smoothed glucose"]
    assert smoothed.visible is True
    assert smoothed.yaxis == "y"
    assert list(smoothed.y) == pytest.approx([100.0, 106.0, 101.2])

    raw = by_name["Raw glucose"]
    assert raw.visible == "legendonly"
    assert raw.mode == "lines+markers"

    calories = by_name["Calories (Kcal)"]
    assert calories.type == "bar"
    assert calories.yaxis == "y2"
    assert calories.visible == "legendonly"
    assert list(calories.y) == [80.0, 20.0]


def test_timestamps_drawn_as_wall_clock(day: DayData) -> None:
    fig = build_figure(day)
    assert fig.data[0].x[0] == datetime(2020, 2, 14, 8, 0)


def test_custom_series_table(day: DayData) -> None:
    table = (SeriesSpec("sugar", "right", "pink", "Sugar (g)", "bar", "g", True),)
    fig = build_figure(day, table)
    assert len(fig.data) == 1
    assert fig.data[0].marker.color == "pink"
    assert fig.data[0].visible is True


def test_unknown_series_raises(day: DayData) -> None:
    table = (SeriesSpec("fat", "right", "gray", "Fat (g)", "bar", "g"),)
    with pytest.raises(ValueError, match="Unknown series id"):
        build_figure(day, table)


def test_unknown_kind_raises(day: DayData) -> None:
    table = (SeriesSpec("calories", "right", "gray", "Calories", "area", "Kcal"),)
    with pytest.raises(ValueError, match="Unknown series kind"):
        build_figure(day, table)


def test_empty_day_is_annotated() -> None:
    fig = build_figure(prepare_day([], [], ChartConfig()))
    texts = [a.text for a in fig.layout.annotations]
    assert "No glucose data found for 2020-02-14" in texts
    assert "No food data found for 2020-02-14" in texts
    assert all(len(t.y) == 0 for t in fig.data)


def test_write_chart_html(day: DayData, tmp_path: Path) -> None:
    out = tmp_path / "nested" / "chart.html"
    write_chart_html(build_figure(day), out)
    html = out.read_text(encoding="utf-8")
    assert "<html>" in html
    assert "cdn.plot.ly" in html
    assert "Smoothed glucose" in html
