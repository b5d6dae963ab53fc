"""CLI: gráfico interactivo de glucosa vs. comidas para un día."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from glucofood.chart import build_figure, write_chart_html
from glucofood.config import (
    DEFAULT_SMOOTHING_ALPHA,
    DEFAULT_TARGET_DATE,
    DEFAULT_TIMEZONE,
    ChartConfig,
)
from glucofood.excel_writer import write_day_xlsx
from glucofood.pipeline import prepare_day
from glucofood.sources.csv_files import CsvPaths, CsvSource

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="glucofood",
        description="Glucosa vs. comidas: gráfico interactivo de un día.",
    )
    parser.add_argument(
        "--data-dir",
        default=".",
        help="Directorio con Glucose.csv y Food.csv (default: actual).",
    )
    parser.add_argument(
        "--date",
        default=DEFAULT_TARGET_DATE.isoformat(),
        help=f"Día a graficar, YYYY-MM-DD (default: {DEFAULT_TARGET_DATE}).",
    )
    parser.add_argument(
        "--alpha",
        type=float,
        default=DEFAULT_SMOOTHING_ALPHA,
        help=f"Factor de suavizado en (0, 1] (default: {DEFAULT_SMOOTHING_ALPHA}).",
    )
    parser.add_argument(
        "--tz",
        default=DEFAULT_TIMEZONE,
        help=f"Zona horaria IANA de los datos (default: {DEFAULT_TIMEZONE}).",
    )
    parser.add_argument(
        "--out",
        default="glucose_food.html",
        help="Archivo HTML de salida (default: glucose_food.html).",
    )
    parser.add_argument(
        "--xlsx",
        default=None,
        help="Además, exportar el día a este archivo Excel.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log INFO.")
    return parser


def config_from_args(
    ns: argparse.Namespace, parser: argparse.ArgumentParser
) -> ChartConfig:
    """Build and validate the chart configuration; errors go to ``parser.error``."""
    try:
        target = date.fromisoformat(ns.date)
        config = ChartConfig(
            target_date=target, smoothing_alpha=ns.alpha, timezone=ns.tz
        )
    except ValueError as exc:
        parser.error(str(exc))
    return config


def main(argv: list[str] | None = None) -> int:
    """Run the chart CLI.

    Returns:
        Exit code (0 on success).
    """
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config = config_from_args(ns, parser)

    base = Path(ns.data_dir).expanduser().resolve()
    source = CsvSource(CsvPaths(root=base))
    source.validate()

    glucose_rows = source.load_glucose_rows()
    food_rows = source.load_food_rows()
    logger.info(
        "Loaded %d glucose rows and %d food rows from %s",
        len(glucose_rows),
        len(food_rows),
        base,
    )
    day = prepare_day(glucose_rows, food_rows, config)

    out_path = Path(ns.out).expanduser()
    write_chart_html(build_figure(day), out_path)
    print(f"OK: Glucose readings: {len(day.glucose_readings)}")
    print(f"OK: Food events: {len(day.food_events)}")
    print(f"OK: Chart: {out_path}")

    if ns.xlsx:
        xlsx_path = Path(ns.xlsx).expanduser()
        write_day_xlsx(day, xlsx_path)
        print(f"OK: Excel: {xlsx_path}")
    return 0
