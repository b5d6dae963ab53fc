"""Exportación del día a Excel (glucosa y nutrientes por hora)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from glucofood.model import DayData
from glucofood.pipeline import glucose_to_frame, hourly_nutrients_frame

_HEADER_MAP: dict[str, str] = {
    "datetime": "Fecha / Hora",
    "glucose_mg_dl": "Glucosa (mg/dL)",
    "smoothed_mg_dl": "Glucosa suavizada\n(mg/dL)",
    "hour": "Hora",
    "calories": "Calorías\n(kcal)",
    "protein": "Proteínas\n(g)",
    "carb": "Carbohidratos\n(g)",
    "sugar": "Azúcar\n(g)",
}

_COLUMN_WIDTHS: dict[str, int] = {
    "Fecha / Hora": 18,
    "Glucosa (mg/dL)": 14,
    "Glucosa suavizada\n(mg/dL)": 16,
    "Hora": 18,
    "Calorías\n(kcal)": 10,
    "Proteínas\n(g)": 10,
    "Carbohidratos\n(g)": 14,
    "Azúcar\n(g)": 10,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Fecha / Hora": "dd/mm/yyyy hh:mm",
    "Hora": "dd/mm/yyyy hh:mm",
    "Glucosa (mg/dL)": "0.00",
    "Glucosa suavizada\n(mg/dL)": "0.00",
    "Calorías\n(kcal)": "#,##0",
    "Proteínas\n(g)": "0.0",
    "Carbohidratos\n(g)": "0.0",
    "Azúcar\n(g)": "0.0",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names for the day workbook."""

    glucose_sheet: str = "Glucosa"
    nutrients_sheet: str = "Nutrientes por hora"


def _drop_timezone(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Quita timezone de una columna datetime (Excel no la soporta)."""
    if column not in df.columns or df.empty:
        return df
    df = df.copy()
    df[column] = pd.to_datetime([ts.replace(tzinfo=None) for ts in df[column]])
    return df


def write_day_xlsx(
    day: DayData, out_path: Path, layout: ExcelLayout | None = None
) -> None:
    """Write the prepared day as a formatted workbook.

    Args:
        day: Prepared day data.
        out_path: Output path for the XLSX file.
        layout: Sheet naming; defaults to ``ExcelLayout()``.
    """
    layout = layout or ExcelLayout()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    glucose_df = _drop_timezone(glucose_to_frame(day), "datetime")
    nutrients_df = _drop_timezone(hourly_nutrients_frame(day), "hour")

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        for df, sheet in (
            (glucose_df, layout.glucose_sheet),
            (nutrients_df, layout.nutrients_sheet),
        ):
            df.rename(columns=_HEADER_MAP).to_excel(
                writer, index=False, sheet_name=sheet
            )
            _format_sheet(writer.book[sheet])


_THIN = Side(style="thin")
_BOX = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def _style_cells(ws: Any) -> None:
    """Centra y enmarca todas las celdas; cabecera en negrita y con ajuste."""
    for row in ws.iter_rows():
        is_header = row[0].row == 1
        for cell in row:
            cell.border = _BOX
            cell.alignment = Alignment(
                horizontal="center", vertical="center", wrap_text=is_header
            )
            if is_header:
                cell.font = Font(bold=True)


def _columns_by_header(ws: Any) -> dict[str, str]:
    """Cabecera -> letra de columna."""
    return {str(cell.value): cell.column_letter for cell in ws[1]}


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_cells(ws)
    letters = _columns_by_header(ws)
    for header, letter in letters.items():
        if header in _COLUMN_WIDTHS:
            ws.column_dimensions[letter].width = _COLUMN_WIDTHS[header]
        fmt = _NUMBER_FORMATS.get(header)
        if fmt is None:
            continue
        for cell in ws[letter][1:]:
            cell.number_format = fmt
