"""Export report sheets to Excel (XLSX) and CSV."""

import csv
from datetime import date, datetime, time
from decimal import Decimal
from io import BytesIO, StringIO
from typing import Any
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.xml.constants import ARC_CORE
from openpyxl.xml.functions import tostring

from src.modules.reports.assembly import Sheet


def _cell_value(v: Any) -> Any:
    """Convert value for Excel (Decimal -> int/float, strings stay)."""
    if v is None:
        return None
    if isinstance(v, Decimal):
        return int(v) if v == v.to_integral_value() else float(v)
    return v


def _write_table(ws: Any, rows: list[list[Any]], start_row: int = 1) -> None:
    """Write list of rows to sheet starting at start_row."""
    for i, row in enumerate(rows, start=start_row):
        for j, val in enumerate(row, start=1):
            ws.cell(row=i, column=j, value=_cell_value(val))


def _fill_sheet(ws: Any, sheet: Sheet) -> None:
    _write_table(ws, [sheet.columns], 1)
    for c in range(1, len(sheet.columns) + 1):
        ws.cell(1, c).font = Font(bold=True)
    _write_table(ws, [[r.get(col) for col in sheet.columns] for r in sheet.rows], 2)
    for c, width in enumerate(sheet.widths, start=1):
        ws.column_dimensions[get_column_letter(c)].width = width


def _pin_archive(content: bytes, wb: Workbook, stamp: datetime) -> bytes:
    """
    Rewrite the saved package with fixed zip entry times and core properties.

    openpyxl stamps both with the current time on save.
    """
    wb.properties.created = stamp
    wb.properties.modified = stamp
    out = BytesIO()
    with ZipFile(BytesIO(content)) as src, ZipFile(out, "w", ZIP_DEFLATED) as dst:
        for info in src.infolist():
            data = src.read(info.filename)
            if info.filename == ARC_CORE:
                data = tostring(wb.properties.to_tree())
            entry = ZipInfo(info.filename, date_time=stamp.timetuple()[:6])
            entry.compress_type = ZIP_DEFLATED
            dst.writestr(entry, data)
    return out.getvalue()


def export_workbook(sheets: list[Sheet], generated_on: date | None = None) -> bytes:
    """One worksheet per sheet, header row in bold. Same sheets and date give the same bytes."""
    wb = Workbook()
    ws = wb.active
    for idx, sheet in enumerate(sheets):
        if idx > 0:
            ws = wb.create_sheet()
        ws.title = sheet.name
        _fill_sheet(ws, sheet)
    buf = BytesIO()
    wb.save(buf)
    stamp = datetime.combine(generated_on or date.today(), time.min)
    return _pin_archive(buf.getvalue(), wb, stamp)


def export_csv(sheet: Sheet) -> bytes:
    """Single sheet as UTF-8 CSV with a header row."""
    buf = StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(sheet.columns)
    for r in sheet.rows:
        writer.writerow([_cell_value(r.get(col)) for col in sheet.columns])
    return buf.getvalue().encode("utf-8")
