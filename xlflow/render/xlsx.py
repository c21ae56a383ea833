"""openpyxl-backed renderer writing ``.xlsx`` workbooks."""

# Module responsibilities:
# - Translate resolved CellStyle values into cached openpyxl style objects.
# - Lay out grouped/simple headers, data rows, widths, freeze panes and auto-filters.
# - Wrap any failure while producing the workbook into WriteError.

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import IO, Any, Dict, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment as XlAlignment
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..errors import WriteError
from ..model import ExcelDocument, Sheet
from ..resolver import ResolvedSheet, StyleResolver
from ..style import BorderStyle, CellStyle
from ..utils.log import get_logger
from .widths import DEFAULT_TABLE_WIDTH, layout_widths

logger = get_logger("render.xlsx")

DATE_FORMAT = "yyyy-mm-dd"
DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"


class _StyleCache:
    """Reuses openpyxl style objects for identical CellStyle values."""

    def __init__(self) -> None:
        self._fonts: Dict[tuple, Font] = {}
        self._fills: Dict[Any, PatternFill] = {}
        self._borders: Dict[Any, Border] = {}
        self._alignments: Dict[Any, XlAlignment] = {}

    def font(self, style: CellStyle) -> Font:
        key = (style.bold, style.italic, style.font_color)
        if key not in self._fonts:
            color = style.font_color.hex if style.font_color else None
            self._fonts[key] = Font(bold=style.bold, italic=style.italic, color=color)
        return self._fonts[key]

    def fill(self, style: CellStyle) -> Optional[PatternFill]:
        if style.background_color is None:
            return None
        key = style.background_color
        if key not in self._fills:
            self._fills[key] = PatternFill(
                fill_type="solid", start_color=key.hex, end_color=key.hex
            )
        return self._fills[key]

    def border(self, style: CellStyle) -> Optional[Border]:
        if style.border is None or style.border is BorderStyle.NONE:
            return None
        if style.border not in self._borders:
            side = Side(style=style.border.value)
            self._borders[style.border] = Border(left=side, right=side, top=side, bottom=side)
        return self._borders[style.border]

    def alignment(self, style: CellStyle) -> Optional[XlAlignment]:
        if style.alignment is None:
            return None
        if style.alignment not in self._alignments:
            self._alignments[style.alignment] = XlAlignment(horizontal=style.alignment.value)
        return self._alignments[style.alignment]

    def apply(self, cell: Any, style: CellStyle, value: Any = None) -> None:
        if style.is_empty and not isinstance(value, (date, datetime)):
            return
        cell.font = self.font(style)
        fill = self.fill(style)
        if fill is not None:
            cell.fill = fill
        border = self.border(style)
        if border is not None:
            cell.border = border
        alignment = self.alignment(style)
        if alignment is not None:
            cell.alignment = alignment
        number_format = style.number_format or _default_format(value)
        if number_format:
            cell.number_format = number_format


def _default_format(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return DATETIME_FORMAT
    if isinstance(value, date):
        return DATE_FORMAT
    return None


class XlsxRenderer:
    """Renders an ExcelDocument to ``.xlsx`` using openpyxl.

    Args:
        table_width: Total character width shared by Percent columns after
            Fixed and Auto columns are laid out.
    """

    def __init__(self, table_width: int = DEFAULT_TABLE_WIDTH) -> None:
        self.table_width = table_width

    def render(self, document: ExcelDocument, output: IO[bytes]) -> None:
        current: Optional[str] = None
        try:
            workbook = Workbook()
            workbook.remove(workbook.active)
            resolver = StyleResolver.for_document(document)
            cache = _StyleCache()
            for sheet in document.sheets:
                current = sheet.name
                worksheet = workbook.create_sheet(title=sheet.name)
                self._render_sheet(worksheet, resolver.resolve_sheet(sheet), cache)
            if not document.sheets:
                workbook.create_sheet(title="Sheet1")
            current = None
            workbook.save(output)
        except WriteError:
            raise
        except Exception as exc:
            logger.error("Failed to render workbook", extra={"sheet": current, "error": str(exc)})
            raise WriteError(f"Failed to write Excel document: {exc}", sheet=current) from exc
        logger.info(
            "Workbook rendered",
            extra={"sheets": list(document.sheet_names)},
        )

    def _render_sheet(self, ws: Worksheet, resolved: ResolvedSheet, cache: _StyleCache) -> None:
        sheet = resolved.sheet
        header_row = 1
        if sheet.header_groups:
            self._render_group_row(ws, resolved, cache)
            header_row = 2

        for col_idx, column in enumerate(sheet.columns, start=1):
            cell = ws.cell(row=header_row, column=col_idx, value=column.header)
            cache.apply(cell, resolved.header_styles[col_idx - 1])

        for row_offset, (row, styles) in enumerate(zip(sheet.rows, resolved.body_styles)):
            excel_row = header_row + 1 + row_offset
            for col_idx, (value, style) in enumerate(zip(row, styles), start=1):
                cell = ws.cell(row=excel_row, column=col_idx, value=_cell_value(value))
                cache.apply(cell, style, value)

        for col_idx, width in enumerate(layout_widths(sheet, self.table_width), start=1):
            ws.column_dimensions[get_column_letter(col_idx)].width = width

        self._apply_freeze_pane(ws, sheet)
        if sheet.auto_filter and sheet.columns:
            last = get_column_letter(len(sheet.columns))
            ws.auto_filter.ref = f"A{header_row}:{last}{header_row + len(sheet.rows)}"

    def _render_group_row(self, ws: Worksheet, resolved: ResolvedSheet, cache: _StyleCache) -> None:
        sheet = resolved.sheet
        for group in sheet.header_groups:
            start = sheet.column_index(group.columns[0]) + 1
            end = start + len(group.columns) - 1
            cell = ws.cell(row=1, column=start, value=group.title)
            cache.apply(cell, resolved.group_header_style)
            if end > start:
                ws.merge_cells(start_row=1, start_column=start, end_row=1, end_column=end)

    @staticmethod
    def _apply_freeze_pane(ws: Worksheet, sheet: Sheet) -> None:
        pane = sheet.freeze_pane
        if pane is None or (pane.row == 0 and pane.col == 0):
            return
        ws.freeze_panes = f"{get_column_letter(pane.col + 1)}{pane.row + 1}"


def _cell_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, Decimal, date, datetime)):
        return value
    return str(value)


__all__ = ["XlsxRenderer", "DATE_FORMAT", "DATETIME_FORMAT"]
