"""openpyxl renderer tests: workbooks are written to memory and read back."""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

import pytest
from openpyxl import load_workbook

from xlflow import (
    MODERN,
    ExcelBuilder,
    SchemaRegistry,
    WriteError,
    excel_field,
    excel_of,
    exportable,
    save,
    to_bytes,
)
from xlflow.model import ColumnDefinition, ExcelDocument, Sheet
from xlflow.render import layout_widths
from xlflow.render.widths import auto_width, text_width
from xlflow.style import CellStyle, Color
from xlflow.width import Fixed, Percent


def _load(document: ExcelDocument):
    return load_workbook(io.BytesIO(to_bytes(document)))


def _people(**sheet_options) -> ExcelDocument:
    builder = ExcelBuilder(theme=sheet_options.pop("theme", None))
    sheet = builder.sheet("People")
    sheet.column("name", "Name").column("age", "Age")
    sheet.values([("Ann", 30), ("Bo", 41)])
    for option, value in sheet_options.items():
        getattr(sheet, option)(*value)
    return builder.build()


def test_headers_and_values_are_written() -> None:
    ws = _load(_people())["People"]

    assert [cell.value for cell in ws[1]] == ["Name", "Age"]
    assert [cell.value for cell in ws[2]] == ["Ann", 30]
    assert [cell.value for cell in ws[3]] == ["Bo", 41]
    assert ws.max_row == 3


def test_theme_header_style_is_rendered() -> None:
    ws = _load(_people(theme=MODERN))["People"]
    header = ws["A1"]

    assert header.font.b is True
    assert header.font.color.rgb.endswith("FFFFFF")
    assert header.fill.fill_type == "solid"
    assert header.fill.fgColor.rgb.endswith("3B5998")
    assert header.alignment.horizontal == "center"
    assert header.border.left.style == "thin"
    assert ws["A2"].border.bottom.style == "thin"
    assert ws["A2"].font.b is not True


def test_alternate_rows_and_number_formats() -> None:
    builder = ExcelBuilder()
    sheet = builder.sheet("Ledger")
    sheet.column("item").column("amount", number_format="#,##0.00")
    sheet.alternate_row_style(CellStyle(background_color=Color.LIGHT_GRAY))
    sheet.values([("a", 1.5), ("b", 2.5), ("c", 3.5)])
    ws = _load(builder.build())["Ledger"]

    assert ws["A2"].fill.fgColor.rgb.endswith("D3D3D3")
    assert ws["A3"].fill.fill_type is None
    assert ws["A4"].fill.fgColor.rgb.endswith("D3D3D3")
    assert ws["B3"].number_format == "#,##0.00"


def test_conditional_style_colors_individual_cells() -> None:
    def negatives_red(value):
        return CellStyle(font_color=Color.RED) if value < 0 else None

    builder = ExcelBuilder()
    builder.sheet("P&L").column("delta", conditional_style=negatives_red).values([(5,), (-3,)])
    ws = _load(builder.build())["P&L"]

    assert ws["A2"].font.color is None or not ws["A2"].font.color.rgb.endswith("FF0000")
    assert ws["A3"].font.color.rgb.endswith("FF0000")


def test_dates_get_default_formats() -> None:
    builder = ExcelBuilder()
    builder.sheet("Dates").column("day").column("at").values(
        [(date(2024, 1, 31), datetime(2024, 1, 31, 8, 30, 0))]
    )
    ws = _load(builder.build())["Dates"]

    assert ws["A2"].number_format == "yyyy-mm-dd"
    assert ws["B2"].number_format == "yyyy-mm-dd hh:mm:ss"
    assert ws["B2"].value == datetime(2024, 1, 31, 8, 30, 0)


def test_unsupported_values_are_written_as_text() -> None:
    builder = ExcelBuilder()
    builder.sheet().column("tags").column("empty").values([(["a", "b"], None)])
    ws = _load(builder.build())["Sheet1"]

    assert ws["A2"].value == "['a', 'b']"
    assert ws["B2"].value is None


def test_header_groups_use_a_merged_row() -> None:
    builder = ExcelBuilder()
    sheet = builder.sheet("Contacts")
    sheet.column("id", "ID")
    sheet.header_group("Contact").column("email", "Email").column("phone", "Phone")
    sheet.values([(1, "a@b.c", "555")])
    ws = _load(builder.build())["Contacts"]

    assert ws["B1"].value == "Contact"
    assert [str(cell_range) for cell_range in ws.merged_cells.ranges] == ["B1:C1"]
    assert [cell.value for cell in ws[2]] == ["ID", "Email", "Phone"]
    assert [cell.value for cell in ws[3]] == [1, "a@b.c", "555"]


def test_freeze_pane_and_auto_filter() -> None:
    ws = _load(_people(freeze_pane=(1, 0), auto_filter=()))["People"]

    assert ws.freeze_panes == "A2"
    assert ws.auto_filter.ref == "A1:B3"


def test_column_widths_are_applied() -> None:
    builder = ExcelBuilder()
    builder.sheet().column("a", width=15).column("b", width="50%").values([("x", "y")])
    ws = _load(builder.build())["Sheet1"]

    assert ws.column_dimensions["A"].width == pytest.approx(15)
    assert ws.column_dimensions["B"].width == pytest.approx((120 - 15) * 0.5)


def test_sheet_order_is_preserved_and_empty_document_gets_a_sheet() -> None:
    builder = ExcelBuilder()
    builder.sheet("Second").column("a")
    builder.sheet("First").column("a")

    assert _load(builder.build()).sheetnames == ["Second", "First"]
    assert _load(ExcelDocument()).sheetnames == ["Sheet1"]


def test_invalid_sheet_title_raises_write_error() -> None:
    builder = ExcelBuilder()
    builder.sheet("Q1/Q2").column("a").values([(1,)])

    with pytest.raises(WriteError) as excinfo:
        to_bytes(builder.build())
    assert excinfo.value.sheet == "Q1/Q2"
    assert excinfo.value.__cause__ is not None


def test_save_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out.xlsx"

    written = save(_people(), target)

    assert written == target
    assert load_workbook(target).sheetnames == ["People"]


def test_text_width_counts_cjk_double() -> None:
    assert text_width("abc") == 3
    assert text_width("名前") == 4
    assert text_width(None) == 0
    assert text_width(12345) == 5


def test_auto_width_is_clamped() -> None:
    assert auto_width([]) == 8
    assert auto_width(["中文中文中文"]) == 14
    assert auto_width(["x" * 500]) == 100


def test_layout_widths_mixes_fixed_auto_and_percent() -> None:
    sheet = Sheet(
        columns=(
            ColumnDefinition("fixed", width=Fixed(10)),
            ColumnDefinition("share", width=Percent(50)),
            ColumnDefinition("auto", "Name"),
        ),
        rows=(("a", "b", "Bo"),),
    )

    assert layout_widths(sheet, table_width=120) == [10.0, 51.0, 8.0]


def test_percent_widths_are_scaled_when_over_one_hundred() -> None:
    sheet = Sheet(
        columns=(
            ColumnDefinition("a", width=Percent(100)),
            ColumnDefinition("b", width=Percent(100)),
        ),
    )

    assert layout_widths(sheet, table_width=100) == [50.0, 50.0]


def test_percent_width_never_drops_below_one_char() -> None:
    sheet = Sheet(
        columns=(
            ColumnDefinition("wide", width=Fixed(200)),
            ColumnDefinition("share", width=Percent(10)),
        ),
    )

    assert layout_widths(sheet, table_width=120) == [200.0, 1.0]


def test_document_column_styles_are_rendered() -> None:
    builder = ExcelBuilder()
    builder.column_style(
        "Name", header_style=CellStyle(italic=True), body_style=CellStyle(bold=True)
    )
    builder.sheet("A").column("name", "Name").column("age", "Age").values([("Ann", 30)])
    builder.sheet("B").column("id").column("name", "Name").values([(1, "Bo")])
    workbook = _load(builder.build())

    assert workbook["A"]["A1"].font.i is True
    assert workbook["A"]["A2"].font.b is True
    assert workbook["A"]["B2"].font.b is not True
    assert workbook["B"]["B2"].font.b is True


@exportable
@dataclass
class Transfer:
    memo: str = excel_field("Memo")
    amount: float = excel_field(
        "Amount",
        conditional_style=lambda value: CellStyle(font_color=Color.RED) if value < 0 else None,
    )


def test_field_conditional_style_is_rendered() -> None:
    document = excel_of([Transfer("in", 10.0), Transfer("out", -4.0)], registry=SchemaRegistry())
    ws = _load(document)["Sheet1"]

    assert ws["B3"].font.color.rgb.endswith("FF0000")
    assert ws["B2"].font.color is None or not ws["B2"].font.color.rgb.endswith("FF0000")
