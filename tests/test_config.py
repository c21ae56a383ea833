"""Layout YAML parsing and conversion tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from xlflow.builder import ExcelBuilder
from xlflow.config import StyleConfig, load_layout, parse_layout, resolve_theme
from xlflow.errors import ConfigurationError, StyleError
from xlflow.style import Alignment, BorderStyle, CellStyle, Color
from xlflow.theme import MINIMAL, MODERN, Theme

LAYOUT_YAML = """
sheet: Orders
theme: modern
header_style:
  background_color: light-gray
freeze_pane:
  row: 2
auto_filter: true
columns:
  - key: order_id
    header: Order
    width: 12
  - key: customer
    width: 40%
  - key: total
    number_format: "#,##0.00"
    style:
      font_color: "#FF0000"
      alignment: right
header_groups:
  - title: Details
    columns: [customer, total]
"""


def _write_layout(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "layout.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_layout_reads_columns_and_sheet_options(tmp_path: Path) -> None:
    layout = load_layout(_write_layout(tmp_path, LAYOUT_YAML))

    assert layout.sheet == "Orders"
    assert [column.key for column in layout.columns] == ["order_id", "customer", "total"]
    assert layout.columns[0].width == 12
    assert layout.columns[1].width == "40%"
    assert layout.freeze_pane is not None and layout.freeze_pane.row == 2
    assert layout.auto_filter is True
    assert layout.resolve_theme() is MODERN


def test_apply_sheet_options_configures_builder(tmp_path: Path) -> None:
    layout = load_layout(_write_layout(tmp_path, LAYOUT_YAML))
    builder = ExcelBuilder()
    sheet = builder.sheet("Orders")
    for column in layout.columns:
        sheet.column(column.key, column.header, width=column.width)
    layout.apply_sheet_options(sheet)
    sheet.values([(1, "Ann", 9.5)])

    built = builder.build().sheet("Orders")

    assert built.header_style == CellStyle(background_color=Color.LIGHT_GRAY)
    assert built.freeze_pane is not None and built.freeze_pane.row == 2
    assert built.auto_filter is True
    assert built.header_groups[0].columns == ("customer", "total")


def test_style_config_converts_names_and_hex() -> None:
    style = StyleConfig(
        background_color="LIGHT_GRAY",
        font_color="#3b5998",
        bold=True,
        alignment="CENTER",
        border="thick",
    ).to_style()

    assert style.background_color == Color.LIGHT_GRAY
    assert style.font_color == Color(59, 89, 152)
    assert style.bold is True
    assert style.alignment is Alignment.CENTER
    assert style.border is BorderStyle.THICK


def test_invalid_alignment_is_a_style_error() -> None:
    with pytest.raises(StyleError):
        StyleConfig(alignment="diagonal").to_style()


def test_invalid_color_is_a_style_error() -> None:
    with pytest.raises(StyleError):
        StyleConfig(font_color="not-a-color").to_style()


def test_theme_mapping_extends_a_preset() -> None:
    layout = parse_layout(
        {"theme": {"preset": "minimal", "body": {"italic": True}}}
    )

    theme = layout.resolve_theme()

    assert isinstance(theme, Theme)
    assert theme.header == MINIMAL.header
    assert theme.body == CellStyle(italic=True)


def test_theme_names_are_case_insensitive() -> None:
    assert resolve_theme(" Modern ") is MODERN
    assert resolve_theme(None) is None


def test_unknown_theme_preset_lists_available_ones() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        resolve_theme("neon")
    assert "classic, minimal, modern" in str(excinfo.value)


def test_unknown_layout_keys_are_rejected() -> None:
    with pytest.raises(ConfigurationError):
        parse_layout({"columns": [{"key": "a", "colour": "red"}]})


def test_layout_must_be_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_layout(_write_layout(tmp_path, "- just\n- a list\n"))


def test_empty_layout_file_is_valid(tmp_path: Path) -> None:
    layout = load_layout(_write_layout(tmp_path, ""))

    assert layout.columns == []
    assert layout.resolve_theme() is None


def test_missing_layout_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_layout(tmp_path / "missing.yaml")
