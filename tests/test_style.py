"""Unit tests for style values and the merge operator."""

from __future__ import annotations

import pytest

from xlflow.errors import StyleError
from xlflow.style import (
    Alignment,
    BorderStyle,
    CellStyle,
    Color,
    cascade,
    merge,
    parse_color,
)

SAMPLE_STYLES = [
    CellStyle(),
    CellStyle(bold=True),
    CellStyle(italic=True, font_color=Color.RED),
    CellStyle(
        background_color=Color.LIGHT_GRAY,
        font_color=Color.BLACK,
        bold=True,
        italic=True,
        alignment=Alignment.CENTER,
        border=BorderStyle.THICK,
        number_format="#,##0.00",
    ),
]


@pytest.mark.parametrize("style", SAMPLE_STYLES)
def test_empty_style_is_right_identity(style: CellStyle) -> None:
    assert merge(style, CellStyle()) == style
    assert style.merge(CellStyle()) == style


@pytest.mark.parametrize("style", SAMPLE_STYLES)
def test_empty_style_is_left_identity(style: CellStyle) -> None:
    assert merge(CellStyle(), style) == style


def test_override_wins_for_nullable_fields() -> None:
    base = CellStyle(
        background_color=Color.GRAY,
        font_color=Color.BLACK,
        alignment=Alignment.LEFT,
        border=BorderStyle.THIN,
        number_format="0",
    )
    override = CellStyle(
        background_color=Color.WHITE,
        font_color=Color.BLUE,
        alignment=Alignment.RIGHT,
        border=BorderStyle.NONE,
        number_format="0.00",
    )

    merged = merge(base, override)

    assert merged.background_color == Color.WHITE
    assert merged.font_color == Color.BLUE
    assert merged.alignment is Alignment.RIGHT
    assert merged.border is BorderStyle.NONE
    assert merged.number_format == "0.00"


def test_unset_override_keeps_base_values() -> None:
    base = CellStyle(background_color=Color.GRAY, number_format="0")
    merged = merge(base, CellStyle(font_color=Color.RED))

    assert merged.background_color == Color.GRAY
    assert merged.number_format == "0"
    assert merged.font_color == Color.RED


@pytest.mark.parametrize(
    ("base_flag", "override_flag", "expected"),
    [(False, False, False), (True, False, True), (False, True, True), (True, True, True)],
)
def test_booleans_are_or_merged(base_flag: bool, override_flag: bool, expected: bool) -> None:
    merged = merge(
        CellStyle(bold=base_flag, italic=base_flag),
        CellStyle(bold=override_flag, italic=override_flag),
    )
    assert merged.bold is expected
    assert merged.italic is expected


def test_more_specific_layer_cannot_unset_bold() -> None:
    assert cascade(CellStyle(bold=True), CellStyle(bold=False)).bold is True


def test_cascade_applies_layers_left_to_right() -> None:
    theme = CellStyle(background_color=Color.GRAY, bold=True)
    sheet = CellStyle(background_color=Color.WHITE)

    assert cascade(theme, sheet).background_color == Color.WHITE
    assert cascade(sheet, theme).background_color == Color.GRAY
    assert cascade(theme, None, sheet, None).bold is True


def test_cascade_of_nothing_is_empty_style() -> None:
    assert cascade() == CellStyle()
    assert cascade(None, None).is_empty


def test_color_rejects_out_of_range_channels() -> None:
    with pytest.raises(StyleError):
        Color(256, 0, 0)
    with pytest.raises(StyleError):
        Color(0, -1, 0)


def test_color_palette_constants() -> None:
    assert Color.GRAY == Color(128, 128, 128)
    assert Color.LIGHT_GRAY == Color(211, 211, 211)
    assert Color.GREEN == Color(0, 128, 0)


def test_color_hex_parsing() -> None:
    assert Color.from_hex("#3B5998") == Color(59, 89, 152)
    assert Color.from_hex("ffffff") == Color.WHITE
    assert Color(59, 89, 152).hex == "3B5998"
    with pytest.raises(StyleError):
        Color.from_hex("#12345")
    with pytest.raises(StyleError):
        Color.from_hex("zzzzzz")


def test_parse_color_accepts_palette_names() -> None:
    assert parse_color("light-gray") == Color.LIGHT_GRAY
    assert parse_color("RED") == Color.RED
    assert parse_color("#00ff00") == Color(0, 255, 0)


def test_blank_number_format_is_rejected() -> None:
    with pytest.raises(StyleError):
        CellStyle(number_format="  ")
