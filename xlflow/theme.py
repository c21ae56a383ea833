"""Document-wide style defaults and bundled presets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .style import Alignment, BorderStyle, CellStyle, Color, EMPTY_STYLE


@dataclass(frozen=True)
class Theme:
    """Least specific cascade layer: a default style plus header/body defaults."""

    default: CellStyle = EMPTY_STYLE
    header: Optional[CellStyle] = None
    body: Optional[CellStyle] = None


MODERN = Theme(
    header=CellStyle(
        background_color=Color(59, 89, 152),
        font_color=Color.WHITE,
        bold=True,
        alignment=Alignment.CENTER,
        border=BorderStyle.THIN,
    ),
    body=CellStyle(border=BorderStyle.THIN),
)

MINIMAL = Theme(
    header=CellStyle(bold=True, alignment=Alignment.LEFT, border=BorderStyle.THIN),
    body=CellStyle(border=BorderStyle.NONE),
)

CLASSIC = Theme(
    header=CellStyle(
        background_color=Color.LIGHT_GRAY,
        font_color=Color.BLACK,
        bold=True,
        alignment=Alignment.CENTER,
        border=BorderStyle.MEDIUM,
    ),
    body=CellStyle(border=BorderStyle.THIN),
)

PRESETS: Dict[str, Theme] = {
    "modern": MODERN,
    "minimal": MINIMAL,
    "classic": CLASSIC,
}


__all__ = ["Theme", "MODERN", "MINIMAL", "CLASSIC", "PRESETS"]
