"""Cell style value types and the merge operator behind the style cascade."""

# Module responsibilities:
# - Provide immutable Color/Alignment/BorderStyle/CellStyle value types.
# - Implement CellStyle.merge and cascade(), the only precedence rules in the library.
# - Parse palette names and hex strings coming from configuration files.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import ClassVar, Optional

from .errors import StyleError


@dataclass(frozen=True)
class Color:
    """RGB color with 8-bit channels."""

    red: int
    green: int
    blue: int

    WHITE: ClassVar["Color"]
    BLACK: ClassVar["Color"]
    GRAY: ClassVar["Color"]
    LIGHT_GRAY: ClassVar["Color"]
    RED: ClassVar["Color"]
    GREEN: ClassVar["Color"]
    BLUE: ClassVar["Color"]

    def __post_init__(self) -> None:
        for channel in ("red", "green", "blue"):
            value = getattr(self, channel)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise StyleError(
                    f"Color channel '{channel}' must be an integer in [0, 255], got {value!r}",
                    style="color",
                )

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parse ``#RRGGBB`` or ``RRGGBB``."""

        normalized = text.strip().removeprefix("#")
        if len(normalized) != 6:
            raise StyleError(f"Invalid HEX color format: {text!r}", style="color")
        try:
            return cls(
                int(normalized[0:2], 16),
                int(normalized[2:4], 16),
                int(normalized[4:6], 16),
            )
        except ValueError as exc:
            raise StyleError(f"Invalid HEX color format: {text!r}", style="color") from exc

    @property
    def hex(self) -> str:
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}"


Color.WHITE = Color(255, 255, 255)
Color.BLACK = Color(0, 0, 0)
Color.GRAY = Color(128, 128, 128)
Color.LIGHT_GRAY = Color(211, 211, 211)
Color.RED = Color(255, 0, 0)
Color.GREEN = Color(0, 128, 0)
Color.BLUE = Color(0, 0, 255)

PALETTE: dict[str, Color] = {
    "WHITE": Color.WHITE,
    "BLACK": Color.BLACK,
    "GRAY": Color.GRAY,
    "LIGHT_GRAY": Color.LIGHT_GRAY,
    "RED": Color.RED,
    "GREEN": Color.GREEN,
    "BLUE": Color.BLUE,
}


def parse_color(value: "str | Color") -> Color:
    """Resolve a palette name (``light_gray``) or hex string into a Color."""

    if isinstance(value, Color):
        return value
    key = value.strip().upper().replace("-", "_").replace(" ", "_")
    if key in PALETTE:
        return PALETTE[key]
    return Color.from_hex(value)


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class BorderStyle(str, Enum):
    NONE = "none"
    THIN = "thin"
    MEDIUM = "medium"
    THICK = "thick"


@dataclass(frozen=True)
class CellStyle:
    """Bag of optional style attributes; unset attributes inherit from the cascade."""

    background_color: Optional[Color] = None
    font_color: Optional[Color] = None
    bold: bool = False
    italic: bool = False
    alignment: Optional[Alignment] = None
    border: Optional[BorderStyle] = None
    number_format: Optional[str] = None

    def __post_init__(self) -> None:
        if self.number_format is not None and not self.number_format.strip():
            raise StyleError("number_format must not be blank", style="number_format")

    def merge(self, other: "CellStyle") -> "CellStyle":
        """Return a new style with ``other`` layered on top of this one.

        Nullable attributes set on ``other`` win. ``bold`` and ``italic`` are
        OR-ed, so a more specific layer can never switch them back off.
        """

        return CellStyle(
            background_color=_pick(other.background_color, self.background_color),
            font_color=_pick(other.font_color, self.font_color),
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            alignment=_pick(other.alignment, self.alignment),
            border=_pick(other.border, self.border),
            number_format=_pick(other.number_format, self.number_format),
        )

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_STYLE


EMPTY_STYLE = CellStyle()


def _pick(preferred, fallback):
    return preferred if preferred is not None else fallback


def merge(base: CellStyle, override: CellStyle) -> CellStyle:
    return base.merge(override)


def cascade(*layers: Optional[CellStyle]) -> CellStyle:
    """Fold style layers ordered from least to most specific.

    ``None`` layers are skipped; an empty chain yields ``CellStyle()``.
    """

    return reduce(merge, (layer for layer in layers if layer is not None), EMPTY_STYLE)


__all__ = [
    "Color",
    "PALETTE",
    "parse_color",
    "Alignment",
    "BorderStyle",
    "CellStyle",
    "EMPTY_STYLE",
    "merge",
    "cascade",
]
