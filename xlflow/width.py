"""Column width strategies."""

# Module responsibilities:
# - Define the closed ColumnWidth variant: Fixed characters, Percent of table width, Auto.
# - Validate widths at construction time and coerce loose declarations (ints, "25%", "auto").

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .errors import ConfigurationError


class ColumnWidth:
    """Base class of the three width strategies; not instantiated directly."""

    __slots__ = ()


@dataclass(frozen=True)
class Fixed(ColumnWidth):
    """Absolute width in characters."""

    chars: int

    def __post_init__(self) -> None:
        if isinstance(self.chars, bool) or not isinstance(self.chars, int) or self.chars <= 0:
            raise ConfigurationError(
                "Fixed column width must be a positive integer", value=self.chars
            )


@dataclass(frozen=True)
class Percent(ColumnWidth):
    """Share of the table width left over after fixed and auto columns."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ConfigurationError("Percent column width must be an integer", value=self.value)


@dataclass(frozen=True)
class _AutoWidth(ColumnWidth):
    """Width computed by the renderer from cell content."""

    def __repr__(self) -> str:
        return "Auto"


Auto = _AutoWidth()
AUTO = Auto

WidthLike = Union[ColumnWidth, int, str, None]

_PERCENT_RE = re.compile(r"^\s*(-?\d+)\s*%\s*$")
_CHARS_RE = re.compile(r"^\s*(-?\d+)\s*$")


def chars(count: int) -> Fixed:
    return Fixed(count)


def percent(value: int) -> Percent:
    return Percent(value)


def coerce_width(value: WidthLike) -> ColumnWidth:
    """Normalize a width declaration into a ColumnWidth.

    Args:
        value: ``None`` or ``"auto"`` for Auto, an int or digit string for Fixed,
            ``"<n>%"`` for Percent, or an existing ColumnWidth.

    Raises:
        ConfigurationError: When the declaration is malformed or the fixed width is not positive.
    """

    if value is None:
        return Auto
    if isinstance(value, ColumnWidth):
        return value
    if isinstance(value, bool):
        raise ConfigurationError("Unsupported column width declaration", value=value)
    if isinstance(value, int):
        return Fixed(value)
    if isinstance(value, str):
        if value.strip().lower() == "auto":
            return Auto
        if match := _PERCENT_RE.match(value):
            return Percent(int(match.group(1)))
        if match := _CHARS_RE.match(value):
            return Fixed(int(match.group(1)))
    raise ConfigurationError("Unsupported column width declaration", value=value)


__all__ = [
    "ColumnWidth",
    "Fixed",
    "Percent",
    "Auto",
    "AUTO",
    "WidthLike",
    "chars",
    "percent",
    "coerce_width",
]
