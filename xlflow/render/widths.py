"""Column width layout used by the bundled renderer."""

# Module responsibilities:
# - Estimate display widths with CJK/full-width characters counted double.
# - Turn each column's ColumnWidth into a concrete character width for one sheet.

from __future__ import annotations

from typing import Any, Iterable, List

from ..model import Sheet
from ..width import Fixed, Percent

CJK_WIDTH_MULTIPLIER = 2.0
MIN_WIDTH_CHARS = 8
MAX_WIDTH_CHARS = 100
PADDING_CHARS = 2
DEFAULT_TABLE_WIDTH = 120

_WIDE_RANGES = (
    (0x1100, 0x11FF),  # Hangul Jamo
    (0x3000, 0x303F),  # CJK symbols and punctuation
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x3130, 0x318F),  # Hangul compatibility Jamo
    (0x3400, 0x4DBF),  # CJK extension A
    (0x4E00, 0x9FFF),  # CJK unified ideographs
    (0xAC00, 0xD7AF),  # Hangul syllables
    (0xFF00, 0xFFEF),  # Full-width forms
)


def is_wide(char: str) -> bool:
    code = ord(char)
    return any(start <= code <= end for start, end in _WIDE_RANGES)


def text_width(value: Any) -> float:
    if value is None:
        return 0.0
    text = value if isinstance(value, str) else str(value)
    return sum(CJK_WIDTH_MULTIPLIER if is_wide(char) else 1.0 for char in text)


def auto_width(values: Iterable[Any]) -> float:
    """Content width plus padding, clamped to the supported range."""

    widest = max((text_width(value) for value in values), default=0.0)
    return float(min(max(widest + PADDING_CHARS, MIN_WIDTH_CHARS), MAX_WIDTH_CHARS))


def layout_widths(sheet: Sheet, table_width: int = DEFAULT_TABLE_WIDTH) -> List[float]:
    """Compute a character width for every column of ``sheet``.

    Fixed columns keep their width and Auto columns are measured from the header
    and body values. Percent columns share what is left of ``table_width``:
    each gets ``remaining * value / max(100, total percent)``, at least 1 char.
    """

    widths: List[float] = [0.0] * len(sheet.columns)
    percent_columns = []
    reserved = 0.0
    for idx, column in enumerate(sheet.columns):
        width = column.width
        if isinstance(width, Fixed):
            widths[idx] = float(width.chars)
        elif isinstance(width, Percent):
            percent_columns.append((idx, width.value))
            continue
        else:
            widths[idx] = auto_width([column.header, *(row[idx] for row in sheet.rows)])
        reserved += widths[idx]

    if percent_columns:
        remaining = max(table_width - reserved, 0.0)
        total = max(100, sum(max(value, 0) for _, value in percent_columns))
        for idx, value in percent_columns:
            widths[idx] = max(remaining * max(value, 0) / total, 1.0)
    return widths


__all__ = [
    "DEFAULT_TABLE_WIDTH",
    "is_wide",
    "text_width",
    "auto_width",
    "layout_widths",
]
