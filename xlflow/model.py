"""Immutable document model: ExcelDocument -> Sheet -> ColumnDefinition/HeaderGroup."""

# Module responsibilities:
# - Hold the structural layout of a workbook plus per-level style overrides.
# - Enforce structural invariants on construction (unique keys, valid header spans, row shape).
# - Offer lookups that raise ColumnNotFoundError instead of returning None.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .errors import ColumnNotFoundError, ConfigurationError
from .style import CellStyle
from .theme import Theme
from .width import Auto, ColumnWidth

Extractor = Callable[[Any], Any]
ConditionalStyle = Callable[[Any], Optional[CellStyle]]
Row = Tuple[Any, ...]

DEFAULT_SHEET_NAME = "Sheet1"


@dataclass(frozen=True)
class ColumnDefinition:
    """A single column: identity, header text, value extraction and overrides."""

    key: str
    header: str = ""
    extractor: Optional[Extractor] = field(default=None, compare=False, repr=False)
    width: ColumnWidth = Auto
    style: Optional[CellStyle] = None
    header_style: Optional[CellStyle] = None
    number_format: Optional[str] = None
    conditional_style: Optional[ConditionalStyle] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ConfigurationError("Column key must be a non-empty string", value=self.key)
        if not self.header:
            object.__setattr__(self, "header", self.key)
        if not isinstance(self.width, ColumnWidth):
            raise ConfigurationError(
                "Column width must be a ColumnWidth", column=self.key, value=self.width
            )

    @property
    def body_style(self) -> Optional[CellStyle]:
        """Column body layer: the style override with ``number_format`` folded in."""

        if self.number_format is None:
            return self.style
        return (self.style or CellStyle()).merge(CellStyle(number_format=self.number_format))


@dataclass(frozen=True)
class HeaderGroup:
    """Header label spanning a contiguous run of column keys."""

    title: str
    columns: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        if not self.columns:
            raise ConfigurationError(f"Header group '{self.title}' spans no columns")


@dataclass(frozen=True)
class FreezePane:
    row: int = 0
    col: int = 0

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ConfigurationError(
                "Freeze pane row/col must be non-negative", value=(self.row, self.col)
            )


@dataclass(frozen=True)
class Sheet:
    """One worksheet with materialized rows aligned positionally to its columns."""

    name: str = DEFAULT_SHEET_NAME
    columns: Tuple[ColumnDefinition, ...] = ()
    header_groups: Tuple[HeaderGroup, ...] = ()
    rows: Tuple[Row, ...] = ()
    style: Optional[CellStyle] = None
    header_style: Optional[CellStyle] = None
    alternate_row_style: Optional[CellStyle] = None
    freeze_pane: Optional[FreezePane] = None
    auto_filter: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "header_groups", tuple(self.header_groups))
        object.__setattr__(
            self, "rows", tuple(self._as_row(idx, row) for idx, row in enumerate(self.rows))
        )
        self._validate_columns()
        self._validate_groups()
        self._validate_rows()

    def _validate_columns(self) -> None:
        seen: set[str] = set()
        for column in self.columns:
            if column.key in seen:
                raise ConfigurationError(
                    f"Duplicate column key in sheet '{self.name}'", column=column.key
                )
            seen.add(column.key)

    def _validate_groups(self) -> None:
        positions = {column.key: idx for idx, column in enumerate(self.columns)}
        claimed: Dict[str, str] = {}
        for group in self.header_groups:
            indices = []
            for key in group.columns:
                if key not in positions:
                    raise ConfigurationError(
                        f"Header group '{group.title}' references an unknown column",
                        column=key,
                    )
                if key in claimed:
                    raise ConfigurationError(
                        f"Header group '{group.title}' overlaps group '{claimed[key]}'",
                        column=key,
                    )
                claimed[key] = group.title
                indices.append(positions[key])
            if indices != list(range(indices[0], indices[0] + len(indices))):
                raise ConfigurationError(
                    f"Header group '{group.title}' must span contiguous columns in sheet order",
                    value=group.columns,
                )

    def _as_row(self, idx: int, row: Any) -> Row:
        if isinstance(row, (str, bytes, bytearray)) or not isinstance(row, Sequence):
            raise ConfigurationError(
                f"Row must be a sequence of cell values, got {type(row).__name__}",
                sheet=self.name,
                row_index=idx,
            )
        return tuple(row)

    def _validate_rows(self) -> None:
        width = len(self.columns)
        for idx, row in enumerate(self.rows):
            if len(row) != width:
                raise ConfigurationError(
                    f"Row has {len(row)} values but the sheet declares {width} columns",
                    sheet=self.name,
                    row_index=idx,
                )

    @property
    def column_keys(self) -> Tuple[str, ...]:
        return tuple(column.key for column in self.columns)

    @property
    def headers(self) -> Tuple[str, ...]:
        return tuple(column.header for column in self.columns)

    def column_index(self, key: str) -> int:
        for idx, column in enumerate(self.columns):
            if column.key == key:
                return idx
        raise ColumnNotFoundError(key, self.column_keys, sheet=self.name)

    def column(self, key: str) -> ColumnDefinition:
        """Return the column definition registered under ``key``.

        Raises:
            ColumnNotFoundError: When no column uses that key.
        """

        return self.columns[self.column_index(key)]

    def group_for(self, key: str) -> Optional[HeaderGroup]:
        self.column_index(key)
        for group in self.header_groups:
            if key in group.columns:
                return group
        return None

    def values(self, key: str) -> Tuple[Any, ...]:
        """Return the column's values across all data rows."""

        idx = self.column_index(key)
        return tuple(row[idx] for row in self.rows)


@dataclass(frozen=True)
class ColumnStyle:
    """Document-wide header/body styles for every column with a given header text."""

    header: Optional[CellStyle] = None
    body: Optional[CellStyle] = None


@dataclass(frozen=True)
class ExcelDocument:
    """Finished workbook model handed to a renderer.

    ``column_styles`` maps column header text to a :class:`ColumnStyle` applied
    in every sheet, between the sheet layer and the column's own styles.
    """

    sheets: Tuple[Sheet, ...] = ()
    theme: Optional[Theme] = None
    column_styles: Mapping[str, ColumnStyle] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sheets", tuple(self.sheets))
        object.__setattr__(self, "column_styles", MappingProxyType(dict(self.column_styles)))
        for header, config in self.column_styles.items():
            if not isinstance(config, ColumnStyle):
                raise ConfigurationError(
                    "Column style must be a ColumnStyle", column=header, value=config
                )
        # Excel compares sheet names case-insensitively.
        seen: Dict[str, str] = {}
        for sheet in self.sheets:
            folded = sheet.name.casefold()
            if folded in seen:
                raise ConfigurationError(
                    f"Duplicate sheet name '{sheet.name}' (clashes with '{seen[folded]}')"
                )
            seen[folded] = sheet.name

    @property
    def sheet_names(self) -> Tuple[str, ...]:
        return tuple(sheet.name for sheet in self.sheets)

    def sheet(self, name: str) -> Sheet:
        for candidate in self.sheets:
            if candidate.name == name:
                return candidate
        raise KeyError(f"Sheet '{name}' not found in document")


__all__ = [
    "Extractor",
    "ConditionalStyle",
    "Row",
    "DEFAULT_SHEET_NAME",
    "ColumnDefinition",
    "HeaderGroup",
    "FreezePane",
    "ColumnStyle",
    "Sheet",
    "ExcelDocument",
]
