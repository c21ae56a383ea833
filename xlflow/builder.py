"""Builders that assemble an immutable ExcelDocument."""

# Module responsibilities:
# - Provide explicit ExcelBuilder/SheetBuilder/HeaderGroupBuilder objects for declaring workbooks.
# - Materialize data rows from records, raw values or exportable dataclasses at build time.
# - Validate everything in build() so either a complete document or an exception comes out.

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import ConfigurationError, DataError
from .model import (
    DEFAULT_SHEET_NAME,
    ColumnDefinition,
    ColumnStyle,
    ConditionalStyle,
    ExcelDocument,
    Extractor,
    FreezePane,
    HeaderGroup,
    Row,
    Sheet,
)
from .schema import SchemaRegistry, default_registry, export_options
from .style import CellStyle
from .theme import Theme
from .utils.log import get_logger
from .width import WidthLike, coerce_width

logger = get_logger("builder")

_MISSING = object()


class HeaderGroupBuilder:
    """Declares columns that share a spanning header label."""

    def __init__(self, sheet: "SheetBuilder", title: str) -> None:
        self._sheet = sheet
        self.title = title
        self.keys: List[str] = []

    def column(self, key: str, header: Optional[str] = None, **options: Any) -> "HeaderGroupBuilder":
        """Declare a grouped column; accepts the same options as :meth:`SheetBuilder.column`."""

        self._sheet.column(key, header, **options)
        self.keys.append(key)
        return self


class SheetBuilder:
    """Collects the layout and data of one sheet until :meth:`build` is called."""

    def __init__(
        self,
        name: str = DEFAULT_SHEET_NAME,
        *,
        style: Optional[CellStyle] = None,
        header_style: Optional[CellStyle] = None,
        registry: Optional[SchemaRegistry] = None,
    ) -> None:
        self.name = name
        self._style = style
        self._header_style = header_style
        self._registry = registry or default_registry
        self._columns: List[ColumnDefinition] = []
        self._groups: List[Tuple[str, List[str]]] = []
        self._records: List[Any] = []
        self._values: List[Sequence[Any]] = []
        self._record_type: Optional[type] = None
        self._alternate_row_style: Optional[CellStyle] = None
        self._freeze_pane: Optional[FreezePane] = None
        self._auto_filter = False

    def column(
        self,
        key: str,
        header: Optional[str] = None,
        *,
        extractor: Optional[Extractor] = None,
        width: WidthLike = None,
        style: Optional[CellStyle] = None,
        header_style: Optional[CellStyle] = None,
        number_format: Optional[str] = None,
        conditional_style: Optional[ConditionalStyle] = None,
    ) -> "SheetBuilder":
        """Declare a column.

        Args:
            key: Identifier unique within the sheet; also the fallback attribute or
                mapping key read from records when no ``extractor`` is given.
            header: Header text, defaults to ``key``.
            extractor: Callable returning the cell value for a record.
            width: Width declaration accepted by :func:`xlflow.width.coerce_width`.
            style: Body style override for this column.
            header_style: Header cell style override for this column.
            number_format: Excel number format applied to body cells.
            conditional_style: Callable mapping a cell value to an extra style layer.
        """

        self._columns.append(
            ColumnDefinition(
                key=key,
                header=header or key,
                extractor=extractor,
                width=coerce_width(width),
                style=style,
                header_style=header_style,
                number_format=number_format,
                conditional_style=conditional_style,
            )
        )
        return self

    def header_group(self, title: str, keys: Optional[Iterable[str]] = None) -> HeaderGroupBuilder:
        """Start a header group.

        With ``keys`` the group spans already declared columns; otherwise columns are
        declared through the returned :class:`HeaderGroupBuilder`.
        """

        group = HeaderGroupBuilder(self, title)
        if keys is not None:
            group.keys.extend(keys)
        self._groups.append((title, group.keys))
        return group

    def rows(self, records: Iterable[Any]) -> "SheetBuilder":
        self._records.extend(records)
        return self

    def values(self, rows: Iterable[Sequence[Any]]) -> "SheetBuilder":
        """Supply rows as raw values aligned positionally to the declared columns."""

        self._values.extend(rows)
        return self

    def records(self, record_type: type, records: Iterable[Any]) -> "SheetBuilder":
        """Declare columns from an exportable record type and queue its records."""

        if self._record_type is not None and self._record_type is not record_type:
            raise ConfigurationError(
                f"Sheet '{self.name}' already maps {self._record_type.__qualname__}",
                record_type=record_type.__qualname__,
            )
        if self._record_type is None:
            self._columns.extend(self._registry.columns(record_type))
            self._record_type = record_type
        return self.rows(records)

    def style(self, style: Optional[CellStyle]) -> "SheetBuilder":
        self._style = style
        return self

    def header_style(self, style: Optional[CellStyle]) -> "SheetBuilder":
        self._header_style = style
        return self

    def alternate_row_style(self, style: Optional[CellStyle]) -> "SheetBuilder":
        self._alternate_row_style = style
        return self

    def freeze_pane(self, row: int = 0, col: int = 0) -> "SheetBuilder":
        self._freeze_pane = FreezePane(row=row, col=col)
        return self

    def auto_filter(self, enabled: bool = True) -> "SheetBuilder":
        self._auto_filter = enabled
        return self

    def build(self) -> Sheet:
        layout = Sheet(
            name=self.name,
            columns=tuple(self._columns),
            header_groups=tuple(HeaderGroup(title, tuple(keys)) for title, keys in self._groups),
            style=self._style,
            header_style=self._header_style,
            alternate_row_style=self._alternate_row_style,
            freeze_pane=self._freeze_pane,
            auto_filter=self._auto_filter,
        )
        if self._records and self._values:
            raise ConfigurationError(
                f"Sheet '{self.name}' mixes records and raw value rows",
                hint="Use either rows()/records() or values() for a sheet.",
            )
        if self._values:
            rows: Tuple[Row, ...] = tuple(self._values)
        else:
            rows = self._extract_rows(layout.columns)
        return Sheet(
            name=layout.name,
            columns=layout.columns,
            header_groups=layout.header_groups,
            rows=rows,
            style=layout.style,
            header_style=layout.header_style,
            alternate_row_style=layout.alternate_row_style,
            freeze_pane=layout.freeze_pane,
            auto_filter=layout.auto_filter,
        )

    def _extract_rows(self, columns: Sequence[ColumnDefinition]) -> Tuple[Row, ...]:
        rows = []
        for row_idx, record in enumerate(self._records):
            if self._record_type is not None and not isinstance(record, self._record_type):
                raise DataError(
                    f"Expected {self._record_type.__qualname__} record",
                    sheet=self.name,
                    row_index=row_idx,
                    value=record,
                )
            rows.append(tuple(self._extract(column, record, row_idx) for column in columns))
        return tuple(rows)

    def _extract(self, column: ColumnDefinition, record: Any, row_idx: int) -> Any:
        try:
            if column.extractor is not None:
                return column.extractor(record)
            if isinstance(record, Mapping):
                value = record.get(column.key, _MISSING)
            else:
                value = getattr(record, column.key, _MISSING)
        except Exception as exc:
            raise DataError(
                f"Failed to extract value: {exc}",
                sheet=self.name,
                row_index=row_idx,
                column=column.header,
            ) from exc
        if value is _MISSING:
            raise DataError(
                f"Record has no value for column key '{column.key}'",
                sheet=self.name,
                row_index=row_idx,
                column=column.header,
            )
        return value


class ExcelBuilder:
    """Entry point for declaring a workbook.

    Example::

        builder = ExcelBuilder(theme=MODERN)
        users = builder.sheet("Users")
        users.column("name", "Name", width=20)
        users.column("age", "Age", number_format="0")
        users.rows(records)
        document = builder.build()
    """

    def __init__(self, theme: Optional[Theme] = None, *, registry: Optional[SchemaRegistry] = None) -> None:
        self._theme = theme
        self._registry = registry or default_registry
        self._sheets: List[SheetBuilder] = []
        self._column_styles: Dict[str, ColumnStyle] = {}

    def theme(self, theme: Optional[Theme]) -> "ExcelBuilder":
        self._theme = theme
        return self

    def column_style(
        self,
        header: str,
        *,
        header_style: Optional[CellStyle] = None,
        body_style: Optional[CellStyle] = None,
    ) -> "ExcelBuilder":
        """Style every column titled ``header`` across all sheets.

        Sits above the sheet styles and below styles declared on the column itself.
        Declaring the same header again replaces the earlier entry.
        """

        self._column_styles[header] = ColumnStyle(header=header_style, body=body_style)
        return self

    def sheet(
        self,
        name: str = DEFAULT_SHEET_NAME,
        *,
        style: Optional[CellStyle] = None,
        header_style: Optional[CellStyle] = None,
    ) -> SheetBuilder:
        builder = SheetBuilder(name, style=style, header_style=header_style, registry=self._registry)
        self._sheets.append(builder)
        return builder

    def build(self) -> ExcelDocument:
        """Validate every declared sheet and return the finished document."""

        sheets = tuple(builder.build() for builder in self._sheets)
        document = ExcelDocument(
            sheets=sheets, theme=self._theme, column_styles=self._column_styles
        )
        logger.info(
            "Document assembled",
            extra={
                "sheets": list(document.sheet_names),
                "rows": sum(len(sheet.rows) for sheet in sheets),
            },
        )
        return document


def excel_of(
    records: Iterable[Any],
    record_type: Optional[type] = None,
    *,
    sheet_name: Optional[str] = None,
    theme: Optional[Theme] = None,
    registry: Optional[SchemaRegistry] = None,
) -> ExcelDocument:
    """Build a single-sheet document from exportable records.

    Args:
        records: Homogeneous records of an ``@exportable`` dataclass.
        record_type: Record type; inferred from the first record when omitted.
        sheet_name: Sheet name, falling back to the type's ``sheet_name`` option and then ``Sheet1``.
        theme: Optional document theme.
        registry: Schema registry; the shared default registry when omitted.

    Raises:
        ConfigurationError: When the type is not exportable or cannot be inferred.
        DataError: When a record cannot be read.
    """

    items = list(records)
    if record_type is None:
        if not items:
            raise ConfigurationError(
                "Cannot infer the record type from an empty sequence",
                hint="Pass record_type explicitly when exporting no rows.",
            )
        record_type = type(items[0])
    name = sheet_name or export_options(record_type).sheet_name or DEFAULT_SHEET_NAME
    builder = ExcelBuilder(theme=theme, registry=registry)
    builder.sheet(name).records(record_type, items)
    return builder.build()


__all__ = ["ExcelBuilder", "SheetBuilder", "HeaderGroupBuilder", "excel_of"]
