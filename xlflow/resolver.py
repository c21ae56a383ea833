"""Style cascade resolution: theme -> sheet -> column -> cell."""

# Module responsibilities:
# - Compose the effective CellStyle of header, group header and body cells.
# - Offer lazy per-cell resolution and eager whole-sheet resolution for renderers.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import StyleError
from .model import ColumnDefinition, ColumnStyle, ExcelDocument, Sheet
from .style import CellStyle, cascade
from .theme import Theme


@dataclass(frozen=True)
class ResolvedSheet:
    """Effective styles for every cell of a sheet."""

    sheet: Sheet
    header_styles: Tuple[CellStyle, ...]
    group_header_style: CellStyle
    body_styles: Tuple[Tuple[CellStyle, ...], ...]


class StyleResolver:
    """Derives effective cell styles from a document without mutating it."""

    def __init__(
        self,
        theme: Optional[Theme] = None,
        column_styles: Optional[Mapping[str, ColumnStyle]] = None,
    ) -> None:
        self.theme = theme or Theme()
        self.column_styles: Mapping[str, ColumnStyle] = column_styles or {}

    @classmethod
    def for_document(cls, document: ExcelDocument) -> "StyleResolver":
        return cls(document.theme, document.column_styles)

    def _shared(self, column: ColumnDefinition) -> ColumnStyle:
        return self.column_styles.get(column.header) or ColumnStyle()

    def group_header_style(self, sheet: Sheet) -> CellStyle:
        return cascade(self.theme.default, self.theme.header, sheet.style, sheet.header_style)

    def header_style(self, sheet: Sheet, column: ColumnDefinition) -> CellStyle:
        return cascade(
            self.theme.default,
            self.theme.header,
            sheet.style,
            sheet.header_style,
            self._shared(column).header,
            column.header_style,
        )

    def body_style(
        self,
        sheet: Sheet,
        column: ColumnDefinition,
        row_index: int,
        value: Any = None,
    ) -> CellStyle:
        """Effective style of a data cell.

        Layers, least to most specific: theme default, theme body, sheet style,
        the sheet's alternate row style on even rows, the document-wide style
        registered for the column header, the column body style and finally
        the column's conditional style evaluated against ``value``.
        """

        alternate = sheet.alternate_row_style if row_index % 2 == 0 else None
        return cascade(
            self.theme.default,
            self.theme.body,
            sheet.style,
            alternate,
            self._shared(column).body,
            column.body_style,
            self._conditional(column, value),
        )

    def _conditional(self, column: ColumnDefinition, value: Any) -> Optional[CellStyle]:
        if column.conditional_style is None:
            return None
        try:
            result = column.conditional_style(value)
        except Exception as exc:
            raise StyleError(
                f"Conditional style failed: {exc}", style="conditional", column=column.key
            ) from exc
        if result is not None and not isinstance(result, CellStyle):
            raise StyleError(
                f"Conditional style returned {type(result).__name__}, expected CellStyle",
                style="conditional",
                column=column.key,
            )
        return result

    def resolve_sheet(self, sheet: Sheet) -> ResolvedSheet:
        header_styles = tuple(self.header_style(sheet, column) for column in sheet.columns)
        body_styles = tuple(
            tuple(
                self.body_style(sheet, column, row_idx, value)
                for column, value in zip(sheet.columns, row)
            )
            for row_idx, row in enumerate(sheet.rows)
        )
        return ResolvedSheet(
            sheet=sheet,
            header_styles=header_styles,
            group_header_style=self.group_header_style(sheet),
            body_styles=body_styles,
        )


def resolve(document: ExcelDocument) -> Dict[str, ResolvedSheet]:
    """Eagerly resolve every sheet of ``document`` keyed by sheet name."""

    resolver = StyleResolver.for_document(document)
    return {sheet.name: resolver.resolve_sheet(sheet) for sheet in document.sheets}


__all__ = ["ResolvedSheet", "StyleResolver", "resolve"]
