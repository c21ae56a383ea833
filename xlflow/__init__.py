"""`xlflow` top-level package exports the document model, builders and writers."""

# Module responsibilities:
# - Re-export the public API (model, styles, widths, schema reflection, builders, renderers)
#   so consumers import from one module boundary.
# - Provide the package version.

from __future__ import annotations

from .builder import ExcelBuilder, HeaderGroupBuilder, SheetBuilder, excel_of
from .errors import (
    ColumnNotFoundError,
    ConfigurationError,
    DataError,
    ExcelError,
    StyleError,
    WriteError,
)
from .model import ColumnDefinition, ColumnStyle, ExcelDocument, FreezePane, HeaderGroup, Sheet
from .render import ExcelRenderer, XlsxRenderer, save, to_bytes, write_to
from .resolver import ResolvedSheet, StyleResolver, resolve
from .schema import (
    FieldDescriptor,
    SchemaRegistry,
    excel_field,
    exportable,
)
from .style import Alignment, BorderStyle, CellStyle, Color, cascade, merge
from .theme import CLASSIC, MINIMAL, MODERN, Theme
from .width import AUTO, Auto, ColumnWidth, Fixed, Percent, chars, percent

__all__ = [
    "ExcelBuilder",
    "SheetBuilder",
    "HeaderGroupBuilder",
    "excel_of",
    "ExcelError",
    "DataError",
    "WriteError",
    "ConfigurationError",
    "ColumnNotFoundError",
    "StyleError",
    "ColumnDefinition",
    "ColumnStyle",
    "ExcelDocument",
    "FreezePane",
    "HeaderGroup",
    "Sheet",
    "ExcelRenderer",
    "XlsxRenderer",
    "save",
    "to_bytes",
    "write_to",
    "ResolvedSheet",
    "StyleResolver",
    "resolve",
    "FieldDescriptor",
    "SchemaRegistry",
    "excel_field",
    "exportable",
    "Alignment",
    "BorderStyle",
    "CellStyle",
    "Color",
    "cascade",
    "merge",
    "Theme",
    "MODERN",
    "MINIMAL",
    "CLASSIC",
    "ColumnWidth",
    "Fixed",
    "Percent",
    "Auto",
    "AUTO",
    "chars",
    "percent",
]

__version__ = "0.1.0"
