"""pandas bridge: CSV tables and DataFrames into sheets."""

# Module responsibilities:
# - Provide a thin wrapper around pandas.read_csv with validation and structured logs.
# - Declare sheet columns from DataFrame columns or a layout file and load values row by row.

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Optional

import pandas as pd

from .builder import ExcelBuilder, SheetBuilder
from .config import ColumnConfig, LayoutConfig
from .errors import ColumnNotFoundError, ConfigurationError
from .model import DEFAULT_SHEET_NAME, ExcelDocument
from .theme import Theme
from .utils.log import get_logger

logger = get_logger("frames")


def read_csv(path: Path, usecols: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Load a DataFrame from a CSV file.

    Raises:
        FileNotFoundError: When the CSV file does not exist.
        ValueError: When pandas fails to parse the file or columns requested.
    """

    if not path.exists():
        raise FileNotFoundError(f"Source table not found: {path}")

    logger.info("Reading CSV table", extra={"path": str(path)})
    try:
        frame = pd.read_csv(path, usecols=list(usecols) if usecols else None)
    except ValueError as exc:
        logger.error("Failed to read CSV table", extra={"error": str(exc)})
        raise

    logger.info(
        "CSV table loaded",
        extra={"rows": len(frame.index), "columns": frame.columns.tolist()},
    )
    return frame


def _python_value(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        # Non-scalar values (lists, dicts) are kept as-is.
        return value
    if type(value).__module__.startswith("numpy") and hasattr(value, "item"):
        return value.item()
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def add_dataframe(
    sheet: SheetBuilder,
    frame: pd.DataFrame,
    layout: Optional[LayoutConfig] = None,
) -> SheetBuilder:
    """Declare columns for ``frame`` on ``sheet`` and queue its rows as raw values.

    Without a layout (or with a layout listing no columns) every DataFrame column is
    exported in order. Otherwise only the listed columns are exported, in layout order.
    """

    available = [str(name) for name in frame.columns]
    specs: List[ColumnConfig] = (
        list(layout.columns) if layout and layout.columns else [ColumnConfig(key=name) for name in available]
    )
    for spec in specs:
        if spec.key not in available:
            raise ColumnNotFoundError(spec.key, available, sheet=sheet.name)
        sheet.column(
            spec.key,
            spec.header,
            width=spec.width,
            style=spec.style.to_style() if spec.style else None,
            header_style=spec.header_style.to_style() if spec.header_style else None,
            number_format=spec.number_format,
        )

    selected = frame.rename(columns=str)[[spec.key for spec in specs]]
    sheet.values(
        tuple(_python_value(value) for value in row)
        for row in selected.itertuples(index=False, name=None)
    )
    if layout is not None:
        layout.apply_sheet_options(sheet)
    return sheet


def document_from_frame(
    frame: pd.DataFrame,
    *,
    sheet_name: Optional[str] = None,
    theme: Optional[Theme] = None,
    layout: Optional[LayoutConfig] = None,
) -> ExcelDocument:
    """Build a single-sheet document from a DataFrame.

    Precedence for the sheet name and theme: explicit argument, then layout, then defaults.
    """

    if frame.columns.duplicated().any():
        raise ConfigurationError(
            "DataFrame has duplicate column labels",
            value=frame.columns[frame.columns.duplicated()].tolist(),
        )
    name = sheet_name or (layout.sheet if layout else None) or DEFAULT_SHEET_NAME
    builder = ExcelBuilder(theme=theme or (layout.resolve_theme() if layout else None))
    add_dataframe(builder.sheet(name), frame, layout)
    return builder.build()


__all__ = ["read_csv", "add_dataframe", "document_from_frame"]
