"""Custom exceptions used across xlflow."""

# Module responsibilities:
# - Define the error taxonomy shared by the model, schema, builder and renderer layers.
# - Attach structured context (sheet, row, column, field) and render it into the message.

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence


def _with_context(message: str, context: Iterable[tuple[str, Any]]) -> str:
    parts = [f"{key}={value}" for key, value in context if value is not None]
    if not parts:
        return message
    return f"{message} [{', '.join(parts)}]"


class ExcelError(Exception):
    """Base error for the library."""


class DataError(ExcelError):
    """Raised when a cell value cannot be extracted or converted."""

    def __init__(
        self,
        message: str,
        *,
        sheet: Optional[str] = None,
        row_index: Optional[int] = None,
        column: Optional[str] = None,
        value: Any = None,
    ) -> None:
        self.sheet = sheet
        self.row_index = row_index
        self.column = column
        self.value = value
        shown_value = None if value is None else f"{value!r} ({type(value).__name__})"
        super().__init__(
            _with_context(
                message,
                (
                    ("sheet", f"'{sheet}'" if sheet is not None else None),
                    ("row", row_index + 1 if row_index is not None else None),
                    ("column", f"'{column}'" if column is not None else None),
                    ("value", shown_value),
                ),
            )
        )


class WriteError(ExcelError):
    """Raised when the renderer fails to produce the output file."""

    def __init__(self, message: str, *, sheet: Optional[str] = None) -> None:
        self.sheet = sheet
        super().__init__(
            _with_context(message, (("sheet", f"'{sheet}'" if sheet is not None else None),))
        )


class ConfigurationError(ExcelError):
    """Raised for invalid builder, schema or layout declarations."""

    def __init__(
        self,
        message: str,
        *,
        record_type: Optional[str] = None,
        sheet: Optional[str] = None,
        row_index: Optional[int] = None,
        field: Optional[str] = None,
        column: Optional[str] = None,
        value: Any = None,
        hint: Optional[str] = None,
    ) -> None:
        self.record_type = record_type
        self.sheet = sheet
        self.row_index = row_index
        self.field = field
        self.column = column
        self.value = value
        self.hint = hint
        text = _with_context(
            message,
            (
                ("class", record_type),
                ("sheet", f"'{sheet}'" if sheet is not None else None),
                ("row", row_index + 1 if row_index is not None else None),
                ("field", field),
                ("column", f"'{column}'" if column is not None else None),
                ("value", repr(value) if value is not None else None),
            ),
        )
        if hint:
            text = f"{text}\nHint: {hint}"
        super().__init__(text)


class ColumnNotFoundError(ExcelError, KeyError):
    """Raised when a column lookup by key, field name or header fails."""

    def __init__(
        self,
        column: str,
        available: Sequence[str] = (),
        *,
        sheet: Optional[str] = None,
    ) -> None:
        self.column = column
        self.available = tuple(available)
        self.sheet = sheet
        text = f"Column '{column}' not found"
        if sheet is not None:
            text += f" (sheet='{sheet}')"
        if self.available:
            text += "\nAvailable columns: " + ", ".join(f"'{name}'" for name in self.available)
        super().__init__(text)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class StyleError(ExcelError):
    """Raised for invalid or conflicting style declarations."""

    def __init__(
        self,
        message: str,
        *,
        style: Optional[str] = None,
        column: Optional[str] = None,
    ) -> None:
        self.style = style
        self.column = column
        super().__init__(
            _with_context(
                message,
                (
                    ("style", style),
                    ("column", f"'{column}'" if column is not None else None),
                ),
            )
        )


__all__ = [
    "ExcelError",
    "DataError",
    "WriteError",
    "ConfigurationError",
    "ColumnNotFoundError",
    "StyleError",
]
