"""Renderer interface and convenience writers."""

# Module responsibilities:
# - Define the ExcelRenderer protocol consumed by the writers below.
# - Offer write_to/to_bytes/save helpers defaulting to the openpyxl renderer.

from __future__ import annotations

import io
from pathlib import Path
from typing import IO, Optional, Protocol

from ..model import ExcelDocument
from .widths import layout_widths
from .xlsx import XlsxRenderer


class ExcelRenderer(Protocol):
    """Serializes a finished document into a binary stream."""

    def render(self, document: ExcelDocument, output: IO[bytes]) -> None:
        ...


def write_to(
    document: ExcelDocument,
    output: IO[bytes],
    renderer: Optional[ExcelRenderer] = None,
) -> None:
    (renderer or XlsxRenderer()).render(document, output)


def to_bytes(document: ExcelDocument, renderer: Optional[ExcelRenderer] = None) -> bytes:
    buffer = io.BytesIO()
    write_to(document, buffer, renderer)
    return buffer.getvalue()


def save(
    document: ExcelDocument,
    path: Path,
    renderer: Optional[ExcelRenderer] = None,
) -> Path:
    """Render ``document`` to ``path``, creating parent directories.

    Returns:
        The written path.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as fh:
        write_to(document, fh, renderer)
    return path


__all__ = [
    "ExcelRenderer",
    "XlsxRenderer",
    "layout_widths",
    "write_to",
    "to_bytes",
    "save",
]
