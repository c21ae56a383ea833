"""YAML layout files describing sheet columns, widths and styles."""

# Module responsibilities:
# - Validate layout YAML payloads with pydantic models.
# - Convert style/theme declarations into CellStyle and Theme values.
# - Apply sheet-level options (styles, freeze pane, auto-filter, header groups) to a SheetBuilder.

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError, StyleError
from .style import Alignment, BorderStyle, CellStyle, parse_color
from .theme import PRESETS, Theme
from .utils.log import get_logger

if TYPE_CHECKING:
    from .builder import SheetBuilder

logger = get_logger("config")


class StyleConfig(BaseModel):
    """Style declaration; colors accept palette names or hex strings."""

    model_config = ConfigDict(extra="forbid")

    background_color: Optional[str] = None
    font_color: Optional[str] = None
    bold: bool = False
    italic: bool = False
    alignment: Optional[str] = None
    border: Optional[str] = None
    number_format: Optional[str] = None

    def to_style(self) -> CellStyle:
        try:
            return CellStyle(
                background_color=parse_color(self.background_color) if self.background_color else None,
                font_color=parse_color(self.font_color) if self.font_color else None,
                bold=self.bold,
                italic=self.italic,
                alignment=Alignment(self.alignment.lower()) if self.alignment else None,
                border=BorderStyle(self.border.lower()) if self.border else None,
                number_format=self.number_format,
            )
        except ValueError as exc:
            raise StyleError(f"Invalid style declaration: {exc}") from exc


class ThemeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    preset: Optional[str] = None
    default: Optional[StyleConfig] = None
    header: Optional[StyleConfig] = None
    body: Optional[StyleConfig] = None


class ColumnConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str
    header: Optional[str] = None
    width: Union[int, str, None] = None
    style: Optional[StyleConfig] = None
    header_style: Optional[StyleConfig] = None
    number_format: Optional[str] = None


class HeaderGroupConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    columns: List[str]


class FreezePaneConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    row: int = 0
    col: int = 0


class LayoutConfig(BaseModel):
    """Complete layout file model."""

    model_config = ConfigDict(extra="forbid")

    sheet: Optional[str] = None
    theme: Union[str, ThemeConfig, None] = None
    style: Optional[StyleConfig] = None
    header_style: Optional[StyleConfig] = None
    alternate_row_style: Optional[StyleConfig] = None
    freeze_pane: Optional[FreezePaneConfig] = None
    auto_filter: bool = False
    columns: List[ColumnConfig] = Field(default_factory=list)
    header_groups: List[HeaderGroupConfig] = Field(default_factory=list)

    def resolve_theme(self) -> Optional[Theme]:
        return resolve_theme(self.theme)

    def apply_sheet_options(self, sheet: "SheetBuilder") -> "SheetBuilder":
        """Copy sheet-level options onto ``sheet``; columns are declared by the caller."""

        if self.style is not None:
            sheet.style(self.style.to_style())
        if self.header_style is not None:
            sheet.header_style(self.header_style.to_style())
        if self.alternate_row_style is not None:
            sheet.alternate_row_style(self.alternate_row_style.to_style())
        if self.freeze_pane is not None:
            sheet.freeze_pane(row=self.freeze_pane.row, col=self.freeze_pane.col)
        if self.auto_filter:
            sheet.auto_filter()
        for group in self.header_groups:
            sheet.header_group(group.title, group.columns)
        return sheet


def _style_or_none(config: Optional[StyleConfig]) -> Optional[CellStyle]:
    return config.to_style() if config is not None else None


def resolve_theme(value: Union[str, ThemeConfig, None]) -> Optional[Theme]:
    """Turn a preset name or theme mapping into a Theme.

    A mapping with ``preset`` starts from that preset and replaces the layers it declares.
    """

    if value is None:
        return None
    if isinstance(value, str):
        return _preset(value)
    base = _preset(value.preset) if value.preset else Theme()
    return Theme(
        default=_style_or_none(value.default) or base.default,
        header=_style_or_none(value.header) or base.header,
        body=_style_or_none(value.body) or base.body,
    )


def _preset(name: str) -> Theme:
    theme = PRESETS.get(name.strip().lower())
    if theme is None:
        raise ConfigurationError(
            f"Unknown theme preset '{name}'",
            hint=f"Available presets: {', '.join(sorted(PRESETS))}",
        )
    return theme


def parse_layout(payload: Dict) -> LayoutConfig:
    if not isinstance(payload, dict):
        raise ConfigurationError("Invalid layout structure (expected mapping)")
    try:
        return LayoutConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid layout: {exc}") from exc


def load_layout(path: Path) -> LayoutConfig:
    """Load and validate a layout YAML file.

    Raises:
        ConfigurationError: When the file is missing or does not match the layout schema.
    """

    if not path.exists():
        raise ConfigurationError(f"Layout file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        payload = yaml.safe_load(fh) or {}
    layout = parse_layout(payload)
    logger.info(
        "Layout loaded",
        extra={"path": str(path), "columns": [column.key for column in layout.columns]},
    )
    return layout


__all__ = [
    "StyleConfig",
    "ThemeConfig",
    "ColumnConfig",
    "HeaderGroupConfig",
    "FreezePaneConfig",
    "LayoutConfig",
    "resolve_theme",
    "parse_layout",
    "load_layout",
]
