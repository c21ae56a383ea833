"""Schema reflection for exportable record types."""

# Module responsibilities:
# - Mark dataclasses as exportable and declare per-field export metadata (excel_field).
# - Build ordered FieldDescriptor tuples once per type and cache them in a registry.
# - Convert descriptors into ColumnDefinitions and records into positional rows.

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type

from .errors import ColumnNotFoundError, ConfigurationError, DataError, StyleError
from .model import ColumnDefinition, ConditionalStyle, Row
from .style import CellStyle
from .utils.log import get_logger
from .width import Auto, ColumnWidth, WidthLike, coerce_width

logger = get_logger("schema")

_EXPORTABLE_ATTR = "__xlflow_exportable__"
_METADATA_KEY = "xlflow"


@dataclass(frozen=True)
class ExportOptions:
    """Type-level options recorded by :func:`exportable`."""

    sheet_name: Optional[str] = None


@dataclass(frozen=True)
class ExcelFieldSpec:
    """Raw per-field declaration stored in dataclass field metadata."""

    header: Optional[str] = None
    width: WidthLike = None
    style: Optional[CellStyle] = None
    header_style: Optional[CellStyle] = None
    number_format: Optional[str] = None
    order: Optional[int] = None
    conditional_style: Optional[ConditionalStyle] = None


@dataclass(frozen=True)
class FieldDescriptor:
    """Validated, ordered description of one exportable field."""

    name: str
    header: str
    accessor: Callable[[Any], Any] = field(compare=False, repr=False)
    width: ColumnWidth = Auto
    style: Optional[CellStyle] = None
    header_style: Optional[CellStyle] = None
    number_format: Optional[str] = None
    order: Optional[int] = None
    position: int = 0
    conditional_style: Optional[ConditionalStyle] = field(default=None, compare=False, repr=False)

    def to_column(self) -> ColumnDefinition:
        return ColumnDefinition(
            key=self.name,
            header=self.header,
            extractor=self.accessor,
            width=self.width,
            style=self.style,
            header_style=self.header_style,
            number_format=self.number_format,
            conditional_style=self.conditional_style,
        )


def exportable(cls: Optional[type] = None, *, sheet_name: Optional[str] = None):
    """Class decorator marking a dataclass as exportable.

    Usable bare (``@exportable``) or with options (``@exportable(sheet_name="Users")``).
    """

    def wrap(klass: type) -> type:
        setattr(klass, _EXPORTABLE_ATTR, ExportOptions(sheet_name=sheet_name))
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def is_exportable(record_type: type) -> bool:
    return isinstance(getattr(record_type, _EXPORTABLE_ATTR, None), ExportOptions)


def export_options(record_type: type) -> ExportOptions:
    options = getattr(record_type, _EXPORTABLE_ATTR, None)
    return options if isinstance(options, ExportOptions) else ExportOptions()


def excel_field(
    header: Optional[str] = None,
    *,
    width: WidthLike = None,
    style: Optional[CellStyle] = None,
    header_style: Optional[CellStyle] = None,
    number_format: Optional[str] = None,
    order: Optional[int] = None,
    conditional_style: Optional[ConditionalStyle] = None,
    **field_kwargs: Any,
) -> Any:
    """Declare an exportable dataclass field.

    ``conditional_style`` maps each cell value of the field to an extra
    CellStyle (or ``None``) applied on top of every other layer.
    Remaining keyword arguments (``default``, ``default_factory``, ``repr`` ...) are
    passed through to :func:`dataclasses.field`. Declarations are validated when the
    schema is built, not here.
    """

    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[_METADATA_KEY] = ExcelFieldSpec(
        header=header,
        width=width,
        style=style,
        header_style=header_style,
        number_format=number_format,
        order=order,
        conditional_style=conditional_style,
    )
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _type_name(record_type: type) -> str:
    return getattr(record_type, "__qualname__", None) or repr(record_type)


def _order_and_validate(
    record_type: type, descriptors: Iterable[FieldDescriptor]
) -> Tuple[FieldDescriptor, ...]:
    items = list(descriptors)
    type_name = _type_name(record_type)
    if not items:
        raise ConfigurationError("Schema declares no exportable fields", record_type=type_name)
    names: set[str] = set()
    orders: Dict[int, str] = {}
    for item in items:
        if item.name in names:
            raise ConfigurationError(
                "Duplicate field in schema", record_type=type_name, field=item.name
            )
        names.add(item.name)
        if item.order is None:
            continue
        if isinstance(item.order, bool) or not isinstance(item.order, int):
            raise ConfigurationError(
                "Field order must be an integer",
                record_type=type_name,
                field=item.name,
                value=item.order,
            )
        if item.order in orders:
            raise ConfigurationError(
                f"Field order {item.order} is also used by '{orders[item.order]}'",
                record_type=type_name,
                field=item.name,
                value=item.order,
            )
        orders[item.order] = item.name
    # Explicitly ordered fields first, the rest keep declaration order.
    return tuple(
        sorted(
            items,
            key=lambda d: (0, d.order, d.position) if d.order is not None else (1, 0, d.position),
        )
    )


def _check_style(record_type: type, name: str, value: Any, label: str) -> Optional[CellStyle]:
    if value is None or isinstance(value, CellStyle):
        return value
    raise StyleError(
        f"Field {label} must be a CellStyle in {_type_name(record_type)}.{name}",
        style=type(value).__name__,
        column=name,
    )


def _check_conditional(record_type: type, name: str, value: Any) -> Optional[ConditionalStyle]:
    if value is None or callable(value):
        return value
    raise StyleError(
        f"Field conditional_style must be callable in {_type_name(record_type)}.{name}",
        style="conditional",
        column=name,
    )


def _reflect(record_type: type) -> Tuple[FieldDescriptor, ...]:
    type_name = _type_name(record_type)
    if not is_exportable(record_type):
        raise ConfigurationError(
            "Record type is not marked exportable",
            record_type=type_name,
            hint=f"Decorate the class with @exportable: @exportable class {type_name}: ...",
        )
    if not dataclasses.is_dataclass(record_type):
        raise ConfigurationError(
            "Exportable record types must be dataclasses",
            record_type=type_name,
            hint="Decorate the class with @dataclass, or register descriptors explicitly.",
        )
    all_fields = dataclasses.fields(record_type)
    descriptors = []
    for position, item in enumerate(all_fields):
        spec = item.metadata.get(_METADATA_KEY)
        if not isinstance(spec, ExcelFieldSpec):
            continue
        try:
            width = coerce_width(spec.width)
        except ConfigurationError as exc:
            raise ConfigurationError(
                "Invalid column width", record_type=type_name, field=item.name, value=spec.width
            ) from exc
        descriptors.append(
            FieldDescriptor(
                name=item.name,
                header=spec.header or item.name,
                accessor=attrgetter(item.name),
                width=width,
                style=_check_style(record_type, item.name, spec.style, "style"),
                header_style=_check_style(record_type, item.name, spec.header_style, "header_style"),
                number_format=spec.number_format or None,
                order=spec.order,
                position=position,
                conditional_style=_check_conditional(record_type, item.name, spec.conditional_style),
            )
        )
    if not descriptors:
        raise ConfigurationError(
            "No fields declared with excel_field()",
            record_type=type_name,
            hint="Available fields: " + ", ".join(f.name for f in all_fields),
        )
    return _order_and_validate(record_type, descriptors)


class SchemaRegistry:
    """Per-type cache of field descriptors.

    Descriptors are either reflected from ``excel_field`` declarations on first
    use or registered explicitly with :meth:`register`.
    """

    def __init__(self) -> None:
        self._schemas: Dict[type, Tuple[FieldDescriptor, ...]] = {}
        self._lock = threading.Lock()

    def register(
        self, record_type: type, descriptors: Iterable[FieldDescriptor]
    ) -> Tuple[FieldDescriptor, ...]:
        ordered = _order_and_validate(record_type, descriptors)
        with self._lock:
            self._schemas[record_type] = ordered
        return ordered

    def describe(self, record_type: type) -> Tuple[FieldDescriptor, ...]:
        with self._lock:
            cached = self._schemas.get(record_type)
        if cached is not None:
            return cached
        built = _reflect(record_type)
        with self._lock:
            cached = self._schemas.setdefault(record_type, built)
        logger.info(
            "Schema built",
            extra={"record_type": _type_name(record_type), "fields": [d.name for d in cached]},
        )
        return cached

    def columns(self, record_type: type) -> Tuple[ColumnDefinition, ...]:
        return tuple(descriptor.to_column() for descriptor in self.describe(record_type))

    def find(self, record_type: type, name: str) -> FieldDescriptor:
        """Look up a descriptor by field name, falling back to header text."""

        descriptors = self.describe(record_type)
        for descriptor in descriptors:
            if descriptor.name == name:
                return descriptor
        for descriptor in descriptors:
            if descriptor.header == name:
                return descriptor
        raise ColumnNotFoundError(name, [d.name for d in descriptors])

    def extract(
        self,
        record_type: type,
        records: Iterable[Any],
        *,
        sheet: Optional[str] = None,
    ) -> Tuple[Row, ...]:
        """Extract one positional row per record, aligned to :meth:`columns`."""

        descriptors = self.describe(record_type)
        rows = []
        for row_idx, record in enumerate(records):
            if not isinstance(record, record_type):
                raise DataError(
                    f"Expected {_type_name(record_type)} record",
                    sheet=sheet,
                    row_index=row_idx,
                    value=record,
                )
            rows.append(tuple(_read(d, record, row_idx, sheet) for d in descriptors))
        return tuple(rows)

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()


def _read(descriptor: FieldDescriptor, record: Any, row_idx: int, sheet: Optional[str]) -> Any:
    try:
        return descriptor.accessor(record)
    except Exception as exc:
        raise DataError(
            f"Failed to read field '{descriptor.name}': {exc}",
            sheet=sheet,
            row_index=row_idx,
            column=descriptor.header,
        ) from exc


default_registry = SchemaRegistry()


def describe(record_type: Type[Any]) -> Tuple[FieldDescriptor, ...]:
    return default_registry.describe(record_type)


def columns(record_type: Type[Any]) -> Tuple[ColumnDefinition, ...]:
    return default_registry.columns(record_type)


def extract(record_type: Type[Any], records: Iterable[Any]) -> Tuple[Row, ...]:
    return default_registry.extract(record_type, records)


def find(record_type: Type[Any], name: str) -> FieldDescriptor:
    return default_registry.find(record_type, name)


def register(record_type: Type[Any], descriptors: Iterable[FieldDescriptor]) -> Tuple[FieldDescriptor, ...]:
    return default_registry.register(record_type, descriptors)


__all__ = [
    "ExportOptions",
    "ExcelFieldSpec",
    "FieldDescriptor",
    "SchemaRegistry",
    "default_registry",
    "exportable",
    "is_exportable",
    "export_options",
    "excel_field",
    "describe",
    "columns",
    "extract",
    "find",
    "register",
]
