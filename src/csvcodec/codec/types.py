from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

# metadata keys read by the schema builder
IGNORE_KEY = "csv_ignore"
DISPLAY_NAME_KEY = "csv_display_name"
FORMAT_HINT_KEY = "csv_format"


class FieldKind(Enum):
    INTEGER = "integer"
    TEXT = "text"
    DECIMAL = "decimal"
    FLOAT = "float"
    SINGLE = "single"           # numpy.float32
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    NULLABLE = "nullable"       # Optional[X], see FieldDescriptor.inner


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind
    inner: Optional[FieldKind] = None   # wrapped kind when kind is NULLABLE
    ignored: bool = False
    display_name: Optional[str] = None  # UI label only, never on the wire
    format_hint: Optional[str] = None   # presentation only
    has_default: bool = True
    init: bool = True                   # accepted by the constructor
    alias: Optional[str] = None         # constructor keyword when it differs from name

    @property
    def init_key(self) -> str:
        return self.alias or self.name

    @property
    def label(self) -> str:
        return self.display_name or self.name


@dataclass(frozen=True)
class Schema:
    """
    Cached CSV description of one record type.

    Invariants:
    - field_order never contains an ignored field
    - header == ", ".join(field_order)
    """

    record_type: type
    fields: Tuple[FieldDescriptor, ...] = ()
    ignored: Tuple[FieldDescriptor, ...] = ()

    @property
    def field_order(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def header(self) -> str:
        return ", ".join(self.field_order)

    def descriptor(self, name: str) -> FieldDescriptor:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


def csv_meta(
    *,
    ignore: bool = False,
    display_name: Optional[str] = None,
    format_hint: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Marker mapping for a record field.

    Works as dataclass metadata::

        name: str = field(default="", metadata=csv_meta(display_name="Full name"))

    and as pydantic field extras::

        name: str = Field("", json_schema_extra=csv_meta(ignore=True))
    """
    meta: Dict[str, Any] = {}
    if ignore:
        meta[IGNORE_KEY] = True
    if display_name is not None:
        meta[DISPLAY_NAME_KEY] = display_name
    if format_hint is not None:
        meta[FORMAT_HINT_KEY] = format_hint
    return meta


def csv_field(
    default: Any = dataclasses.MISSING,
    *,
    default_factory: Any = dataclasses.MISSING,
    ignore: bool = False,
    display_name: Optional[str] = None,
    format_hint: Optional[str] = None,
    **kwargs: Any,
):
    """dataclasses.field() with CSV markers attached."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata.update(csv_meta(ignore=ignore, display_name=display_name, format_hint=format_hint))
    return field(default=default, default_factory=default_factory, metadata=metadata, **kwargs)
