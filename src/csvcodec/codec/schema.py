from __future__ import annotations

import dataclasses
import logging
import threading
import types
from datetime import date, datetime, time
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Mapping, Optional, Tuple, Union, get_args, get_origin, get_type_hints

import numpy as np
from pydantic import BaseModel

from .errors import SchemaError
from .types import (
    DISPLAY_NAME_KEY,
    FORMAT_HINT_KEY,
    IGNORE_KEY,
    FieldDescriptor,
    FieldKind,
    Schema,
)

logger = logging.getLogger("csvcodec")

# exact types only: bool, IntEnum and friends are not integers on the wire
_SCALAR_KINDS: Dict[Any, FieldKind] = {
    int: FieldKind.INTEGER,
    str: FieldKind.TEXT,
    Decimal: FieldKind.DECIMAL,
    float: FieldKind.FLOAT,
    np.float32: FieldKind.SINGLE,
    datetime: FieldKind.DATETIME,
    date: FieldKind.DATE,
    time: FieldKind.TIME,
}

_UNION_ORIGINS = (Union, types.UnionType)


# ---------------------------------------------------------------------------
# Annotation -> FieldKind
# ---------------------------------------------------------------------------

def resolve_kind(name: str, annotation: Any) -> Tuple[FieldKind, Optional[FieldKind]]:
    """Return (kind, inner) for a field annotation or raise SchemaError."""
    if get_origin(annotation) is Annotated:
        return resolve_kind(name, get_args(annotation)[0])

    if get_origin(annotation) in _UNION_ORIGINS:
        args = get_args(annotation)
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1 and len(args) == 2:
            inner, _ = resolve_kind(name, rest[0])
            if inner is FieldKind.NULLABLE:
                raise SchemaError(f"Field '{name}': nested Optional is not supported")
            return FieldKind.NULLABLE, inner
        raise SchemaError(f"Field '{name}': union {annotation!r} is not a supported CSV kind")

    try:
        kind = _SCALAR_KINDS.get(annotation)
    except TypeError:  # unhashable annotation objects
        kind = None
    if kind is None:
        raise SchemaError(f"Field '{name}': type {annotation!r} is not a supported CSV kind")
    return kind, None


# ---------------------------------------------------------------------------
# Field enumeration per record flavour
# ---------------------------------------------------------------------------

def _dataclass_fields(record_type: type) -> List[Tuple[str, Any, Mapping[str, Any], bool, bool, Optional[str]]]:
    try:
        hints = get_type_hints(record_type, include_extras=True)
    except Exception as e:
        raise SchemaError(f"{record_type.__name__}: cannot resolve annotations: {e}") from e
    out = []
    for f in dataclasses.fields(record_type):
        has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        out.append((f.name, hints.get(f.name, f.type), f.metadata, has_default, f.init, None))
    return out


def _model_fields(record_type: type) -> List[Tuple[str, Any, Mapping[str, Any], bool, bool, Optional[str]]]:
    out = []
    for name, info in record_type.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        # the constructor only accepts the alias unless populate_by_name is set
        alias = info.validation_alias if isinstance(info.validation_alias, str) else info.alias
        out.append((name, info.annotation, extra, not info.is_required(), True, alias))
    return out


def build_schema(record_type: type) -> Schema:
    """
    Describe a dataclass or pydantic model as a CSV schema.

    Public fields are taken in declaration order. Fields marked ignored
    are left out of the header but must carry a default so the record
    can still be constructed on decode.
    """
    if not isinstance(record_type, type):
        raise SchemaError(f"Expected a record class, got {type(record_type).__name__}")

    if dataclasses.is_dataclass(record_type):
        raw = _dataclass_fields(record_type)
    elif issubclass(record_type, BaseModel):
        raw = _model_fields(record_type)
    else:
        raise SchemaError(
            f"{record_type.__name__} is neither a dataclass nor a pydantic model"
        )

    fields: List[FieldDescriptor] = []
    ignored: List[FieldDescriptor] = []
    for name, annotation, meta, has_default, init, alias in raw:
        if name.startswith("_"):
            continue
        if meta.get(IGNORE_KEY):
            if not has_default and init:
                raise SchemaError(
                    f"{record_type.__name__}.{name}: ignored fields need a default"
                )
            ignored.append(FieldDescriptor(
                name=name, kind=FieldKind.TEXT, ignored=True,
                has_default=has_default, init=init, alias=alias,
            ))
            continue

        kind, inner = resolve_kind(f"{record_type.__name__}.{name}", annotation)
        fields.append(FieldDescriptor(
            name=name,
            kind=kind,
            inner=inner,
            display_name=meta.get(DISPLAY_NAME_KEY),
            format_hint=meta.get(FORMAT_HINT_KEY),
            has_default=has_default,
            init=init,
            alias=alias,
        ))

    schema = Schema(record_type=record_type, fields=tuple(fields), ignored=tuple(ignored))
    logger.debug("schema %s: %s", record_type.__name__, schema.header or "<empty>")
    return schema


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class SchemaCache:
    """
    Per-type schema memo. Entries are immutable and never evicted; two
    threads racing on a first lookup may both build, and the first
    insert wins.
    """

    def __init__(self) -> None:
        self._schemas: Dict[type, Schema] = {}
        self._lock = threading.Lock()

    def schema_for(self, record_type: type) -> Schema:
        schema = self._schemas.get(record_type)
        if schema is not None:
            return schema
        built = build_schema(record_type)
        with self._lock:
            return self._schemas.setdefault(record_type, built)

    def register(self, record_type: type) -> type:
        """Build eagerly so schema errors surface at import time."""
        self.schema_for(record_type)
        return record_type

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


_DEFAULT_CACHE = SchemaCache()


def default_cache() -> SchemaCache:
    return _DEFAULT_CACHE


def csv_record(record_type: type) -> type:
    """Class decorator: register a record type with the default cache."""
    return _DEFAULT_CACHE.register(record_type)
