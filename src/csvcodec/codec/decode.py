from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import ValidationError

from .coerce import parse_text, zero_value
from .errors import CoercionError, FieldCountError, HeaderMismatchError
from .split import split_header, split_line, unquote
from .types import FieldDescriptor, FieldKind, Schema


def _descriptor_for(schema: Schema, key: str) -> Optional[FieldDescriptor]:
    # pydantic reports the alias in loc
    for desc in schema.fields:
        if key in (desc.name, desc.alias):
            return desc
    return None


def _construct(schema: Schema, values: Dict[str, Any]) -> Any:
    """
    Build a record from decoded values.

    Fields that were not decoded keep their declared default, or get
    their kind's zero value when they have none.
    """
    kwargs: Dict[str, Any] = {}
    late: Dict[str, Any] = {}
    for desc in schema.fields:
        if desc.name in values:
            value = values[desc.name]
        elif desc.has_default:
            continue
        else:
            value = zero_value(desc)
        if desc.init:
            kwargs[desc.init_key] = value
        else:
            late[desc.name] = value

    try:
        record = schema.record_type(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(p) for p in err.get("loc", ())) or "?"
        desc = _descriptor_for(schema, loc)
        name, kind = (desc.name, desc.inner or desc.kind) if desc else (loc, FieldKind.TEXT)
        raise CoercionError(name, kind, str(err.get("input", "")), err.get("msg")) from e

    # init=False fields; object.__setattr__ also covers frozen dataclasses
    for name, value in late.items():
        if name in values or not hasattr(record, name):
            object.__setattr__(record, name, value)
    return record


def decode_strict_with(schema: Schema, header: str, line: str) -> Optional[Any]:
    """
    Positional decode. `header` must be exactly schema.header.

    Returns None when `line` is the header row itself.
    """
    if header != schema.header:
        raise HeaderMismatchError(schema.header, header)
    if line == schema.header:
        return None

    raw = split_line(line)
    if len(raw) < len(schema.fields):
        raise FieldCountError(len(schema.fields), len(raw))

    values = {
        desc.name: parse_text(desc, unquote(raw[i]))
        for i, desc in enumerate(schema.fields)
    }
    return _construct(schema, values)


def decode_fuzzy_with(schema: Schema, header: str, line: str) -> Any:
    """
    Name-matched decode against the line's own header row.

    Missing columns leave fields at their defaults; unknown columns are
    skipped. Only coercion failures raise.
    """
    columns = split_header(header)
    raw = split_line(line)

    values: Dict[str, Any] = {}
    for desc in schema.fields:
        try:
            j = columns.index(desc.name)
        except ValueError:
            continue
        if j >= len(raw):
            continue
        values[desc.name] = parse_text(desc, unquote(raw[j]))
    return _construct(schema, values)
