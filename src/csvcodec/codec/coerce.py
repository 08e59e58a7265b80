from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict

import numpy as np

from .errors import CoercionError
from .types import FieldDescriptor, FieldKind


def _parse_int(text: str) -> int:
    # int() also accepts "1_000" and surrounding blanks; the wire format does not
    if not text or "_" in text or text != text.strip():
        raise ValueError("not a base-10 integer")
    return int(text, 10)


def _parse_decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError("not a decimal") from e


def _parse_single(text: str) -> np.float32:
    return np.float32(float(text))


_PARSERS: Dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.INTEGER: _parse_int,
    FieldKind.TEXT: lambda s: s,
    FieldKind.DECIMAL: _parse_decimal,
    FieldKind.FLOAT: float,
    FieldKind.SINGLE: _parse_single,
    FieldKind.DATETIME: datetime.fromisoformat,
    FieldKind.DATE: date.fromisoformat,
    FieldKind.TIME: time.fromisoformat,
}

_ZERO: Dict[FieldKind, Callable[[], Any]] = {
    FieldKind.INTEGER: int,
    FieldKind.TEXT: str,
    FieldKind.DECIMAL: Decimal,
    FieldKind.FLOAT: float,
    FieldKind.SINGLE: np.float32,
    FieldKind.DATETIME: lambda: datetime.min,
    FieldKind.DATE: lambda: date.min,
    FieldKind.TIME: lambda: time.min,
    FieldKind.NULLABLE: lambda: None,
}


def parse_text(desc: FieldDescriptor, text: str) -> Any:
    """Coerce one (already unquoted) CSV cell into the field's kind."""
    kind = desc.kind
    if kind is FieldKind.NULLABLE:
        if text == "":
            return None
        kind = desc.inner
    try:
        return _PARSERS[kind](text)
    except (ValueError, TypeError, OverflowError) as e:
        raise CoercionError(desc.name, kind, text, str(e) or None) from e


def to_text(value: Any) -> str:
    """Natural text of a value; None becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def zero_value(desc: FieldDescriptor) -> Any:
    return _ZERO[desc.kind]()
