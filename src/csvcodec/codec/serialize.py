from __future__ import annotations

from typing import Any

from .coerce import to_text
from .split import DELIMITER, QUOTE
from .types import Schema


def escape(text: str) -> str:
    """
    Quote a cell iff it contains a comma.

    Embedded quotes are neither doubled nor a reason to quote; readers of
    existing files depend on exactly this rule.
    """
    if DELIMITER in text:
        return f"{QUOTE}{text}{QUOTE}"
    return text


def serialize_with(schema: Schema, instance: Any) -> str:
    return DELIMITER.join(
        escape(to_text(getattr(instance, name))) for name in schema.field_order
    )
