"""
Presentation helpers for decoded records.

Display names and format hints only ever change what a person sees in a
table; the codec never reads them.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

import pandas as pd

from csvcodec.codec.coerce import to_text
from csvcodec.codec.engine import CsvCodec, default_codec
from csvcodec.codec.types import FieldDescriptor


def display_headers(record_type: type, *, codec: Optional[CsvCodec] = None) -> List[str]:
    codec = codec or default_codec()
    return [f.label for f in codec.schema_for(record_type).fields]


def format_cell(desc: FieldDescriptor, value: Any) -> str:
    """
    Render one value for display.

    The hint goes through format(), so dates take strftime patterns
    ("%Y.%m.%d") and numbers take format specs (",.2f").
    """
    if value is None:
        return ""
    if not desc.format_hint:
        return to_text(value)
    try:
        return format(value, desc.format_hint)
    except (ValueError, TypeError):
        return to_text(value)


def to_dataframe(
    records: Sequence[Any],
    record_type: Optional[type] = None,
    *,
    codec: Optional[CsvCodec] = None,
) -> pd.DataFrame:
    """Table of formatted cells with display-name columns."""
    codec = codec or default_codec()
    if record_type is None:
        if not records:
            raise ValueError("record_type is required when there are no records")
        record_type = type(records[0])
    schema = codec.schema_for(record_type)

    rows = [
        [format_cell(f, getattr(r, f.name)) for f in schema.fields]
        for r in records
    ]
    return pd.DataFrame(rows, columns=[f.label for f in schema.fields])
