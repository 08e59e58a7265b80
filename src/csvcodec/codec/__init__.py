"""
Schema-driven CSV record codec.

Exports the public API:
- CsvCodec, default_codec
- header_for, header_fields_for, serialize, decode_strict, decode_fuzzy
- SchemaCache, csv_record, csv_field, csv_meta
- decode_lines, load_csv, combine_csv, all_lines, write_csv
"""
from .types import FieldKind, FieldDescriptor, Schema, csv_field, csv_meta
from .errors import (
    CodecError,
    CoercionError,
    ConfigError,
    FieldCountError,
    HeaderMismatchError,
    MalformedLineError,
    SchemaError,
)
from .schema import SchemaCache, build_schema, csv_record, default_cache
from .split import check_quotes, split_line, unquote
from .engine import (
    CsvCodec,
    decode_fuzzy,
    decode_strict,
    default_codec,
    header_fields_for,
    header_for,
    serialize,
)
from .loader import DecodeReport, LineFailure, combine_csv, decode_lines, load_csv
from .emit import all_lines, write_csv

__all__ = [
    "FieldKind",
    "FieldDescriptor",
    "Schema",
    "csv_field",
    "csv_meta",
    "CodecError",
    "CoercionError",
    "ConfigError",
    "FieldCountError",
    "HeaderMismatchError",
    "MalformedLineError",
    "SchemaError",
    "SchemaCache",
    "build_schema",
    "csv_record",
    "default_cache",
    "check_quotes",
    "split_line",
    "unquote",
    "CsvCodec",
    "decode_fuzzy",
    "decode_strict",
    "default_codec",
    "header_fields_for",
    "header_for",
    "serialize",
    "DecodeReport",
    "LineFailure",
    "combine_csv",
    "decode_lines",
    "load_csv",
    "all_lines",
    "write_csv",
]
