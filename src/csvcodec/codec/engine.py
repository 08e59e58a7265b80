from __future__ import annotations

from typing import Any, List, Optional

from .decode import decode_fuzzy_with, decode_strict_with
from .schema import SchemaCache, default_cache
from .serialize import serialize_with
from .types import Schema

MODES = ("strict", "fuzzy")


class CsvCodec:
    """
    The five collaborator operations over one schema cache.

    Pass a private SchemaCache to keep tests (or tenants) isolated;
    default_codec() shares the process-wide cache.
    """

    def __init__(self, cache: Optional[SchemaCache] = None):
        self.cache = cache if cache is not None else SchemaCache()

    def schema_for(self, record_type: type) -> Schema:
        return self.cache.schema_for(record_type)

    def header_for(self, record_type: type) -> str:
        return self.schema_for(record_type).header

    def header_fields_for(self, record_type: type) -> List[str]:
        return list(self.schema_for(record_type).field_order)

    def serialize(self, instance: Any) -> str:
        return serialize_with(self.schema_for(type(instance)), instance)

    def decode_strict(self, record_type: type, header: str, line: str) -> Optional[Any]:
        return decode_strict_with(self.schema_for(record_type), header, line)

    def decode_fuzzy(self, record_type: type, header: str, line: str) -> Any:
        return decode_fuzzy_with(self.schema_for(record_type), header, line)

    def decode(self, record_type: type, header: str, line: str, mode: str = "strict") -> Optional[Any]:
        if mode == "strict":
            return self.decode_strict(record_type, header, line)
        if mode == "fuzzy":
            return self.decode_fuzzy(record_type, header, line)
        raise ValueError(f"Unknown decode mode '{mode}'. Expected one of {MODES}")


_DEFAULT_CODEC: Optional[CsvCodec] = None


def default_codec() -> CsvCodec:
    global _DEFAULT_CODEC
    if _DEFAULT_CODEC is None:
        _DEFAULT_CODEC = CsvCodec(default_cache())
    return _DEFAULT_CODEC


# module-level shorthands over the default codec

def header_for(record_type: type) -> str:
    return default_codec().header_for(record_type)


def header_fields_for(record_type: type) -> List[str]:
    return default_codec().header_fields_for(record_type)


def serialize(instance: Any) -> str:
    return default_codec().serialize(instance)


def decode_strict(record_type: type, header: str, line: str) -> Optional[Any]:
    return default_codec().decode_strict(record_type, header, line)


def decode_fuzzy(record_type: type, header: str, line: str) -> Any:
    return default_codec().decode_fuzzy(record_type, header, line)
