from __future__ import annotations

from typing import Any, Optional


class CodecError(Exception):
    """Base class for everything the codec raises."""


class SchemaError(CodecError, TypeError):
    """A record type cannot be described as a CSV schema."""


class ConfigError(CodecError, ValueError):
    """Invalid codec configuration document."""


class HeaderMismatchError(CodecError, ValueError):
    """
    Strict decoding was asked to trust a header that is not the
    canonical header of the record type.
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Header does not match record schema: "
            f"expected {expected!r}, got {actual!r}"
        )


class CoercionError(CodecError, ValueError):
    def __init__(self, field: str, kind: Any, text: str, reason: Optional[str] = None):
        self.field = field
        self.kind = kind
        self.text = text
        msg = f"Field '{field}': cannot parse {text!r} as {getattr(kind, 'value', kind)}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class FieldCountError(CodecError, IndexError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Line has {actual} field(s); schema requires {expected}")


class MalformedLineError(CodecError, ValueError):
    """Unbalanced double quotes; the splitter cannot be trusted on this line."""
