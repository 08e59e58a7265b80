from __future__ import annotations

from typing import List

from .errors import MalformedLineError

QUOTE = '"'
DELIMITER = ","


def split_line(line: str) -> List[str]:
    """
    Split a CSV line on commas that sit outside double-quoted spans.

    Quotes are kept on the returned pieces, so
    ``split_line('1,"a,b",3') == ['1', '"a,b"', '3']``.
    Doubled quotes inside a span are not understood; run check_quotes()
    first when the line comes from an untrusted source.
    """
    fields: List[str] = []
    in_quotes = False
    start = 0
    for i, ch in enumerate(line):
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch == DELIMITER and not in_quotes:
            fields.append(line[start:i])
            start = i + 1
    fields.append(line[start:])
    return fields


def unquote(raw: str) -> str:
    # only cells that were quoted because of a comma lose their quotes
    if len(raw) >= 2 and DELIMITER in raw and raw.startswith(QUOTE) and raw.endswith(QUOTE):
        return raw[1:-1]
    return raw


def split_header(header: str) -> List[str]:
    """Header rows carry no quoting; names are trimmed so ', ' headers match."""
    return [name.strip() for name in header.split(DELIMITER)]


def check_quotes(line: str, lineno: int | None = None) -> None:
    if line.count(QUOTE) % 2:
        where = f"line {lineno}: " if lineno is not None else ""
        raise MalformedLineError(f"{where}unbalanced double quotes in {line!r}")
