from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Optional

from .engine import MODES, CsvCodec, default_codec
from .errors import CodecError, HeaderMismatchError
from .split import check_quotes

logger = logging.getLogger("csvcodec")


@dataclass(frozen=True)
class LineFailure:
    lineno: int     # 1-based physical line number
    line: str
    error: CodecError
    source: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.source}:" if self.source else "line "
        return f"{where}{self.lineno}: {self.error}"


@dataclass
class DecodeReport:
    """Records decoded from a batch, plus every line that failed."""

    records: List[Any] = field(default_factory=list)
    failures: List[LineFailure] = field(default_factory=list)
    header: Optional[str] = None
    source: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def extend(self, other: "DecodeReport") -> None:
        self.records.extend(other.records)
        self.failures.extend(other.failures)


def decode_lines(
    record_type: type,
    lines: Iterable[str],
    mode: str = "strict",
    *,
    validate_quotes: bool = True,
    skip_blank_lines: bool = True,
    codec: Optional[CsvCodec] = None,
    source: Optional[str] = None,
) -> DecodeReport:
    """
    Decode a header row followed by data lines.

    One bad line never aborts the batch: CodecErrors are collected as
    line-numbered failures. In strict mode a header that differs from the
    record's canonical header is a contract violation and raises
    HeaderMismatchError before any line is decoded.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown decode mode '{mode}'. Expected one of {MODES}")
    codec = codec or default_codec()
    report = DecodeReport(source=source)
    where = f"{source}: " if source else ""

    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if lineno == 1:
            # UTF-8 byte order mark left in place by utf-8 (not utf-8-sig) decoding
            line = line.removeprefix("\ufeff")
        if not line.strip():
            if skip_blank_lines:
                continue
        if report.header is None:
            report.header = line
            if mode == "strict":
                expected = codec.header_for(record_type)
                if line != expected:
                    raise HeaderMismatchError(expected, line)
            continue

        try:
            if validate_quotes:
                check_quotes(line, lineno)
            record = codec.decode(record_type, report.header, line, mode=mode)
        except CodecError as e:
            logger.warning("%sline %d: %s", where, lineno, e)
            report.failures.append(LineFailure(lineno=lineno, line=line, error=e, source=source))
            continue
        if record is not None:
            report.records.append(record)

    logger.info(
        "%sdecoded %d record(s), %d failure(s) [%s]",
        where, len(report.records), len(report.failures), mode,
    )
    return report


def load_csv(
    record_type: type,
    path: Path,
    mode: str = "strict",
    *,
    encoding: str = "utf-8",
    validate_quotes: bool = True,
    skip_blank_lines: bool = True,
    codec: Optional[CsvCodec] = None,
) -> DecodeReport:
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(path)
    with path.open("r", encoding=encoding, newline="") as f:
        return decode_lines(
            record_type,
            f,
            mode,
            validate_quotes=validate_quotes,
            skip_blank_lines=skip_blank_lines,
            codec=codec,
            source=str(path),
        )


def combine_csv(
    record_type: type,
    paths: Iterable[Path],
    *,
    encoding: str = "utf-8",
    validate_quotes: bool = True,
    codec: Optional[CsvCodec] = None,
) -> DecodeReport:
    """Fuzzy-decode several differently shaped files into one record type."""
    merged = DecodeReport()
    for p in paths:
        part = load_csv(
            record_type,
            p,
            "fuzzy",
            encoding=encoding,
            validate_quotes=validate_quotes,
            codec=codec,
        )
        merged.extend(part)
    return merged
