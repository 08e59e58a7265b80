from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .engine import CsvCodec, default_codec

logger = logging.getLogger("csvcodec")


def all_lines(
    records: Sequence[Any],
    record_type: Optional[type] = None,
    *,
    codec: Optional[CsvCodec] = None,
) -> List[str]:
    """Header row followed by one serialized line per record."""
    codec = codec or default_codec()
    if record_type is None:
        if not records:
            raise ValueError("record_type is required when there are no records")
        record_type = type(records[0])
    lines = [codec.header_for(record_type)]
    lines.extend(codec.serialize(r) for r in records)
    return lines


def write_csv(
    records: Sequence[Any],
    outpath: Path,
    record_type: Optional[type] = None,
    *,
    encoding: str = "utf-8",
    codec: Optional[CsvCodec] = None,
    dry_run: bool = False,
) -> str | Path:
    """
    Write records with the canonical header so the file reads back strictly.

    With dry_run the text is returned instead of written.
    """
    text = "\n".join(all_lines(records, record_type, codec=codec)) + "\n"
    if dry_run:
        return text

    outpath = Path(outpath).expanduser().resolve()
    outpath.parent.mkdir(parents=True, exist_ok=True)
    outpath.write_text(text, encoding=encoding)
    logger.info("wrote %d record(s) to %s", len(records), outpath)
    return outpath
