from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from csvcodec.codec import (
    CodecError,
    DecodeReport,
    combine_csv,
    header_fields_for,
    header_for,
    load_csv,
    write_csv,
)
from csvcodec.config import CodecConfig, import_record_type, load_config
from csvcodec.display import to_dataframe

app = typer.Typer(help="csv-codec CLI")

logger = logging.getLogger("csvcodec")


def _configure_logging(verbose: bool) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[csvcodec] %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    _configure_logging(verbose)


# -----------------------------
# Helpers
# -----------------------------

def _settings(config: Optional[Path], **overrides) -> CodecConfig:
    try:
        return load_config(config).with_overrides(**overrides)
    except (CodecError, FileNotFoundError) as e:
        raise typer.BadParameter(str(e), param_hint="--config")


def _record_type(ref: Optional[str]) -> type:
    if not ref:
        raise typer.BadParameter("No record type given (use --record or 'record:' in the config)")
    try:
        return import_record_type(ref)
    except CodecError as e:
        raise typer.BadParameter(str(e), param_hint="--record")


def _report_failures(report: DecodeReport) -> None:
    for failure in report.failures:
        typer.secho(str(failure), fg=typer.colors.RED, err=True)


# -----------------------------
# Commands
# -----------------------------

@app.command()
def header(
    record: str = typer.Argument(..., help="Record class, e.g. mypkg.models:Person"),
    fields: bool = typer.Option(False, "--fields", help="One field name per line"),
):
    """Print the canonical CSV header of a record type."""
    rtype = _record_type(record)
    try:
        if fields:
            for name in header_fields_for(rtype):
                typer.echo(name)
        else:
            typer.echo(header_for(rtype))
    except CodecError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


@app.command()
def check(
    path: Path = typer.Argument(..., help="CSV file with a header row"),
    record: Optional[str] = typer.Option(None, "--record", "-r"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="strict | fuzzy"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML codec config"),
):
    """Decode every line of a file and list the ones that fail."""
    cfg = _settings(config, record=record, mode=mode)
    rtype = _record_type(cfg.record)
    try:
        report = load_csv(
            rtype,
            path,
            cfg.mode,
            encoding=cfg.encoding,
            validate_quotes=cfg.validate_quotes,
            skip_blank_lines=cfg.skip_blank_lines,
        )
    except (CodecError, ValueError, FileNotFoundError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    _report_failures(report)
    typer.echo(f"{len(report.records)} record(s) ok, {len(report.failures)} failure(s)")
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def combine(
    paths: List[Path] = typer.Argument(..., help="CSV files with their own header rows"),
    out: Path = typer.Option(Path("master.csv"), "--out", "-o", help="Output CSV"),
    record: Optional[str] = typer.Option(None, "--record", "-r"),
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Merge differently shaped CSV files into one record type by column name."""
    cfg = _settings(config, record=record)
    rtype = _record_type(cfg.record)
    try:
        report = combine_csv(
            rtype,
            paths,
            encoding=cfg.encoding,
            validate_quotes=cfg.validate_quotes,
        )
        write_csv(report.records, out, rtype, encoding=cfg.encoding)
    except (CodecError, FileNotFoundError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    _report_failures(report)
    typer.secho(f"Wrote {out} ({len(report.records)} rows)", fg=typer.colors.GREEN)
    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def preview(
    path: Path = typer.Argument(...),
    record: Optional[str] = typer.Option(None, "--record", "-r"),
    mode: Optional[str] = typer.Option(None, "--mode", "-m"),
    limit: int = typer.Option(20, "--limit", "-n", min=0, help="Rows to show (0 = all)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c"),
):
    """Show decoded records as a table using display names and format hints."""
    cfg = _settings(config, record=record, mode=mode)
    rtype = _record_type(cfg.record)
    try:
        report = load_csv(
            rtype,
            path,
            cfg.mode,
            encoding=cfg.encoding,
            validate_quotes=cfg.validate_quotes,
            skip_blank_lines=cfg.skip_blank_lines,
        )
    except (CodecError, ValueError, FileNotFoundError) as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    records = report.records[:limit] if limit else report.records
    df = to_dataframe(records, rtype)
    typer.echo(df.to_string(index=False) if len(df) else "(no records)")
    _report_failures(report)


if __name__ == "__main__":
    app()
