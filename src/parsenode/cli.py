"""Command-line interface for parsenode.

Provides commands for inspecting and annotating storyboard and xib files from
the terminal. Patching is a dry run unless --apply is given.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .batch import discover, process_file, scan_file
from .classifier import partition
from .config import PatcherConfig, load_config, parse_csv
from .errors import ConfigError
from .export import record_to_dict, unified_diff, write_json_report
from .results import BatchReport, FileReport

app = typer.Typer(
    name="parsenode",
    help="Insert accessibility annotations into storyboards and xibs without reformatting them.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"parsenode version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Insert accessibility annotations into storyboards and xibs."""
    pass


def _load(config_path: Path | None) -> PatcherConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _collect(path: Path, file: Path | None, config: PatcherConfig) -> list[Path]:
    files = [file] if file is not None else discover(path, config.patterns)
    if not files:
        typer.echo(f"No documents found under {path}")
    return files


@app.command()
def scan(
    path: Annotated[Path, typer.Argument(help="Folder to search for storyboards/xibs")] = Path("."),
    file: Annotated[
        Path | None, typer.Option("--file", "-f", help="Single storyboard/xib file to scan")
    ] = None,
    allowlist: Annotated[
        str | None, typer.Option("--allowlist", help="Comma-separated tags to include")
    ] = None,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="YAML configuration file")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print results as JSON")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
) -> None:
    """List tracked elements and whether they are already annotated."""
    _configure_logging(verbose)
    config = _load(config_path).merged(allowlist=parse_csv(allowlist))
    reports = [scan_file(doc, config) for doc in _collect(path, file, config)]

    if json_output:
        data = [
            {"file": str(r.path), "error": str(r.error)}
            if r.error
            else {"file": str(r.path), "elements": [record_to_dict(rec) for rec in r.records]}
            for r in reports
        ]
        typer.echo(json.dumps(data, indent=2))
    else:
        for report in reports:
            if report.error:
                typer.echo(f"Error processing {report.path}: {report.error}", err=True)
                continue
            missing, annotated = partition(report.records)
            typer.echo(
                f"{report.path}: {len(report.records)} tracked, "
                f"{len(annotated)} annotated, {len(missing)} missing"
            )
            for record in report.records:
                status = "annotated" if record.has_annotation else "missing"
                typer.echo(f"  - {record} [{status}]")

    if any(not report.success for report in reports):
        raise typer.Exit(1)


@app.command()
def patch(
    path: Annotated[Path, typer.Argument(help="Folder to search for storyboards/xibs")] = Path("."),
    file: Annotated[
        Path | None, typer.Option("--file", "-f", help="Single storyboard/xib file to patch")
    ] = None,
    apply: Annotated[
        bool, typer.Option("--apply", help="Write patched files and backups")
    ] = False,
    output: Annotated[
        Path | None, typer.Option("--out", "-o", help="Output path (single-file mode only)")
    ] = None,
    no_backup: Annotated[
        bool, typer.Option("--no-backup", help="Do not write <file>.bak backups")
    ] = False,
    report_path: Annotated[
        Path | None, typer.Option("--report", "-r", help="Write a JSON report of changes")
    ] = None,
    prefix: Annotated[
        str | None, typer.Option("--prefix", help="Global identifier prefix")
    ] = None,
    allowlist: Annotated[
        str | None, typer.Option("--allowlist", help="Comma-separated tags to include")
    ] = None,
    unique_ids: Annotated[
        bool, typer.Option("--unique-ids", help="Disambiguate repeated identifiers")
    ] = False,
    show_diff: Annotated[bool, typer.Option("--diff", help="Print a unified diff")] = False,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="YAML configuration file")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging")] = False,
) -> None:
    """Insert missing accessibility annotations (dry run unless --apply)."""
    _configure_logging(verbose)
    if output is not None and file is None:
        typer.echo("Error: --out requires --file", err=True)
        raise typer.Exit(1)

    config = _load(config_path).merged(
        prefix=prefix,
        allowlist=parse_csv(allowlist),
        backup=False if no_backup else None,
        unique_ids=True if unique_ids else None,
    )

    batch = BatchReport()
    for doc in _collect(path, file, config):
        report = process_file(doc, config, apply=apply, out_path=output)
        batch.files.append(report)
        _echo_report(report, show_diff)

    if report_path is not None:
        write_json_report(batch, report_path)
        typer.echo(f"Report written to {report_path}")

    mode = "Applied" if apply else "Dry run"
    typer.echo(f"\n{mode}: {batch}")
    if batch.failed:
        raise typer.Exit(1)


def _echo_report(report: FileReport, show_diff: bool) -> None:
    if report.error is not None:
        typer.echo(f"Error processing {report.path}: {report.error}", err=True)
        return

    typer.echo(f"\n{report}")
    for op in report.ops:
        record = op.source_record
        detail = f"[{record.identifier_attribute}]" if record.has_identifier else "[no id]"
        typer.echo(f"  - {record.tag} lines {record.start_line}-{record.end_line} {detail}")
    if report.result is not None and report.result.applied_count:
        typer.echo(f"  {report.result}")
        if show_diff:
            typer.echo(unified_diff(report.original, report.result.patched, report.path))


if __name__ == "__main__":
    app()
