"""
Batch processing: discover documents and run parse, plan and apply on each.

Each file is handled independently. A failure in one file is recorded in its
``FileReport`` and never stops the rest of the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from . import applier
from .config import PatcherConfig
from .errors import ParseNodeError
from .planner import plan
from .results import BatchReport, FileReport
from .tracker import parse, parse_file, read_document

logger = logging.getLogger(__name__)


def discover(root: str | Path, patterns: Iterable[str]) -> list[Path]:
    """Find documents under ``root`` matching any of ``patterns``.

    A ``root`` that is itself a file is returned as the only match.

    Returns:
        Sorted, de-duplicated list of files
    """
    root = Path(root)
    if root.is_file():
        return [root]
    found = {path for pattern in patterns for path in root.glob(pattern) if path.is_file()}
    return sorted(found)


def scan_file(path: str | Path, config: PatcherConfig | None = None) -> FileReport:
    """Parse one document without planning or writing anything.

    The report carries records only; ``ops`` stays empty and ``result`` None.
    """
    path = Path(path)
    config = config or PatcherConfig()
    report = FileReport(path=path)
    try:
        report.original, report.records = parse_file(path, config.effective_tags)
    except ParseNodeError as e:
        logger.debug("Failed to scan %s: %s", path, e)
        report.error = e
    return report


def process_file(
    path: str | Path,
    config: PatcherConfig | None = None,
    *,
    apply: bool = False,
    out_path: str | Path | None = None,
) -> FileReport:
    """Parse, plan and (optionally) apply annotations for one document.

    Args:
        path: Document to process
        config: Run settings (defaults to ``PatcherConfig()``)
        apply: If False, nothing is written
        out_path: Destination for the patched document (default: in place)

    Returns:
        FileReport; ``error`` is set instead of raising for per-file failures
    """
    path = Path(path)
    config = config or PatcherConfig()
    report = FileReport(path=path)
    try:
        report.original = read_document(path)
        report.records = parse(report.original, str(path), config.effective_tags)
        report.ops = plan(
            report.original,
            report.records,
            prefix=config.prefix,
            unique_ids=config.unique_ids,
        )
        report.result = applier.apply(
            report.original,
            report.ops,
            source_path=path,
            dry_run=not apply,
            backup=config.backup,
            out_path=out_path,
            verify=config.verify,
        )
    except ParseNodeError as e:
        logger.debug("Failed to process %s: %s", path, e)
        report.error = e
    return report


def process_paths(
    paths: Iterable[str | Path],
    config: PatcherConfig | None = None,
    *,
    apply: bool = False,
) -> BatchReport:
    """Process several documents in place, isolating failures per file."""
    batch = BatchReport()
    for path in paths:
        batch.files.append(process_file(path, config, apply=apply))
    logger.debug("Processed batch: %s", batch)
    return batch
