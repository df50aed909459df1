"""
Export of processing results as JSON reports and unified diffs.
"""

from __future__ import annotations

import difflib
import json
from pathlib import Path
from typing import Any

from .applier import write_atomic
from .models.element import ElementRecord
from .results import BatchReport, FileReport


def record_to_dict(record: ElementRecord) -> dict[str, Any]:
    """Serialize the reporting fields of a record."""
    return {
        "tag": record.tag,
        "startLine": record.start_line,
        "endLine": record.end_line,
        "hasIdentifier": record.has_identifier,
        "hasAnnotation": record.has_annotation,
    }


def file_report_to_dict(report: FileReport) -> dict[str, Any]:
    """Serialize one file's outcome."""
    data: dict[str, Any] = {"file": str(report.path)}
    if report.error is not None:
        data["error"] = str(report.error)
        return data

    data["tracked"] = len(report.records)
    data["annotated"] = len(report.annotated)
    data["ops"] = [
        {
            "tag": op.source_record.tag,
            "startLine": op.source_record.start_line,
            "endLine": op.source_record.end_line,
            "insertOffset": op.insert_offset,
            "text": op.text.strip(),
        }
        for op in report.ops
    ]
    data["applied"] = report.applied_count
    if report.result is not None:
        data["backupPath"] = str(report.result.backup_path) if report.result.backup_path else None
        data["outPath"] = str(report.result.out_path) if report.result.out_path else None
    return data


def report_to_dict(batch: BatchReport) -> dict[str, Any]:
    """Serialize a batch with a summary block."""
    return {
        "files": [file_report_to_dict(report) for report in batch.files],
        "summary": {
            "files": len(batch.files),
            "failed": len(batch.failed),
            "planned": batch.total_planned,
            "applied": batch.total_applied,
        },
    }


def write_json_report(batch: BatchReport, path: str | Path) -> Path:
    """Write the batch report as indented JSON and return its path."""
    path = Path(path)
    write_atomic(path, json.dumps(report_to_dict(batch), indent=2).encode("utf-8"))
    return path


def unified_diff(original: bytes, patched: bytes, path: str | Path) -> str:
    """Return a unified diff between the original and patched document."""
    diff = difflib.unified_diff(
        original.decode("utf-8", errors="replace").splitlines(keepends=True),
        patched.decode("utf-8", errors="replace").splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
    )
    return "".join(diff)
