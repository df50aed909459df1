"""
Result classes for patch application and batch processing.

These types track what happened to each document so the CLI and report
writers can describe it without re-running anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .models.element import ElementRecord
from .models.patch import PatchOp


@dataclass
class ApplyResult:
    """Result of applying patch operations to one buffer.

    Attributes:
        applied_count: Number of operations spliced in
        patched: The patched buffer (the original when nothing applied)
        dry_run: Whether writing was skipped
        backup_path: Where the original bytes were saved, if they were
        out_path: Where the patched bytes were written, if they were
    """

    applied_count: int
    patched: bytes = field(repr=False)
    dry_run: bool = True
    backup_path: Path | None = None
    out_path: Path | None = None

    @property
    def written(self) -> bool:
        """Whether the patched buffer was written to disk."""
        return self.out_path is not None

    def __str__(self) -> str:
        if self.applied_count == 0:
            return "No changes"
        noun = "annotation" if self.applied_count == 1 else "annotations"
        if not self.written:
            return f"Would insert {self.applied_count} {noun} (dry run)"
        return f"Inserted {self.applied_count} {noun} into {self.out_path}"


@dataclass
class FileReport:
    """Outcome of processing a single document.

    Attributes:
        path: The document that was processed
        records: Tracked elements found in it
        ops: Planned insertions
        result: Result of applying the insertions, if planning succeeded
        original: The bytes that were parsed
        error: The per-file error, if processing failed
    """

    path: Path
    records: list[ElementRecord] = field(default_factory=list)
    ops: list[PatchOp] = field(default_factory=list)
    result: ApplyResult | None = None
    original: bytes = field(default=b"", repr=False)
    error: Exception | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def annotated(self) -> list[ElementRecord]:
        """Records that already carried an annotation."""
        return [record for record in self.records if record.has_annotation]

    @property
    def applied_count(self) -> int:
        return self.result.applied_count if self.result else 0

    def __str__(self) -> str:
        if self.error is not None:
            return f"✗ {self.path}: {self.error}"
        return (
            f"{self.path}: found {len(self.records)} tracked elements; "
            f"planned ops: {len(self.ops)}"
        )


@dataclass
class BatchReport:
    """Outcome of processing several documents."""

    files: list[FileReport] = field(default_factory=list)

    @property
    def succeeded(self) -> list[FileReport]:
        return [report for report in self.files if report.success]

    @property
    def failed(self) -> list[FileReport]:
        return [report for report in self.files if not report.success]

    @property
    def total_planned(self) -> int:
        return sum(len(report.ops) for report in self.files)

    @property
    def total_applied(self) -> int:
        return sum(report.applied_count for report in self.files)

    def __str__(self) -> str:
        msg = f"{len(self.files)} file{'s' if len(self.files) != 1 else ''}, "
        msg += f"{self.total_planned} planned insertion{'s' if self.total_planned != 1 else ''}"
        if self.failed:
            msg += f", {len(self.failed)} failed"
        return msg
