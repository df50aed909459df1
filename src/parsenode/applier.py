"""
Patch application: splice planned insertions into a buffer and persist it.

Offsets in every ``PatchOp`` refer to the original buffer. ``splice`` applies
them from the highest offset down, so no offset ever has to be adjusted for
text inserted before it.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

from lxml import etree

from .constants import BACKUP_SUFFIX
from .errors import DocumentIOError, PatchVerificationError
from .models.patch import PatchOp
from .results import ApplyResult

logger = logging.getLogger(__name__)


def splice(buffer: bytes, ops: Sequence[PatchOp]) -> bytes:
    """Return ``buffer`` with every operation applied.

    Operations with equal offsets land in the order they are given.

    Args:
        buffer: The original document bytes
        ops: Operations planned against ``buffer``

    Returns:
        The patched bytes; identical to ``buffer`` when ``ops`` is empty

    Raises:
        ValueError: If an operation falls outside the buffer or two
            operations overlap
    """
    ordered = sorted(ops, key=lambda op: op.insert_offset)
    _check_ops(buffer, ordered)

    patched = bytearray(buffer)
    # Highest offset first: a splice only moves bytes at or after its own
    # offset, so every offset still pending keeps its original meaning.
    # Ascending order would corrupt the output without raising anything.
    for op in reversed(ordered):
        patched[op.insert_offset : op.end_offset] = op.insert_text
    return bytes(patched)


def _check_ops(buffer: bytes, ordered: Sequence[PatchOp]) -> None:
    previous_end = 0
    for op in ordered:
        if op.insert_offset < 0 or op.end_offset > len(buffer):
            raise ValueError(
                f"Patch offset {op.insert_offset} is outside a buffer of {len(buffer)} bytes"
            )
        if op.insert_offset < previous_end:
            raise ValueError(f"Patch at offset {op.insert_offset} overlaps a previous patch")
        previous_end = op.end_offset


def verify_well_formed(buffer: bytes, identity: str) -> None:
    """Check that a patched buffer still parses as XML.

    Raises:
        PatchVerificationError: If lxml rejects the buffer
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        etree.fromstring(buffer, parser)
    except etree.XMLSyntaxError as e:
        raise PatchVerificationError(identity, str(e)) from e


def backup_path_for(path: str | Path) -> Path:
    """Return the backup location for a document (``<path>.bak``)."""
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def apply(
    buffer: bytes,
    ops: Sequence[PatchOp],
    *,
    source_path: str | Path | None = None,
    dry_run: bool = True,
    backup: bool = True,
    out_path: str | Path | None = None,
    verify: bool = True,
) -> ApplyResult:
    """Apply operations to a buffer and optionally write the result.

    Nothing is written in dry-run mode, when ``ops`` is empty, or when
    verification fails. Writes go through a temporary file in the target
    directory, so the destination holds either the full patched buffer or
    its previous contents.

    Args:
        buffer: The original document bytes
        ops: Operations planned against ``buffer``
        source_path: Path the buffer was read from
        dry_run: If True, compute the patched buffer but write nothing
        backup: If True (and not a dry run), save the original to
            ``<source_path>.bak`` before writing
        out_path: Destination for the patched buffer (default: source_path)
        verify: If True, re-parse the patched buffer before writing

    Returns:
        ApplyResult describing what was applied and written

    Raises:
        PatchVerificationError: If the patched buffer is not well-formed
        DocumentIOError: If the backup or output cannot be written
        ValueError: If writing is requested without any destination
    """
    if not ops:
        logger.debug("No patch operations for %s", source_path or "<buffer>")
        return ApplyResult(applied_count=0, patched=buffer, dry_run=dry_run)

    identity = str(source_path or out_path or "<buffer>")
    patched = splice(buffer, ops)
    if verify:
        verify_well_formed(patched, identity)

    if dry_run:
        return ApplyResult(applied_count=len(ops), patched=patched, dry_run=True)

    if out_path is None and source_path is None:
        raise ValueError("Writing a patched buffer requires source_path or out_path")
    target = Path(out_path if out_path is not None else source_path)

    written_backup = None
    if backup and source_path is not None:
        written_backup = backup_path_for(source_path)
        write_atomic(written_backup, buffer)
        logger.debug("Wrote backup %s", written_backup)

    write_atomic(target, patched)
    logger.debug("Wrote %d insertions to %s", len(ops), target)
    return ApplyResult(
        applied_count=len(ops),
        patched=patched,
        dry_run=False,
        backup_path=written_backup,
        out_path=target,
    )


def write_atomic(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` in one step.

    Raises:
        DocumentIOError: If the file cannot be written
    """
    path = Path(path)
    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            temp_name = handle.name
            handle.write(data)
        if path.exists():
            shutil.copymode(path, temp_name)
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
        raise DocumentIOError(path, e.strerror or str(e)) from e
