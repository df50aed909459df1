"""
Tag tracker: locates tracked UI elements and their exact byte offsets.

The tracker consumes the span events of a ``TagSpanProvider`` and keeps a
stack of open elements. Each close event pops the stack; tracked tags are
finalized into ``ElementRecord`` objects. All state is local to one
``parse()`` call, so documents can be processed independently.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path

from .constants import ANNOTATION_TAG, TRACKED_TAGS
from .errors import DocumentIOError
from .models.element import ElementRecord
from .positions import LineIndex
from .spans import ExpatSpanProvider, SpanKind, TagSpanProvider

logger = logging.getLogger(__name__)


@dataclass
class _OpenElement:
    """An element whose end tag has not been seen yet."""

    tag: str
    attributes: dict[str, str]
    start_offset: int
    open_tag_end_offset: int
    has_annotation: bool = False
    annotation_attributes: dict[str, str] | None = None


def parse(
    buffer: bytes | str,
    identity: str = "<buffer>",
    tracked_tags: Collection[str] = TRACKED_TAGS,
    provider: TagSpanProvider | None = None,
) -> list[ElementRecord]:
    """Parse a document and return a record for every tracked element.

    An element counts as annotated only when an ``<accessibility>`` element
    is its direct child; deeper descendants do not count.

    Args:
        buffer: Document bytes (``str`` input is encoded as UTF-8)
        identity: Name used in error messages, usually the file path
        tracked_tags: Element names to report
        provider: Source of tag spans (defaults to ``ExpatSpanProvider``)

    Returns:
        Records sorted by ``start_offset``

    Raises:
        ParseError: If the document is malformed. No records are returned.

    Example:
        >>> records = parse(b'<view><button id="ok"></button></view>')
        >>> [(r.tag, r.has_annotation) for r in records]
        [('view', False), ('button', False)]
    """
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    provider = provider or ExpatSpanProvider()

    spans = provider.spans(buffer, identity)
    lines = LineIndex(buffer)
    stack: list[_OpenElement] = []
    records: list[ElementRecord] = []

    for span in spans:
        if span.kind is SpanKind.OPEN:
            if span.name == ANNOTATION_TAG and stack:
                parent = stack[-1]
                parent.has_annotation = True
                parent.annotation_attributes = dict(span.attributes)
            stack.append(_OpenElement(span.name, span.attributes, span.start, span.end))
            continue

        entry = stack.pop()
        if entry.tag not in tracked_tags:
            continue
        records.append(
            ElementRecord(
                tag=entry.tag,
                attributes=entry.attributes,
                start_offset=entry.start_offset,
                open_tag_end_offset=entry.open_tag_end_offset,
                close_tag_start_offset=span.start,
                end_offset=span.end,
                start_line=lines.line_of(entry.start_offset),
                end_line=lines.line_of(max(span.end - 1, entry.start_offset)),
                has_annotation=entry.has_annotation,
                annotation_attributes=entry.annotation_attributes,
            )
        )

    # Records were collected in completion order (children before parents)
    records.sort(key=lambda record: record.start_offset)
    logger.debug("Parsed %s: %d tracked elements", identity, len(records))
    return records


def read_document(path: str | Path) -> bytes:
    """Read a document's raw bytes.

    Raises:
        DocumentIOError: If the file cannot be read
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as e:
        raise DocumentIOError(path, e.strerror or str(e)) from e


def parse_file(
    path: str | Path,
    tracked_tags: Collection[str] = TRACKED_TAGS,
) -> tuple[bytes, list[ElementRecord]]:
    """Read and parse a document file.

    Args:
        path: Path to a .storyboard or .xib file
        tracked_tags: Element names to report

    Returns:
        Tuple of (raw bytes, records). The bytes are returned so callers can
        plan and apply against exactly the buffer that was parsed.

    Raises:
        DocumentIOError: If the file cannot be read
        ParseError: If the document is malformed
    """
    buffer = read_document(path)
    return buffer, parse(buffer, str(path), tracked_tags)
