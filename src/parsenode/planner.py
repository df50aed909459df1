"""
Patch planning: where each missing annotation goes and what text to insert.

Every ``PatchOp`` is expressed against the original buffer. The planner never
looks at a partially patched document; ``applier.splice`` relies on that.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable

from .classifier import select_candidates
from .constants import INDENT_UNIT
from .identifiers import build_annotation, make_identifier, seed_for
from .models.element import ElementRecord
from .models.patch import PatchOp
from .positions import detect_newline, line_indent, newline_styles

logger = logging.getLogger(__name__)


def plan(
    buffer: bytes,
    records: Iterable[ElementRecord],
    *,
    prefix: str = "",
    unique_ids: bool = False,
    id_callback: Callable[[ElementRecord], str] | None = None,
    newline: bytes | None = None,
) -> list[PatchOp]:
    """Plan one insertion for every record that lacks an annotation.

    Container elements get the annotation right before their close tag. The
    annotation takes over the close tag's indentation and the close tag moves
    to the next line, keeping its own indentation:

        <button id="ok">            <button id="ok">
            <rect .../>      ->         <rect .../>
        </button>                   <accessibility .../>
                                    </button>

    Self-closing elements are expanded: their ``/>`` is replaced so the
    element becomes a container holding the annotation:

        <imageView id="img"/>  ->   <imageView id="img">
                                        <accessibility .../>
                                    </imageView>

    Args:
        buffer: The original document bytes the records were parsed from
        records: Records from ``tracker.parse``
        prefix: Project-wide identifier prefix
        unique_ids: Append ``_2``, ``_3``... to identifiers repeated within
            this document
        id_callback: Overrides identifier generation when given
        newline: Line terminator to use (detected from the document if None)

    Returns:
        Operations sorted by ``insert_offset``
    """
    if newline is None:
        newline = detect_newline(buffer)
        if len(newline_styles(buffer)) > 1:
            logger.warning("Document mixes line terminators; inserting with %r", newline)

    candidates = select_candidates(records)
    identifiers = [
        id_callback(record)
        if id_callback
        else make_identifier(record.tag, seed_for(record), prefix)
        for record in candidates
    ]
    if unique_ids:
        identifiers = disambiguate(identifiers)

    ops = []
    for record, identifier in zip(candidates, identifiers):
        annotation = build_annotation(identifier).encode("utf-8")
        ops.append(_plan_record(buffer, record, annotation, newline))

    ops.sort(key=lambda op: op.insert_offset)
    logger.debug("Planned %d insertions for %d candidates", len(ops), len(candidates))
    return ops


def _plan_record(
    buffer: bytes,
    record: ElementRecord,
    annotation: bytes,
    newline: bytes,
) -> PatchOp:
    """Build the operation for a single element."""
    if not record.self_closing:
        indent = line_indent(buffer, record.close_tag_start_offset)
        return PatchOp(
            insert_offset=record.close_tag_start_offset,
            insert_text=annotation + newline + indent,
            source_record=record,
        )

    indent = line_indent(buffer, record.start_offset)
    child_indent = indent + (b"\t" if b"\t" in indent else INDENT_UNIT)
    close_tag = b"</" + record.tag.encode("utf-8") + b">"
    return PatchOp(
        insert_offset=record.open_tag_end_offset - 2,
        insert_text=b">" + newline + child_indent + annotation + newline + indent + close_tag,
        source_record=record,
        replace_length=2,
    )


def disambiguate(identifiers: list[str]) -> list[str]:
    """Make repeated identifiers unique by appending an occurrence number.

    The first occurrence keeps its identifier; later ones get ``_2``, ``_3``
    and so on, skipping any suffix that is already taken.

    Example:
        >>> disambiguate(["btn_noid", "lbl_x", "btn_noid", "btn_noid_2"])
        ['btn_noid', 'lbl_x', 'btn_noid_3', 'btn_noid_2']
    """
    taken = set(identifiers)
    seen: Counter[str] = Counter()
    result = []
    for identifier in identifiers:
        seen[identifier] += 1
        if seen[identifier] == 1:
            result.append(identifier)
            continue
        number = seen[identifier]
        while f"{identifier}_{number}" in taken:
            number += 1
        unique = f"{identifier}_{number}"
        taken.add(unique)
        result.append(unique)
    return result
