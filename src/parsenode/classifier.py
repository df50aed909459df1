"""
Selection of the elements that still need an accessibility annotation.
"""

from collections.abc import Iterable

from .models.element import ElementRecord


def select_candidates(records: Iterable[ElementRecord]) -> list[ElementRecord]:
    """Return the records that have no accessibility annotation yet.

    Order is preserved. No other filtering is applied: every tracked element
    without the annotation is a candidate.
    """
    return [record for record in records if not record.has_annotation]


def partition(
    records: Iterable[ElementRecord],
) -> tuple[list[ElementRecord], list[ElementRecord]]:
    """Split records into (candidates, already annotated), preserving order."""
    candidates: list[ElementRecord] = []
    annotated: list[ElementRecord] = []
    for record in records:
        (annotated if record.has_annotation else candidates).append(record)
    return candidates, annotated
