"""
PatchOp: one planned insertion into a document buffer.
"""

from dataclasses import dataclass

from parsenode.models.element import ElementRecord


@dataclass(frozen=True)
class PatchOp:
    """Text to splice into the original buffer.

    Attributes:
        insert_offset: Offset into the original, unpatched buffer
        insert_text: Bytes to insert at that offset
        source_record: The element this insertion annotates
        replace_length: Number of original bytes replaced, starting at
            ``insert_offset``. Zero for a pure insertion.
    """

    insert_offset: int
    insert_text: bytes
    source_record: ElementRecord
    replace_length: int = 0

    @property
    def end_offset(self) -> int:
        """Offset just past the original bytes this operation consumes."""
        return self.insert_offset + self.replace_length

    @property
    def text(self) -> str:
        """The inserted text, decoded for display."""
        return self.insert_text.decode("utf-8", errors="replace")
