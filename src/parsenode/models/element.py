"""
ElementRecord: one tracked UI element located in a document.
"""

from dataclasses import dataclass, field

from parsenode.constants import SEED_ATTRIBUTES


@dataclass(frozen=True)
class ElementRecord:
    """A tracked element with the exact byte offsets of its markup.

    Offsets always refer to the original, unmodified document and satisfy
    ``start_offset <= open_tag_end_offset <= close_tag_start_offset <= end_offset``.

    Attributes:
        tag: Element name (e.g., "button")
        attributes: Attribute name to value mapping from the open tag
        start_offset: Offset of the ``<`` that opens the element
        open_tag_end_offset: Offset just past the open tag's ``>`` or ``/>``
        close_tag_start_offset: Offset of ``</tag``; equal to
            ``open_tag_end_offset`` for a self-closing element
        end_offset: Offset just past the element's last byte
        start_line: 1-based line of ``start_offset``
        end_line: 1-based line of the element's last byte
        has_annotation: Whether an accessibility child is directly inside
        annotation_attributes: Attributes of that child, if present
    """

    tag: str
    attributes: dict[str, str] = field(compare=False)
    start_offset: int
    open_tag_end_offset: int
    close_tag_start_offset: int
    end_offset: int
    start_line: int
    end_line: int
    has_annotation: bool = False
    annotation_attributes: dict[str, str] | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not (
            self.start_offset
            <= self.open_tag_end_offset
            <= self.close_tag_start_offset
            <= self.end_offset
        ):
            raise ValueError(
                f"Inconsistent offsets for <{self.tag}>: {self.start_offset}, "
                f"{self.open_tag_end_offset}, {self.close_tag_start_offset}, {self.end_offset}"
            )

    @property
    def self_closing(self) -> bool:
        """Whether the element was written as ``<tag .../>``."""
        return self.close_tag_start_offset == self.end_offset == self.open_tag_end_offset

    @property
    def identifier_attribute(self) -> str | None:
        """Name of the first identifier-like attribute present, if any."""
        for name in SEED_ATTRIBUTES:
            if name in self.attributes:
                return name
        return None

    @property
    def has_identifier(self) -> bool:
        """Whether the element carries an id, user label or accessibility id."""
        return self.identifier_attribute is not None

    def __str__(self) -> str:
        return f"<{self.tag}> lines {self.start_line}-{self.end_line}"
