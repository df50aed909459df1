"""
Tag span providers: exact byte spans for every start and end tag.

The tracker never searches the buffer for tag boundaries itself. It asks a
``TagSpanProvider`` for an ordered list of ``TagSpan`` events and only keeps
the nesting state. ``ExpatSpanProvider`` is the shipped implementation: expat
reports ``CurrentByteIndex`` as the exact offset of the ``<`` that begins each
tag, and the end of an open tag is found by a quote-aware forward scan from
that ``<``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
from xml.parsers import expat

from .errors import ParseError

logger = logging.getLogger(__name__)

# Everything up to the first ">" that is not inside a quoted attribute value
_OPEN_TAG_RE = re.compile(rb"""<(?:[^>"']|"[^"]*"|'[^']*')*>""")


class SpanKind(Enum):
    """Whether a span is a start tag or the end of an element."""

    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class TagSpan:
    """One start or end event with its exact byte span.

    For ``OPEN`` events ``start`` is the offset of ``<`` and ``end`` is one
    past the closing ``>`` (or ``/>``). For ``CLOSE`` events ``start`` is the
    offset of ``</name`` and ``end`` one past its ``>``; a self-closing
    element has no separate close construct, so its ``CLOSE`` span is empty
    and sits at the open tag's end.
    """

    kind: SpanKind
    name: str
    start: int
    end: int
    self_closing: bool = False
    attributes: dict[str, str] = field(default_factory=dict)


class TagSpanProvider(Protocol):
    """Capability that turns a document into ordered ``TagSpan`` events."""

    def spans(self, buffer: bytes, identity: str) -> list[TagSpan]:
        """Tokenize ``buffer`` and return its tag spans in document order.

        Raises:
            ParseError: If the document is not well-formed
        """
        ...


class ExpatSpanProvider:
    """``TagSpanProvider`` backed by the expat tokenizer.

    Namespace processing is off, so prefixed names are reported verbatim.
    Offsets are byte offsets into the buffer as given, which means documents
    must use an ASCII-compatible encoding (UTF-8 in practice).
    """

    def spans(self, buffer: bytes, identity: str) -> list[TagSpan]:
        """Tokenize ``buffer`` and return its tag spans in document order.

        Args:
            buffer: Raw document bytes
            identity: Name of the document, used in error messages

        Returns:
            Start and end spans, in the order the tokenizer reported them

        Raises:
            ParseError: If expat rejects the document
        """
        parser = expat.ParserCreate()
        events: list[TagSpan] = []
        open_tags: list[TagSpan] = []

        def on_start(name: str, attributes: dict[str, str]) -> None:
            start = parser.CurrentByteIndex
            match = _OPEN_TAG_RE.match(buffer, start)
            if match is None:
                line = parser.CurrentLineNumber
                raise ParseError(identity, f"cannot find end of <{name}> tag", line)
            end = match.end()
            span = TagSpan(
                kind=SpanKind.OPEN,
                name=name,
                start=start,
                end=end,
                self_closing=buffer[end - 2 : end] == b"/>",
                attributes=dict(attributes),
            )
            open_tags.append(span)
            events.append(span)

        def on_end(name: str) -> None:
            opener = open_tags.pop()
            # A self-closing element must be settled before looking for "</name":
            # the nearest one belongs to some other, earlier element.
            if opener.self_closing:
                events.append(TagSpan(SpanKind.CLOSE, name, opener.end, opener.end, True))
                return
            start = parser.CurrentByteIndex
            end = buffer.find(b">", start) + 1
            events.append(TagSpan(SpanKind.CLOSE, name, start, end))

        parser.StartElementHandler = on_start
        parser.EndElementHandler = on_end

        try:
            parser.Parse(buffer, True)
        except expat.ExpatError as e:
            raise ParseError(identity, expat.ErrorString(e.code), e.lineno, e.offset) from e

        logger.debug("Tokenized %s: %d tag spans", identity, len(events))
        return events
