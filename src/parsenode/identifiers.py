"""
Deterministic accessibility identifiers and the annotation markup built from them.

Identifiers take the form ``<prefix>_<seed>`` where the prefix comes from the
element's tag and the seed from its id, user label or existing
accessibility identifier. The same inputs always produce the same output.
"""

import html
import re

from .constants import (
    ANNOTATION_KEY,
    ANNOTATION_TAG,
    EMPTY_SEED_TOKEN,
    GENERIC_PREFIX,
    SEED_ATTRIBUTES,
    TAG_PREFIXES,
)
from .models.element import ElementRecord

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_.:\-]")


def sanitize_seed(seed: str | None) -> str:
    """Make a seed safe for XML attributes and file names.

    Whitespace runs collapse to a single underscore and every character
    outside ``[A-Za-z0-9_.:-]`` becomes an underscore.

    Example:
        >>> sanitize_seed("Sign in  (main)")
        'Sign_in__main_'
        >>> sanitize_seed("")
        'noid'
    """
    if not seed:
        return EMPTY_SEED_TOKEN
    return _UNSAFE_CHARS_RE.sub("_", _WHITESPACE_RE.sub("_", seed))


def make_identifier(tag: str, seed: str | None = None, prefix: str = "") -> str:
    """Build the identifier for an element.

    Args:
        tag: Element name (e.g., "button")
        seed: Value to derive the identifier from; empty or None yields the
            placeholder token
        prefix: Optional project-wide prefix placed in front of everything

    Returns:
        Identifier such as ``btn_ok`` or ``myapp_btn_ok``
    """
    identifier = f"{TAG_PREFIXES.get(tag, GENERIC_PREFIX)}_{sanitize_seed(seed)}"
    if prefix:
        identifier = f"{sanitize_seed(prefix)}_{identifier}"
    return identifier


def seed_for(record: ElementRecord) -> str:
    """Pick the identifier seed for a record.

    The first of ``id``, ``userLabel`` and ``accessibilityIdentifier`` that
    is present wins, even when its value is empty.
    """
    for name in SEED_ATTRIBUTES:
        value = record.attributes.get(name)
        if value is not None:
            return value
    return ""


def build_annotation(identifier: str) -> str:
    """Return the self-closing accessibility element for ``identifier``."""
    value = html.escape(identifier, quote=True)
    return (
        f'<{ANNOTATION_TAG} key="{ANNOTATION_KEY}" identifier="{value}" label="{value}"/>'
    )
