"""
Centralized constants for storyboard element names and annotation markup.

This module consolidates the tag vocabulary, identifier prefixes and the
accessibility annotation template so the tracker, planner and CLI agree on
the same values. Import from here rather than redefining them.
"""

# =============================================================================
# Tracked Element Vocabulary
# =============================================================================

# Xcode storyboard/xib element names that are eligible for annotation
TRACKED_TAGS = frozenset(
    {
        "button",
        "label",
        "textField",
        "textView",
        "imageView",
        "switch",
        "slider",
        "stepper",
        "segmentedControl",
        "tableViewCell",
        "collectionViewCell",
        "view",
        "barButtonItem",
        "navigationItem",
        "navigationBar",
        "stackView",
        "tableView",
        "collectionView",
    }
)

# Child element that marks accessibility metadata as already present
ANNOTATION_TAG = "accessibility"

# Value of the annotation's ``key`` attribute
ANNOTATION_KEY = "accessibilityConfiguration"


# =============================================================================
# Identifier Generation
# =============================================================================

# Short identifier prefix per tracked tag
TAG_PREFIXES = {
    "button": "btn",
    "label": "lbl",
    "textField": "txt",
    "textView": "txtv",
    "imageView": "img",
    "switch": "swi",
    "slider": "sld",
    "stepper": "stp",
    "segmentedControl": "seg",
    "tableViewCell": "cell",
    "collectionViewCell": "ccell",
    "view": "view",
    "barButtonItem": "barbtn",
    "navigationItem": "navitem",
    "navigationBar": "navbar",
    "stackView": "stack",
    "tableView": "table",
    "collectionView": "collection",
}

# Prefix used for tags missing from TAG_PREFIXES
GENERIC_PREFIX = "el"

# Placeholder used when an element has nothing to seed its identifier
EMPTY_SEED_TOKEN = "noid"

# Attributes consulted, in order, for an identifier seed
SEED_ATTRIBUTES = ("id", "userLabel", "accessibilityIdentifier")


# =============================================================================
# Files and Formatting
# =============================================================================

# Glob patterns for documents discovered in batch mode
DOCUMENT_PATTERNS = ("**/*.storyboard", "**/*.xib")

# Suffix appended to the source path for backups
BACKUP_SUFFIX = ".bak"

# Line terminator used when a document has none to copy
DEFAULT_NEWLINE = b"\n"

# One indentation level for children created by self-closing expansion
INDENT_UNIT = b"    "
