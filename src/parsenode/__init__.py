"""
parsenode - Text-preserving accessibility annotation for Xcode storyboards.

This package finds UI elements in .storyboard and .xib files that have no
``<accessibility>`` child and inserts one at the exact byte position needed,
leaving every other byte of the document untouched.

Example:
    >>> from parsenode import apply, parse, plan
    >>> raw = open("Main.storyboard", "rb").read()
    >>> records = parse(raw, "Main.storyboard")
    >>> ops = plan(raw, records)
    >>> result = apply(raw, ops, source_path="Main.storyboard", dry_run=False)
"""

__version__ = "0.1.0"
__all__ = [
    "parse",
    "parse_file",
    "plan",
    "apply",
    "splice",
    "select_candidates",
    "make_identifier",
    "ElementRecord",
    "PatchOp",
    "ApplyResult",
    "FileReport",
    "BatchReport",
    "PatcherConfig",
    "load_config",
    "discover",
    "process_file",
    "process_paths",
    "TagSpan",
    "TagSpanProvider",
    "ExpatSpanProvider",
    "ParseNodeError",
    "ParseError",
    "DocumentIOError",
    "PatchVerificationError",
    "ConfigError",
]

# Import patch application
from .applier import apply, splice

# Import batch driver
from .batch import discover, process_file, process_paths

# Import candidate selection
from .classifier import select_candidates

# Import configuration
from .config import PatcherConfig, load_config
from .errors import (
    ConfigError,
    DocumentIOError,
    ParseError,
    ParseNodeError,
    PatchVerificationError,
)

# Import identifier generation
from .identifiers import make_identifier

# Import model classes
from .models import ElementRecord, PatchOp

# Import planning
from .planner import plan

# Import result types
from .results import ApplyResult, BatchReport, FileReport

# Import span providers
from .spans import ExpatSpanProvider, TagSpan, TagSpanProvider

# Import element tracking
from .tracker import parse, parse_file
