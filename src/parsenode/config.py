"""
Configuration for batch patching runs.

Settings live in a ``PatcherConfig`` dataclass. They can be loaded from a
YAML file and then overridden by command-line flags:

    tracked_tags: [button, label, textField]
    allowlist: button,label
    prefix: myapp
    patterns: ["**/*.storyboard", "**/*.xib"]
    backup: true
    unique_ids: false
    verify: true
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .constants import DOCUMENT_PATTERNS, TRACKED_TAGS
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatcherConfig:
    """Settings shared by every file in a run.

    Attributes:
        tracked_tags: Element names that are eligible for annotation
        allowlist: If set, replaces ``tracked_tags`` for this run
        prefix: Project-wide identifier prefix
        patterns: Glob patterns used to discover documents
        backup: Write ``<file>.bak`` before overwriting a document
        unique_ids: Disambiguate repeated identifiers within a document
        verify: Re-parse patched output before writing it
    """

    tracked_tags: frozenset[str] = TRACKED_TAGS
    allowlist: frozenset[str] | None = None
    prefix: str = ""
    patterns: tuple[str, ...] = DOCUMENT_PATTERNS
    backup: bool = True
    unique_ids: bool = False
    verify: bool = True

    @property
    def effective_tags(self) -> frozenset[str]:
        """The tag vocabulary actually used for tracking."""
        return self.allowlist if self.allowlist else self.tracked_tags

    def merged(self, **overrides: Any) -> PatcherConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes) if changes else self

    @classmethod
    def from_mapping(cls, data: dict[str, Any], source: str | Path | None = None) -> PatcherConfig:
        """Build a config from a parsed YAML/JSON mapping.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}", source)

        values: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in ("tracked_tags", "allowlist"):
                tags = _as_tag_set(key, value, source)
                if tags is None and key == "tracked_tags":
                    raise ConfigError("'tracked_tags' must not be empty", source)
                values[key] = tags
            elif key == "patterns":
                values[key] = tuple(_as_string_list(key, value, source))
            elif key == "prefix":
                if not isinstance(value, str):
                    raise ConfigError("'prefix' must be a string", source)
                values[key] = value
            elif not isinstance(value, bool):
                raise ConfigError(f"'{key}' must be true or false", source)
            else:
                values[key] = value
        return cls(**values)


def parse_csv(value: str | None) -> frozenset[str] | None:
    """Split a comma-separated tag list; empty input means "not set"."""
    if not value:
        return None
    tags = frozenset(part.strip() for part in value.split(",") if part.strip())
    return tags or None


def _as_string_list(key: str, value: Any, source: str | Path | None) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise ConfigError(f"'{key}' must be a list of strings", source)


def _as_tag_set(key: str, value: Any, source: str | Path | None) -> frozenset[str] | None:
    tags = frozenset(_as_string_list(key, value, source))
    return tags or None


def load_config(path: str | Path | None = None) -> PatcherConfig:
    """Load configuration from a YAML file.

    Args:
        path: YAML file to read; None returns the defaults

    Returns:
        The loaded PatcherConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is None:
        return PatcherConfig()

    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration: {e.strerror or e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping", path)

    logger.debug("Loaded configuration from %s", path)
    return PatcherConfig.from_mapping(data, path)
