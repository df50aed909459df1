"""
Custom exception classes for the parsenode package.

Every error raised by the parse, plan and apply pipeline is scoped to a
single document so that a batch driver can report it and move on to the
next file.
"""

from pathlib import Path


class ParseNodeError(Exception):
    """Base exception for all parsenode errors."""

    pass


class ParseError(ParseNodeError):
    """Raised when a document is not well-formed XML.

    Attributes:
        identity: Name of the document (usually its path)
        message: Diagnostic reported by the underlying tokenizer
        line: 1-based line of the failure, if known
        column: 0-based column of the failure, if known
    """

    def __init__(
        self,
        identity: str,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.identity = identity
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error with file identity and position."""
        msg = f"XML parse error in {self.identity}: {self.message}"
        if self.line is not None:
            msg += f" (line {self.line}"
            if self.column is not None:
                msg += f", column {self.column}"
            msg += ")"
        return msg


class DocumentIOError(ParseNodeError):
    """Raised when a document, backup or output file cannot be read or written.

    Attributes:
        path: The file that could not be accessed
        message: Description of the failure
    """

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        self.message = message
        super().__init__(f"Cannot access {self.path}: {message}")


class PatchVerificationError(ParseNodeError):
    """Raised when a patched buffer is no longer well-formed XML.

    Nothing is written to disk when this is raised.

    Attributes:
        identity: Name of the document being patched
        message: Diagnostic from the verifying parser
    """

    def __init__(self, identity: str, message: str) -> None:
        self.identity = identity
        self.message = message
        super().__init__(
            f"Patched output for {identity} is not well-formed: {message}\n\n"
            "No files were written."
        )


class ConfigError(ParseNodeError):
    """Raised when a configuration file cannot be loaded.

    Attributes:
        source: The configuration file, if one was involved
    """

    def __init__(self, message: str, source: str | Path | None = None) -> None:
        self.source = Path(source) if source is not None else None
        if self.source is not None:
            message = f"{self.source}: {message}"
        super().__init__(message)
