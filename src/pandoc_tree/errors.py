"""Error taxonomy for manifest compilation."""

from __future__ import annotations

from pathlib import Path


class PandocTreeError(Exception):
    """Base class for all build failures."""

    exit_code = 1


class ManifestParseError(PandocTreeError):
    """Raised when manifest text is malformed or semantically invalid.

    Parameters
    ----------
    message : str
        Human-readable description of the problem.
    line : int | None, default=None
        1-based line of the offending token, when known.
    column : int | None, default=None
        1-based column of the offending token, when known.
    """

    exit_code = 2

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        if line is not None and column is not None:
            super().__init__(f"{message} (line {line}, column {column})")
        else:
            super().__init__(message)


class OptionNotSupportedError(ManifestParseError):
    """Raised for a known converter option the decoder cannot express yet."""


class FilesystemError(PandocTreeError):
    """Raised when a content path cannot be explored."""

    exit_code = 3

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"Failed to explore {path}: {message}")


class ConversionError(PandocTreeError):
    """Raised when the converter fails on a source document."""

    exit_code = 4

    def __init__(self, source_path: Path, message: str) -> None:
        self.source_path = source_path
        self.message = message
        super().__init__(f"Converter failed on {source_path}: {message}")


class InternalConsistencyError(PandocTreeError):
    """Raised when collected results do not cover the discovered files."""

    exit_code = 70
