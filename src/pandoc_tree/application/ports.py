"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from pandoc_tree.infrastructure.filesystem import FsTree
from pandoc_tree.manifest.options import ConverterOption


class DocumentConverter(Protocol):
    """Convert one source document into an in-memory output buffer."""

    def convert(
        self,
        source_path: Path,
        options: Sequence[ConverterOption],
    ) -> bytes:
        """Return the converter's full output; raise ``ConversionError`` on failure."""


class TreeWalker(Protocol):
    """Explore a content root into an ordered tree."""

    def __call__(self, root: Path) -> FsTree:
        """Return the tree rooted at ``root``."""
