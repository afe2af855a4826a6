"""Application-layer result objects."""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pandoc_tree.content import Directory

ResultMap: TypeAlias = Mapping[Path, bytes]


@dataclass(frozen=True)
class BuildResult:
    """Structured build outcome handed to serializers."""

    mod_name: str
    tree_name: str
    tree: Directory
    document_count: int
