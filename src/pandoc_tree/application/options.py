"""Typed build configuration shared across pipeline stages."""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass, field
from pathlib import Path

from pandoc_tree.manifest.options import ConverterOption, to_flags


@dataclass(frozen=True)
class Special:
    """Opaque marker element not backed by a file."""

    kind: str


@dataclass(frozen=True)
class CompileFromPath:
    """Filesystem subtree to convert, with an optional routing label."""

    path: str
    route: str | None = None


ContentElement: TypeAlias = Special | CompileFromPath


@dataclass(frozen=True)
class BuildConfig:
    """Validated manifest contents."""

    mod_name: str
    tree_name: str
    content: tuple[ContentElement, ...]
    converter_options: tuple[ConverterOption, ...] = ()
    nproc: int = 1

    def compile_elements(self) -> tuple[CompileFromPath, ...]:
        """Return the elements that require filesystem exploration, in order."""
        return tuple(el for el in self.content if isinstance(el, CompileFromPath))

    def converter_flags(self) -> list[str]:
        """Render converter options as command-line flags."""
        return to_flags(self.converter_options)


@dataclass(frozen=True)
class PandocSettings:
    """How to launch the external converter."""

    executable: str = "pandoc"
    extra_env: dict[str, str] = field(default_factory=dict)
    cwd: Path | None = None
