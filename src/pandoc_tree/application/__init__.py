"""Application-layer use-cases and configuration objects."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pandoc_tree.application.options import (
    BuildConfig,
    CompileFromPath,
    ContentElement,
    PandocSettings,
    Special,
)
from pandoc_tree.application.ports import DocumentConverter, TreeWalker
from pandoc_tree.application.results import BuildResult
from pandoc_tree.manifest.options import ConverterOption


def build_config(
    *,
    mod_name: str,
    tree_name: str,
    content: Sequence[ContentElement],
    options: Sequence[ConverterOption] = (),
    nproc: int = 1,
) -> BuildConfig:
    """Build typed configuration via lazy use-case import."""
    from pandoc_tree.application.use_cases import build_config as _impl

    return _impl(
        mod_name=mod_name,
        tree_name=tree_name,
        content=content,
        options=options,
        nproc=nproc,
    )


def build_content_tree(
    config: BuildConfig,
    *,
    base_dir: Path | None = None,
    converter: DocumentConverter | None = None,
    walker: TreeWalker | None = None,
    nproc: int | None = None,
) -> BuildResult:
    """Run a manifest build via lazy use-case import."""
    from pandoc_tree.application.use_cases import build_content_tree as _impl

    return _impl(
        config,
        base_dir=base_dir,
        converter=converter,
        walker=walker,
        nproc=nproc,
    )


__all__ = [
    "BuildConfig",
    "BuildResult",
    "CompileFromPath",
    "PandocSettings",
    "Special",
    "build_config",
    "build_content_tree",
]
