"""Application use-cases orchestrating a manifest build."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from pandoc_tree.adapters.converters import PandocConverter
from pandoc_tree.application.options import (
    BuildConfig,
    CompileFromPath,
    ContentElement,
    Special,
)
from pandoc_tree.application.ports import DocumentConverter, TreeWalker
from pandoc_tree.application.results import BuildResult
from pandoc_tree.errors import ManifestParseError
from pandoc_tree.infrastructure.filesystem import FsTree, walk_tree
from pandoc_tree.manifest.options import ConverterOption
from pandoc_tree.pipeline.assembly import assemble
from pandoc_tree.pipeline.dispatch import convert_all
from pandoc_tree.schemas import ManifestSchema

logger = logging.getLogger(__name__)


def build_config(
    *,
    mod_name: str,
    tree_name: str,
    content: Sequence[ContentElement],
    options: Sequence[ConverterOption] = (),
    nproc: int = 1,
) -> BuildConfig:
    """Build a validated configuration from already-typed values."""
    elements: list[dict[str, str | None]] = []
    for element in content:
        if isinstance(element, Special):
            elements.append({"element": "special", "ty": element.kind})
        else:
            elements.append(
                {
                    "element": "compile_from_path",
                    "path": element.path,
                    "route": element.route,
                }
            )
    try:
        schema = ManifestSchema(
            mod_name=mod_name,
            tree_name=tree_name,
            content=elements,
            options=list(options),
            nproc=nproc,
        )
    except ValidationError as exc:
        raise ManifestParseError(f"Invalid build configuration: {exc}") from exc
    return schema.to_config()


def resolve_content_path(path: str, base_dir: Path | None = None) -> Path:
    """Resolve a manifest path against ``base_dir`` unless it is absolute."""
    candidate = Path(path)
    if base_dir is None or candidate.is_absolute():
        return candidate
    return base_dir / candidate


def explore_content(
    elements: Sequence[CompileFromPath],
    *,
    base_dir: Path | None = None,
    walker: TreeWalker | None = None,
) -> list[FsTree]:
    """Explore every ``compile_from_path`` element, in manifest order."""
    walker = walker or walk_tree
    trees: list[FsTree] = []
    for element in elements:
        root = resolve_content_path(element.path, base_dir)
        logger.info("Exploring %s", root)
        trees.append(walker(root))
    return trees


def build_content_tree(
    config: BuildConfig,
    *,
    base_dir: Path | None = None,
    converter: DocumentConverter | None = None,
    walker: TreeWalker | None = None,
    nproc: int | None = None,
) -> BuildResult:
    """Use-case: explore, convert and assemble the configured content.

    Parameters
    ----------
    config : BuildConfig
        Parsed manifest.
    base_dir : Path | None, default=None
        Directory that relative content paths are resolved against. Made
        absolute; defaults to the current directory.
    converter : DocumentConverter | None, default=None
        Converter port; defaults to :class:`PandocConverter`.
    walker : TreeWalker | None, default=None
        Filesystem explorer; defaults to :func:`walk_tree`.
    nproc : int | None, default=None
        Overrides ``config.nproc`` when given.

    Returns
    -------
    BuildResult
        Assembled artifact with the manifest's identifiers.
    """
    converter = converter or PandocConverter()
    # source paths are absolute; the converter may run with its own cwd
    root = (base_dir if base_dir is not None else Path()).absolute()
    trees = explore_content(config.compile_elements(), base_dir=root, walker=walker)
    sources = [path for tree in trees for path in tree.files()]
    results = convert_all(
        sources,
        config.converter_options,
        converter,
        nproc=nproc if nproc is not None else config.nproc,
    )
    tree = assemble(config.content, trees, results)
    document_count = sum(1 for _ in tree.documents())
    logger.info("Assembled %s with %d documents", config.tree_name, document_count)
    return BuildResult(
        mod_name=config.mod_name,
        tree_name=config.tree_name,
        tree=tree,
        document_count=document_count,
    )
