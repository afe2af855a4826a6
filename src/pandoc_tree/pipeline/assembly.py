"""Merge explored trees and conversion results into the content tree."""

from __future__ import annotations

from collections.abc import Sequence

from pandoc_tree import content
from pandoc_tree.application.options import ContentElement, Special
from pandoc_tree.application.results import ResultMap
from pandoc_tree.errors import InternalConsistencyError
from pandoc_tree.infrastructure.filesystem import FileNode, FsTree


def translate(
    tree: FsTree,
    results: ResultMap,
    route: str | None = None,
) -> content.Document | content.Directory:
    """Translate one explored tree; only its top node receives ``route``."""
    if isinstance(tree, FileNode):
        try:
            payload = results[tree.path]
        except KeyError:
            raise InternalConsistencyError(
                f"No conversion result for discovered file {tree.path}"
            ) from None
        return content.Document(
            name=tree.name, content=payload, route=route, source_path=tree.path
        )
    return content.Directory(
        name=tree.name,
        children=tuple(translate(child, results) for child in tree.children),
        route=route,
    )


def assemble(
    elements: Sequence[ContentElement],
    trees: Sequence[FsTree],
    results: ResultMap,
) -> content.Directory:
    """Build the root directory from manifest elements, trees and results.

    Parameters
    ----------
    elements : Sequence[ContentElement]
        Manifest content list, in order.
    trees : Sequence[FsTree]
        One explored tree per ``CompileFromPath`` element, in the same order.
    results : Mapping[Path, bytes]
        Completed result table.

    Returns
    -------
    content.Directory
        Root node named ``ROOT`` with one child per element.

    Raises
    ------
    InternalConsistencyError
        If a discovered file has no result, or trees and elements disagree.
    """
    remaining = iter(trees)
    children: list[content.ContentTree] = []
    for element in elements:
        if isinstance(element, Special):
            children.append(content.Special(kind=element.kind))
            continue
        tree = next(remaining, None)
        if tree is None:
            raise InternalConsistencyError(
                f"No explored tree for content path {element.path!r}"
            )
        children.append(translate(tree, results, element.route))

    if next(remaining, None) is not None:
        raise InternalConsistencyError(
            "More explored trees than compile_from_path elements"
        )
    return content.Directory(name=content.ROOT_NAME, children=tuple(children))
