"""Immutable content tree produced by a build."""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

ROOT_NAME = "ROOT"


@dataclass(frozen=True)
class Special:
    """Opaque marker node carried through from the manifest."""

    kind: str


@dataclass(frozen=True)
class Document:
    """Converted document.

    ``source_path`` records where the content came from; it is not part of
    the node's identity.
    """

    name: str
    content: bytes
    route: str | None = None
    source_path: Path | None = field(default=None, compare=False, repr=False)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass(frozen=True)
class Directory:
    """Directory node owning an ordered tuple of children."""

    name: str
    children: tuple[ContentTree, ...] = ()
    route: str | None = None

    def child(self, name: str) -> ContentTree:
        """Return the first direct child named ``name``.

        Raises
        ------
        KeyError
            If no child has that name.
        """
        for node in self.children:
            if not isinstance(node, Special) and node.name == name:
                return node
        raise KeyError(name)

    def documents(self) -> Iterator[Document]:
        """Yield every document below this directory in tree order."""
        for node in self.children:
            if isinstance(node, Document):
                yield node
            elif isinstance(node, Directory):
                yield from node.documents()


ContentTree: TypeAlias = Special | Document | Directory


def walk(
    tree: ContentTree, depth: int = 0
) -> Iterator[tuple[int, ContentTree]]:
    """Yield ``(depth, node)`` pairs in pre-order."""
    yield depth, tree
    if isinstance(tree, Directory):
        for node in tree.children:
            yield from walk(node, depth + 1)
