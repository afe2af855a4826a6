"""Deterministic filesystem tree discovery."""

from __future__ import annotations

from typing import TypeAlias

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from pandoc_tree.errors import FilesystemError

logger = logging.getLogger(__name__)

ListDir: TypeAlias = Callable[[Path], Iterable[Path]]


@dataclass(frozen=True)
class FileNode:
    """Leaf node for a single source file."""

    path: Path

    @property
    def name(self) -> str:
        return node_name(self.path)

    def files(self) -> list[Path]:
        return [self.path]


@dataclass(frozen=True)
class DirectoryNode:
    """Directory node owning its sorted children."""

    path: Path
    children: tuple[FsTree, ...] = ()

    @property
    def name(self) -> str:
        return node_name(self.path)

    def files(self) -> list[Path]:
        """Return every file below this directory in tree order."""
        return list(self._iter_files())

    def _iter_files(self) -> Iterator[Path]:
        for child in self.children:
            if isinstance(child, DirectoryNode):
                yield from child._iter_files()
            else:
                yield child.path


FsTree: TypeAlias = FileNode | DirectoryNode


def node_name(path: Path) -> str:
    """Return the final path component used as a node name."""
    return path.name or path.resolve().name


def sort_key(path: Path) -> bytes:
    """Byte-lexicographic ordering key for sibling entries."""
    return os.fsencode(node_name(path))


def list_directory(path: Path) -> Iterable[Path]:
    """Enumerate directory entries in native order."""
    return path.iterdir()


def walk_tree(root: Path, *, list_dir: ListDir = list_directory) -> FsTree:
    """Explore ``root`` into an immutable, deterministically ordered tree.

    Parameters
    ----------
    root : Path
        File or directory to explore.
    list_dir : Callable[[Path], Iterable[Path]], optional
        Directory enumeration hook. Its output order does not affect the
        result.

    Returns
    -------
    FsTree
        ``FileNode`` when ``root`` is a file, otherwise a ``DirectoryNode``
        whose siblings are sorted by the bytes of their final component.

    Raises
    ------
    FilesystemError
        If ``root`` is missing, any directory cannot be enumerated, or a
        directory symlink leads back to one of its ancestors.
    """
    try:
        is_dir = root.is_dir()
        if not is_dir and not root.exists():
            raise FileNotFoundError(f"No such file or directory: '{root}'")
    except OSError as exc:
        raise FilesystemError(root, str(exc)) from exc

    if not is_dir:
        return FileNode(root)
    tree = _walk_directory(root, list_dir, frozenset())
    logger.debug("explored %s: %d files", root, len(tree.files()))
    return tree


def _walk_directory(
    directory: Path, list_dir: ListDir, ancestors: frozenset[tuple[int, int]]
) -> DirectoryNode:
    # ancestors holds (device, inode) of every directory on the current descent
    try:
        info = directory.stat()
        identity = (info.st_dev, info.st_ino)
        if identity in ancestors:
            raise FilesystemError(directory, "symlink cycle")
        entries = sorted(list_dir(directory), key=sort_key)
    except OSError as exc:
        raise FilesystemError(directory, str(exc)) from exc
    ancestors = ancestors | {identity}

    children: list[FsTree] = []
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError as exc:
            raise FilesystemError(entry, str(exc)) from exc
        if is_dir:
            children.append(_walk_directory(entry, list_dir, ancestors))
        else:
            children.append(FileNode(entry))
    return DirectoryNode(directory, tuple(children))
