"""Unit tests for deterministic filesystem exploration."""

from __future__ import annotations

import os
import random
from collections.abc import Iterable
from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from pandoc_tree.errors import FilesystemError
from pandoc_tree.infrastructure.filesystem import (
    DirectoryNode,
    FileNode,
    list_directory,
    walk_tree,
)

NAMES = ["b.md", "C.md", "a.md", "_x.md", "Z", "ä.md", "10.md", "9.md"]


def _populate(root: Path) -> None:
    (root / "nested" / "deeper").mkdir(parents=True)
    for name in NAMES:
        (root / name).write_text(name)
    (root / "nested" / "z.md").write_text("z")
    (root / "nested" / "deeper" / "y.md").write_text("y")
    (root / "nested" / "a.md").write_text("a")


def _names(node: DirectoryNode) -> list[str]:
    return [child.name for child in node.children]


def test_file_root_yields_bare_file_node(tmp_path: Path) -> None:
    """Return the file itself without a wrapping directory."""
    target = tmp_path / "single.md"
    target.write_text("x")
    assert walk_tree(target) == FileNode(target)


def test_directory_children_sorted_bytewise(tmp_path: Path) -> None:
    """Sort siblings by the bytes of their final component."""
    _populate(tmp_path)
    tree = walk_tree(tmp_path)
    assert isinstance(tree, DirectoryNode)
    expected = sorted(NAMES + ["nested"], key=os.fsencode)
    assert _names(tree) == expected
    assert _names(tree)[:4] == ["10.md", "9.md", "C.md", "Z"]


def test_nested_directories_are_recursed(tmp_path: Path) -> None:
    """Recurse into subdirectories and list files in tree order."""
    _populate(tmp_path)
    tree = walk_tree(tmp_path / "nested")
    assert isinstance(tree, DirectoryNode)
    assert _names(tree) == ["a.md", "deeper", "z.md"]
    deeper = tree.children[1]
    assert isinstance(deeper, DirectoryNode)
    assert deeper.children == (FileNode(tmp_path / "nested" / "deeper" / "y.md"),)
    assert [path.name for path in tree.files()] == ["a.md", "y.md", "z.md"]


def test_empty_directory(tmp_path: Path) -> None:
    """Produce a directory node without children."""
    empty = tmp_path / "empty"
    empty.mkdir()
    assert walk_tree(empty) == DirectoryNode(empty, ())


def test_missing_root_raises(tmp_path: Path) -> None:
    """Abort with the offending path attached."""
    missing = tmp_path / "missing"
    with pytest.raises(FilesystemError) as info:
        walk_tree(missing)
    assert info.value.path == missing


def test_enumeration_failure_is_fatal(tmp_path: Path) -> None:
    """Wrap enumeration errors from any directory level."""
    _populate(tmp_path)
    broken = tmp_path / "nested" / "deeper"

    def failing_list(path: Path) -> Iterable[Path]:
        if path == broken:
            raise PermissionError("denied")
        return list_directory(path)

    with pytest.raises(FilesystemError, match="denied") as info:
        walk_tree(tmp_path, list_dir=failing_list)
    assert info.value.path == broken


@settings(
    max_examples=25,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
@given(seed=st.integers(min_value=0, max_value=2**32 - 1))
def test_ordering_independent_of_enumeration_order(tmp_path: Path, seed: int) -> None:
    """Produce identical trees across shuffled native enumeration orders."""
    root = tmp_path / "tree"
    if not root.exists():
        root.mkdir()
        _populate(root)
    rng = random.Random(seed)

    def shuffled(path: Path) -> list[Path]:
        entries = list(list_directory(path))
        rng.shuffle(entries)
        return entries

    assert walk_tree(root, list_dir=shuffled) == walk_tree(root)


def test_directory_symlink_cycle_is_rejected(tmp_path: Path) -> None:
    """Stop at a directory link that points back to an ancestor."""
    root = tmp_path / "docs"
    (root / "sub").mkdir(parents=True)
    (root / "a.md").write_text("a")
    loop = root / "sub" / "loop"
    try:
        loop.symlink_to(root, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")

    with pytest.raises(FilesystemError, match="symlink cycle") as info:
        walk_tree(root)
    assert info.value.path == loop


def test_sibling_links_to_same_directory_are_allowed(tmp_path: Path) -> None:
    """Only links into the current descent count as cycles."""
    shared = tmp_path / "shared"
    shared.mkdir()
    (shared / "x.md").write_text("x")
    root = tmp_path / "docs"
    root.mkdir()
    try:
        (root / "one").symlink_to(shared, target_is_directory=True)
        (root / "two").symlink_to(shared, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")

    tree = walk_tree(root)
    assert tree.files() == [root / "one" / "x.md", root / "two" / "x.md"]
