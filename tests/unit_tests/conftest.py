"""Shared fixtures for pipeline tests."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from pandoc_tree.errors import ConversionError
from pandoc_tree.manifest.options import ConverterOption, to_flags


class FakeConverter:
    """In-process stand-in for pandoc.

    Output is ``<flags>|<file bytes upper-cased>`` so results depend on both
    the options and the source content.
    """

    def __init__(self, fail_on: Sequence[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls: list[Path] = []
        self.threads: set[str] = set()
        self._lock = threading.Lock()

    def convert(
        self,
        source_path: Path,
        options: Sequence[ConverterOption],
    ) -> bytes:
        with self._lock:
            self.calls.append(source_path)
            self.threads.add(threading.current_thread().name)
        if source_path.name in self.fail_on:
            raise ConversionError(source_path, "forced failure")
        flags = " ".join(to_flags(options)).encode()
        return flags + b"|" + source_path.read_bytes().upper()


@pytest.fixture
def fake_converter_factory() -> Callable[..., FakeConverter]:
    """Return a factory building fresh fake converters."""
    return FakeConverter


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create ``docs/`` with ``a.md`` and ``sub/b.md``."""
    docs = tmp_path / "docs"
    (docs / "sub").mkdir(parents=True)
    (docs / "a.md").write_text("alpha")
    (docs / "sub" / "b.md").write_text("beta")
    return docs
