"""Suite markers by directory and skipping of pandoc-bound tests."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

SUITE_MARKERS = {
    "unit_tests": "unit",
    "integration_tests": "integration",
    "e2e_tests": "e2e",
}


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each test with its suite and skip ``pandoc`` tests without pandoc."""
    del config
    skip_pandoc = (
        pytest.mark.skip(reason="pandoc is not installed")
        if shutil.which("pandoc") is None
        else None
    )
    for item in items:
        for part in Path(str(item.path)).parts:
            if part in SUITE_MARKERS:
                item.add_marker(SUITE_MARKERS[part])
                break
        if skip_pandoc is not None and item.get_closest_marker("pandoc"):
            item.add_marker(skip_pandoc)
