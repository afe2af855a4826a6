"""End-to-end smoke test for CLI help output."""

from __future__ import annotations

import shutil
import subprocess

import pytest

import pandoc_tree

pytestmark = pytest.mark.skipif(
    shutil.which("pandoc-tree") is None, reason="console script is not installed"
)


def test_package_import_smoke() -> None:
    """Ensure package can be imported in the test process."""
    assert pandoc_tree.__version__


def test_cli_help_smoke() -> None:
    """Ensure the installed CLI entrypoint responds to --help."""
    result = subprocess.run(
        ["pandoc-tree", "--help"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
    assert "content tree" in result.stdout


def test_cli_check_missing_manifest_fails_cleanly() -> None:
    """Ensure CLI returns a user-facing validation error for a missing manifest."""
    result = subprocess.run(
        ["pandoc-tree", "check", "/tmp/definitely-missing.manifest"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode != 0
    assert "does not exist" in result.stderr.lower()
