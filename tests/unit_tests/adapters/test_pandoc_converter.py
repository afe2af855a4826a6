"""Unit tests for the pandoc subprocess adapter."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from pandoc_tree.adapters import converters
from pandoc_tree.adapters.converters import PandocConverter, pandoc_version
from pandoc_tree.application.options import PandocSettings
from pandoc_tree.errors import ConversionError
from pandoc_tree.manifest.parser import parse_options


class _Recorder:
    def __init__(self, completed: subprocess.CompletedProcess[bytes]) -> None:
        self.completed = completed
        self.calls: list[tuple[list[str], dict[str, object]]] = []

    def __call__(self, command: list[str], **kwargs: object) -> object:
        self.calls.append((command, kwargs))
        return self.completed


def test_command_renders_flags_in_order() -> None:
    """Place flags between the executable and the single input file."""
    options = parse_options('Standalone, Meta { "title", "Guide" }, TabStop { 2 }')
    command = PandocConverter(PandocSettings(executable="/opt/pandoc")).command(
        Path("docs/a.md"), options
    )
    assert command == [
        "/opt/pandoc",
        "--standalone",
        "--metadata=title:Guide",
        "--tab-stop=2",
        "docs/a.md",
    ]


def test_convert_captures_stdout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Return standard output as the in-memory payload."""
    recorder = _Recorder(subprocess.CompletedProcess([], 0, b"<h1>A</h1>\n", b""))
    monkeypatch.setattr(converters.subprocess, "run", recorder)

    output = PandocConverter().convert(Path("a.md"), ())

    assert output == b"<h1>A</h1>\n"
    command, kwargs = recorder.calls[0]
    assert command == ["pandoc", "a.md"]
    assert kwargs["capture_output"] is True
    assert kwargs["check"] is False
    assert kwargs["env"] is None


def test_convert_passes_extra_env_and_cwd(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Merge extra environment variables and honour the working directory."""
    recorder = _Recorder(subprocess.CompletedProcess([], 0, b"", b""))
    monkeypatch.setattr(converters.subprocess, "run", recorder)
    settings = PandocSettings(extra_env={"LANG": "C.UTF-8"}, cwd=tmp_path)

    PandocConverter(settings).convert(Path("a.md"), ())

    _, kwargs = recorder.calls[0]
    env = kwargs["env"]
    assert isinstance(env, dict)
    assert env["LANG"] == "C.UTF-8"
    assert kwargs["cwd"] == tmp_path


def test_nonzero_exit_raises_with_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    """Surface pandoc's stderr as the failure message."""
    recorder = _Recorder(
        subprocess.CompletedProcess([], 64, b"", b"Unknown option --bogus\n")
    )
    monkeypatch.setattr(converters.subprocess, "run", recorder)

    with pytest.raises(ConversionError, match="Unknown option --bogus") as info:
        PandocConverter().convert(Path("a.md"), ())
    assert info.value.source_path == Path("a.md")


def test_nonzero_exit_without_stderr(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fall back to the exit code when stderr is empty."""
    monkeypatch.setattr(
        converters.subprocess,
        "run",
        _Recorder(subprocess.CompletedProcess([], 3, b"", b"")),
    )
    with pytest.raises(ConversionError, match="exited with code 3"):
        PandocConverter().convert(Path("a.md"), ())


def test_missing_executable_raises(tmp_path: Path) -> None:
    """Report a converter that cannot be launched."""
    settings = PandocSettings(executable=str(tmp_path / "no-such-pandoc"))
    with pytest.raises(ConversionError, match="Failed to launch"):
        PandocConverter(settings).convert(tmp_path / "a.md", ())


def test_pandoc_version(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Read the first line of the version banner, or None when unavailable."""
    monkeypatch.setattr(
        converters.subprocess,
        "run",
        lambda *args, **kwargs: subprocess.CompletedProcess(
            [], 0, "pandoc 3.1.9\nmore\n", ""
        ),
    )
    assert pandoc_version() == "pandoc 3.1.9"
    monkeypatch.undo()
    assert pandoc_version(PandocSettings(executable=str(tmp_path / "nope"))) is None
