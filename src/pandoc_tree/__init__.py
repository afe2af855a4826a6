"""Top-level API for compiling build manifests into content trees."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pandoc_tree.application.options import BuildConfig, PandocSettings
    from pandoc_tree.application.ports import DocumentConverter
    from pandoc_tree.application.results import BuildResult

__version__ = "0.1.0"


def parse_manifest(text: str) -> BuildConfig:
    """Parse manifest text into a validated configuration.

    Parameters
    ----------
    text : str
        Manifest source.

    Returns
    -------
    BuildConfig
        Immutable build configuration.
    """
    from .manifest.parser import parse_manifest as _impl

    return _impl(text)


def compile_manifest(
    text: str,
    *,
    base_dir: Path | None = None,
    converter: DocumentConverter | None = None,
    settings: PandocSettings | None = None,
    nproc: int | None = None,
) -> BuildResult:
    """Parse a manifest and build its content tree.

    Parameters
    ----------
    text : str
        Manifest source.
    base_dir : Path | None, default=None
        Directory that relative content paths are resolved against. Defaults
        to the current working directory.
    converter : DocumentConverter | None, default=None
        Converter override. When omitted, pandoc is launched according to
        ``settings``.
    settings : PandocSettings | None, default=None
        Pandoc launch settings for the default converter.
    nproc : int | None, default=None
        Worker count override; defaults to the manifest's ``nproc``.

    Returns
    -------
    BuildResult
        Assembled content tree with the manifest's identifiers.
    """
    from .adapters.converters import PandocConverter
    from .application.use_cases import build_content_tree
    from .manifest.parser import parse_manifest as _parse

    config = _parse(text)
    return build_content_tree(
        config,
        base_dir=base_dir,
        converter=converter or PandocConverter(settings),
        nproc=nproc,
    )


def compile_manifest_file(
    manifest_path: Path,
    *,
    base_dir: Path | None = None,
    converter: DocumentConverter | None = None,
    settings: PandocSettings | None = None,
    nproc: int | None = None,
) -> BuildResult:
    """Read a UTF-8 manifest file and build its content tree.

    Relative content paths resolve against ``base_dir`` or, when omitted,
    against the manifest's own directory.
    """
    from .errors import FilesystemError, ManifestParseError

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestParseError(
            f"Manifest {manifest_path} is not valid UTF-8: {exc}"
        ) from exc
    except OSError as exc:
        raise FilesystemError(manifest_path, str(exc)) from exc
    return compile_manifest(
        text,
        base_dir=base_dir if base_dir is not None else manifest_path.parent,
        converter=converter,
        settings=settings,
        nproc=nproc,
    )


__all__ = [
    "parse_manifest",
    "compile_manifest",
    "compile_manifest_file",
]
