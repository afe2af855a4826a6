#!/usr/bin/env python3
"""
pandoc_tree.cli.cli

Typer-based CLI for compiling build manifests into content trees.

Examples
--------
Check a manifest without touching the filesystem:

    pandoc-tree check docs.manifest

Build and print the resulting tree outline:

    pandoc-tree build docs.manifest --nproc 8
"""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import typer

from pandoc_tree import content
from pandoc_tree.errors import PandocTreeError

app = typer.Typer(
    name="pandoc-tree",
    help="Compile a build manifest into a pandoc-converted content tree.",
    no_args_is_help=True,
)

PANDOC_HELP = "Pandoc executable used for conversion."
PANDOC_ENVVAR = "PANDOC_TREE_PANDOC"


def _configure_logging(debug: bool) -> None:
    """Route library log records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _print_build_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly build error.

    Parameters
    ----------
    exc : Exception
        Exception raised during the build.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _read_manifest(manifest_path: Path) -> str:
    try:
        return manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(
            f"Cannot read manifest {manifest_path}: {exc}"
        ) from exc


def _render_outline(tree: content.ContentTree) -> list[str]:
    """Render a content tree as indented outline lines."""
    lines: list[str] = []
    for depth, node in content.walk(tree):
        indent = "  " * depth
        if isinstance(node, content.Special):
            lines.append(f"{indent}* special: {node.kind}")
            continue
        route = f"  -> {node.route}" if node.route is not None else ""
        if isinstance(node, content.Document):
            lines.append(f"{indent}{node.name} ({len(node.content)} bytes){route}")
        elif isinstance(node, content.Directory):
            lines.append(f"{indent}{node.name}/{route}")
    return lines


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False, "--debug", help="Show debug logs and full tracebacks on error."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug output.
    """
    _configure_logging(debug)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("build")
def build_cmd(
    ctx: typer.Context,
    manifest_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the build manifest.",
    ),
    base_dir: Path | None = typer.Option(
        None,
        "--base-dir",
        exists=True,
        file_okay=False,
        help="Directory for relative content paths (default: manifest directory).",
    ),
    pandoc: str = typer.Option(
        "pandoc", "--pandoc", envvar=PANDOC_ENVVAR, help=PANDOC_HELP
    ),
    nproc: int | None = typer.Option(
        None, "--nproc", min=1, help="Override the manifest's worker count."
    ),
) -> None:
    """Convert every document named by the manifest and print the tree."""
    debug: bool = bool(ctx.obj.get("debug", False))
    text = _read_manifest(manifest_path)

    try:
        from pandoc_tree import compile_manifest
        from pandoc_tree.application.options import PandocSettings

        result = compile_manifest(
            text,
            base_dir=base_dir if base_dir is not None else manifest_path.parent,
            settings=PandocSettings(executable=pandoc),
            nproc=nproc,
        )
    except PandocTreeError as exc:
        raise typer.Exit(code=_print_build_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_build_error(exc, debug))

    typer.echo(f"{result.mod_name}::{result.tree_name}")
    for line in _render_outline(result.tree):
        typer.echo(line)
    typer.secho(
        f"✓ Converted {result.document_count} documents", fg=typer.colors.GREEN
    )


@app.command("check")
def check_cmd(
    ctx: typer.Context,
    manifest_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the build manifest.",
    ),
) -> None:
    """Parse a manifest and print its decoded configuration."""
    debug: bool = bool(ctx.obj.get("debug", False))
    text = _read_manifest(manifest_path)

    try:
        from pandoc_tree import parse_manifest

        config = parse_manifest(text)
    except PandocTreeError as exc:
        raise typer.Exit(code=_print_build_error(exc, debug))

    from pandoc_tree.application.options import Special

    typer.echo(f"mod_name: {config.mod_name}")
    typer.echo(f"tree_name: {config.tree_name}")
    typer.echo(f"nproc: {config.nproc}")
    typer.echo("content:")
    for element in config.content:
        if isinstance(element, Special):
            typer.echo(f"  special {element.kind}")
        elif element.route is not None:
            typer.echo(f"  compile_from_path {element.path} (route: {element.route})")
        else:
            typer.echo(f"  compile_from_path {element.path}")
    flags = config.converter_flags()
    typer.echo(f"flags: {' '.join(flags) if flags else '<none>'}")


@app.command("options")
def options_cmd() -> None:
    """List every converter option the manifest decoder recognizes."""
    from pandoc_tree.manifest.options import OPTION_SPECS, UNSUPPORTED_OPTIONS

    for name, spec in sorted(OPTION_SPECS.items()):
        if spec.is_flag:
            typer.echo(f"{name:<24} {spec.flag}")
            continue
        params = [
            kind.value if idx < spec.min_args else f"[{kind.value}]"
            for idx, kind in enumerate(spec.params)
        ]
        typer.echo(f"{name:<24} {spec.flag}=<{', '.join(params)}>")
    typer.echo(f"not yet supported: {', '.join(sorted(UNSUPPORTED_OPTIONS))}")


@app.command("doctor")
def doctor_cmd(
    pandoc: str = typer.Option(
        "pandoc", "--pandoc", envvar=PANDOC_ENVVAR, help=PANDOC_HELP
    ),
) -> None:
    """Print installed toolchain versions."""
    import importlib.metadata as metadata

    from pandoc_tree.adapters.converters import pandoc_version
    from pandoc_tree.application.options import PandocSettings

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("pydantic", "typer"):
        try:
            typer.echo(f"{module}: {metadata.version(module)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    version = pandoc_version(PandocSettings(executable=pandoc))
    typer.echo(f"pandoc: {version or '<not installed>'}")


if __name__ == "__main__":
    app()
