"""Document converters implementing application ports."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from pandoc_tree.application.options import PandocSettings
from pandoc_tree.errors import ConversionError
from pandoc_tree.manifest.options import ConverterOption, to_flags

logger = logging.getLogger(__name__)


class PandocConverter:
    """Run the pandoc executable on a single file and capture stdout."""

    def __init__(self, settings: PandocSettings | None = None) -> None:
        self.settings = settings or PandocSettings()

    def command(
        self,
        source_path: Path,
        options: Sequence[ConverterOption],
    ) -> list[str]:
        """Build the argument vector for one conversion."""
        return [self.settings.executable, *to_flags(options), str(source_path)]

    def convert(
        self,
        source_path: Path,
        options: Sequence[ConverterOption],
    ) -> bytes:
        """Convert ``source_path`` and return pandoc's standard output.

        Parameters
        ----------
        source_path : Path
            Document to convert.
        options : Sequence[ConverterOption]
            Decoded manifest options, rendered 1:1 as flags.

        Returns
        -------
        bytes
            Entire standard output of the converter.

        Raises
        ------
        ConversionError
            If pandoc cannot be launched or exits with a non-zero status.
        """
        command = self.command(source_path, options)
        env = (
            {**os.environ, **self.settings.extra_env}
            if self.settings.extra_env
            else None
        )
        logger.debug("running %s", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                check=False,
                cwd=self.settings.cwd,
                env=env,
            )
        except OSError as exc:
            raise ConversionError(
                source_path, f"Failed to launch {self.settings.executable}: {exc}"
            ) from exc

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace").strip()
            message = stderr or (
                f"{self.settings.executable} exited with code {completed.returncode}"
            )
            raise ConversionError(source_path, message)
        return completed.stdout


def pandoc_version(settings: PandocSettings | None = None) -> str | None:
    """Return the first line of ``pandoc --version`` or ``None`` if unavailable."""
    settings = settings or PandocSettings()
    try:
        completed = subprocess.run(
            [settings.executable, "--version"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    lines = completed.stdout.splitlines()
    return lines[0].strip() if lines else None
