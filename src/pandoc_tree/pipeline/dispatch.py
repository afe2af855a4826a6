"""Bounded concurrent conversion: dispatch jobs, collect at a barrier."""

from __future__ import annotations

from typing import TypeAlias

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from pandoc_tree.application.ports import DocumentConverter
from pandoc_tree.application.results import ResultMap
from pandoc_tree.errors import ConversionError, InternalConsistencyError
from pandoc_tree.manifest.options import ConverterOption

logger = logging.getLogger(__name__)

Submission: TypeAlias = tuple[Path, Future[bytes]]


@dataclass(frozen=True)
class ConversionJob:
    """One source file plus the shared, immutable option set."""

    source_path: Path
    options: tuple[ConverterOption, ...]

    def run(self, converter: DocumentConverter) -> bytes:
        """Invoke the converter; any failure surfaces as ``ConversionError``."""
        logger.debug("converting %s", self.source_path)
        try:
            payload = converter.convert(self.source_path, self.options)
        except ConversionError:
            raise
        except Exception as exc:
            raise ConversionError(self.source_path, str(exc)) from exc
        if not isinstance(payload, bytes):
            raise ConversionError(
                self.source_path,
                f"converter returned {type(payload).__name__}, expected bytes",
            )
        return payload


def plan_jobs(
    sources: Iterable[Path],
    options: Sequence[ConverterOption],
) -> list[ConversionJob]:
    """Create one job per distinct source path, keeping first-seen order."""
    frozen = tuple(options)
    return [ConversionJob(path, frozen) for path in dict.fromkeys(sources)]


def dispatch(
    executor: Executor,
    jobs: Sequence[ConversionJob],
    converter: DocumentConverter,
) -> list[Submission]:
    """Submit every job and return its completion future keyed by source."""
    return [(job.source_path, executor.submit(job.run, converter)) for job in jobs]


def collect(submissions: Sequence[Submission]) -> ResultMap:
    """Wait for every submitted job and merge results by source path.

    All futures are drained before any failure is reported, so no job is
    left running when this returns or raises.

    Parameters
    ----------
    submissions : Sequence[tuple[Path, Future[bytes]]]
        Output of :func:`dispatch`.

    Returns
    -------
    Mapping[Path, bytes]
        Read-only result table.

    Raises
    ------
    ConversionError
        For the earliest-submitted failed job, once all jobs completed.
    InternalConsistencyError
        If two submissions report the same source path.
    """
    order = {future: (index, path) for index, (path, future) in enumerate(submissions)}
    results: dict[Path, bytes] = {}
    failures: list[tuple[int, Path, BaseException]] = []
    duplicates: list[Path] = []

    for future in as_completed(order):
        index, path = order[future]
        exc = future.exception()
        if exc is not None:
            logger.error("conversion failed for %s: %s", path, exc)
            failures.append((index, path, exc))
            continue
        if path in results:
            duplicates.append(path)
            continue
        results[path] = future.result()

    if duplicates:
        raise InternalConsistencyError(
            f"Duplicate conversion result for {duplicates[0]}"
        )
    if failures:
        index, path, exc = min(failures, key=lambda item: item[0])
        logger.error("%d of %d conversions failed", len(failures), len(submissions))
        if isinstance(exc, ConversionError):
            raise exc
        raise ConversionError(path, str(exc)) from exc
    return MappingProxyType(results)


def convert_all(
    sources: Iterable[Path],
    options: Sequence[ConverterOption],
    converter: DocumentConverter,
    nproc: int = 1,
) -> ResultMap:
    """Convert every source exactly once on a pool of ``nproc`` workers.

    Parameters
    ----------
    sources : Iterable[Path]
        Discovered files; duplicates are converted once.
    options : Sequence[ConverterOption]
        Option set shared read-only by all workers.
    converter : DocumentConverter
        Converter port invoked once per file.
    nproc : int, default=1
        Worker pool size (at least one worker is always used).

    Returns
    -------
    Mapping[Path, bytes]
        Result table keyed by source path.
    """
    jobs = plan_jobs(sources, options)
    workers = max(1, nproc)
    logger.info("Starting conversion of %d files on %d workers", len(jobs), workers)
    with ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="pandoc-tree"
    ) as executor:
        submissions = dispatch(executor, jobs, converter)
        logger.info("Gathering results")
        return collect(submissions)
