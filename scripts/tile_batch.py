"""
Directory bookkeeping and the skip-on-failure loop shared by pad and crop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from buffer_config import RASTER_SUFFIXES
from buffer_errors import PathEnumerationError, TileError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class TileResult:
    """Outcome of one tile: ``error`` is None on success."""

    name: str
    source: Path
    output: Path
    error: Optional[TileError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchReport:
    operation: str
    results: List[TileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[TileResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> List[TileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def total(self) -> int:
        return len(self.results)

    def summary(self) -> str:
        return (
            f"{self.operation}: {len(self.succeeded)} of {self.total} tiles written, "
            f"{len(self.failed)} skipped"
        )


def ensure_directory(path: PathLike) -> Path:
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathEnumerationError(path, exc) from exc
    return path


def list_raster_files(directory: PathLike, suffixes: Iterable[str] = RASTER_SUFFIXES) -> List[Path]:
    """Regular files in ``directory`` whose suffix (case-sensitive) is in ``suffixes``."""
    directory = Path(directory)
    wanted = set(suffixes)
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        raise PathEnumerationError(directory, exc) from exc

    paths: List[Path] = []
    for entry in entries:
        if entry.suffix[1:] not in wanted:
            continue
        if not entry.is_file():
            logger.debug("Not a regular file, ignoring: %s", entry)
            continue
        paths.append(entry)
    return paths


def run_batch(
    operation: str,
    sources: Iterable[Path],
    output_dir: Path,
    process: Callable[[Path, Path], None],
) -> BatchReport:
    """Call ``process(source, output)`` for every source, skipping failed tiles.

    ``output`` is ``output_dir`` joined with the source file name. A
    ``TileError`` is logged and recorded in the report; any other exception
    propagates.
    """
    report = BatchReport(operation)
    for source in sources:
        output = output_dir / source.name
        try:
            process(source, output)
        except TileError as exc:
            if exc.operation is None:
                exc.operation = operation
            logger.warning("Skipping %s: %s", source.name, exc)
            report.results.append(TileResult(source.name, source, output, exc))
            continue
        logger.info("Wrote %s", output)
        report.results.append(TileResult(source.name, source, output))

    logger.info("%s", report.summary())
    return report
