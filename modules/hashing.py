"""Hashing service that digests single files or whole directory trees."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator, Optional

from utils.algorithm_resolver import require_algorithm
from utils.errors import FileReadError
from utils.file_walker import list_files
from utils.hash_tools import (
    DEFAULT_CHUNK_SIZE,
    Algorithm,
    DigestState,
    create_digest,
    iter_file_chunks,
)

LOGGER = logging.getLogger(__name__)

REPORT_SEPARATOR = "----------"


@dataclass(slots=True, frozen=True)
class ProgressEvent:
    """Progress notification emitted while a file is being hashed."""

    file_index: int
    total_files: int
    path: str
    bytes_processed: int
    finished: bool = False


@dataclass(slots=True)
class HashReport:
    """Per-file digests plus the aggregate digest of a run."""

    algorithm: Algorithm
    base: str
    entries: dict[str, str] = field(default_factory=dict)
    digest: Optional[str] = None

    def render(self) -> str:
        lines = [
            f"hash algorithm: {self.algorithm.value}",
            f"base: {self.base}",
            REPORT_SEPARATOR,
        ]
        lines.extend(f"- {path} = {digest}" for path, digest in self.entries.items())
        lines.append(REPORT_SEPARATOR)
        lines.append(f"complete hash = {self.digest}")
        return "\n".join(lines) + "\n"

    def write(self, destination: Path | str) -> Path:
        target = Path(destination).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.render(), encoding="utf-8")
        return target


@dataclass(slots=True)
class HashResult:
    """Outcome of a hashing run."""

    digest: str
    algorithm: Algorithm
    files: list[Path]
    report: Optional[HashReport] = None


class HashingService:
    """Compute one running digest over every file below a path.

    Files are visited in sorted path order and their contents are fed into a
    single digest, so a directory's digest is the digest of all its file
    contents concatenated in that order.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def hash(
        self,
        path: Path | str,
        algorithm: Algorithm | str,
        *,
        emit_per_file: bool = False,
        exclude: Path | str | None = None,
    ) -> HashResult:
        """Hash *path* and return the result once every file has been read."""

        run = self.iter_hash(path, algorithm, emit_per_file=emit_per_file, exclude=exclude)
        while True:
            try:
                next(run)
            except StopIteration as stop:
                return stop.value

    def iter_hash(
        self,
        path: Path | str,
        algorithm: Algorithm | str,
        *,
        emit_per_file: bool = False,
        exclude: Path | str | None = None,
    ) -> Generator[ProgressEvent, None, HashResult]:
        """Hash *path*, yielding :class:`ProgressEvent` objects along the way.

        The :class:`HashResult` is the generator's return value. Nothing is
        read until the generator is advanced.
        """

        resolved_algorithm = require_algorithm(algorithm)
        root = Path(path)
        files = list_files(root, recursive=True)
        if exclude is not None:
            excluded = _resolve_quietly(Path(exclude).expanduser())
            kept = [file_path for file_path in files if _resolve_quietly(file_path) != excluded]
            if len(kept) != len(files):
                LOGGER.info("Skipping report output file", extra={"path": str(excluded)})
            files = kept

        aggregate = create_digest(resolved_algorithm)
        report: Optional[HashReport] = None
        empty_state: Optional[DigestState] = None
        if emit_per_file:
            report = HashReport(algorithm=resolved_algorithm, base=str(root))
            # Per-file states are cloned from this untouched empty state.
            empty_state = aggregate.copy()

        hashed: list[Path] = []
        total = len(files)
        for index, file_path in enumerate(files):
            file_state = empty_state.copy() if empty_state is not None else None
            yield from self._feed_file(file_path, index, total, aggregate, file_state)

            if report is not None and file_state is not None:
                report.entries[str(file_path)] = file_state.finalize()
            hashed.append(file_path)

        digest = aggregate.finalize()
        if report is not None:
            report.digest = digest

        LOGGER.info(
            "Hashed files",
            extra={
                "path": str(root),
                "algorithm": resolved_algorithm.value,
                "file_count": len(hashed),
            },
        )
        return HashResult(
            digest=digest,
            algorithm=resolved_algorithm,
            files=hashed,
            report=report,
        )

    # ------------------------------------------------------------------
    def _feed_file(
        self,
        file_path: Path,
        index: int,
        total: int,
        aggregate: DigestState,
        file_state: Optional[DigestState],
    ) -> Generator[ProgressEvent, None, None]:
        processed = 0
        try:
            for chunk in iter_file_chunks(file_path, self._chunk_size):
                aggregate.update(chunk)
                if file_state is not None:
                    file_state.update(chunk)
                processed += len(chunk)
                yield ProgressEvent(index, total, str(file_path), processed)
        except OSError as exc:
            raise FileReadError(file_path, exc.strerror or str(exc)) from exc

        LOGGER.debug(
            "Hashed file", extra={"path": str(file_path), "bytes": processed}
        )
        yield ProgressEvent(index, total, str(file_path), processed, finished=True)


def _resolve_quietly(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path


__all__ = [
    "HashReport",
    "HashResult",
    "HashingService",
    "ProgressEvent",
    "REPORT_SEPARATOR",
]
