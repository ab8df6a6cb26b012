"""Enumerate the files below a path in a reproducible order."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from utils.errors import FileReadError, PathNotFoundError

LOGGER = logging.getLogger(__name__)


def list_files(path: Path | str, recursive: bool = True) -> list[Path]:
    """Return the files under *path* sorted by their string form.

    A file root yields a single entry. For a directory, subdirectories are
    expanded when *recursive* is true and skipped otherwise; every other entry
    is returned as a file. Pending directories live on an explicit stack so
    deep trees do not grow the call stack.

    Special files (FIFOs, sockets, devices) are listed too and logged at
    warning level; reading a FIFO blocks until a writer closes it.
    """

    root = Path(path)
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise PathNotFoundError(root)

    files: list[Path] = []
    pending: list[Path] = [root]
    while pending:
        directory = pending.pop()
        try:
            entries = sorted(os.listdir(directory))
        except OSError as exc:
            raise FileReadError(directory, exc.strerror or str(exc)) from exc

        for name in entries:
            entry = directory / name
            if entry.is_dir():
                if recursive:
                    pending.append(entry)
                continue
            if not entry.is_file() and not entry.is_symlink():
                LOGGER.warning("Listing special file", extra={"path": str(entry)})
            files.append(entry)

    files.sort(key=str)
    LOGGER.debug(
        "Enumerated files", extra={"path": str(root), "file_count": len(files)}
    )
    return files


__all__ = ["list_files"]
