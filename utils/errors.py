"""Exception hierarchy for hashing and verification."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class HashCheckError(Exception):
    """Base exception for hashcheck failures."""


class PathNotFoundError(HashCheckError):
    """Raised when the root path is neither a file nor a directory."""

    def __init__(self, path: Path | str) -> None:
        self.path = str(path)
        super().__init__(f"path {self.path!r} not found")


class UnsupportedAlgorithmError(HashCheckError, ValueError):
    """Raised for algorithm names outside the supported set."""

    def __init__(self, name: str, supported: Iterable[str] = ()) -> None:
        self.name = name
        self.supported = list(supported)
        message = f"{name} is not an available algorithm"
        if self.supported:
            message = f"{message} (available: {', '.join(self.supported)})"
        super().__init__(message)


class FileReadError(HashCheckError):
    """Raised when a file or directory cannot be read."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        self.path = str(path)
        self.reason = reason
        message = f"can't read {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DigestLengthError(HashCheckError):
    """No supported algorithm produces a digest of the given length."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(
            f"no algorithm produces a {length} character digest; no inference possible"
        )


class DigestStateError(HashCheckError):
    """A finalized digest state was used again."""


__all__ = [
    "HashCheckError",
    "PathNotFoundError",
    "UnsupportedAlgorithmError",
    "FileReadError",
    "DigestLengthError",
    "DigestStateError",
]
