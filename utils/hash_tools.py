"""Streaming digest primitives shared by the hashing services."""

from __future__ import annotations

import hashlib
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator

from utils.errors import DigestStateError, UnsupportedAlgorithmError

DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1 MiB


class Algorithm(str, Enum):
    """Closed set of supported digest algorithms."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @property
    def hex_length(self) -> int:
        return _HEX_LENGTHS[self]

    def __str__(self) -> str:
        return self.value


_HEX_LENGTHS: dict[Algorithm, int] = {
    Algorithm.MD5: 32,
    Algorithm.SHA1: 40,
    Algorithm.SHA256: 64,
    Algorithm.SHA384: 96,
    Algorithm.SHA512: 128,
}

_CONSTRUCTORS: dict[Algorithm, Callable[[], Any]] = {
    Algorithm.MD5: hashlib.md5,
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA384: hashlib.sha384,
    Algorithm.SHA512: hashlib.sha512,
}


def coerce_algorithm(algorithm: Algorithm | str) -> Algorithm:
    """Return *algorithm* as an :class:`Algorithm` or raise if unsupported."""

    if isinstance(algorithm, Algorithm):
        return algorithm
    try:
        return Algorithm(algorithm)
    except ValueError as exc:
        raise UnsupportedAlgorithmError(
            str(algorithm), [member.value for member in Algorithm]
        ) from exc


class DigestState:
    """Running digest bound to a single algorithm.

    The state is consumed by :meth:`finalize`; any later ``update`` or
    ``finalize`` raises :class:`~utils.errors.DigestStateError`.
    """

    __slots__ = ("algorithm", "_hasher", "_finalized")

    def __init__(self, algorithm: Algorithm, _hasher=None) -> None:
        self.algorithm = algorithm
        self._hasher = _hasher if _hasher is not None else _CONSTRUCTORS[algorithm]()
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def update(self, data: bytes) -> None:
        self._ensure_open()
        self._hasher.update(data)

    def copy(self) -> "DigestState":
        """Clone the current state into an independent accumulator."""

        self._ensure_open()
        return DigestState(self.algorithm, self._hasher.copy())

    def finalize(self) -> str:
        self._ensure_open()
        self._finalized = True
        # hexdigest() already renders each byte as two lowercase characters.
        return self._hasher.hexdigest()

    def _ensure_open(self) -> None:
        if self._finalized:
            raise DigestStateError(
                f"{self.algorithm.value} digest state has already been finalized"
            )


def create_digest(algorithm: Algorithm | str) -> DigestState:
    """Create an empty :class:`DigestState` for *algorithm*."""

    return DigestState(coerce_algorithm(algorithm))


def iter_file_chunks(path: Path | str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the contents of *path* in ``chunk_size`` pieces."""

    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    with Path(path).open("rb") as file_handle:
        for chunk in iter(lambda: file_handle.read(chunk_size), b""):
            yield chunk


def compute_file_hash(
    path: Path | str,
    algorithm: Algorithm | str = Algorithm.SHA256,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Compute the hash for a single file at *path* using *algorithm*.

    The file is streamed in ``chunk_size`` chunks to avoid loading large
    files into memory.
    """

    state = create_digest(algorithm)
    for chunk in iter_file_chunks(Path(path).expanduser(), chunk_size):
        state.update(chunk)
    return state.finalize()


__all__ = [
    "Algorithm",
    "DigestState",
    "DEFAULT_CHUNK_SIZE",
    "coerce_algorithm",
    "compute_file_hash",
    "create_digest",
    "iter_file_chunks",
]
