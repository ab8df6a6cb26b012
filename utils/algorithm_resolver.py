"""Resolve digest algorithms from names or digest lengths."""

from __future__ import annotations

from typing import Optional

from utils.errors import DigestLengthError, UnsupportedAlgorithmError
from utils.hash_tools import Algorithm, coerce_algorithm

# Enum definition order is the display order.
SUPPORTED_ALGORITHMS: tuple[Algorithm, ...] = tuple(Algorithm)

_BY_LENGTH: dict[int, Algorithm] = {
    algorithm.hex_length: algorithm for algorithm in SUPPORTED_ALGORITHMS
}


def list_supported() -> list[Algorithm]:
    """Supported algorithms in their fixed display order."""

    return list(SUPPORTED_ALGORITHMS)


def resolve_by_length(hex_len: int) -> Optional[Algorithm]:
    """Return the algorithm whose hex digest has *hex_len* characters."""

    return _BY_LENGTH.get(hex_len)


def validate(name: str) -> Optional[Algorithm]:
    """Case-sensitive lookup of *name* in the supported set."""

    try:
        return coerce_algorithm(name)
    except UnsupportedAlgorithmError:
        return None


def require_algorithm(name: Algorithm | str) -> Algorithm:
    return coerce_algorithm(name)


def infer_algorithm(digest: str) -> Algorithm:
    """Infer the algorithm that produced *digest* from its length.

    Raises :class:`~utils.errors.DigestLengthError` when no supported
    algorithm matches; the length is never guessed.
    """

    algorithm = resolve_by_length(len(digest))
    if algorithm is None:
        raise DigestLengthError(len(digest))
    return algorithm


__all__ = [
    "SUPPORTED_ALGORITHMS",
    "infer_algorithm",
    "list_supported",
    "require_algorithm",
    "resolve_by_length",
    "validate",
]
