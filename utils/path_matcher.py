"""Suggest the closest existing path for a mistyped one."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

LOGGER = logging.getLogger(__name__)

DEFAULT_THRESHOLD_DIVISOR = 5

Candidate = Union[str, Path]


@dataclass(slots=True, frozen=True)
class MatchCandidate:
    """A candidate together with its distance from the typed input."""

    candidate: Candidate
    distance: int


def edit_distance(source: str, target: str) -> int:
    """Levenshtein distance with unit cost insertions, deletions and substitutions."""

    previous = list(range(len(target) + 1))
    for i in range(1, len(source) + 1):
        current = [i] + [0] * len(target)
        for j in range(1, len(target) + 1):
            cost = 0 if source[i - 1] == target[j - 1] else 1
            current[j] = min(
                previous[j - 1] + cost,
                previous[j] + 1,
                current[j - 1] + 1,
            )
        previous = current
    return previous[len(target)]


def candidate_distance(text: str, candidate: Candidate) -> int:
    """Distance of *candidate* from *text*; a literal prefix match counts as 0."""

    name = str(candidate)
    if name.startswith(text):
        return 0
    return edit_distance(text, name)


def rank_candidates(text: str, candidates: Iterable[Candidate]) -> list[MatchCandidate]:
    return [MatchCandidate(candidate, candidate_distance(text, candidate)) for candidate in candidates]


def suggest(
    text: str,
    candidates: Iterable[Candidate],
    *,
    threshold_divisor: int = DEFAULT_THRESHOLD_DIVISOR,
) -> Optional[Candidate]:
    """Return the candidate closest to *text*, or ``None``.

    Ties keep the first candidate seen. The winner is only returned when its
    distance is at most ``len(text) // threshold_divisor``.
    """

    if threshold_divisor <= 0:
        raise ValueError("threshold_divisor must be positive")

    best: Optional[MatchCandidate] = None
    for match in rank_candidates(text, candidates):
        if best is None or match.distance < best.distance:
            best = match

    if best is None or best.distance > len(text) // threshold_divisor:
        return None
    return best.candidate


def list_candidates(text: str) -> list[str]:
    """List the siblings of *text* spelled relative to its parent as typed."""

    parent = os.path.dirname(text)
    directory = os.path.expanduser(parent) if parent else "."
    try:
        names = sorted(os.listdir(directory))
    except OSError:
        LOGGER.debug("Unable to list suggestion candidates", extra={"path": directory})
        return []
    return [os.path.join(parent, name) if parent else name for name in names]


def suggest_path(
    text: str, *, threshold_divisor: int = DEFAULT_THRESHOLD_DIVISOR
) -> Optional[str]:
    """Suggest an existing path close to the mistyped *text*."""

    suggestion = suggest(text, list_candidates(text), threshold_divisor=threshold_divisor)
    if suggestion is not None:
        LOGGER.debug("Found path suggestion", extra={"path": text, "suggestion": str(suggestion)})
        return str(suggestion)
    return None


__all__ = [
    "DEFAULT_THRESHOLD_DIVISOR",
    "MatchCandidate",
    "candidate_distance",
    "edit_distance",
    "list_candidates",
    "rank_candidates",
    "suggest",
    "suggest_path",
]
