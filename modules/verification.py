"""Verify computed digests against user supplied ones."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, field_validator

from modules.hashing import HashingService, HashResult, ProgressEvent
from utils.algorithm_resolver import infer_algorithm, require_algorithm
from utils.hash_tools import Algorithm

LOGGER = logging.getLogger(__name__)

# Digests shorter than this are treated as "compute only".
MIN_DIGEST_LENGTH = 2


class HashRequest(BaseModel):
    """Input accepted from the prompt or command-line layer."""

    path: Path
    algorithm: Optional[str] = None
    target_digest: Optional[str] = None
    per_file: bool = False
    report_path: Optional[Path] = None

    @field_validator("algorithm", "target_digest", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def verifies(self) -> bool:
        return self.target_digest is not None and len(self.target_digest) >= MIN_DIGEST_LENGTH


@dataclass(slots=True, frozen=True)
class VerificationResult:
    """Comparison of a computed digest with the expected one."""

    computed: str
    expected: str

    @property
    def equal(self) -> bool:
        return self.computed == self.expected

    def message(self) -> str:
        if self.equal:
            return "The hashes are equal"
        return (
            "ERROR\nThe hashes are NOT equal\n"
            f"computed: {self.computed}\nexpected: {self.expected}"
        )


@dataclass(slots=True)
class HashOutcome:
    result: HashResult
    verification: Optional[VerificationResult] = None


def verify_digest(computed: str, expected: str) -> VerificationResult:
    """Compare digests with exact, case-sensitive string equality."""

    return VerificationResult(computed=computed, expected=expected)


def resolve_request_algorithm(
    request: HashRequest, default: Algorithm | str = Algorithm.SHA256
) -> Algorithm:
    """Pick the algorithm for *request*.

    An explicit name wins; otherwise it is inferred from the target digest's
    length, falling back to *default* when there is nothing to verify.
    """

    if request.algorithm is not None:
        return require_algorithm(request.algorithm)
    if request.verifies:
        return infer_algorithm(request.target_digest or "")
    return require_algorithm(default)


class VerificationService:
    """Hash a request's path and optionally check it against a digest."""

    def __init__(
        self,
        hashing_service: HashingService,
        *,
        default_algorithm: Algorithm | str = Algorithm.SHA256,
    ) -> None:
        self._hashing = hashing_service
        self._default_algorithm = require_algorithm(default_algorithm)

    @property
    def default_algorithm(self) -> Algorithm:
        return self._default_algorithm

    def run(
        self,
        request: HashRequest,
        on_progress: Optional[Callable[[ProgressEvent], None]] = None,
    ) -> HashOutcome:
        algorithm = resolve_request_algorithm(request, self._default_algorithm)
        per_file = request.per_file or request.report_path is not None
        run = self._hashing.iter_hash(
            request.path,
            algorithm,
            emit_per_file=per_file,
            exclude=request.report_path,
        )
        while True:
            try:
                event = next(run)
            except StopIteration as stop:
                result: HashResult = stop.value
                break
            if on_progress is not None:
                on_progress(event)
        if request.report_path is not None and result.report is not None:
            written = result.report.write(request.report_path)
            LOGGER.info("Wrote per-file report", extra={"path": str(written)})

        if not request.verifies:
            return HashOutcome(result=result)

        verification = verify_digest(result.digest, request.target_digest or "")
        if not verification.equal:
            LOGGER.warning(
                "Digest mismatch",
                extra={
                    "path": str(request.path),
                    "computed": verification.computed,
                    "expected": verification.expected,
                },
            )
        return HashOutcome(result=result, verification=verification)


__all__ = [
    "HashOutcome",
    "HashRequest",
    "MIN_DIGEST_LENGTH",
    "VerificationResult",
    "VerificationService",
    "resolve_request_algorithm",
    "verify_digest",
]
