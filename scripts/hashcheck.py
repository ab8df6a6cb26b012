#!/usr/bin/env python3
"""Interactive helper for computing and verifying file digests."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from modules.hashing import ProgressEvent
from modules.verification import HashRequest, MIN_DIGEST_LENGTH
from utils.algorithm_resolver import list_supported, resolve_by_length, validate
from utils.config_loader import load_config
from utils.errors import HashCheckError
from utils.path_matcher import suggest_path
from utils.service_container import ServiceContainer, build_service_container

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISMATCH = 1
EXIT_ERROR = 2


class HashCheckCLI:
    """Prompt for whatever the command line left out, then hash."""

    def __init__(
        self,
        container: ServiceContainer,
        *,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self._container = container
        self._input = input_func
        self._print = output_func

    def run(
        self,
        path: Optional[str] = None,
        digest: Optional[str] = None,
        algorithm: Optional[str] = None,
        report_path: Optional[Path] = None,
    ) -> int:
        target = self._ask_path(path)
        given = digest if digest is not None else self._input(
            "Please put in the hash or leave it empty to compute the hash only: "
        )
        given = given.strip()
        chosen = self._ask_algorithm(algorithm, given)
        report = report_path or self._container.report_path

        request = HashRequest(
            path=target,
            algorithm=chosen,
            target_digest=given,
            report_path=report,
        )
        try:
            outcome = self._container.verification_service.run(
                request, on_progress=log_progress
            )
        except (HashCheckError, OSError) as exc:
            self._print(f"ERROR\n{exc}")
            return EXIT_ERROR

        if outcome.verification is None:
            self._print(outcome.result.digest)
            return EXIT_OK
        self._print(outcome.verification.message())
        return EXIT_OK if outcome.verification.equal else EXIT_MISMATCH

    # ------------------------------------------------------------------
    def _ask_path(self, path: Optional[str]) -> Path:
        candidate = path
        while True:
            if candidate is None:
                candidate = self._input("Please put in the path: ")
            candidate = candidate.strip()
            resolved = Path(candidate).expanduser()
            if candidate and resolved.exists():
                return resolved

            self._print(f"path {candidate!r} not found")
            suggestion = (
                suggest_path(candidate, threshold_divisor=self._container.threshold_divisor)
                if candidate
                else None
            )
            if suggestion is not None:
                answer = self._input(f"Did you mean {suggestion!r}? [y/N] ").strip().lower()
                if answer in {"y", "yes"}:
                    return Path(suggestion).expanduser()
            candidate = None

    def _ask_algorithm(self, algorithm: Optional[str], given: str) -> Optional[str]:
        if algorithm is not None:
            if validate(algorithm) is not None:
                return algorithm
            self._print(f"Algorithm {algorithm} not available")
        elif len(given) < MIN_DIGEST_LENGTH:
            return None
        else:
            inferred = resolve_by_length(len(given))
            if inferred is not None:
                return inferred.value
            self._print("Can't infer the algorithm from the length of the hash")

        names = ", ".join(item.value for item in list_supported())
        while True:
            answer = self._input(f"Please put in the algorithm ({names}): ").strip()
            if validate(answer) is not None:
                return answer
            self._print(f"Algorithm not available, choose one of: {names}")


def log_progress(event: ProgressEvent) -> None:
    if event.finished:
        LOGGER.info(
            "hashed %d/%d files",
            event.file_index + 1,
            event.total_files,
            extra={"path": event.path},
        )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--path", help="File or directory to hash")
    parser.add_argument("--hash", dest="digest", help="Digest to verify against")
    parser.add_argument(
        "--algorithm",
        help="Digest algorithm; inferred from --hash when omitted",
    )
    parser.add_argument(
        "--output-individual",
        type=Path,
        default=None,
        help="Write per-file digests to this report file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to configuration file to load",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        if args.config:
            container = build_service_container(
                load_config(args.config), config_path=args.config
            )
        else:
            container = build_service_container()
    except (HashCheckError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=getattr(logging, container.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cli = HashCheckCLI(container)
    try:
        return cli.run(
            path=args.path,
            digest=args.digest,
            algorithm=args.algorithm,
            report_path=args.output_individual,
        )
    except (KeyboardInterrupt, EOFError):  # pragma: no cover - user interaction
        print("\nInterrupted")
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
