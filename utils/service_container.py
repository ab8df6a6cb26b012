"""Factory helpers for constructing hashing services consistently."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from modules.hashing import HashingService
from modules.verification import VerificationService
from utils.algorithm_resolver import require_algorithm
from utils.config_loader import get_config_value, load_config, resolve_config_path
from utils.hash_tools import DEFAULT_CHUNK_SIZE, Algorithm
from utils.path_matcher import DEFAULT_THRESHOLD_DIVISOR


@dataclass(slots=True)
class ServiceContainer:
    """Bundle of services and settings used by the entry points."""

    config: dict[str, Any]
    config_path: Path
    hashing_service: HashingService
    verification_service: VerificationService
    default_algorithm: Algorithm
    threshold_divisor: int
    report_path: Optional[Path]
    log_level: str


def _positive_int(value: Any, fallback: int, name: str) -> int:
    if value is None or value == "":
        return fallback
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {number}")
    return number


def build_service_container(
    config: dict[str, Any] | None = None,
    *,
    config_path: Path | str | None = None,
) -> ServiceContainer:
    """Construct services from configuration.

    An invalid ``hashing.default_algorithm`` raises
    :class:`~utils.errors.UnsupportedAlgorithmError` at build time rather
    than on the first hash.
    """

    if config_path is not None:
        resolved_path = Path(config_path)
    else:
        resolved_path = Path(resolve_config_path())

    config_data = config if config is not None else load_config(resolved_path)

    default_algorithm = require_algorithm(
        str(
            get_config_value(
                "hashing", "default_algorithm", default="sha256", config=config_data
            )
        ).strip()
    )
    chunk_size = _positive_int(
        get_config_value("hashing", "chunk_size", config=config_data),
        DEFAULT_CHUNK_SIZE,
        "hashing.chunk_size",
    )
    threshold_divisor = _positive_int(
        get_config_value("matcher", "threshold_divisor", config=config_data),
        DEFAULT_THRESHOLD_DIVISOR,
        "matcher.threshold_divisor",
    )
    report_value = str(
        get_config_value("report", "output_path", default="", config=config_data) or ""
    ).strip()
    log_level = str(
        get_config_value("system", "log_level", default="INFO", config=config_data) or "INFO"
    ).strip().upper()

    hashing_service = HashingService(chunk_size=chunk_size)
    verification_service = VerificationService(
        hashing_service, default_algorithm=default_algorithm
    )

    return ServiceContainer(
        config=config_data,
        config_path=resolved_path,
        hashing_service=hashing_service,
        verification_service=verification_service,
        default_algorithm=default_algorithm,
        threshold_divisor=threshold_divisor,
        report_path=Path(report_value).expanduser() if report_value else None,
        log_level=log_level,
    )


__all__ = ["ServiceContainer", "build_service_container"]
