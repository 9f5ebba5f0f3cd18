"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the service address, request limits and log destination from the
environment (a project-root `.env` file is loaded first).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_SOURCE_URL = "https://opendata.riga.lv/odata/service/DeclaredPersons"


@dataclass(frozen=True)
class Settings:
    """Container for pipeline configuration read from the environment.

    Attributes:
        source_url: OData endpoint serving declared-person records.
        request_timeout: HTTP timeout in seconds.
        default_limit: Default `$top` value for a query.
        log_path: Optional log file; ``None`` disables file logging.
    """
    source_url: str
    request_timeout: float
    default_limit: int
    log_path: Path | None


def _positive_number(name: str, raw: str, cast: type) -> float | int:
    try:
        value = cast(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {raw!r}")
    return value


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `DECLARED_PERSONS_TIMEOUT` or `DECLARED_PERSONS_LIMIT`
            is not a positive number.
    """
    source_url = os.getenv("DECLARED_PERSONS_URL", "").strip() or DEFAULT_SOURCE_URL
    request_timeout = _positive_number(
        "DECLARED_PERSONS_TIMEOUT", os.getenv("DECLARED_PERSONS_TIMEOUT", "10"), float
    )
    default_limit = _positive_number(
        "DECLARED_PERSONS_LIMIT", os.getenv("DECLARED_PERSONS_LIMIT", "100"), int
    )
    raw_log = os.getenv("DECLARED_PERSONS_LOG", "logs/declared_persons.log").strip()

    return Settings(
        source_url=source_url,
        request_timeout=float(request_timeout),
        default_limit=int(default_limit),
        log_path=Path(raw_log) if raw_log else None,
    )
