"""
Environment configuration.

All settings come from environment variables so the same build runs
in development and behind a reverse proxy without code changes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping
import os

from .engine_core.ids import ID_STRATEGIES


TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the API, CLI and sessions."""
    env: str = "development"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    id_strategy: str = "sequential"
    log_json: bool = False
    verbose: bool = False
    session_ttl_seconds: int = 3600


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer number of seconds, got {raw!r}") from None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Read settings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Raises:
        ValueError: if a variable holds a value the app cannot use
    """
    environ = os.environ if environ is None else environ

    id_strategy = environ.get("GRIDSLOT_ID_STRATEGY", "sequential")
    if id_strategy not in ID_STRATEGIES:
        raise ValueError(
            f"GRIDSLOT_ID_STRATEGY must be one of {sorted(ID_STRATEGIES)}, got {id_strategy!r}"
        )

    origins = [
        origin.strip()
        for origin in environ.get("ALLOWED_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    return Settings(
        env=environ.get("GRIDSLOT_ENV", "development"),
        allowed_origins=origins or ["*"],
        id_strategy=id_strategy,
        log_json=_flag(environ.get("GRIDSLOT_LOG_JSON")),
        verbose=_flag(environ.get("GRIDSLOT_VERBOSE")),
        session_ttl_seconds=_int_setting(environ, "GRIDSLOT_SESSION_TTL", 3600),
    )
