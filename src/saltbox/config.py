"""Runtime settings for SaltBox, read from the environment.

- ``SALTBOX_LOG_LEVEL``: logging level name for the CLI (default ``WARNING``)
- ``SALTBOX_MAX_ITERATIONS``: ceiling on PBKDF2 iteration counts (default 2**24)
- ``SALTBOX_KEYRING_SERVICE``: keyring service name used by the CLI (default ``saltbox``)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from saltbox.core.exceptions import InvalidParameterError

DEFAULT_MAX_ITERATIONS = 1 << 24


@dataclass(frozen=True)
class Settings:
    """Container for the knobs the library and CLI read at runtime."""

    log_level: int = logging.WARNING
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    keyring_service: str = "saltbox"


def _parse_level(value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise InvalidParameterError(f"unknown log level {value!r}")
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    log_level = logging.WARNING
    if env.get("SALTBOX_LOG_LEVEL"):
        log_level = _parse_level(env["SALTBOX_LOG_LEVEL"])

    max_iterations = DEFAULT_MAX_ITERATIONS
    raw = env.get("SALTBOX_MAX_ITERATIONS")
    if raw:
        try:
            max_iterations = int(raw)
        except ValueError as e:
            raise InvalidParameterError(f"SALTBOX_MAX_ITERATIONS must be an integer, got {raw!r}") from e
        if max_iterations < 1:
            raise InvalidParameterError("SALTBOX_MAX_ITERATIONS must be at least 1")

    return Settings(
        log_level=log_level,
        max_iterations=max_iterations,
        keyring_service=env.get("SALTBOX_KEYRING_SERVICE") or "saltbox",
    )


# module-level cached settings
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() rereads the environment."""
    global _settings
    _settings = None
