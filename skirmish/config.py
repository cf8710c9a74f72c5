"""
Configuration read from the environment.

    SKIRMISH_LOG_LEVEL    logging level name (default WARNING)
    SKIRMISH_LOG_FORMAT   logging format string
    SKIRMISH_SEED         integer seed for the demo dice (default: unseeded)
    SKIRMISH_ENV          deployment label (default development)
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    log_format: str = DEFAULT_LOG_FORMAT
    seed: int | None = None
    env: str = "development"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        environ = os.environ if environ is None else environ
        seed = environ.get("SKIRMISH_SEED")
        try:
            seed_value = int(seed) if seed not in (None, "") else None
        except ValueError:
            raise ValueError(f"SKIRMISH_SEED must be an integer, got {seed!r}")
        return cls(
            log_level=environ.get("SKIRMISH_LOG_LEVEL", "WARNING").upper(),
            log_format=environ.get("SKIRMISH_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            seed=seed_value,
            env=environ.get("SKIRMISH_ENV", "development"),
        )


def get_settings() -> Settings:
    """Current settings, read fresh from the process environment."""
    return Settings.from_env()


def configure_logging(settings: Settings | None = None) -> None:
    """Install a basic root handler at the configured level."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=settings.log_format)
