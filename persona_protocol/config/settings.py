"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and .env files.
- Provide defaults for optional settings.
- Expose typed settings (API host/port, log level, input size limit)
  for use across the ingest layer, API server and CLI.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from persona_protocol.config.env import get_env_int, get_env_str

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"
# Inputs are expected in the tens to low thousands of transactions.
DEFAULT_MAX_TRANSACTIONS = 10_000


@dataclass(frozen=True)
class Settings:
    """Typed runtime settings. Built once per process by get_settings()."""

    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    max_transactions: int = DEFAULT_MAX_TRANSACTIONS


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Cached for the life of the process; tests call get_settings.cache_clear()
    after changing the environment.
    """
    return Settings(
        api_host=get_env_str("API_HOST", DEFAULT_API_HOST),
        api_port=get_env_int("API_PORT", DEFAULT_API_PORT, minimum=1),
        log_level=get_env_str("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        max_transactions=get_env_int(
            "PERSONA_MAX_TRANSACTIONS", DEFAULT_MAX_TRANSACTIONS, minimum=1
        ),
    )
