"""
Environment variable loading for Persona Protocol.

- API_HOST / API_PORT: bind address for the HTTP wrapper
- LOG_LEVEL / LOG_FORMAT: read by persona_logging at import
- PERSONA_MAX_TRANSACTIONS: upper bound on transactions per request
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from persona_protocol.persona_logging import get_logger

logger = get_logger(__name__)

# Project root: config is persona_protocol/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_persona_env() -> None:
    """Load .env from project root. Existing environment variables win. Safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def get_env_str(name: str, default: str) -> str:
    """Return a stripped env value, or default when unset or blank."""
    load_persona_env()
    raw = (os.getenv(name) or "").strip()
    return raw or default


def get_env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    """
    Return an integer env value.

    Unparseable values (or values below minimum) fall back to default and are
    logged, so a typo in .env never stops the service from starting.
    """
    raw = get_env_str(name, "")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("env_invalid_int", name=name, value=raw, default=default)
        return default
    if minimum is not None and value < minimum:
        logger.warning("env_below_minimum", name=name, value=value, minimum=minimum, default=default)
        return default
    return value
