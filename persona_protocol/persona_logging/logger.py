"""
Structured logging for Persona Protocol, built on structlog.

Every record carries timestamp, level, logger and event_type (the first
positional argument) plus keyword context such as wallet_id or tx_count.

LOG_LEVEL and LOG_FORMAT (json | console) are read from the process
environment first, then from the project's .env file, so the logger agrees
with config.settings. Records go to stderr; stdout belongs to the CLI output.

Imports nothing from persona_protocol, so any module can import it first.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Any

import structlog
from dotenv import dotenv_values

# persona_protocol/persona_logging/logger.py -> project root
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "json"


def read_logging_env(env_file: Path | None = None) -> tuple[str, str]:
    """
    Resolve (level, format) for the logger.

    A non-blank environment variable wins over the .env file, which wins over
    the defaults; the same precedence config.env applies via load_dotenv.
    """
    path = env_file or ENV_FILE
    from_file = dotenv_values(path) if path.is_file() else {}

    def _pick(name: str, default: str) -> str:
        for candidate in (os.getenv(name), from_file.get(name)):
            if candidate and candidate.strip():
                return candidate.strip()
        return default

    return _pick("LOG_LEVEL", DEFAULT_LEVEL).upper(), _pick("LOG_FORMAT", DEFAULT_FORMAT).lower()


def configure_structlog(
    level: str | None = None,
    fmt: str | None = None,
    *,
    stream: IO[str] | None = None,
    env_file: Path | None = None,
) -> None:
    """
    (Re)configure structlog. Explicit arguments override the environment.

    Runs once at import; call again (e.g. from tests) to change level,
    renderer or destination. Loggers obtained earlier keep their old setup.
    """
    env_level, env_format = read_logging_env(env_file)
    level = (level or env_level).upper()
    fmt = (fmt or env_format).lower()
    out = stream or sys.stderr

    renderer: Any
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.EventRenamer("event_type"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("persona_assembled", wallet_id=addr, title="DeFi Degen")

    renders as {"event_type": "persona_assembled", "wallet_id": "...",
    "title": "DeFi Degen", "level": "info", "logger": "...", "timestamp": "..."}.
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_wallet(wallet_id: str) -> structlog.BoundLogger:
    """Logger with wallet_id bound to every subsequent call."""
    return get_logger("persona_protocol").bind(wallet_id=wallet_id)
