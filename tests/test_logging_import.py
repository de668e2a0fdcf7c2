"""
Test that persona_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from persona_logging and use the logger."""
    from persona_protocol.persona_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    logger.info("test_message", key="value")


def test_bind_wallet():
    """Wallet-scoped logger accepts further context."""
    from persona_protocol.persona_logging import bind_wallet

    log = bind_wallet("0xabc")
    log.info("test_wallet_message", tx_count=3)


def _records(stream) -> list[dict]:
    import json

    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_log_level_read_from_env_file(tmp_path, monkeypatch):
    """LOG_LEVEL in .env filters records when the environment does not set it."""
    import io

    from persona_protocol.persona_logging import configure_structlog, get_logger

    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_LEVEL=ERROR\n", encoding="utf-8")
    stream = io.StringIO()
    try:
        configure_structlog(stream=stream, env_file=env_file)
        log = get_logger("test_env_file")
        log.info("info_event_filtered")
        log.error("error_event_kept", wallet_id="0xabc")
    finally:
        configure_structlog()

    records = _records(stream)
    assert [r["event_type"] for r in records] == ["error_event_kept"]
    assert records[0]["level"] == "error"
    assert records[0]["logger"] == "test_env_file"
    assert records[0]["wallet_id"] == "0xabc"
    assert "timestamp" in records[0]


def test_environment_wins_over_env_file(tmp_path, monkeypatch):
    import io

    from persona_protocol.persona_logging import configure_structlog, get_logger
    from persona_protocol.persona_logging.logger import read_logging_env

    env_file = tmp_path / ".env"
    env_file.write_text("LOG_LEVEL=ERROR\nLOG_FORMAT=json\n", encoding="utf-8")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert read_logging_env(env_file) == ("DEBUG", "json")

    stream = io.StringIO()
    try:
        configure_structlog(stream=stream, env_file=env_file)
        get_logger("test_env_wins").debug("debug_event_kept")
    finally:
        configure_structlog()
    assert [r["event_type"] for r in _records(stream)] == ["debug_event_kept"]


def test_missing_env_file_uses_defaults(tmp_path, monkeypatch):
    from persona_protocol.persona_logging.logger import read_logging_env

    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    assert read_logging_env(tmp_path / "absent.env") == ("INFO", "json")
