"""
Structured logging for Persona Protocol.

JSON logs with timestamp, wallet_id and event_type.
Use get_logger() in all modules for aggregation-friendly output.
"""

from persona_protocol.persona_logging.logger import bind_wallet, configure_structlog, get_logger

__all__ = ["bind_wallet", "configure_structlog", "get_logger"]
