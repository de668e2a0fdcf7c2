"""Output package: JSON rendering of persona results."""

from persona_protocol.output.formatter import OUTPUT_KEYS, format_persona

__all__ = ["OUTPUT_KEYS", "format_persona"]
