"""
Configuration management for Persona Protocol.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for service configuration.
"""

from persona_protocol.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
