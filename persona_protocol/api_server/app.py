"""
FastAPI/ASGI application entrypoint.

Build and configure the ASGI app; routes live in server.
Run with: uvicorn persona_protocol.api_server.app:app --host 0.0.0.0 --port 8000
"""

from persona_protocol.api_server.server import app

__all__ = ["app"]
