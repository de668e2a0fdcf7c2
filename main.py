"""
Main entrypoint: Persona Protocol HTTP API.

Serves the FastAPI app with uvicorn. Host, port and log level come from the
environment (or .env): API_HOST, API_PORT, LOG_LEVEL.

Equivalent: uvicorn persona_protocol.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Configure structured logging before other imports that may log
from persona_protocol.persona_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the API server in the main thread."""
    import uvicorn

    from persona_protocol.api_server.app import app
    from persona_protocol.config import get_settings

    settings = get_settings()
    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
