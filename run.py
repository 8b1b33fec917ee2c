"""Entry point for the Nudge API server.

Serves ``nudge_api.app.main:app`` with uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (see
``nudge_api.app.core.config``).  SIGINT/SIGTERM stop the server
gracefully; the application's shutdown hook closes the MongoDB client.

Usage:
    python run.py
"""
import sys

from uvicorn import Config, Server

from nudge_api.app.core.config import settings


def main() -> None:
    """Run the API until interrupted; exit with status 1 if startup fails."""
    config = Config(
        app="nudge_api.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    server.run()
    # A failed startup (e.g. MongoDB unreachable) returns without serving.
    if not server.started:
        sys.exit(1)


if __name__ == "__main__":
    main()
