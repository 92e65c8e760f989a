"""
Starlette-based control server for autoscuttle.

This server provides a REST API with the following endpoints:
- /scuttle/start: Start auto-scuttling toward a target server
- /scuttle/stop: Stop the active run
- /scuttle/status: Running flag and attempt count
- /scuttle/notifications: Drain success / max-attempts events
- /health: Liveness check
"""

import asyncio
import os
import sys
from contextlib import asynccontextmanager
from typing import Callable, Optional

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from autoscuttle.config import CONFIG
from autoscuttle.core.scuttle import ScuttleRunner
from autoscuttle.logger import get_logger, setup_logging
from autoscuttle.routes.health_routes import health_check
from autoscuttle.routes.scuttle_routes import (
    get_scuttle_notifications,
    get_scuttle_status,
    start_scuttle,
    stop_scuttle,
)

# Setup logging
if "--debug" in sys.argv:
    os.environ["LOG_LEVEL"] = "DEBUG"

log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
setup_logging(level=log_level, log_file=log_file)

logger = get_logger(__name__)


def _log_event(event: str, payload) -> None:
    logger.info(f"Event {event}: {payload}")


def create_app(runner_factory: Optional[Callable[[], ScuttleRunner]] = None) -> Starlette:
    """Build the application. ``runner_factory`` lets tests supply fakes."""

    @asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("Application startup - initializing ScuttleRunner")
        runner = runner_factory() if runner_factory else ScuttleRunner()
        runner.bind_loop(asyncio.get_running_loop())
        runner.add_listener(_log_event)
        app.state.scuttle = runner
        try:
            yield
        finally:
            logger.info("Application shutdown - stopping ScuttleRunner")
            await runner.shutdown()
            app.state.scuttle = None

    return Starlette(
        debug=CONFIG.debug,
        routes=[
            Route("/health", health_check, methods=["GET"]),
            Route("/scuttle/start", start_scuttle, methods=["POST"]),
            Route("/scuttle/stop", stop_scuttle, methods=["POST"]),
            Route("/scuttle/status", get_scuttle_status, methods=["GET"]),
            Route(
                "/scuttle/notifications", get_scuttle_notifications, methods=["GET"]
            ),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            )
        ],
        lifespan=lifespan,
    )


app = create_app()


def main(host: Optional[str] = None, port: Optional[int] = None):
    """Run the server with uvicorn."""
    import uvicorn

    host = host or CONFIG.host
    port = port or CONFIG.port
    logger.info(f"Serving autoscuttle on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
