"""
Health check endpoint.
"""
import time
from datetime import datetime

from starlette.requests import Request
from starlette.responses import JSONResponse

start_time = time.time()


async def health_check(request: Request) -> JSONResponse:
    """
    Basic health check endpoint.

    Returns 200 if service is running.
    """
    runner = getattr(request.app.state, "scuttle", None)
    return JSONResponse({
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "uptime_seconds": int(time.time() - start_time),
        "scuttle_initialized": runner is not None,
    })
