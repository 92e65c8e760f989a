"""
Auto-scuttle API routes.
"""

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from autoscuttle.core.scuttle import ScuttleRunner
from autoscuttle.errors import AlreadyRunningError
from autoscuttle.logger import get_logger
from autoscuttle.models import (
    NotificationListResponse,
    StartRequest,
    StatusResponse,
)

logger = get_logger(__name__)


def _get_runner(request: Request) -> ScuttleRunner | None:
    """Get the ScuttleRunner from app state."""
    return getattr(request.app.state, "scuttle", None)


def _not_initialized() -> JSONResponse:
    return JSONResponse({"error": "ScuttleRunner not initialized"}, status_code=503)


async def start_scuttle(request: Request) -> JSONResponse:
    """
    POST /scuttle/start: Start auto-scuttling toward a server.

    Body: {"target_server": "203.0.113.7"}
    """
    if not (runner := _get_runner(request)):
        return _not_initialized()

    try:
        body = await request.json()
        start_req = StartRequest(**body)
    except ValidationError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception:
        return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

    try:
        runner.start(start_req.target_server)
    except AlreadyRunningError as e:
        return JSONResponse({"error": e.code}, status_code=409)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except Exception as e:
        logger.error(f"Error starting auto-scuttle: {e}")
        return JSONResponse({"error": f"Internal error: {e}"}, status_code=500)

    return JSONResponse({"success": True})


async def stop_scuttle(request: Request) -> JSONResponse:
    """POST /scuttle/stop: Request cooperative cancellation."""
    if not (runner := _get_runner(request)):
        return _not_initialized()
    runner.stop()
    return JSONResponse({"success": True})


async def get_scuttle_status(request: Request) -> JSONResponse:
    """GET /scuttle/status: Current run state and attempt count."""
    if not (runner := _get_runner(request)):
        return _not_initialized()
    resp = StatusResponse(**runner.status_dict())
    return JSONResponse(resp.model_dump())


async def get_scuttle_notifications(request: Request) -> JSONResponse:
    """GET /scuttle/notifications: Drain pending success/max-attempts events."""
    if not (runner := _get_runner(request)):
        return _not_initialized()
    resp = NotificationListResponse(notifications=runner.drain_notifications())
    return JSONResponse(resp.model_dump())
