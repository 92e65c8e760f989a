"""
Status observers: report which server the game is currently connected to.

The HTTP observer asks a companion status endpoint (for example the fleet
overlay's local API). Without one, the clock fallback synthesizes an
identifier from wall-clock time. That identifier is never a real server, so a
run without an observer always ends by exhausting its attempts.
"""

import time
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from autoscuttle.config import CONFIG
from autoscuttle.errors import ObserverError
from autoscuttle.logger import get_logger

logger = get_logger(__name__)


class StatusObserver(ABC):
    """Reports the environment's current identifying state."""

    @abstractmethod
    async def get_current_identifier(self) -> str:
        """Return the current server identifier. Raises ObserverError."""


class HttpStatusObserver(StatusObserver):
    """Queries a status endpoint over HTTP.

    The endpoint may answer with JSON (``{"server_ip": ...}``,
    ``{"identifier": ...}`` or ``{"server": ...}``) or with the identifier
    as plain text. An empty answer means no server is detected.
    """

    _KEYS = ("server_ip", "identifier", "server")

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def get_current_identifier(self) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self.url)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise ObserverError(f"Status query failed: {e}") from e

        identifier = self._parse(resp)
        if not identifier:
            raise ObserverError("No server detected")
        return identifier

    def _parse(self, resp: httpx.Response) -> str:
        if "application/json" in resp.headers.get("content-type", ""):
            try:
                data = resp.json()
            except ValueError as e:
                raise ObserverError(f"Malformed status response: {e}") from e
            if isinstance(data, str):
                return data.strip()
            if isinstance(data, dict):
                for key in self._KEYS:
                    if data.get(key):
                        return str(data[key]).strip()
            return ""
        return resp.text.strip()


class ClockFallbackObserver(StatusObserver):
    """Stand-in used when no real observer is available."""

    async def get_current_identifier(self) -> str:
        return f"server-{int(time.time()) % 1000}"


def build_observer(url: Optional[str] = None) -> StatusObserver:
    """Build the observer for the configured endpoint, or the clock fallback."""
    url = CONFIG.observer_url if url is None else url
    if url:
        logger.info(f"Using status observer at {url}")
        return HttpStatusObserver(url, timeout=CONFIG.observer_timeout)

    logger.warning(
        "No status observer configured; server ids will be synthesized from the clock"
    )
    return ClockFallbackObserver()
