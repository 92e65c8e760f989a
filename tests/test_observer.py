"""Tests for the status observers."""

from unittest.mock import patch

import httpx
import pytest

from autoscuttle.errors import ObserverError
from autoscuttle.observer import (
    ClockFallbackObserver,
    HttpStatusObserver,
    build_observer,
)

URL = "http://observer.local/server"


def observer_for(handler) -> HttpStatusObserver:
    return HttpStatusObserver(URL, transport=httpx.MockTransport(handler))


class TestHttpStatusObserver:
    @pytest.mark.asyncio
    async def test_plain_text_identifier(self):
        observer = observer_for(lambda request: httpx.Response(200, text=" 203.0.113.7\n"))
        assert await observer.get_current_identifier() == "203.0.113.7"

    @pytest.mark.asyncio
    async def test_json_server_ip(self):
        observer = observer_for(
            lambda request: httpx.Response(200, json={"server_ip": "198.51.100.4"})
        )
        assert await observer.get_current_identifier() == "198.51.100.4"

    @pytest.mark.asyncio
    async def test_json_identifier_key(self):
        observer = observer_for(
            lambda request: httpx.Response(200, json={"identifier": "srv-7"})
        )
        assert await observer.get_current_identifier() == "srv-7"

    @pytest.mark.asyncio
    async def test_empty_answer_means_no_server(self):
        observer = observer_for(lambda request: httpx.Response(200, text=""))
        with pytest.raises(ObserverError, match="No server detected"):
            await observer.get_current_identifier()

    @pytest.mark.asyncio
    async def test_json_without_known_key_means_no_server(self):
        observer = observer_for(lambda request: httpx.Response(200, json={"ok": True}))
        with pytest.raises(ObserverError, match="No server detected"):
            await observer.get_current_identifier()

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        observer = observer_for(lambda request: httpx.Response(503))
        with pytest.raises(ObserverError, match="Status query failed"):
            await observer.get_current_identifier()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ObserverError):
            await observer_for(refuse).get_current_identifier()


class TestClockFallback:
    @pytest.mark.asyncio
    async def test_identifier_derived_from_clock(self):
        with patch("autoscuttle.observer.time.time", return_value=1_700_000_123.9):
            assert await ClockFallbackObserver().get_current_identifier() == "server-123"


class TestBuildObserver:
    def test_empty_url_uses_clock_fallback(self):
        assert isinstance(build_observer(""), ClockFallbackObserver)

    def test_url_builds_http_observer(self):
        observer = build_observer(URL)
        assert isinstance(observer, HttpStatusObserver)
        assert observer.url == URL

    def test_defaults_to_config(self, monkeypatch):
        monkeypatch.setattr("autoscuttle.observer.CONFIG.observer_url", URL)
        assert isinstance(build_observer(), HttpStatusObserver)
