from __future__ import annotations

import asyncio
import logging

import aiohttp
import pytest

from pelican.api import RESTClient
import pelican.api as api
from pelican.errors import MalformedResponseError, TransportError

from conftest import FakeSession, MockResponse, thermostat_xml, xml_result


def _client(session: FakeSession) -> RESTClient:
    return RESTClient(session, "ops@example.com", "hunter2", "acme")


def test_api_url_from_site(session: FakeSession) -> None:
    client = _client(session)

    assert client.api_url == "https://acme.officeclimatecontrol.net/api.cgi"
    assert client.site == "acme"


def test_query_builds_parameters(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue_xml(xml_result(thermostat_xml()))
        client = _client(session)

        bag = await client.query(
            "Thermostat", {"name": "Lobby"}, ("temperature", "humidity")
        )

        assert bag["success"] == "1"
        assert bag["Thermostat"]["temperature"] == "71.5"

        method, url, kwargs = session.request_calls[0]
        assert method == "GET"
        assert url == "https://acme.officeclimatecontrol.net/api.cgi"
        assert kwargs["params"] == {
            "username": "ops@example.com",
            "password": "hunter2",
            "request": "get",
            "object": "Thermostat",
            "selection": "name:Lobby;",
            "value": "temperature;humidity",
        }
        assert list(kwargs["params"]) == [
            "username",
            "password",
            "request",
            "object",
            "selection",
            "value",
        ]

    asyncio.run(_run())


def test_query_without_selection(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue_xml(xml_result())
        await _client(session).query("Site", None, ("timeZone",))

        assert "selection" not in session.params[0]
        assert session.params[0]["value"] == "timeZone"

    asyncio.run(_run())


def test_write_builds_parameters(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue_xml(xml_result())
        await _client(session).write(
            "thermostat", {"name": "Lobby"}, "heatSetting:68;"
        )

        assert session.params[0] == {
            "username": "ops@example.com",
            "password": "hunter2",
            "request": "set",
            "object": "thermostat",
            "selection": "name:Lobby;",
            "value": "heatSetting:68;",
        }

    asyncio.run(_run())


def test_http_error_raises_transport_error(
    session: FakeSession, caplog: pytest.LogCaptureFixture
) -> None:
    async def _run() -> None:
        session.queue(MockResponse(503, "password=hunter2 unavailable"))

        with caplog.at_level(logging.ERROR):
            with pytest.raises(TransportError, match="HTTP 503"):
                await _client(session).query("Thermostat", None, ("name",))

    asyncio.run(_run())
    assert "hunter2" not in caplog.text
    assert "password=***" in caplog.text


def test_client_error_raises_transport_error(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue(aiohttp.ClientConnectionError("connection reset"))

        with pytest.raises(TransportError, match="connection reset") as exc:
            await _client(session).query("Thermostat", None, ("name",))
        assert isinstance(exc.value.__cause__, aiohttp.ClientConnectionError)

    asyncio.run(_run())


def test_timeout_raises_transport_error(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue(MockResponse(200, text_exc=asyncio.TimeoutError()))

        with pytest.raises(TransportError, match="TimeoutError"):
            await _client(session).query("Thermostat", None, ("name",))

    asyncio.run(_run())


def test_cancellation_is_not_wrapped(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue(asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await _client(session).query("Thermostat", None, ("name",))

    asyncio.run(_run())


def test_malformed_body_raises(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue_xml("<html><body>Maintenance")

        with pytest.raises(MalformedResponseError):
            await _client(session).query("Thermostat", None, ("name",))

    asyncio.run(_run())


def test_undecodable_body_raises_malformed(session: FakeSession) -> None:
    async def _run() -> None:
        session.queue(
            MockResponse(
                200,
                text_exc=UnicodeDecodeError(
                    "utf-8", b"\xff", 0, 1, "invalid start byte"
                ),
            )
        )

        with pytest.raises(MalformedResponseError, match="not valid text") as exc:
            await _client(session).query("Thermostat", None, ("name",))
        assert isinstance(exc.value.__cause__, UnicodeDecodeError)

    asyncio.run(_run())


def test_request_preview_logs_redacted_body(
    session: FakeSession,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def _run() -> None:
        monkeypatch.setattr(api, "API_LOG_PREVIEW", True)
        session.queue_xml(xml_result("<password>hunter2</password>"))

        with caplog.at_level(logging.DEBUG, logger="pelican.api"):
            await _client(session).query("Thermostat", None, ("name",))

    asyncio.run(_run())
    previews = [rec.message for rec in caplog.records if "body[0:200]" in rec.message]
    assert previews
    assert "hunter2" not in previews[0]
