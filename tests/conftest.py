# ruff: noqa: D100,D101,D102,D103,D105,D107,INP001
from __future__ import annotations

import asyncio
import copy
import inspect
from typing import Any

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers used across the suite."""

    if not config.pluginmanager.hasplugin("pytest_asyncio"):
        config.addinivalue_line(
            "markers", "asyncio: mark test as requiring asyncio event loop support."
        )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async tests when pytest-asyncio is unavailable."""

    if pyfuncitem.config.pluginmanager.hasplugin("pytest_asyncio"):
        return None

    testfunction = pyfuncitem.obj
    if not inspect.iscoroutinefunction(testfunction):
        return None

    marker = pyfuncitem.get_closest_marker("asyncio")
    if marker is None:
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name]
        for name in pyfuncitem._fixtureinfo.argnames
    }
    with asyncio.Runner(debug=False) as runner:
        runner.run(testfunction(**funcargs))
    return True


def xml_result(body: str = "", *, success: int = 1, message: str = "") -> str:
    """Return a vendor ``<result>`` document wrapping ``body``."""

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<result>{body}<success>{success}</success>"
        f"<message>{message}</message></result>"
    )


def thermostat_xml(**fields: Any) -> str:
    """Return a ``<Thermostat>`` element with default reading fields."""

    values: dict[str, Any] = {
        "temperature": "71.5",
        "humidity": "40",
        "heatSetting": "68",
        "coolSetting": "76",
        "setBy": "Schedule",
        "HeatNeedsFan": "No",
        "system": "Auto",
        "runStatus": "Off",
        "statusDisplay": "Auto",
    }
    values.update(fields)
    inner = "".join(
        f"<{key}>{value}</{key}>" for key, value in values.items() if value is not None
    )
    return f"<Thermostat>{inner}</Thermostat>"


def history_xml(*timestamps: str, name: str = "Lobby") -> str:
    """Return a ``<ThermostatHistory>`` element with one record per timestamp."""

    records = "".join(
        f"<History><timestamp>{stamp}</timestamp></History>" for stamp in timestamps
    )
    return f"<ThermostatHistory><name>{name}</name>{records}</ThermostatHistory>"


class MockResponse:
    def __init__(
        self,
        status: int,
        text_data: str | None = "",
        *,
        headers: dict[str, str] | None = None,
        text_exc: Exception | None = None,
    ) -> None:
        self.status = status
        self._text = text_data
        self._text_exc = text_exc
        self.headers = headers or {"Content-Type": "text/xml"}

    async def __aenter__(self) -> MockResponse:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def text(self) -> str:
        if self._text_exc is not None:
            raise self._text_exc
        return self._text or ""


class FakeSession:
    def __init__(self) -> None:
        self._queue: list[Any] = []
        self.request_calls: list[tuple[str, str, dict[str, Any]]] = []

    def queue(self, *responses: Any) -> None:
        self._queue.extend(responses)

    def queue_xml(self, *documents: str, status: int = 200) -> None:
        self._queue.extend(MockResponse(status, doc) for doc in documents)

    @property
    def params(self) -> list[dict[str, Any]]:
        return [call[2].get("params", {}) for call in self.request_calls]

    def request(self, method: str, url: str, *args: Any, **kwargs: Any) -> Any:
        self.request_calls.append((method, url, copy.deepcopy(kwargs)))
        if not self._queue:
            raise AssertionError("Unexpected request call with no queued response")
        result = self._queue.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
