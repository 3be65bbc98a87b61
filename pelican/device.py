"""Handle for a single Pelican thermostat."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta, tzinfo
import logging
import time

import aiohttp

from .api import RESTClient
from .backend.sanitize import mask_identifier
from .codecs.pelican_codec import (
    build_setpoints_clause,
    build_state_clause,
    decode_history_result,
    decode_mode,
    decode_thermostat_result,
    parse_history_timestamp,
    resolve_fan,
    resolve_override,
    resolve_run_state,
)
from .config import PelicanConfig, load_timezone
from .const import (
    DEFAULT_HISTORY_LOOKBACK,
    DEFAULT_STALE_AFTER,
    HISTORY_FIELDS,
    KEY_END,
    KEY_NAME,
    KEY_START,
    OBJECT_HISTORY,
    OBJECT_THERMOSTAT,
    OBJECT_THERMOSTAT_WRITE,
    STATUS_FIELDS,
    STATUS_UNREACHABLE,
)
from .domain.commands import SetSetpoints, SetState
from .domain.state import CanonicalStatus
from .errors import InvalidParameterError, VendorError

_LOGGER = logging.getLogger(__name__)


def _format_bound(moment: datetime, tz: tzinfo) -> str:
    """Return ``moment`` as an RFC 3339 string in ``tz``."""

    return moment.astimezone(tz).isoformat(timespec="seconds")


class Pelican:
    """One physical thermostat reachable through a Pelican site.

    The handle is immutable after construction. Reads may run concurrently;
    writes are serialised because the vendor applies them last-writer-wins.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        username: str,
        password: str,
        site: str,
        name: str,
        timezone: str | tzinfo,
        *,
        history_lookback: timedelta = DEFAULT_HISTORY_LOOKBACK,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
        api_url: str | None = None,
    ) -> None:
        """Bind the thermostat ``name`` to a REST client for ``site``."""
        if history_lookback <= timedelta(0) or stale_after <= timedelta(0):
            raise InvalidParameterError("Freshness windows must be positive")
        if stale_after < history_lookback:
            raise InvalidParameterError(
                "stale_after must not be shorter than history_lookback"
            )
        self._name = name
        self._timezone = load_timezone(timezone)
        self._history_lookback = history_lookback
        self._stale_after = stale_after
        self._client = RESTClient(session, username, password, site, api_url=api_url)
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls, session: aiohttp.ClientSession, config: PelicanConfig
    ) -> Pelican:
        """Create a handle from validated configuration."""

        return cls(
            session,
            config.username,
            config.password,
            config.site,
            config.name,
            config.tzinfo,
            history_lookback=config.history_lookback,
            stale_after=config.stale_after,
        )

    @property
    def name(self) -> str:
        """Return the thermostat name."""

        return self._name

    @property
    def timezone(self) -> tzinfo:
        """Return the timezone history timestamps are interpreted in."""

        return self._timezone

    @property
    def client(self) -> RESTClient:
        """Return the REST client bound to this thermostat."""

        return self._client

    def __repr__(self) -> str:
        """Return a representation without credentials."""

        return f"Pelican(site={self._client.site!r}, name={self._name!r})"

    # ----------------- Reads -----------------

    async def get_status(self) -> CanonicalStatus | None:
        """Return the current status, or ``None`` when it cannot be trusted.

        ``None`` means the device is unreachable or reported no history in the
        lookback window; callers should skip the cycle. A snapshot whose last
        history record is older than the staleness threshold is still returned
        with ``stale`` set.
        """

        now_ns = time.time_ns()
        now = datetime.fromtimestamp(now_ns / 1_000_000_000, tz=UTC)
        masked = mask_identifier(self._name)

        bag = await self._client.query(
            OBJECT_THERMOSTAT, {KEY_NAME: self._name}, STATUS_FIELDS
        )
        result = decode_thermostat_result(bag)
        if not result.ok:
            raise VendorError(
                result.message,
                context=f"Error retrieving thermostat status for {masked}",
            )

        reading = result.thermostat
        if reading.status_display == STATUS_UNREACHABLE:
            _LOGGER.info("Thermostat %s is unreachable", masked)
            return None

        fan = resolve_fan(reading.run_status, reading.heat_needs_fan)
        state = resolve_run_state(reading.run_status)

        last_seen = await self._last_history_timestamp(now)
        if last_seen is None:
            _LOGGER.debug(
                "Thermostat %s reported no history in the last %s",
                masked,
                self._history_lookback,
            )
            return None

        stale = last_seen < now - self._stale_after
        if stale:
            _LOGGER.warning(
                "Thermostat %s data has not changed since %s (over %s); "
                "this is not necessarily an error",
                masked,
                last_seen.isoformat(),
                self._stale_after,
            )

        return CanonicalStatus(
            temperature=reading.temperature,
            relative_humidity=reading.humidity,
            heating_setpoint=reading.heat_setting,
            cooling_setpoint=reading.cool_setting,
            override=resolve_override(reading.set_by),
            fan=fan,
            mode=decode_mode(reading.system),
            state=state,
            time=now_ns,
            stale=stale,
        )

    async def _last_history_timestamp(self, now: datetime) -> datetime | None:
        """Return the most recent history timestamp in the lookback window.

        The selection is scoped to this thermostat by name as well as by time.
        The API also accepts the time bounds alone, which returns records for
        every thermostat on the site; the name keeps another device's records
        from making this one look fresh.
        """

        selection = {
            KEY_NAME: self._name,
            KEY_START: _format_bound(now - self._history_lookback, self._timezone),
            KEY_END: _format_bound(now, self._timezone),
        }
        bag = await self._client.query(OBJECT_HISTORY, selection, HISTORY_FIELDS)
        result = decode_history_result(bag)
        if not result.ok:
            raise VendorError(
                result.message,
                context=(
                    "Error retrieving thermostat history for "
                    f"{mask_identifier(self._name)}"
                ),
            )

        timestamps = result.timestamps()
        if not timestamps:
            return None
        return parse_history_timestamp(timestamps[-1], self._timezone)

    # ----------------- Writes -----------------

    async def set_setpoints(self, command: SetSetpoints) -> None:
        """Write the heating and/or cooling setpoint."""

        clause = build_setpoints_clause(command)
        await self._write(clause, "Error modifying thermostat temp settings")

    async def set_state(self, command: SetState) -> None:
        """Write mode, schedule override, fan and setpoints."""

        clause = build_state_clause(command)
        await self._write(clause, "Error modifying thermostat state")

    async def _write(self, clause: str, context: str) -> None:
        """Send a value clause to this thermostat.

        An empty clause is sent as-is; the vendor treats it as a no-op.
        """

        _LOGGER.debug(
            "Writing %r to thermostat %s", clause, mask_identifier(self._name)
        )
        async with self._write_lock:
            bag = await self._client.write(
                OBJECT_THERMOSTAT_WRITE, {KEY_NAME: self._name}, clause
            )
        result = decode_thermostat_result(bag)
        if not result.ok:
            raise VendorError(result.message, context=context)


__all__ = ["Pelican"]
