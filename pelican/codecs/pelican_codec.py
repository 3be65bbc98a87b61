"""Codec helpers for Pelican vendor interactions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, tzinfo
import logging
from types import MappingProxyType
from typing import Any, TypeVar
from xml.parsers.expat import ExpatError

from pydantic import BaseModel, ValidationError
import xmltodict

from ..const import (
    FAN_AUTO,
    FAN_ON,
    HEAT_NEEDS_FAN_YES,
    HISTORY_TIMESTAMP_FORMAT,
    KEY_COOL_SETTING,
    KEY_FAN,
    KEY_HEAT_SETTING,
    KEY_SCHEDULE,
    KEY_SYSTEM,
    RUN_STATUS_HEAT_PREFIX,
    RUN_STATUS_OFF,
    SCHEDULE_OFF,
    SCHEDULE_ON,
    SET_BY_SCHEDULE,
)
from ..domain.commands import SetSetpoints, SetState
from ..domain.state import Mode, RunState
from ..errors import InvalidParameterError, MalformedResponseError
from .common import encode_clause, truncate_setpoint
from .pelican_models import (
    DiscoveryResult,
    HistoryResult,
    SiteResult,
    ThermostatResult,
)

_LOGGER = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

MODE_TOKENS: Mapping[int, str] = MappingProxyType(
    {
        Mode.OFF: "Off",
        Mode.HEAT: "Heat",
        Mode.COOL: "Cool",
        Mode.AUTO: "Auto",
    }
)
TOKEN_MODES: Mapping[str, Mode] = MappingProxyType(
    {token: Mode(mode) for mode, token in MODE_TOKENS.items()}
)

RUN_STATUS_STATES: Mapping[str, RunState] = MappingProxyType(
    {
        "Off": RunState.OFF,
        "Heat-Stage1": RunState.HEATING,
        "Heat-Stage2": RunState.HEATING,
        "Cool-Stage1": RunState.COOLING,
        "Cool-Stage2": RunState.COOLING,
    }
)


# ----------------- Enum translation -----------------


def encode_mode(mode: Any) -> str:
    """Return the vendor ``system`` token for a canonical mode."""

    if isinstance(mode, bool) or not isinstance(mode, int):
        raise InvalidParameterError(f"Invalid thermostat mode: {mode!r}")
    token = MODE_TOKENS.get(mode)
    if token is None:
        raise InvalidParameterError(f"Specified thermostat mode {mode} is invalid")
    return token


def decode_mode(token: str | None) -> Mode:
    """Return the canonical mode for a vendor ``system`` token."""

    mode = TOKEN_MODES.get(token or "")
    if mode is None:
        _LOGGER.debug("Unknown system token %r; treating as Off", token)
        return Mode.OFF
    return mode


def resolve_run_state(run_status: str | None) -> RunState:
    """Return the operating state for a vendor run status.

    Tokens outside the known heat and cool stages, including the fan running
    on its own, resolve to ``RunState.OFF``.
    """

    state = RUN_STATUS_STATES.get(run_status or "")
    if state is None:
        _LOGGER.debug("Run status %r is not heating or cooling", run_status)
        return RunState.OFF
    return state


def resolve_fan(run_status: str | None, heat_needs_fan: str | None) -> bool:
    """Return whether the fan is running."""

    status = run_status or ""
    if status.startswith(RUN_STATUS_HEAT_PREFIX):
        return heat_needs_fan == HEAT_NEEDS_FAN_YES
    return status != RUN_STATUS_OFF


def resolve_override(set_by: str | None) -> bool:
    """Return True when the setpoints were not set by the schedule."""

    return set_by != SET_BY_SCHEDULE


# ----------------- Value clauses -----------------


def build_setpoints_clause(command: SetSetpoints) -> str:
    """Encode a setpoint change as ``heatSetting:..;coolSetting:..;``."""

    return encode_clause(
        _setpoint_pairs(command.heating_setpoint, command.cooling_setpoint)
    )


def build_state_clause(command: SetState) -> str:
    """Encode a state change in mode, schedule, fan, heat, cool order."""

    pairs: list[tuple[str, Any]] = []
    if command.mode is not None:
        pairs.append((KEY_SYSTEM, encode_mode(command.mode)))
    if command.override is not None:
        # An active override means the schedule is switched off.
        pairs.append((KEY_SCHEDULE, SCHEDULE_OFF if command.override else SCHEDULE_ON))
    if command.fan is not None:
        pairs.append((KEY_FAN, FAN_ON if command.fan else FAN_AUTO))
    pairs.extend(
        _setpoint_pairs(command.heating_setpoint, command.cooling_setpoint)
    )
    return encode_clause(pairs)


def _setpoint_pairs(
    heating: float | None, cooling: float | None
) -> Iterable[tuple[str, int]]:
    """Yield truncated setpoint pairs in heat-then-cool order."""

    if heating is not None:
        yield KEY_HEAT_SETTING, truncate_setpoint(heating)
    if cooling is not None:
        yield KEY_COOL_SETTING, truncate_setpoint(cooling)


# ----------------- Response decoding -----------------


def _prune(value: Any) -> Any:
    """Drop empty elements so model defaults apply."""

    if isinstance(value, dict):
        return {key: _prune(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [{} if item is None else _prune(item) for item in value]
    return value


def decode_envelope(text: str | bytes | None) -> dict[str, Any]:
    """Decode an XML ``<result>`` document into a field bag."""

    if not text:
        raise MalformedResponseError("Empty response body")
    try:
        document = xmltodict.parse(text)
    except ExpatError as err:
        raise MalformedResponseError(f"Failed to decode response XML: {err}") from err
    if not isinstance(document, dict) or len(document) != 1:
        raise MalformedResponseError("Response XML has no single root element")
    root = next(iter(document.values()))
    if root is None:
        return {}
    if not isinstance(root, dict):
        raise MalformedResponseError(f"Unexpected response root content: {root!r}")
    return _prune(root)


def _validate(model_cls: type[_ModelT], bag: Mapping[str, Any]) -> _ModelT:
    """Validate ``bag`` against ``model_cls``."""

    try:
        return model_cls.model_validate(dict(bag))
    except ValidationError as err:
        raise MalformedResponseError(
            f"Invalid {model_cls.__name__} payload: {err}"
        ) from err


def decode_thermostat_result(bag: Mapping[str, Any]) -> ThermostatResult:
    """Validate a ``Thermostat`` read or write result."""

    return _validate(ThermostatResult, bag)


def decode_history_result(bag: Mapping[str, Any]) -> HistoryResult:
    """Validate a ``ThermostatHistory`` result."""

    return _validate(HistoryResult, bag)


def decode_site_result(bag: Mapping[str, Any]) -> SiteResult:
    """Validate a ``Site`` result."""

    return _validate(SiteResult, bag)


def decode_discovery_result(bag: Mapping[str, Any]) -> DiscoveryResult:
    """Validate a site-wide thermostat listing."""

    return _validate(DiscoveryResult, bag)


def parse_history_timestamp(value: str, tz: tzinfo) -> datetime:
    """Parse a ``YYYY-MM-DDThh:mm`` history timestamp in ``tz``."""

    try:
        parsed = datetime.strptime(value, HISTORY_TIMESTAMP_FORMAT)
    except (TypeError, ValueError) as err:
        raise MalformedResponseError(
            f"Error parsing history timestamp {value!r}"
        ) from err
    return parsed.replace(tzinfo=tz)


__all__ = [
    "MODE_TOKENS",
    "RUN_STATUS_STATES",
    "TOKEN_MODES",
    "build_setpoints_clause",
    "build_state_clause",
    "decode_discovery_result",
    "decode_envelope",
    "decode_history_result",
    "decode_mode",
    "decode_site_result",
    "decode_thermostat_result",
    "encode_mode",
    "parse_history_timestamp",
    "resolve_fan",
    "resolve_override",
    "resolve_run_state",
]
