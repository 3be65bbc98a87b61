"""Pydantic models for Pelican API result envelopes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_list(value: Any) -> Any:
    """Wrap a single repeated element into a list."""

    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    return value


class ResultEnvelope(BaseModel):
    """Fields shared by every ``<result>`` document."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: int = 0
    message: str | None = None

    @property
    def ok(self) -> bool:
        """Return True when the vendor reported success."""

        return self.success != 0


class ThermostatReading(BaseModel):
    """Current reading of a single ``Thermostat`` object."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    temperature: float = 0.0
    humidity: float = 0.0
    heat_setting: float = Field(default=0.0, alias="heatSetting")
    cool_setting: float = Field(default=0.0, alias="coolSetting")
    set_by: str = Field(default="", alias="setBy")
    heat_needs_fan: str = Field(default="", alias="HeatNeedsFan")
    system: str = ""
    run_status: str = Field(default="", alias="runStatus")
    status_display: str = Field(default="", alias="statusDisplay")


class ThermostatResult(ResultEnvelope):
    """Result of a ``Thermostat`` read or write."""

    thermostat: ThermostatReading = Field(
        default_factory=ThermostatReading, alias="Thermostat"
    )

    @field_validator("thermostat", mode="before")
    @classmethod
    def _first_thermostat(cls, value: Any) -> Any:
        """Use the first element when several thermostats are returned."""

        if isinstance(value, list):
            return value[0] if value else {}
        return value


class HistoryRecord(BaseModel):
    """A single ``History`` element."""

    model_config = ConfigDict(extra="ignore")

    timestamp: str = ""


class HistoryGroup(BaseModel):
    """History records reported for one thermostat."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = None
    history: list[HistoryRecord] = Field(default_factory=list, alias="History")

    @field_validator("history", mode="before")
    @classmethod
    def _wrap_history(cls, value: Any) -> Any:
        """Accept a single ``History`` element."""

        return _as_list(value)


class HistoryResult(ResultEnvelope):
    """Result of a ``ThermostatHistory`` read."""

    groups: list[HistoryGroup] = Field(
        default_factory=list, alias="ThermostatHistory"
    )

    @field_validator("groups", mode="before")
    @classmethod
    def _wrap_groups(cls, value: Any) -> Any:
        """Accept a single ``ThermostatHistory`` element."""

        return _as_list(value)

    def timestamps(self) -> list[str]:
        """Return every record timestamp in document order."""

        return [record.timestamp for group in self.groups for record in group.history]


class SiteAttributes(BaseModel):
    """Attributes of the ``Site`` object."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    time_zone: str = Field(default="", alias="timeZone")


class SiteResult(ResultEnvelope):
    """Result of a ``Site`` read."""

    attribute: SiteAttributes = Field(default_factory=SiteAttributes)


class ThermostatSummary(BaseModel):
    """Name and description of a thermostat returned by discovery."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    description: str | None = None


class DiscoveryResult(ResultEnvelope):
    """Result of a site-wide ``Thermostat`` listing."""

    thermostats: list[ThermostatSummary] = Field(
        default_factory=list, alias="Thermostat"
    )

    @field_validator("thermostats", mode="before")
    @classmethod
    def _wrap_thermostats(cls, value: Any) -> Any:
        """Accept a single ``Thermostat`` element."""

        return _as_list(value)
