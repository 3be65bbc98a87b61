"""Configuration for Pelican thermostat handles."""

from __future__ import annotations

from datetime import timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .const import DEFAULT_HISTORY_LOOKBACK, DEFAULT_STALE_AFTER
from .errors import InvalidParameterError


def load_timezone(value: str | tzinfo) -> tzinfo:
    """Return a ``tzinfo`` for an IANA name or pass an existing one through."""

    if isinstance(value, tzinfo):
        return value
    try:
        return ZoneInfo(str(value).strip())
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise InvalidParameterError(f"Invalid timezone: {value!r}") from err


class PelicanConfig(BaseModel):
    """Connection settings for one thermostat."""

    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)

    username: str = Field(min_length=1)
    password: str = Field(min_length=1, repr=False)
    site: str = Field(min_length=1, pattern=r"^[A-Za-z0-9-]+$")
    name: str = Field(min_length=1)
    timezone: str = "UTC"
    history_lookback: timedelta = DEFAULT_HISTORY_LOOKBACK
    stale_after: timedelta = DEFAULT_STALE_AFTER

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        """Reject timezone names missing from the tz database."""

        load_timezone(value)
        return value

    @field_validator("history_lookback", "stale_after")
    @classmethod
    def _positive_window(cls, value: timedelta) -> timedelta:
        """Require freshness windows to be positive."""

        if value <= timedelta(0):
            raise ValueError("window must be positive")
        return value

    @model_validator(mode="after")
    def _stale_after_lookback(self) -> PelicanConfig:
        """Keep the staleness threshold at or beyond the history window."""

        if self.stale_after < self.history_lookback:
            raise ValueError("stale_after must not be shorter than history_lookback")
        return self

    @property
    def tzinfo(self) -> tzinfo:
        """Return the configured timezone."""

        return load_timezone(self.timezone)


__all__ = ["PelicanConfig", "load_timezone"]
