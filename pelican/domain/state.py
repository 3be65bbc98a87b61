"""Canonical thermostat state objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class Mode(IntEnum):
    """Configured system mode of a thermostat."""

    OFF = 0
    HEAT = 1
    COOL = 2
    AUTO = 3


class RunState(IntEnum):
    """Current operating condition, independent of the configured mode."""

    OFF = 0
    HEATING = 1
    COOLING = 2


@dataclass(frozen=True, slots=True)
class CanonicalStatus:
    """Normalised snapshot of one thermostat for a single poll cycle.

    Temperatures and setpoints are reported in the units the device is
    configured for; Celsius devices are passed through unconverted.
    ``time`` is the capture time in nanoseconds since the epoch, taken from
    the local clock rather than the vendor's. ``stale`` is set when the most
    recent history record is older than the freshness threshold.
    """

    temperature: float
    relative_humidity: float
    heating_setpoint: float
    cooling_setpoint: float
    override: bool
    fan: bool
    mode: Mode
    state: RunState
    time: int
    stale: bool = False

    def as_dict(self) -> dict[str, Any]:
        """Return the snapshot as a flat mapping with integer enums."""

        return {
            "temperature": self.temperature,
            "relative_humidity": self.relative_humidity,
            "heating_setpoint": self.heating_setpoint,
            "cooling_setpoint": self.cooling_setpoint,
            "override": self.override,
            "fan": self.fan,
            "mode": int(self.mode),
            "state": int(self.state),
            "time": self.time,
        }
