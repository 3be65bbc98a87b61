"""Sparse write commands for Pelican thermostats."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class BaseCommand:
    """Base type for thermostat commands."""


@dataclass(slots=True)
class SetSetpoints(BaseCommand):
    """Change the heating and/or cooling setpoint."""

    heating_setpoint: float | None = None
    cooling_setpoint: float | None = None


@dataclass(slots=True)
class SetState(BaseCommand):
    """Change mode, schedule override, fan and setpoints in one write.

    ``override`` true disables the schedule; ``fan`` true forces the fan on
    and false returns it to automatic control.
    """

    mode: int | None = None
    override: bool | None = None
    fan: bool | None = None
    heating_setpoint: float | None = None
    cooling_setpoint: float | None = None
