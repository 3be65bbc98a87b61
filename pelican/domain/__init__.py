"""Domain types for Pelican thermostats."""

from __future__ import annotations

from .commands import BaseCommand, SetSetpoints, SetState
from .state import CanonicalStatus, Mode, RunState

__all__ = [
    "BaseCommand",
    "CanonicalStatus",
    "Mode",
    "RunState",
    "SetSetpoints",
    "SetState",
]
