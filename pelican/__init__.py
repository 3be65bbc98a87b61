"""Normalisation layer for Pelican cloud thermostats."""

from __future__ import annotations

from .api import RESTClient
from .config import PelicanConfig
from .device import Pelican
from .discovery import discover_pelicans
from .domain import CanonicalStatus, Mode, RunState, SetSetpoints, SetState
from .errors import (
    InvalidParameterError,
    MalformedResponseError,
    PelicanError,
    TransportError,
    VendorError,
)

__all__ = [
    "CanonicalStatus",
    "InvalidParameterError",
    "MalformedResponseError",
    "Mode",
    "Pelican",
    "PelicanConfig",
    "PelicanError",
    "RESTClient",
    "RunState",
    "SetSetpoints",
    "SetState",
    "TransportError",
    "VendorError",
    "discover_pelicans",
]
