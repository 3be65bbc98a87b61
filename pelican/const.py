"""Constants for the Pelican thermostat client."""

from __future__ import annotations

from datetime import timedelta
from typing import Final

# HTTP base
API_URL_FMT: Final = "https://{site}.officeclimatecontrol.net/api.cgi"
REQUEST_TIMEOUT: Final = 25

# Request verbs
REQUEST_GET: Final = "get"
REQUEST_SET: Final = "set"

# Vendor objects. Writes use the lower case object name.
OBJECT_THERMOSTAT: Final = "Thermostat"
OBJECT_THERMOSTAT_WRITE: Final = "thermostat"
OBJECT_HISTORY: Final = "ThermostatHistory"
OBJECT_SITE: Final = "Site"

# Field selections
STATUS_FIELDS: Final = (
    "temperature",
    "humidity",
    "heatSetting",
    "coolSetting",
    "setBy",
    "HeatNeedsFan",
    "system",
    "runStatus",
    "statusDisplay",
)
HISTORY_FIELDS: Final = ("timestamp",)
DISCOVERY_FIELDS: Final = ("name", "description")
SITE_FIELDS: Final = ("timeZone",)

# Vendor tokens
STATUS_UNREACHABLE: Final = "Unreachable"
SET_BY_SCHEDULE: Final = "Schedule"
RUN_STATUS_OFF: Final = "Off"
RUN_STATUS_HEAT_PREFIX: Final = "Heat"
HEAT_NEEDS_FAN_YES: Final = "Yes"
SCHEDULE_ON: Final = "On"
SCHEDULE_OFF: Final = "Off"
FAN_ON: Final = "On"
FAN_AUTO: Final = "Auto"

# Value clause keys
KEY_SYSTEM: Final = "system"
KEY_SCHEDULE: Final = "schedule"
KEY_FAN: Final = "fan"
KEY_HEAT_SETTING: Final = "heatSetting"
KEY_COOL_SETTING: Final = "coolSetting"
KEY_NAME: Final = "name"
KEY_START: Final = "startDateTime"
KEY_END: Final = "endDateTime"

# History records carry no seconds and no offset.
HISTORY_TIMESTAMP_FORMAT: Final = "%Y-%m-%dT%H:%M"

# Freshness windows
DEFAULT_HISTORY_LOOKBACK: Final = timedelta(hours=1)
DEFAULT_STALE_AFTER: Final = timedelta(hours=2)
