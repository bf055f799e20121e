# locgate/model/location.py
from __future__ import annotations

from enum import Enum


class LocationSessionStatus(Enum):
    """Status of a location data source (owned by the source, observed by us)."""
    STOPPED = "stopped"
    STARTING = "starting"
    STARTED = "started"
    FAILED_TO_START = "failedToStart"


class AutoPanMode(Enum):
    """How the map view follows the device location."""
    OFF = "off"
    RECENTER = "recenter"
    NAVIGATION = "navigation"
    COMPASS_NAVIGATION = "compassNavigation"
