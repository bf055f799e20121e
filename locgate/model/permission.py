# locgate/model/permission.py
"""
Location permission model.

Two layers:
  - PermissionStatus: raw value reported by the OS (via a PermissionProvider)
  - PermissionState:  the three states the app actually branches on
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class PermissionStatus(Enum):
    """Raw OS permission status, as reported by the platform."""
    GRANTED = "granted"
    DENIED = "denied"
    PERMANENTLY_DENIED = "permanentlyDenied"
    RESTRICTED = "restricted"
    LIMITED = "limited"
    PROVISIONAL = "provisional"


class PermissionState(Enum):
    """App-level permission state driving which UI branch is rendered."""
    GRANTED = "granted"
    DENIED = "denied"
    PERMANENTLY_DENIED = "permanentlyDenied"

    @classmethod
    def from_status(cls, status: Any) -> "PermissionState":
        """
        Normalize a raw provider status.

        Only granted and permanentlyDenied are kept; every other value
        (restricted, limited, unknown strings, None) becomes DENIED.
        """
        raw = status.value if isinstance(status, Enum) else status
        if raw == PermissionStatus.GRANTED.value:
            return cls.GRANTED
        if raw == PermissionStatus.PERMANENTLY_DENIED.value:
            return cls.PERMANENTLY_DENIED
        return cls.DENIED
