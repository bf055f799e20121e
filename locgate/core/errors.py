# locgate/core/errors.py
from __future__ import annotations


class LocGateError(Exception):
    """
    Base class for all expected operational errors in locgate.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, UI notifications, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no provider access yet)
# ---------------------------------------------------------------------------

class ConfigError(LocGateError):
    """
    Configuration or scenario file is missing, malformed or inconsistent.

    Examples:
      - YAML syntax error
      - unknown auto-pan mode or resume policy
      - scenario step with an unknown action
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Location session errors
# ---------------------------------------------------------------------------

class StartError(LocGateError):
    """
    The location data source failed to start.

    Examples:
      - location services disabled on the device
      - platform-level denial
      - transient hardware failure

    Non-fatal: reported once to the user, the session still becomes ready.
    """
    code = "location_start_failed"


# ---------------------------------------------------------------------------
# Permission flow errors
# ---------------------------------------------------------------------------

class SettingsOpenError(LocGateError):
    """
    The OS settings screen could not be opened.

    The settings-opened flag stays false, so the next resume does not
    re-query the permission status.
    """
    code = "settings_open_failed"
