# locgate/app/views.py
"""
View models for the three permission branches.

render() is the only place that decides which branch is shown.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from locgate.app.config import DEFAULT_SETTINGS_MESSAGE
from locgate.model.location import AutoPanMode, LocationSessionStatus
from locgate.model.permission import PermissionState
from locgate.runtime.state import AppState


@dataclass(frozen=True)
class MapView:
    """Map with the device location; controls disabled until ready."""
    ready: bool
    auto_pan_mode: AutoPanMode
    status: LocationSessionStatus
    location_enabled: bool = True

    @property
    def show_progress(self) -> bool:
        return self.location_enabled and not self.ready


@dataclass(frozen=True)
class RequestPermissionView:
    button_label: str = "Enable Location"


@dataclass(frozen=True)
class OpenSettingsView:
    message: str = DEFAULT_SETTINGS_MESSAGE
    button_label: str = "Open App Settings"


View = Union[MapView, RequestPermissionView, OpenSettingsView]


def render(state: AppState, *, settings_message: str = DEFAULT_SETTINGS_MESSAGE) -> View:
    permission = state.permission.permission

    if permission is PermissionState.GRANTED:
        session = state.session
        return MapView(
            ready=session.ready,
            auto_pan_mode=session.auto_pan_mode,
            status=session.status,
            location_enabled=session.location_enabled,
        )
    if permission is PermissionState.DENIED:
        return RequestPermissionView()
    if permission is PermissionState.PERMANENTLY_DENIED:
        return OpenSettingsView(message=settings_message)

    raise AssertionError(f"Unhandled permission state: {permission!r}")
