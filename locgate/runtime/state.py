# locgate/runtime/state.py
"""
Immutable state snapshots and the pure transitions between them.

Owners (coordinator, session manager) hold the current snapshot and replace
it through the functions below; readers only ever see frozen objects.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from locgate.model.lifecycle import LifecycleState, ResumeRequeryPolicy
from locgate.model.location import AutoPanMode, LocationSessionStatus
from locgate.model.permission import PermissionState


@dataclass(frozen=True)
class PermissionFlowState:
    """
    Permission / lifecycle state owned by the coordinator.
    """
    permission: PermissionState = PermissionState.DENIED
    lifecycle: LifecycleState = LifecycleState.RESUMED
    settings_opened: bool = False


@dataclass(frozen=True)
class SessionState:
    """
    Runtime state of the location session (display + data source).
    """
    ready: bool = False
    status: LocationSessionStatus = LocationSessionStatus.STOPPED
    auto_pan_mode: AutoPanMode = AutoPanMode.RECENTER
    location_enabled: bool = True
    last_error: Optional[str] = None


@dataclass(frozen=True)
class AppState:
    """
    Everything the presentation layer renders from.
    """
    permission: PermissionFlowState
    session: SessionState


# ---------------------------------------------------------------------------
# Permission flow transitions
# ---------------------------------------------------------------------------

def with_permission(state: PermissionFlowState, permission: PermissionState) -> PermissionFlowState:
    return replace(state, permission=permission)


def with_settings_opened(state: PermissionFlowState, opened: bool) -> PermissionFlowState:
    return replace(state, settings_opened=bool(opened))


def on_lifecycle(
    state: PermissionFlowState,
    lifecycle: LifecycleState,
    policy: ResumeRequeryPolicy,
) -> Tuple[PermissionFlowState, bool]:
    """
    Record a lifecycle transition.

    Returns (new_state, should_query). A granted permission is never
    re-queried. Under AFTER_SETTINGS the settings flag is consumed by the
    resume that checks it, whether or not it triggers a query.
    """
    new_state = replace(state, lifecycle=lifecycle)
    if lifecycle is not LifecycleState.RESUMED:
        return new_state, False

    if state.permission is PermissionState.GRANTED:
        return replace(new_state, settings_opened=False), False

    if policy is ResumeRequeryPolicy.ALWAYS:
        return replace(new_state, settings_opened=False), True

    should_query = state.settings_opened
    return replace(new_state, settings_opened=False), should_query


# ---------------------------------------------------------------------------
# Session transitions
# ---------------------------------------------------------------------------

def session_starting(state: SessionState) -> SessionState:
    return replace(state, ready=False, last_error=None)


def session_started(state: SessionState) -> SessionState:
    return replace(state, ready=True, last_error=None)


def session_failed(state: SessionState, message: str) -> SessionState:
    # UI unblocks even though location is unavailable
    return replace(state, ready=True, last_error=message)


def session_stopped(state: SessionState) -> SessionState:
    return replace(state, ready=False, status=LocationSessionStatus.STOPPED)


def with_status(state: SessionState, status: LocationSessionStatus) -> SessionState:
    return replace(state, status=status)


def with_auto_pan_mode(state: SessionState, mode: AutoPanMode) -> SessionState:
    return replace(state, auto_pan_mode=mode)


def with_location_enabled(state: SessionState, enabled: bool) -> SessionState:
    return replace(state, location_enabled=bool(enabled))
