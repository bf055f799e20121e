from __future__ import annotations

import pytest

from locgate.model import (
    AutoPanMode,
    LifecycleState,
    LocationSessionStatus,
    PermissionState,
    ResumeRequeryPolicy,
)
from locgate.runtime.state import (
    PermissionFlowState,
    SessionState,
    on_lifecycle,
    session_failed,
    session_started,
    session_stopped,
    with_auto_pan_mode,
    with_permission,
    with_settings_opened,
)


def test_defaults_match_first_mount():
    st = PermissionFlowState()
    assert st.permission is PermissionState.DENIED
    assert st.settings_opened is False

    ss = SessionState()
    assert ss.ready is False
    assert ss.status is LocationSessionStatus.STOPPED
    assert ss.auto_pan_mode is AutoPanMode.RECENTER


def test_transitions_return_new_objects():
    st = PermissionFlowState()
    st2 = with_permission(st, PermissionState.GRANTED)
    assert st.permission is PermissionState.DENIED
    assert st2.permission is PermissionState.GRANTED

    with pytest.raises(AttributeError):
        st2.permission = PermissionState.DENIED  # frozen


@pytest.mark.parametrize(
    "lifecycle",
    [LifecycleState.INACTIVE, LifecycleState.PAUSED, LifecycleState.DETACHED, LifecycleState.HIDDEN],
)
def test_non_resume_never_queries(lifecycle):
    st = with_settings_opened(PermissionFlowState(), True)
    new, should_query = on_lifecycle(st, lifecycle, ResumeRequeryPolicy.ALWAYS)
    assert should_query is False
    assert new.lifecycle is lifecycle
    assert new.settings_opened is True


@pytest.mark.parametrize("policy", list(ResumeRequeryPolicy))
def test_resume_with_granted_never_queries(policy):
    st = with_settings_opened(with_permission(PermissionFlowState(), PermissionState.GRANTED), True)
    _, should_query = on_lifecycle(st, LifecycleState.RESUMED, policy)
    assert should_query is False


def test_after_settings_policy_requires_settings_trip():
    st = PermissionFlowState(permission=PermissionState.PERMANENTLY_DENIED)
    _, should_query = on_lifecycle(st, LifecycleState.RESUMED, ResumeRequeryPolicy.AFTER_SETTINGS)
    assert should_query is False

    st = with_settings_opened(st, True)
    new, should_query = on_lifecycle(st, LifecycleState.RESUMED, ResumeRequeryPolicy.AFTER_SETTINGS)
    assert should_query is True
    assert new.settings_opened is False  # consumed by the check


def test_always_policy_queries_every_resume():
    st = PermissionFlowState(permission=PermissionState.DENIED)
    for _ in range(3):
        st, should_query = on_lifecycle(st, LifecycleState.RESUMED, ResumeRequeryPolicy.ALWAYS)
        assert should_query is True


def test_session_failure_still_marks_ready():
    ss = session_failed(SessionState(), "Location services disabled")
    assert ss.ready is True
    assert ss.last_error == "Location services disabled"

    ss = session_started(ss)
    assert ss.ready is True and ss.last_error is None

    ss = session_stopped(with_auto_pan_mode(ss, AutoPanMode.NAVIGATION))
    assert ss.ready is False
    assert ss.status is LocationSessionStatus.STOPPED
    assert ss.auto_pan_mode is AutoPanMode.NAVIGATION
