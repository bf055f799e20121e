from __future__ import annotations

import pytest

from locgate.model import LifecycleState, PermissionState, PermissionStatus


@pytest.mark.parametrize(
    "raw, expected",
    [
        (PermissionStatus.GRANTED, PermissionState.GRANTED),
        (PermissionStatus.PERMANENTLY_DENIED, PermissionState.PERMANENTLY_DENIED),
        (PermissionStatus.DENIED, PermissionState.DENIED),
        (PermissionStatus.RESTRICTED, PermissionState.DENIED),
        (PermissionStatus.LIMITED, PermissionState.DENIED),
        (PermissionStatus.PROVISIONAL, PermissionState.DENIED),
    ],
)
def test_from_status_maps_os_statuses(raw, expected):
    assert PermissionState.from_status(raw) is expected


def test_from_status_accepts_plain_strings():
    assert PermissionState.from_status("granted") is PermissionState.GRANTED
    assert PermissionState.from_status("permanentlyDenied") is PermissionState.PERMANENTLY_DENIED


@pytest.mark.parametrize("raw", ["restricted", "whatever", "", None, 3, LifecycleState.RESUMED])
def test_from_status_defaults_to_denied(raw):
    assert PermissionState.from_status(raw) is PermissionState.DENIED
