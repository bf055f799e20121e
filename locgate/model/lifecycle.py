# locgate/model/lifecycle.py
from __future__ import annotations

from enum import Enum


class LifecycleState(Enum):
    """Foreground/background state reported by the host platform."""
    RESUMED = "resumed"
    INACTIVE = "inactive"
    PAUSED = "paused"
    DETACHED = "detached"
    HIDDEN = "hidden"


class ResumeRequeryPolicy(Enum):
    """
    When a resume transition re-queries a non-granted permission.

    AFTER_SETTINGS: only if the user was sent to the OS settings screen
                    (flag consumed by the check).
    ALWAYS:         on every resume.
    """
    AFTER_SETTINGS = "after_settings"
    ALWAYS = "always"
