from .permission import PermissionState, PermissionStatus
from .lifecycle import LifecycleState, ResumeRequeryPolicy
from .location import AutoPanMode, LocationSessionStatus

__all__ = ["PermissionState",
           "PermissionStatus",
           "LifecycleState",
           "ResumeRequeryPolicy",
           "AutoPanMode",
           "LocationSessionStatus"]
