from .state import AppState, PermissionFlowState, SessionState
from .coordinator import PermissionCoordinator
from .location_session import LocationSessionManager

__all__ = ["AppState",
           "PermissionFlowState",
           "SessionState",
           "PermissionCoordinator",
           "LocationSessionManager"]
