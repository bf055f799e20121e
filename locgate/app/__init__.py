from .config import LocGateConfig
from .controller import ShowDeviceLocationController
from .views import MapView, OpenSettingsView, RequestPermissionView, View, render

__all__ = ["LocGateConfig",
           "ShowDeviceLocationController",
           "MapView",
           "OpenSettingsView",
           "RequestPermissionView",
           "View",
           "render"]
