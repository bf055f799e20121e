from .permission_provider import PermissionProvider
from .lifecycle_notifier import LifecycleNotifier, LifecycleObserver
from .location_data_source import LocationDataSource, StatusCallback
from .display_surface import DisplaySurface
from .notification_sink import NotificationSink

__all__ = ["PermissionProvider",
           "LifecycleNotifier",
           "LifecycleObserver",
           "LocationDataSource",
           "StatusCallback",
           "DisplaySurface",
           "NotificationSink"]
