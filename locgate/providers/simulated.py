# locgate/providers/simulated.py
"""
In-memory stand-ins for the platform: permission API, lifecycle events,
location data source, map display and dialogs.

Used by the scenario runner and by tests; nothing here touches a device.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from locgate.core.errors import StartError
from locgate.interfaces import LifecycleObserver, StatusCallback
from locgate.model.lifecycle import LifecycleState
from locgate.model.location import AutoPanMode, LocationSessionStatus
from locgate.model.permission import PermissionStatus


class SimulatedPermissionProvider:
    """
    OS permission API with a settable current status.

    request() only prompts while the status is undecided; the prompt outcome
    is `request_result`.
    """

    def __init__(
        self,
        status: Any = PermissionStatus.DENIED,
        *,
        request_result: Any = PermissionStatus.GRANTED,
        settings_opens: bool = True,
    ):
        self.current = status
        self.request_result = request_result
        self.settings_opens = settings_opens

        self.status_calls = 0
        self.request_calls = 0
        self.settings_calls = 0

    async def status(self) -> Any:
        self.status_calls += 1
        await asyncio.sleep(0)
        return self.current

    async def request(self) -> Any:
        self.request_calls += 1
        await asyncio.sleep(0)
        if self.current in (PermissionStatus.GRANTED, PermissionStatus.PERMANENTLY_DENIED):
            return self.current
        self.current = self.request_result
        return self.current

    async def open_system_settings(self) -> bool:
        self.settings_calls += 1
        await asyncio.sleep(0)
        return bool(self.settings_opens)


class ManualLifecycleNotifier:
    """Lifecycle notifier driven by explicit emit() calls."""

    def __init__(self, *, logger: Optional[logging.Logger] = None):
        self._observers: List[LifecycleObserver] = []
        self._log = logger or logging.getLogger(__name__)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def add_observer(self, observer: LifecycleObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: LifecycleObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def emit(self, state: LifecycleState) -> None:
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                self._log.exception("LIFECYCLE_OBSERVER_ERROR")


class SimulatedLocationDataSource:
    """
    Location data source with a scripted start outcome.

    start_error: message raised as StartError by the next start() calls.
    start_gate:  when set, start() waits for the event (keeps a start in flight).
    """

    def __init__(self, *, start_error: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.start_error = start_error
        self.start_gate: Optional[asyncio.Event] = None
        self._status = LocationSessionStatus.STOPPED
        self._status_cbs: List[StatusCallback] = []
        self._log = logger or logging.getLogger(__name__)

        self.start_calls = 0
        self.stop_calls = 0

    @property
    def status(self) -> LocationSessionStatus:
        return self._status

    @property
    def subscriber_count(self) -> int:
        return len(self._status_cbs)

    async def start(self) -> None:
        self.start_calls += 1
        self._set_status(LocationSessionStatus.STARTING)
        if self.start_gate is not None:
            await self.start_gate.wait()
        else:
            await asyncio.sleep(0)

        if self.start_error is not None:
            self._set_status(LocationSessionStatus.FAILED_TO_START)
            raise StartError(self.start_error)
        self._set_status(LocationSessionStatus.STARTED)

    async def stop(self) -> None:
        self.stop_calls += 1
        self._set_status(LocationSessionStatus.STOPPED)

    def subscribe_status(self, cb: StatusCallback) -> Callable[[], None]:
        self._status_cbs.append(cb)

        def _unsubscribe() -> None:
            if cb in self._status_cbs:
                self._status_cbs.remove(cb)

        return _unsubscribe

    def _set_status(self, status: LocationSessionStatus) -> None:
        if status is self._status:
            return
        self._status = status
        for cb in list(self._status_cbs):
            try:
                cb(status)
            except Exception:
                self._log.exception("STATUS_CALLBACK_ERROR")


class RecordingDisplay:
    """Location display of a map view; just remembers what was set."""

    def __init__(self):
        self.data_source: Optional[Any] = None
        self.auto_pan_mode: AutoPanMode = AutoPanMode.OFF
        self.basemap_style: Optional[str] = None


class CollectingNotificationSink:
    """Dialogs shown to the user, in order."""

    def __init__(self):
        self.messages: List[str] = []

    def show_error(self, message: str) -> None:
        self.messages.append(message)
