# locgate/app/controller.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Set

from locgate.app.config import LocGateConfig
from locgate.app.views import View, render
from locgate.core.errors import SettingsOpenError, StartError
from locgate.interfaces import (
    DisplaySurface,
    LifecycleNotifier,
    LocationDataSource,
    NotificationSink,
    PermissionProvider,
)
from locgate.model.location import AutoPanMode
from locgate.model.permission import PermissionState
from locgate.runtime.coordinator import PermissionCoordinator
from locgate.runtime.location_session import LocationSessionManager
from locgate.runtime.state import AppState, PermissionFlowState, SessionState

ViewListener = Callable[[View], None]


class ShowDeviceLocationController:
    """
    App-level controller for the "show device location" screen.

    Mount with open() (or `async with`), unmount with close(). User actions
    are the public coroutines; the map session follows the permission state.
    """

    def __init__(
        self,
        config: LocGateConfig,
        *,
        permissions: PermissionProvider,
        lifecycle: LifecycleNotifier,
        data_source: LocationDataSource,
        display: DisplaySurface,
        notifications: NotificationSink,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._log = logger or logging.getLogger(__name__)

        self._data_source = data_source
        self._display = display
        self._notifications = notifications

        self._coordinator = PermissionCoordinator(
            permissions=permissions,
            lifecycle=lifecycle,
            policy=config.resume_requery,
            logger=self._log,
        )
        self._session = LocationSessionManager(
            auto_pan_mode=config.auto_pan_mode,
            basemap_style=config.basemap_style,
            logger=self._log,
        )

        self._view_listeners: List[ViewListener] = []
        self._unsubscribes: List[Callable[[], None]] = []
        self._tasks: Set[asyncio.Task] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._open = False

    @property
    def config(self) -> LocGateConfig:
        return self._config

    @property
    def coordinator(self) -> PermissionCoordinator:
        return self._coordinator

    @property
    def session(self) -> LocationSessionManager:
        return self._session

    @property
    def state(self) -> AppState:
        return AppState(permission=self._coordinator.state, session=self._session.state)

    def view(self) -> View:
        return render(self.state, settings_message=self._config.settings_message)

    # ------------------------------------------------------------------
    # Mount / unmount
    # ------------------------------------------------------------------

    async def open(self) -> None:
        if self._open:
            return
        self._loop = asyncio.get_running_loop()
        self._open = True
        self._unsubscribes.append(self._coordinator.subscribe(self._on_permission_state))
        self._unsubscribes.append(self._session.subscribe(self._on_session_state))

        try:
            await self._coordinator.open()
            await self._sync_session()
            await self._settle()
        except Exception:
            try:
                await self.close()
            except Exception:
                self._log.exception("CONTROLLER_CLOSE_AFTER_OPEN_FAIL")
            raise

    async def close(self) -> None:
        if not self._open:
            return
        self._open = False

        for unsubscribe in self._unsubscribes:
            try:
                unsubscribe()
            except Exception:
                self._log.exception("UNSUBSCRIBE_ERROR")
        self._unsubscribes.clear()

        try:
            await self._coordinator.close()
        except Exception:
            self._log.exception("COORDINATOR_CLOSE_ERROR")

        try:
            await self._session.stop()
        except Exception:
            self._log.exception("SESSION_STOP_ERROR")

        self._view_listeners.clear()

    async def __aenter__(self) -> "ShowDeviceLocationController":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def enable_location(self) -> None:
        """'Enable Location' button."""
        await self._coordinator.request_permission()
        await self._settle()

    async def open_app_settings(self) -> None:
        """'Open App Settings' button."""
        try:
            await self._coordinator.open_settings()
        except SettingsOpenError as e:
            self._log.warning("SETTINGS_OPEN_FAILED msg=%s", e.message)
            self._show_error(e.message)

    async def set_location_enabled(self, enabled: bool) -> None:
        """Location on/off switch. Turning it on again retries a failed start."""
        self._session.set_location_enabled(enabled)
        if self._session.is_attached:
            await self._session.stop()
        await self._sync_session()

    def set_auto_pan_mode(self, mode: AutoPanMode) -> None:
        self._session.set_auto_pan_mode(mode)

    async def drain(self) -> None:
        """Wait until lifecycle-triggered work and session changes have settled."""
        while True:
            await self._coordinator.drain()
            if not self._tasks:
                return
            await self._settle()

    def subscribe(self, cb: ViewListener) -> Callable[[], None]:
        self._view_listeners.append(cb)

        def _unsubscribe() -> None:
            if cb in self._view_listeners:
                self._view_listeners.remove(cb)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _sync_session(self) -> None:
        if not self._open:
            return
        granted = self._coordinator.permission is PermissionState.GRANTED
        if granted and self._session.state.location_enabled and not self._session.is_attached:
            await self._start_session()
        elif not granted and self._session.is_attached:
            await self._session.stop()

    async def _start_session(self) -> None:
        try:
            await self._session.attach_and_start(self._display, self._data_source)
        except StartError as e:
            if self._open:
                self._show_error(e.message)

    async def _settle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_permission_state(self, state: PermissionFlowState) -> None:
        self._publish_view()
        if not self._open or self._loop is None:
            return
        task = self._loop.create_task(self._sync_session())
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_session_state(self, state: SessionState) -> None:
        self._publish_view()

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("SESSION_SYNC_ERROR err=%s", exc, exc_info=exc)

    def _publish_view(self) -> None:
        if not self._view_listeners:
            return
        view = self.view()
        for cb in list(self._view_listeners):
            try:
                cb(view)
            except Exception:
                self._log.exception("VIEW_LISTENER_ERROR")

    def _show_error(self, message: str) -> None:
        try:
            self._notifications.show_error(message)
        except Exception:
            self._log.exception("NOTIFICATION_SINK_ERROR")
