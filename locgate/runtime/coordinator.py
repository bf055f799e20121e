# locgate/runtime/coordinator.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Set

from locgate.core.errors import SettingsOpenError
from locgate.interfaces import LifecycleNotifier, PermissionProvider
from locgate.model.lifecycle import LifecycleState, ResumeRequeryPolicy
from locgate.model.permission import PermissionState
from locgate.runtime.state import (
    PermissionFlowState,
    on_lifecycle,
    with_permission,
    with_settings_opened,
)

StateListener = Callable[[PermissionFlowState], None]


class PermissionCoordinator:
    """
    Owns the location permission state and the app foreground state.

    Responsibilities:
      - query the OS permission status (no prompt) at open and on resume
      - request the permission (prompt) only when asked to by a user action
      - track the trip to the OS settings screen
      - notify listeners with a new PermissionFlowState on every change

    Lifecycle events from the notifier are handled as tasks on the loop that
    called open(). After close(), results that arrive late are discarded.
    """

    def __init__(
        self,
        *,
        permissions: PermissionProvider,
        lifecycle: LifecycleNotifier,
        policy: ResumeRequeryPolicy = ResumeRequeryPolicy.AFTER_SETTINGS,
        logger: Optional[logging.Logger] = None,
    ):
        self._permissions = permissions
        self._lifecycle = lifecycle
        self._policy = policy
        self._log = logger or logging.getLogger(__name__)

        self._state = PermissionFlowState()
        self._listeners: List[StateListener] = []

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._tasks: Set[asyncio.Task] = set()
        self._opened = False
        # bumped by close(); results of awaits started in an older epoch are dropped
        self._epoch = 0

    @property
    def state(self) -> PermissionFlowState:
        return self._state

    @property
    def permission(self) -> PermissionState:
        return self._state.permission

    @property
    def policy(self) -> ResumeRequeryPolicy:
        return self._policy

    @property
    def is_open(self) -> bool:
        return self._opened

    # ------------------------------------------------------------------
    # Mount / unmount
    # ------------------------------------------------------------------

    async def open(self) -> None:
        if self._opened:
            return
        self._loop = asyncio.get_running_loop()
        self._lifecycle.add_observer(self._on_lifecycle_event)
        self._opened = True
        self._log.info("COORDINATOR_OPEN policy=%s", self._policy.value)

        try:
            if self._state.permission is not PermissionState.GRANTED:
                await self.query_permission()
        except BaseException:
            await self.close()
            raise

    async def close(self) -> None:
        """Deregister and drop pending work. The permission state is kept for a later open()."""
        if not self._opened:
            return
        self._opened = False
        self._epoch += 1
        self._log.info("COORDINATOR_CLOSE")

        try:
            self._lifecycle.remove_observer(self._on_lifecycle_event)
        except Exception:
            self._log.exception("LIFECYCLE_REMOVE_OBSERVER_ERROR")

        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        self._listeners.clear()

    async def __aenter__(self) -> "PermissionCoordinator":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Permission operations
    # ------------------------------------------------------------------

    async def query_permission(self) -> PermissionState:
        epoch = self._epoch
        raw = await self._permissions.status()
        result = PermissionState.from_status(raw)
        self._log.info("PERMISSION_QUERY raw=%s result=%s", _raw_name(raw), result.value)
        self._apply(with_permission(self._state, result), epoch)
        return result

    async def request_permission(self) -> PermissionState:
        """Show the OS prompt. Call only from a user action."""
        epoch = self._epoch
        raw = await self._permissions.request()
        result = PermissionState.from_status(raw)
        self._log.info("PERMISSION_REQUEST raw=%s result=%s", _raw_name(raw), result.value)
        self._apply(with_permission(self._state, result), epoch)
        return result

    async def open_settings(self) -> bool:
        """
        Send the user to the OS settings screen.

        Returns True once the screen was opened. Raises SettingsOpenError
        otherwise; the settings flag is then cleared.

        The flag is set before the call, so a resume handled while the call
        is pending already sees the settings trip.
        """
        epoch = self._epoch
        self._apply(with_settings_opened(self._state, True), epoch)
        opened = bool(await self._permissions.open_system_settings())
        self._log.info("SETTINGS_OPEN opened=%s", opened)
        if epoch != self._epoch:
            return opened
        if not opened:
            self._apply(with_settings_opened(self._state, False), epoch)
            raise SettingsOpenError(
                "Could not open the app settings screen.",
                hint="Open the system settings manually and enable location for this app.",
            )
        return opened

    async def on_lifecycle_changed(self, new_state: LifecycleState) -> None:
        new, should_query = on_lifecycle(self._state, new_state, self._policy)
        self._log.debug(
            "LIFECYCLE state=%s permission=%s requery=%s",
            new_state.value,
            self._state.permission.value,
            should_query,
        )
        self._apply(new)
        if should_query:
            await self.query_permission()

    async def drain(self) -> None:
        """Wait for lifecycle-triggered work still in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, cb: StateListener) -> Callable[[], None]:
        self._listeners.append(cb)

        def _unsubscribe() -> None:
            if cb in self._listeners:
                self._listeners.remove(cb)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_lifecycle_event(self, new_state: LifecycleState) -> None:
        if not self.is_open or self._loop is None:
            return
        task = self._loop.create_task(self.on_lifecycle_changed(new_state))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("LIFECYCLE_HANDLER_ERROR err=%s", exc, exc_info=exc)

    def _apply(self, new_state: PermissionFlowState, epoch: Optional[int] = None) -> None:
        if epoch is not None and epoch != self._epoch:
            self._log.debug("STATE_DISCARDED_AFTER_CLOSE permission=%s", new_state.permission.value)
            return
        if new_state == self._state:
            return
        self._state = new_state

        for cb in list(self._listeners):
            try:
                cb(new_state)
            except Exception:
                self._log.exception("STATE_LISTENER_ERROR")


def _raw_name(raw) -> str:
    return str(getattr(raw, "value", raw))
