# locgate/runtime/location_session.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from locgate.core.errors import LocGateError, StartError
from locgate.interfaces import DisplaySurface, LocationDataSource
from locgate.model.location import AutoPanMode, LocationSessionStatus
from locgate.runtime.state import (
    SessionState,
    session_failed,
    session_started,
    session_starting,
    session_stopped,
    with_auto_pan_mode,
    with_location_enabled,
    with_status,
)

SessionListener = Callable[[SessionState], None]


class LocationSessionManager:
    """
    Binds a location data source to a display surface and runs it.

    Every attach/stop bumps a generation counter; a start() or a status
    callback belonging to an older generation no longer touches the state.
    """

    def __init__(
        self,
        *,
        auto_pan_mode: AutoPanMode = AutoPanMode.RECENTER,
        basemap_style: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._basemap_style = basemap_style
        self._log = logger or logging.getLogger(__name__)

        self._state = SessionState(auto_pan_mode=auto_pan_mode)
        self._listeners: List[SessionListener] = []

        self._display: Optional[DisplaySurface] = None
        self._source: Optional[LocationDataSource] = None
        self._unsubscribe_status: Optional[Callable[[], None]] = None
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_attached(self) -> bool:
        return self._source is not None

    async def attach_and_start(self, display: DisplaySurface, data_source: LocationDataSource) -> None:
        """
        Attach data_source to display and start it.

        Raises StartError (after marking the session ready) when the source
        fails to start. A start that completes after stop() is ignored.
        """
        self._release_status_subscription()
        self._generation += 1
        generation = self._generation

        self._display = display
        self._source = data_source

        if self._basemap_style is not None:
            display.basemap_style = self._basemap_style
        display.data_source = data_source
        display.auto_pan_mode = self._state.auto_pan_mode

        self._subscribe_status(data_source, generation)
        self._apply(with_status(session_starting(self._state), data_source.status))

        self._log.info(
            "SESSION_START source=%s auto_pan_mode=%s",
            type(data_source).__name__,
            self._state.auto_pan_mode.value,
        )

        try:
            await data_source.start()
        except Exception as e:
            if generation != self._generation:
                self._log.info("SESSION_START_RESULT_DISCARDED outcome=error")
                return
            message = e.message if isinstance(e, LocGateError) else str(e)
            message = message or "Location data source failed to start."
            self._log.warning("SESSION_START_FAILED msg=%s", message)
            self._apply(session_failed(self._state, message))
            if isinstance(e, StartError):
                raise
            raise StartError(
                message,
                details={"source": type(data_source).__name__},
            ) from e

        if generation != self._generation:
            self._log.info("SESSION_START_RESULT_DISCARDED outcome=ok")
            return
        self._apply(session_started(self._state))
        self._log.info("SESSION_STARTED")

    async def stop(self) -> None:
        """Stop the data source and drop the status subscription. Idempotent."""
        self._generation += 1
        self._release_status_subscription()

        source = self._source
        self._source = None
        if source is not None:
            self._log.info("SESSION_STOP")
            try:
                await source.stop()
            except Exception:
                self._log.exception("LOCATION_SOURCE_STOP_ERROR")

        self._apply(session_stopped(self._state))

    def set_auto_pan_mode(self, mode: AutoPanMode) -> None:
        self._log.info("AUTO_PAN_MODE mode=%s", mode.value)
        if self._display is not None:
            self._display.auto_pan_mode = mode
        self._apply(with_auto_pan_mode(self._state, mode))

    def set_location_enabled(self, enabled: bool) -> None:
        self._apply(with_location_enabled(self._state, enabled))

    def subscribe(self, cb: SessionListener) -> Callable[[], None]:
        self._listeners.append(cb)

        def _unsubscribe() -> None:
            if cb in self._listeners:
                self._listeners.remove(cb)

        return _unsubscribe

    def _subscribe_status(self, source: LocationDataSource, generation: int) -> None:
        def _on_status(status: LocationSessionStatus) -> None:
            if generation != self._generation:
                return
            self._log.debug("LOCATION_STATUS status=%s", status.value)
            self._apply(with_status(self._state, status))

        self._unsubscribe_status = source.subscribe_status(_on_status)

    def _release_status_subscription(self) -> None:
        if self._unsubscribe_status is None:
            return
        try:
            self._unsubscribe_status()
        except Exception:
            self._log.exception("STATUS_UNSUBSCRIBE_ERROR")
        finally:
            self._unsubscribe_status = None

    def _apply(self, new_state: SessionState) -> None:
        if new_state == self._state:
            return
        self._state = new_state

        for cb in list(self._listeners):
            try:
                cb(new_state)
            except Exception:
                self._log.exception("SESSION_LISTENER_ERROR")
