from __future__ import annotations

import asyncio

import pytest

from locgate.core.errors import StartError
from locgate.model import AutoPanMode, LocationSessionStatus
from locgate.providers.simulated import RecordingDisplay, SimulatedLocationDataSource
from locgate.runtime.location_session import LocationSessionManager


class FakeSource:
    """Data source that keeps the status callback so tests can fire it late."""

    def __init__(self, *, exc: Exception | None = None):
        self.status = LocationSessionStatus.STOPPED
        self.exc = exc
        self.callbacks = []
        self.stop_calls = 0

    async def start(self) -> None:
        if self.exc is not None:
            raise self.exc

    async def stop(self) -> None:
        self.stop_calls += 1

    def subscribe_status(self, cb):
        self.callbacks.append(cb)
        return lambda: None  # deliberately leaky: the manager must still ignore late calls


def test_attach_and_start_binds_display_and_marks_ready():
    async def scenario():
        mgr = LocationSessionManager(auto_pan_mode=AutoPanMode.RECENTER, basemap_style="arcGISNavigationNight")
        display = RecordingDisplay()
        source = SimulatedLocationDataSource()

        await mgr.attach_and_start(display, source)

        assert display.data_source is source
        assert display.auto_pan_mode is AutoPanMode.RECENTER
        assert display.basemap_style == "arcGISNavigationNight"
        assert mgr.state.ready is True
        assert mgr.state.status is LocationSessionStatus.STARTED
        assert mgr.state.last_error is None
        assert mgr.is_attached is True

    asyncio.run(scenario())


def test_start_failure_raises_but_session_is_ready():
    async def scenario():
        mgr = LocationSessionManager()
        source = SimulatedLocationDataSource(start_error="Location services disabled")

        with pytest.raises(StartError) as ei:
            await mgr.attach_and_start(RecordingDisplay(), source)

        assert ei.value.message == "Location services disabled"
        assert mgr.state.ready is True
        assert mgr.state.status is LocationSessionStatus.FAILED_TO_START
        assert mgr.state.last_error == "Location services disabled"

    asyncio.run(scenario())


def test_foreign_start_exception_is_wrapped():
    async def scenario():
        mgr = LocationSessionManager()
        cause = RuntimeError("GPS hardware unavailable")

        with pytest.raises(StartError) as ei:
            await mgr.attach_and_start(RecordingDisplay(), FakeSource(exc=cause))

        assert str(ei.value) == "GPS hardware unavailable"
        assert ei.value.__cause__ is cause
        assert ei.value.details == {"source": "FakeSource"}
        assert mgr.state.ready is True

    asyncio.run(scenario())


def test_stop_is_idempotent_and_safe_without_start():
    async def scenario():
        mgr = LocationSessionManager()
        await mgr.stop()
        await mgr.stop()
        assert mgr.state.ready is False

        source = SimulatedLocationDataSource()
        await mgr.attach_and_start(RecordingDisplay(), source)
        await mgr.stop()
        await mgr.stop()

        assert source.stop_calls == 1
        assert source.subscriber_count == 0
        assert mgr.state.ready is False
        assert mgr.is_attached is False

    asyncio.run(scenario())


def test_status_callbacks_after_stop_do_not_mutate_state():
    async def scenario():
        mgr = LocationSessionManager()
        source = FakeSource()
        await mgr.attach_and_start(RecordingDisplay(), source)

        source.callbacks[0](LocationSessionStatus.STARTED)
        assert mgr.state.status is LocationSessionStatus.STARTED

        await mgr.stop()
        snapshot = mgr.state
        source.callbacks[0](LocationSessionStatus.FAILED_TO_START)
        assert mgr.state == snapshot

    asyncio.run(scenario())


def test_in_flight_start_completing_after_stop_is_ignored():
    async def scenario():
        mgr = LocationSessionManager()
        source = SimulatedLocationDataSource(start_error="too late")
        source.start_gate = asyncio.Event()

        starting = asyncio.create_task(mgr.attach_and_start(RecordingDisplay(), source))
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert mgr.state.status is LocationSessionStatus.STARTING

        await mgr.stop()
        source.start_gate.set()
        await starting  # must not raise

        assert mgr.state.ready is False
        assert mgr.state.last_error is None
        assert mgr.state.status is LocationSessionStatus.STOPPED

    asyncio.run(scenario())


def test_auto_pan_mode_updates_display_and_state():
    async def scenario():
        mgr = LocationSessionManager()
        display = RecordingDisplay()

        mgr.set_auto_pan_mode(AutoPanMode.NAVIGATION)
        await mgr.attach_and_start(display, SimulatedLocationDataSource())
        assert display.auto_pan_mode is AutoPanMode.NAVIGATION

        mgr.set_auto_pan_mode(AutoPanMode.COMPASS_NAVIGATION)
        assert display.auto_pan_mode is AutoPanMode.COMPASS_NAVIGATION
        assert mgr.state.auto_pan_mode is AutoPanMode.COMPASS_NAVIGATION

    asyncio.run(scenario())


def test_listeners_follow_session_progress():
    async def scenario():
        mgr = LocationSessionManager()
        seen = []
        mgr.subscribe(lambda st: seen.append((st.ready, st.status)))

        await mgr.attach_and_start(RecordingDisplay(), SimulatedLocationDataSource())

        assert seen[-1] == (True, LocationSessionStatus.STARTED)
        assert (False, LocationSessionStatus.STARTING) in seen

    asyncio.run(scenario())
