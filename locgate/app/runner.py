# locgate/app/runner.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from locgate.app.config import LocGateConfig
from locgate.app.controller import ShowDeviceLocationController
from locgate.app.scenario import Scenario, ScenarioStep
from locgate.app.views import View
from locgate.providers.simulated import (
    CollectingNotificationSink,
    ManualLifecycleNotifier,
    RecordingDisplay,
    SimulatedLocationDataSource,
    SimulatedPermissionProvider,
)


@dataclass(frozen=True)
class SimulatedRun:
    controller: ShowDeviceLocationController
    permissions: SimulatedPermissionProvider
    lifecycle: ManualLifecycleNotifier
    data_source: SimulatedLocationDataSource
    display: RecordingDisplay
    notifications: CollectingNotificationSink


@dataclass(frozen=True)
class StepOutcome:
    step: Optional[ScenarioStep]   # None for the initial mount
    view: View
    dialogs: List[str]


StepCallback = Callable[[StepOutcome], None]


def build_simulated_run(
    cfg: LocGateConfig,
    scenario: Scenario,
    *,
    logger: Optional[logging.Logger] = None,
) -> SimulatedRun:
    log = logger or logging.getLogger(__name__)

    permissions = SimulatedPermissionProvider(
        scenario.initial_status,
        request_result=scenario.request_result,
        settings_opens=scenario.settings_opens,
    )
    lifecycle = ManualLifecycleNotifier(logger=log)
    data_source = SimulatedLocationDataSource(start_error=scenario.start_error, logger=log)
    display = RecordingDisplay()
    notifications = CollectingNotificationSink()

    controller = ShowDeviceLocationController(
        cfg,
        permissions=permissions,
        lifecycle=lifecycle,
        data_source=data_source,
        display=display,
        notifications=notifications,
        logger=log,
    )

    return SimulatedRun(
        controller=controller,
        permissions=permissions,
        lifecycle=lifecycle,
        data_source=data_source,
        display=display,
        notifications=notifications,
    )


async def run_scenario(
    run: SimulatedRun,
    scenario: Scenario,
    *,
    on_step: Optional[StepCallback] = None,
) -> List[StepOutcome]:
    """Mount the controller, play every step, unmount. Returns one outcome per step."""
    outcomes: List[StepOutcome] = []
    seen = 0

    def _record(step: Optional[ScenarioStep]) -> None:
        nonlocal seen
        dialogs = run.notifications.messages[seen:]
        seen = len(run.notifications.messages)
        outcome = StepOutcome(step=step, view=run.controller.view(), dialogs=list(dialogs))
        outcomes.append(outcome)
        if on_step is not None:
            on_step(outcome)

    async with run.controller:
        _record(None)
        for step in scenario.steps:
            await apply_step(run, step)
            _record(step)

    return outcomes


async def apply_step(run: SimulatedRun, step: ScenarioStep) -> None:
    controller = run.controller

    if step.action == "tap":
        if step.value == "enable_location":
            await controller.enable_location()
        else:
            await controller.open_app_settings()
    elif step.action == "lifecycle":
        run.lifecycle.emit(step.value)
    elif step.action == "os_status":
        run.permissions.current = step.value
    elif step.action == "location_enabled":
        await controller.set_location_enabled(step.value)
    elif step.action == "pan_mode":
        controller.set_auto_pan_mode(step.value)
    elif step.action == "start_error":
        run.data_source.start_error = step.value
    elif step.action == "settings_opens":
        run.permissions.settings_opens = step.value
    else:
        raise ValueError(f"Unknown scenario action: {step.action!r}")

    await controller.drain()
