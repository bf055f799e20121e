# locgate/app/scenario.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional

from locgate.app.config import parse_auto_pan_mode
from locgate.core.errors import ConfigError
from locgate.core.yaml_loader import load_yaml_mapping, parse_enum
from locgate.model.lifecycle import LifecycleState
from locgate.model.permission import PermissionStatus

TAP_ACTIONS = ("enable_location", "open_settings")
STEP_ACTIONS = (
    "tap",
    "lifecycle",
    "os_status",
    "location_enabled",
    "pan_mode",
    "start_error",
    "settings_opens",
)


@dataclass(frozen=True)
class ScenarioStep:
    action: str
    value: Any

    def describe(self) -> str:
        v = getattr(self.value, "value", self.value)
        return f"{self.action}={v}"


@dataclass(frozen=True)
class Scenario:
    """
    Scripted run against the simulated platform.

    Initial platform behaviour plus an ordered list of OS and user events.
    """
    initial_status: Any = PermissionStatus.DENIED
    request_result: Any = PermissionStatus.GRANTED
    settings_opens: bool = True
    start_error: Optional[str] = None
    steps: List[ScenarioStep] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Scenario":
        raw_steps = data.get("steps") or []
        if not isinstance(raw_steps, list):
            raise ConfigError("Scenario 'steps' must be a list.")

        settings_opens = data.get("settings_opens", True)
        if not isinstance(settings_opens, bool):
            raise ConfigError(
                "Scenario 'settings_opens' must be true or false.",
                details={"value": settings_opens},
            )

        start_error = data.get("start_error")
        return cls(
            initial_status=parse_os_status(data.get("initial_status", "denied")),
            request_result=parse_os_status(data.get("request_result", "granted")),
            settings_opens=settings_opens,
            start_error=None if start_error is None else str(start_error),
            steps=[parse_step(s, index=i) for i, s in enumerate(raw_steps)],
        )

    @classmethod
    def load(cls, path: str | Path) -> "Scenario":
        return cls.from_mapping(load_yaml_mapping(path, what="scenario"))


def parse_os_status(value: Any) -> Any:
    """Known statuses become PermissionStatus; anything else is kept raw."""
    for member in PermissionStatus:
        if value == member.value or value is member:
            return member
    return value


def parse_step(raw: Any, *, index: int) -> ScenarioStep:
    if not isinstance(raw, dict) or len(raw) != 1:
        raise ConfigError(
            f"Scenario step #{index + 1} must be a single-key mapping.",
            hint=f"Use one of: {', '.join(STEP_ACTIONS)}",
            details={"step": raw},
        )

    action, value = next(iter(raw.items()))
    field_name = f"steps[{index}].{action}"

    if action == "tap":
        if value not in TAP_ACTIONS:
            raise ConfigError(
                f"Unknown tap target in step #{index + 1}: {value!r}",
                hint=f"Use one of: {', '.join(TAP_ACTIONS)}",
            )
        return ScenarioStep(action, value)
    if action == "lifecycle":
        return ScenarioStep(action, parse_enum(LifecycleState, value, field=field_name))
    if action == "os_status":
        return ScenarioStep(action, parse_os_status(value))
    if action == "pan_mode":
        return ScenarioStep(action, parse_auto_pan_mode(value, field=field_name))
    if action in ("location_enabled", "settings_opens"):
        if not isinstance(value, bool):
            raise ConfigError(f"'{field_name}' must be true or false.", details={"value": value})
        return ScenarioStep(action, value)
    if action == "start_error":
        return ScenarioStep(action, None if value is None else str(value))

    raise ConfigError(
        f"Unknown scenario action in step #{index + 1}: {action!r}",
        hint=f"Use one of: {', '.join(STEP_ACTIONS)}",
    )
