# locgate/cli/commands.py
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from locgate.app.config import LocGateConfig
from locgate.app.runner import StepOutcome, build_simulated_run, run_scenario
from locgate.app.scenario import Scenario
from locgate.app.views import MapView, OpenSettingsView, RequestPermissionView, View

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ---------------- Logging ----------------

def configure_console_logging(*, verbose: bool = False) -> None:
    root = logging.getLogger()
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(sh)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def configure_file_logging(app_log_path: Path) -> None:
    """
    Add a file handler to the root logger (idempotent).
    Kept in CLI (presentation-layer concern).
    """
    root = logging.getLogger()
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    if root.level > logging.INFO:
        root.setLevel(logging.INFO)


# ---------------- View printing ----------------

def format_view(view: View) -> str:
    if isinstance(view, MapView):
        if not view.location_enabled:
            state = "location off"
        else:
            state = "ready" if view.ready else "loading"
        return f"MAP [{state}] status={view.status.value} pan={view.auto_pan_mode.value}"
    if isinstance(view, RequestPermissionView):
        return f"BUTTON '{view.button_label}'"
    if isinstance(view, OpenSettingsView):
        return f"TEXT '{view.message}' + BUTTON '{view.button_label}'"
    raise AssertionError(f"Unhandled view: {view!r}")


def print_outcome(outcome: StepOutcome) -> None:
    label = outcome.step.describe() if outcome.step is not None else "mount"
    print(f"{label:<28} -> {format_view(outcome.view)}")
    for message in outcome.dialogs:
        print(f"{'':<28}    DIALOG: {message}")


# ---------------- Commands ----------------

def load_config(path: Optional[str]) -> LocGateConfig:
    return LocGateConfig.load(path) if path else LocGateConfig()


def cmd_show_config(*, config_path: Optional[str]) -> int:
    cfg = load_config(config_path)
    for key, value in cfg.as_dict().items():
        print(f"{key}: {value}")
    return 0


def cmd_scenario(*, scenario_path: str, config_path: Optional[str], log_file: Optional[str] = None) -> int:
    cfg = load_config(config_path)
    scenario = Scenario.load(scenario_path)

    if log_file:
        configure_file_logging(Path(log_file))

    print(f"Scenario: {scenario_path} (resume_requery={cfg.resume_requery.value})\n")

    run = build_simulated_run(cfg, scenario, logger=logging.getLogger("locgate"))
    asyncio.run(run_scenario(run, scenario, on_step=print_outcome))

    print(
        f"\nOS calls: status={run.permissions.status_calls} "
        f"request={run.permissions.request_calls} settings={run.permissions.settings_calls}"
    )
    return 0
