# locgate/app/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from locgate.core.errors import ConfigError
from locgate.core.yaml_loader import load_yaml_mapping, parse_enum
from locgate.model.lifecycle import ResumeRequeryPolicy
from locgate.model.location import AutoPanMode

DEFAULT_BASEMAP_STYLE = "arcGISNavigationNight"
DEFAULT_SETTINGS_MESSAGE = (
    "App location permission is denied. "
    "Go to settings and enable location to use the app."
)


@dataclass(frozen=True)
class LocGateConfig:
    resume_requery: ResumeRequeryPolicy = ResumeRequeryPolicy.AFTER_SETTINGS
    auto_pan_mode: AutoPanMode = AutoPanMode.RECENTER
    basemap_style: Optional[str] = DEFAULT_BASEMAP_STYLE
    settings_message: str = DEFAULT_SETTINGS_MESSAGE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LocGateConfig":
        known = {"resume_requery", "auto_pan_mode", "basemap_style", "settings_message"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown config keys: {', '.join(unknown)}",
                hint=f"Supported keys: {', '.join(sorted(known))}",
                details={"unknown": unknown},
            )

        kwargs: dict = {}
        if "resume_requery" in data:
            kwargs["resume_requery"] = parse_enum(
                ResumeRequeryPolicy, data["resume_requery"], field="resume_requery"
            )
        if "auto_pan_mode" in data:
            kwargs["auto_pan_mode"] = parse_auto_pan_mode(data["auto_pan_mode"], field="auto_pan_mode")
        if "basemap_style" in data:
            style = data["basemap_style"]
            kwargs["basemap_style"] = None if style is None else str(style)
        if "settings_message" in data:
            kwargs["settings_message"] = str(data["settings_message"])
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | Path) -> "LocGateConfig":
        return cls.from_mapping(load_yaml_mapping(path, what="config"))

    def as_dict(self) -> dict:
        return {
            "resume_requery": self.resume_requery.value,
            "auto_pan_mode": self.auto_pan_mode.value,
            "basemap_style": self.basemap_style,
            "settings_message": self.settings_message,
        }


def parse_auto_pan_mode(value: Any, *, field: str) -> AutoPanMode:
    # YAML 1.1 reads a bare `off` as false
    if value is False:
        return AutoPanMode.OFF
    return parse_enum(AutoPanMode, value, field=field)
