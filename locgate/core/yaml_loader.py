# locgate/core/yaml_loader.py
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Type, TypeVar

import yaml

from locgate.core.errors import ConfigError

E = TypeVar("E", bound=Enum)


def load_yaml_mapping(path: str | Path, *, what: str) -> dict:
    """
    Load a YAML file whose root node must be a mapping.

    An empty file yields {}. Any failure is reported as ConfigError.
    """
    full_path = Path(path)
    if not full_path.exists():
        raise ConfigError(
            f"Missing {what} file.",
            hint=f"Check the path: {full_path}",
            details={"path": str(full_path)},
        )

    try:
        with open(full_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse {what} file.",
            hint=str(e),
            details={"path": str(full_path)},
        ) from None

    if not isinstance(data, dict):
        raise ConfigError(
            f"The {what} file must contain a mapping at its root.",
            details={"path": str(full_path)},
        )
    return data


def parse_enum(enum_cls: Type[E], value: Any, *, field: str) -> E:
    """Accept an enum member, its value, or its member name (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value

    for member in enum_cls:
        if value == member.value:
            return member
    if isinstance(value, str):
        for member in enum_cls:
            if value.lower() in (member.name.lower(), str(member.value).lower()):
                return member

    allowed = ", ".join(str(m.value) for m in enum_cls)
    raise ConfigError(
        f"Invalid value for '{field}': {value!r}",
        hint=f"Use one of: {allowed}",
        details={"field": field, "value": value},
    )
