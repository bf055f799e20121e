# locgate/interfaces/permission_provider.py
from __future__ import annotations

from typing import Any, Protocol


class PermissionProvider(Protocol):
    """
    OS location-permission API.

    status()/request() report a status value (PermissionStatus or any other
    value); they are not expected to raise.
    """
    async def status(self) -> Any: ...
    async def request(self) -> Any: ...
    async def open_system_settings(self) -> bool: ...
