# locgate/interfaces/location_data_source.py
from __future__ import annotations

from typing import Callable, Protocol

from locgate.model.location import LocationSessionStatus

StatusCallback = Callable[[LocationSessionStatus], None]


class LocationDataSource(Protocol):
    """
    Continuous device-position stream.

    start() raises when the platform denies access or the hardware is
    unavailable; the exception text is shown to the user as-is.
    """
    @property
    def status(self) -> LocationSessionStatus: ...

    async def start(self) -> None: ...
    async def stop(self) -> None: ...
    def subscribe_status(self, cb: StatusCallback) -> Callable[[], None]: ...
