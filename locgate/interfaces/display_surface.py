# locgate/interfaces/display_surface.py
from __future__ import annotations

from typing import Any, Optional, Protocol

from locgate.model.location import AutoPanMode


class DisplaySurface(Protocol):
    """Map view location display: what it shows and how it follows the device."""
    data_source: Optional[Any]
    auto_pan_mode: AutoPanMode
    basemap_style: Optional[str]
