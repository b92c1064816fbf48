"""lanfinder - find devices on the local network through the ARP table."""

from __future__ import annotations

from importlib.metadata import version

from .config import ScanningConfig, Settings, get_settings
from .core import (
    NeighborTable,
    NeighborTableError,
    find_local_device,
    find_local_devices,
    get_local_device_list,
)
from .models import Device

__all__ = [
    "Device",
    "NeighborTable",
    "NeighborTableError",
    "ScanningConfig",
    "Settings",
    "__version__",
    "find_local_device",
    "find_local_devices",
    "get_local_device_list",
    "get_settings",
]

__version__ = version("lanfinder")
