from __future__ import annotations

from .finder import find_local_device, find_local_devices, get_local_device_list
from .neighbors import NeighborTable, NeighborTableError
from .ranges import expand_range, local_networks, make_ip_set
from .scheduler import race_bounded
from .session import scan

__all__ = [
    "NeighborTable",
    "NeighborTableError",
    "expand_range",
    "find_local_device",
    "find_local_devices",
    "get_local_device_list",
    "local_networks",
    "make_ip_set",
    "race_bounded",
    "scan",
]
