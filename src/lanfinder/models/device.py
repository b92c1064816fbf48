from __future__ import annotations

import ipaddress
import string

from pydantic import BaseModel


class Device(BaseModel):
    """Address-resolution table entry for a host on the local network.

    ``ip`` and ``mac`` are always present, the rest depends on the platform.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    ip: str
    mac: str
    flag: str | None = None
    interface: str | None = None
    interface_name: str | None = None


def normalize_mac(value: str) -> str:
    """Reduce a MAC address to lower-case hex digits only."""
    return "".join(ch for ch in value if ch in string.hexdigits).lower()


def ip_sort_key(ip: str) -> tuple[int, ...]:
    return tuple(ipaddress.IPv4Address(ip).packed)
