"""Data models for lanfinder."""

from lanfinder.models.device import Device, ip_sort_key, normalize_mac

__all__ = [
    "Device",
    "ip_sort_key",
    "normalize_mac",
]
