from __future__ import annotations

from dataclasses import dataclass, field

from lanfinder.models import normalize_mac


@dataclass
class Redactor:
    """Mask addresses in command output so it can be shared."""

    enabled: bool = True
    _mac_map: dict[str, int] = field(default_factory=dict)
    _mac_counter: int = 0

    def redact_ip(self, ip: str) -> str:
        if not self.enabled:
            return ip
        parts = ip.split(".")
        if len(parts) == 4 and all(part.isdigit() for part in parts):
            return f"x.x.x.{parts[3]}"
        return ip

    def redact_mac(self, mac: str) -> str:
        if not self.enabled:
            return mac
        digits = normalize_mac(mac)
        if len(digits) != 12:
            return mac
        # vendor prefix stays readable, the device part becomes a stable counter
        counter = self._mac_map.get(digits)
        if counter is None:
            self._mac_counter += 1
            counter = self._mac_counter
            self._mac_map[digits] = counter
        prefix = ":".join(digits[i : i + 2] for i in range(0, 6, 2))
        return f"{prefix}:xx:xx:{counter:02d}"

    def redact_interface(self, value: str | None) -> str:
        if value is None:
            return ""
        return self.redact_ip(value)
