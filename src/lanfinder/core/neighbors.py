"""Access to the operating system's address-resolution (ARP) table."""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import re
import time
from collections.abc import Sequence
from pathlib import Path

from lanfinder.models import Device, normalize_mac

logger = logging.getLogger(__name__)

PROC_NET_ARP = Path("/proc/net/arp")
ARP_COMMAND = ("arp", "-a")

_IGNORED_MACS = {"000000000000", "ffffffffffff"}

# "? (192.168.1.1) at aa:bb:cc:dd:ee:ff on en0 ifscope [ethernet]" (BSD/macOS)
# "? (192.168.1.1) at aa:bb:cc:dd:ee:ff [ether] on eth0" (net-tools)
_UNIX_ENTRY = re.compile(
    r"\((?P<ip>\d+\.\d+\.\d+\.\d+)\)\s+at\s+(?P<mac>\S+)"
    r"(?:\s+\[(?P<hwtype>[^\]]+)\])?"
    r"(?:\s+on\s+(?P<ifname>\S+))?"
)
# "Interface: 192.168.1.5 --- 0xb"
_WINDOWS_INTERFACE = re.compile(r"^Interface:\s+(?P<ip>\d+\.\d+\.\d+\.\d+)")
# "  192.168.1.1           aa-bb-cc-dd-ee-ff     dynamic"
_WINDOWS_ENTRY = re.compile(
    r"^\s*(?P<ip>\d+\.\d+\.\d+\.\d+)\s+(?P<mac>[0-9a-fA-F-]{11,17})\s+(?P<type>\w+)"
)


class NeighborTableError(RuntimeError):
    """The address-resolution table could not be read."""


def format_mac(value: str) -> str | None:
    """Lower-case, colon separated MAC, or None for unusable entries."""
    octets = [octet.zfill(2) for octet in re.split(r"[:-]", value.strip())]
    if len(octets) != 6:
        return None
    mac = ":".join(octets).lower()
    digits = normalize_mac(mac)
    if len(digits) != 12 or digits in _IGNORED_MACS:
        return None
    return mac


def _valid_ip(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def parse_proc_arp(text: str) -> list[Device]:
    """Parse the Linux ``/proc/net/arp`` table."""
    devices: list[Device] = []
    for line in text.splitlines()[1:]:
        fields = line.split()
        if len(fields) < 6 or not _valid_ip(fields[0]):
            continue
        ip, _hwtype, flags, raw_mac, _mask, ifname = fields[:6]
        mac = format_mac(raw_mac)
        if mac is None:
            continue
        devices.append(Device(ip=ip, mac=mac, flag=flags, interface_name=ifname))
    return devices


def parse_arp_output(text: str) -> list[Device]:
    """Parse ``arp -a`` output from BSD/macOS, net-tools or Windows."""
    devices: list[Device] = []
    interface: str | None = None
    for line in text.splitlines():
        header = _WINDOWS_INTERFACE.match(line)
        if header:
            interface = header["ip"]
            continue

        unix = _UNIX_ENTRY.search(line)
        if unix:
            mac = format_mac(unix["mac"])
            if mac is not None and _valid_ip(unix["ip"]):
                devices.append(
                    Device(ip=unix["ip"], mac=mac, interface_name=unix["ifname"])
                )
            continue

        windows = _WINDOWS_ENTRY.match(line)
        if windows:
            mac = format_mac(windows["mac"])
            if mac is not None and _valid_ip(windows["ip"]):
                devices.append(
                    Device(
                        ip=windows["ip"],
                        mac=mac,
                        flag=windows["type"],
                        interface=interface,
                    )
                )
    return devices


class NeighborTable:
    """Reads the neighbor table from ``/proc/net/arp`` or ``arp -a``.

    The proc file is used when it exists, otherwise the command output is
    parsed. Every failure surfaces as a single :class:`NeighborTableError`.

    The last read is kept as a snapshot stamped with the monotonic time the
    read started. :meth:`lookup` reuses it for callers that only need entries
    learned up to an earlier point in time.
    """

    def __init__(
        self,
        proc_path: Path | None = PROC_NET_ARP,
        command: Sequence[str] = ARP_COMMAND,
    ) -> None:
        self.proc_path = proc_path
        self.command = tuple(command)
        self._snapshot: tuple[float, list[Device]] | None = None

    async def read(self) -> list[Device]:
        started = time.monotonic()
        try:
            if self.proc_path is not None and self.proc_path.exists():
                text = await asyncio.to_thread(self.proc_path.read_text)
                devices = parse_proc_arp(text)
            else:
                devices = parse_arp_output(await self._run_command())
        except (OSError, UnicodeDecodeError) as exc:
            raise NeighborTableError(
                "Unable to read the address-resolution table"
            ) from exc
        self._snapshot = (started, devices)
        return list(devices)

    async def lookup(self, ip: str, since: float | None = None) -> list[Device]:
        """Entries for ``ip``.

        With ``since`` (a :func:`time.monotonic` value) the table is only
        re-read when the snapshot started before that moment.
        """
        snapshot = self._snapshot
        if since is not None and snapshot is not None and snapshot[0] >= since:
            devices = snapshot[1]
        else:
            devices = await self.read()
        return [device for device in devices if device.ip == ip]

    async def _run_command(self) -> str:
        process = await asyncio.create_subprocess_exec(
            *self.command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip()
            raise OSError(
                f"{' '.join(self.command)} exited with {process.returncode}: {message}"
            )
        # localized Windows prints headers in the OEM code page; rows are ASCII
        return stdout.decode(errors="replace")
