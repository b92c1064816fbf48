from __future__ import annotations

import asyncio
import sys
import time

import pytest

from lanfinder.core.neighbors import (
    NeighborTable,
    NeighborTableError,
    format_mac,
    parse_arp_output,
    parse_proc_arp,
)
from lanfinder.models import Device

PROC_NET_ARP = """\
IP address       HW type     Flags       HW address            Mask     Device
192.168.1.1      0x1         0x2         AA:BB:CC:DD:EE:01     *        eth0
192.168.1.20     0x1         0x0         00:00:00:00:00:00     *        eth0
192.168.1.30     0x1         0x2         aa:bb:cc:dd:ee:1e     *        wlan0
"""

BSD_ARP = """\
? (192.168.1.1) at aa:bb:cc:dd:ee:1 on en0 ifscope [ethernet]
? (192.168.1.7) at (incomplete) on en0 ifscope [ethernet]
router.lan (192.168.1.2) at 0:1b:63:a:b:c on en0 ifscope permanent [ethernet]
? (192.168.1.255) at ff:ff:ff:ff:ff:ff on en0 ifscope [ethernet]
"""

NET_TOOLS_ARP = """\
? (10.0.0.1) at 52:54:00:12:34:56 [ether] on eth0
"""

WINDOWS_ARP = """\

Interface: 192.168.1.5 --- 0xb
  Internet Address      Physical Address      Type
  192.168.1.1           aa-bb-cc-dd-ee-01     dynamic
  192.168.1.255         ff-ff-ff-ff-ff-ff     static
  224.0.0.22            01-00-5e-00-00-16     static

Interface: 10.0.0.5 --- 0x11
  Internet Address      Physical Address      Type
  10.0.0.1              52-54-00-12-34-56     dynamic
"""


def test_format_mac_normalizes_separators_and_padding():
    assert format_mac("AA-BB-CC-DD-EE-FF") == "aa:bb:cc:dd:ee:ff"
    assert format_mac("0:1b:63:a:b:c") == "00:1b:63:0a:0b:0c"


@pytest.mark.parametrize(
    "value", ["(incomplete)", "00:00:00:00:00:00", "ff:ff:ff:ff:ff:ff", "aa:bb:cc"]
)
def test_format_mac_rejects_unusable_entries(value: str):
    assert format_mac(value) is None


def test_parse_proc_arp():
    assert parse_proc_arp(PROC_NET_ARP) == [
        Device(
            ip="192.168.1.1",
            mac="aa:bb:cc:dd:ee:01",
            flag="0x2",
            interface_name="eth0",
        ),
        Device(
            ip="192.168.1.30",
            mac="aa:bb:cc:dd:ee:1e",
            flag="0x2",
            interface_name="wlan0",
        ),
    ]


def test_parse_bsd_arp_output():
    assert parse_arp_output(BSD_ARP) == [
        Device(ip="192.168.1.1", mac="aa:bb:cc:dd:ee:01", interface_name="en0"),
        Device(ip="192.168.1.2", mac="00:1b:63:0a:0b:0c", interface_name="en0"),
    ]


def test_parse_net_tools_arp_output():
    assert parse_arp_output(NET_TOOLS_ARP) == [
        Device(ip="10.0.0.1", mac="52:54:00:12:34:56", interface_name="eth0"),
    ]


def test_parse_windows_arp_output():
    devices = parse_arp_output(WINDOWS_ARP)
    assert devices == [
        Device(
            ip="192.168.1.1",
            mac="aa:bb:cc:dd:ee:01",
            flag="dynamic",
            interface="192.168.1.5",
        ),
        Device(
            ip="224.0.0.22",
            mac="01:00:5e:00:00:16",
            flag="static",
            interface="192.168.1.5",
        ),
        Device(
            ip="10.0.0.1",
            mac="52:54:00:12:34:56",
            flag="dynamic",
            interface="10.0.0.5",
        ),
    ]


def test_read_from_proc_file(tmp_path):
    path = tmp_path / "arp"
    path.write_text(PROC_NET_ARP)
    table = NeighborTable(proc_path=path)

    devices = asyncio.run(table.read())

    assert [device.ip for device in devices] == ["192.168.1.1", "192.168.1.30"]


def test_lookup_returns_entries_for_one_address(tmp_path):
    path = tmp_path / "arp"
    path.write_text(PROC_NET_ARP)
    table = NeighborTable(proc_path=path)

    assert [d.mac for d in asyncio.run(table.lookup("192.168.1.30"))] == [
        "aa:bb:cc:dd:ee:1e"
    ]
    assert asyncio.run(table.lookup("192.168.1.20")) == []


def test_read_falls_back_to_command_without_proc_file(tmp_path):
    command = [sys.executable, "-c", f"print({NET_TOOLS_ARP!r})"]
    table = NeighborTable(proc_path=tmp_path / "missing", command=command)

    devices = asyncio.run(table.read())

    assert devices == [
        Device(ip="10.0.0.1", mac="52:54:00:12:34:56", interface_name="eth0")
    ]


def test_failing_command_raises_single_error():
    command = [sys.executable, "-c", "import sys; sys.exit(3)"]
    table = NeighborTable(proc_path=None, command=command)

    with pytest.raises(NeighborTableError, match="address-resolution table") as info:
        asyncio.run(table.read())
    assert "exited with 3" in str(info.value.__cause__)


def test_missing_command_raises_single_error():
    table = NeighborTable(proc_path=None, command=["lanfinder-no-such-arp-binary"])

    with pytest.raises(NeighborTableError) as info:
        asyncio.run(table.read())
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_unreadable_proc_file_raises_single_error(tmp_path):
    table = NeighborTable(proc_path=tmp_path)

    with pytest.raises(NeighborTableError):
        asyncio.run(table.lookup("192.168.1.1"))


def test_command_output_with_localized_header_bytes():
    # German Windows prints "Physikal. Adresse" in cp850, which is not UTF-8
    payload = (
        b"Schnittstelle: 10.0.0.5 --- 0x4\r\n"
        b"  Internetadresse  Physikal. Adr\x84  Typ\r\n"
        b"  10.0.0.1   52-54-00-12-34-56   dynamic\r\n"
    )
    script = f"import sys; sys.stdout.buffer.write({payload!r})"
    command = [sys.executable, "-c", script]
    table = NeighborTable(proc_path=None, command=command)

    devices = asyncio.run(table.read())

    assert [(d.ip, d.mac) for d in devices] == [("10.0.0.1", "52:54:00:12:34:56")]


def test_lookup_reuses_a_read_that_started_later(tmp_path):
    path = tmp_path / "arp"
    path.write_text(PROC_NET_ARP)
    table = NeighborTable(proc_path=path)
    reads = 0
    original_read = table.read

    async def _counting_read():
        nonlocal reads
        reads += 1
        return await original_read()

    table.read = _counting_read  # type: ignore[method-assign]

    async def _lookups():
        before = time.monotonic()
        await table.lookup("192.168.1.1", since=before)
        await table.lookup("192.168.1.30", since=before)
        assert reads == 1
        await table.lookup("192.168.1.30", since=time.monotonic() + 1)
        assert reads == 2
        await table.lookup("192.168.1.30")
        assert reads == 3

    asyncio.run(_lookups())


def test_lookup_sees_entries_learned_after_the_snapshot(tmp_path):
    path = tmp_path / "arp"
    path.write_text(PROC_NET_ARP)
    table = NeighborTable(proc_path=path)

    async def _lookups():
        assert await table.lookup("192.168.1.40", since=time.monotonic()) == []
        learned = "192.168.1.40  0x1  0x2  aa:bb:cc:dd:ee:28  *  eth0\n"
        path.write_text(PROC_NET_ARP + learned)
        return await table.lookup("192.168.1.40", since=time.monotonic() + 1)

    assert [d.mac for d in asyncio.run(_lookups())] == ["aa:bb:cc:dd:ee:28"]
