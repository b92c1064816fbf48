from __future__ import annotations

import ipaddress
import logging
import socket

import psutil

logger = logging.getLogger(__name__)


def _address_span(
    first: ipaddress.IPv4Address, last: ipaddress.IPv4Address
) -> list[str]:
    low, high = sorted((int(first), int(last)))
    return [str(ipaddress.IPv4Address(value)) for value in range(low, high + 1)]


def expand_range(expression: str, end: str | None = None) -> list[str]:
    """Expand an IPv4 range expression into its addresses.

    Accepts CIDR notation (``192.168.1.0/24``), a hyphenated range
    (``192.168.1.10-192.168.1.20``), a single address, or two bounding
    addresses passed as ``expression`` and ``end``. CIDR blocks include their
    network and broadcast addresses.

    Expansion is best effort: malformed or IPv6 input contributes nothing and
    is only reported at debug level.
    """
    try:
        if end is not None:
            return _address_span(
                ipaddress.IPv4Address(expression.strip()),
                ipaddress.IPv4Address(end.strip()),
            )
        text = expression.strip()
        if "/" in text:
            network = ipaddress.IPv4Network(text, strict=False)
            return [str(address) for address in network]
        if "-" in text:
            first, last = text.split("-", 1)
            return _address_span(
                ipaddress.IPv4Address(first.strip()),
                ipaddress.IPv4Address(last.strip()),
            )
        return [str(ipaddress.IPv4Address(text))]
    except ValueError as exc:
        logger.debug("Ignoring IP range %r: %s", expression, exc)
        return []


def local_networks() -> list[str]:
    """CIDRs of every non-loopback IPv4 interface on this host."""
    networks: list[str] = []
    for iface, addrs in psutil.net_if_addrs().items():
        for addr in addrs:
            if addr.family != socket.AF_INET or not addr.netmask:
                continue
            try:
                interface = ipaddress.IPv4Interface(f"{addr.address}/{addr.netmask}")
            except ValueError as exc:
                logger.debug("Skipping address on %s: %s", iface, exc)
                continue
            if interface.is_loopback:
                continue
            cidr = str(interface.network)
            if cidr not in networks:
                networks.append(cidr)
    logger.debug("Local networks: %s", ", ".join(networks) or "none")
    return networks


def make_ip_set(*expressions: str) -> frozenset[str]:
    """Union of the given ranges, or of the local networks when none given."""
    if not expressions:
        expressions = tuple(local_networks())
    return frozenset(
        ip for expression in expressions for ip in expand_range(expression)
    )
