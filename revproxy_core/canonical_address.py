"""Canonical forms of socket addresses (IPv4-mapped IPv6 folded to IPv4)."""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any, Sequence

IPAddress = IPv4Address | IPv6Address
SocketAddress = tuple[IPAddress, int]

_LOOPBACK_COMPAT = IPv4Address("0.0.0.1")


def _normalize(address: Sequence[Any]) -> SocketAddress:
    if len(address) < 2:
        raise ValueError(f"socket address needs a host and a port: {address!r}")
    host, port = address[0], address[1]
    ip = host if isinstance(host, (IPv4Address, IPv6Address)) else ip_address(host)
    if not isinstance(port, int) or not 0 <= port <= 0xFFFF:
        raise ValueError(f"invalid port: {port!r}")
    return ip, port


def _embedded_ipv4(ip: IPv6Address) -> IPv4Address | None:
    packed = ip.packed
    if packed[:10] == bytes(10) and packed[10:12] in (b"\x00\x00", b"\xff\xff"):
        return IPv4Address(packed[12:])
    return None


def to_canonical(address: Sequence[Any]) -> SocketAddress:
    """Return ``(ip, port)`` with IPv4-mapped or -compatible IPv6 turned into IPv4.

    ``::1`` is kept as IPv6 loopback rather than becoming ``0.0.0.1``.
    """
    ip, port = _normalize(address)
    if isinstance(ip, IPv6Address):
        mapped = _embedded_ipv4(ip)
        if mapped is not None and mapped != _LOOPBACK_COMPAT:
            return mapped, port
    return ip, port


def format_address(address: Sequence[Any]) -> str:
    """Render an address as ``ip:port`` or ``[ipv6]:port``."""
    ip, port = _normalize(address)
    if isinstance(ip, IPv6Address):
        return f"[{ip}]:{port}"
    return f"{ip}:{port}"