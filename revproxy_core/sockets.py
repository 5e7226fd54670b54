"""Listening sockets bound with address and port reuse enabled."""

from __future__ import annotations

import logging
import socket
from collections.abc import Sequence
from ipaddress import IPv6Address, ip_address
from typing import Any

_log = logging.getLogger(__name__)


def _bind(listening_on: Sequence[Any], kind: int, label: str) -> socket.socket:
    host, port = listening_on[0], listening_on[1]
    ip = ip_address(str(host))
    if isinstance(ip, IPv6Address):
        family, address = socket.AF_INET6, (str(ip), port, 0, 0)
    else:
        family, address = socket.AF_INET, (str(ip), port)
    sock = socket.socket(family, kind)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        try:
            sock.bind(address)
        except OSError as exc:
            _log.error("Failed to bind %s socket: %s", label, exc)
            raise
    except BaseException:
        sock.close()
        raise
    return sock


def bind_tcp_socket(listening_on: Sequence[Any]) -> socket.socket:
    """A TCP socket bound to ``(host, port)`` with address and port reuse, not yet listening."""
    return _bind(listening_on, socket.SOCK_STREAM, "TCP")


def bind_udp_socket(listening_on: Sequence[Any]) -> socket.socket:
    """A non-blocking UDP socket bound to ``(host, port)`` with address and port reuse."""
    sock = _bind(listening_on, socket.SOCK_DGRAM, "UDP")
    sock.setblocking(False)
    return sock