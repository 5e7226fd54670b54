"""Extraction of the target host name from a request's Host header or request line."""

from __future__ import annotations

import re

from .message import Request

_BRACKETS = re.compile(rb"[\[\]]")


def _drop_port(value: bytes) -> bytes:
    """Strip a port from a host value, lower-casing plain host names."""
    if value.startswith(b"["):
        # Bracketed IPv6 literal: the part between the brackets is the host.
        return _BRACKETS.split(value)[1]
    if value.count(b":") >= 2:
        # Bare IPv6 literal; it cannot carry a port.
        return value
    return value.split(b":", 1)[0].lower()


def inspect_parse_host(request: Request) -> bytes:
    """Host name of ``request`` from its Host header and/or URI, without any port.

    When both are present they must agree. Raises ValueError when they differ
    or when neither is present.
    """
    header_value = request.headers.get("host")
    header_host = None if header_value is None else _drop_port(header_value.encode("utf-8"))
    uri_value = request.uri.host
    uri_host = None if uri_value is None else _drop_port(uri_value.encode("utf-8"))

    if header_host is not None and uri_host is not None:
        if header_host != uri_host:
            raise ValueError("Host header and uri host mismatch")
        return header_host
    if header_host is not None:
        return header_host
    if uri_host is not None:
        return uri_host
    raise ValueError("Neither Host header nor uri host is valid")