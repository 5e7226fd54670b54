"""Header rewriting for requests forwarded upstream and responses sent downstream."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .canonical_address import to_canonical
from .message import Headers, Uri

_log = logging.getLogger(__name__)

HOP_HEADERS = (
    "connection",
    "te",
    "trailer",
    "keep-alive",
    "proxy-connection",
    "proxy-authenticate",
    "proxy-authorization",
    "transfer-encoding",
    "upgrade",
)


def _visible(value: str | None) -> str | None:
    """The value when it is made only of visible ASCII or tabs, else None."""
    if value is None:
        return None
    if all(ch == "\t" or " " <= ch <= "~" for ch in value):
        return value
    return None


def override_host_header(headers: Headers, upstream_base_uri: Uri) -> None:
    """Replace every Host value with the upstream host, keeping an explicit port."""
    host = upstream_base_uri.host
    if host is None:
        raise ValueError("No hostname is given")
    port = upstream_base_uri.port
    if port is not None:
        host = f"{host}:{port}"
    headers.insert("host", host)


def append_header_entry_with_comma(headers: Headers, key: str, value: str) -> None:
    """Set ``key`` or extend its first value with ``, value`` (RFC 9110 list syntax)."""
    existing = headers.get(key)
    if existing is None:
        headers.insert(key, value)
    else:
        headers.insert(key, f"{existing}, {value}")


def add_header_entry_if_not_exist(headers: Headers, key: str, value: str) -> None:
    """Set ``key`` only when it is absent."""
    if headers.get(key) is None:
        headers.insert(key, value)


def add_header_entry_overwrite_if_exist(headers: Headers, key: str, value: str) -> None:
    """Set ``key`` to exactly ``value``, replacing any values it had."""
    headers.insert(key, value)


def make_cookie_single_line(headers: Headers) -> None:
    """Join all Cookie values into one line separated by ``; ``."""
    cookies = "; ".join(_visible(v) or "" for v in headers.get_all("cookie"))
    if cookies:
        headers.remove("cookie")
        headers.insert("cookie", cookies)


def add_forwarding_header(
    headers: Headers,
    client_addr: Sequence[Any],
    listen_addr: Sequence[Any],
    tls: bool,
    uri_str: str,
) -> None:
    """Add X-Forwarded-*, X-Real-IP and related headers for the upstream request."""
    client_ip = str(to_canonical(client_addr)[0])
    listen_port = to_canonical(listen_addr)[1]

    append_header_entry_with_comma(headers, "x-forwarded-for", client_ip)
    make_cookie_single_line(headers)

    add_header_entry_if_not_exist(headers, "x-forwarded-proto", "https" if tls else "http")
    add_header_entry_if_not_exist(headers, "x-forwarded-port", str(listen_port))

    add_header_entry_overwrite_if_exist(headers, "x-real-ip", client_ip)
    add_header_entry_overwrite_if_exist(headers, "x-forwarded-ssl", "on" if tls else "off")
    add_header_entry_overwrite_if_exist(headers, "x-original-uri", uri_str)
    add_header_entry_overwrite_if_exist(headers, "proxy", "")


def remove_connection_header(headers: Headers) -> None:
    """Remove the headers named by the Connection header."""
    value = _visible(headers.get("connection"))
    if value is None:
        return
    for member in value.split(","):
        if not member:
            continue
        name = member.strip()
        if name in headers:
            headers.remove(name)


def remove_hop_header(headers: Headers) -> None:
    """Remove hop-by-hop headers."""
    for key in HOP_HEADERS:
        headers.remove(key)


def extract_upgrade(headers: Headers) -> str | None:
    """The Upgrade value when Connection lists ``upgrade``, else None."""
    connection = _visible(headers.get("connection"))
    if connection is None:
        return None
    if not any(token.strip().lower() == "upgrade" for token in connection.split(",")):
        return None
    upgrade = _visible(headers.get("upgrade"))
    if upgrade is not None:
        _log.debug("Upgrade in request header: %s", upgrade)
    return upgrade