"""Access-log record of one proxied HTTP exchange."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from .canonical_address import format_address, to_canonical
from .message import Request, Uri, Version

_log = logging.getLogger(__name__)


def _visible_or_empty(value: str | None) -> str:
    if value is None:
        return ""
    if all(ch == "\t" or " " <= ch <= "~" for ch in value):
        return value
    return ""


@dataclass
class HttpMessageLog:
    """Fields gathered while handling a request, written as one log line."""

    client_addr: str
    method: str
    host: str
    p_and_q: str
    version: Version
    uri_scheme: str
    uri_host: str
    ua: str
    xff: str
    status: str
    upstream: str

    @classmethod
    def from_request(cls, request: Request) -> HttpMessageLog:
        """Start a record from the incoming request."""
        headers = request.headers
        uri = request.uri
        return cls(
            client_addr="",
            method=request.method,
            host=_visible_or_empty(headers.get("host")),
            p_and_q=uri.path_and_query or "",
            version=request.version,
            uri_scheme=uri.scheme or "",
            uri_host=uri.host or "",
            ua=_visible_or_empty(headers.get("user-agent")),
            xff=_visible_or_empty(headers.get("x-forwarded-for")),
            status="",
            upstream="",
        )

    def record_client_addr(self, client_addr: Sequence[Any]) -> HttpMessageLog:
        """Record the client's canonical socket address."""
        self.client_addr = format_address(to_canonical(client_addr))
        return self

    def record_status(self, status_code: int) -> HttpMessageLog:
        """Record the response status as ``code reason``."""
        code = int(status_code)
        try:
            reason = HTTPStatus(code).phrase
        except ValueError:
            reason = "<unknown status code>"
        self.status = f"{code} {reason}"
        return self

    def record_xff(self, xff: str | None) -> HttpMessageLog:
        """Record the X-Forwarded-For value sent upstream."""
        self.xff = _visible_or_empty(xff)
        return self

    def record_upstream(self, upstream: Uri) -> HttpMessageLog:
        """Record the URI the request was forwarded to."""
        self.upstream = str(upstream)
        return self

    def format_line(self) -> str:
        """The access-log line for this record."""
        host = self.host or self.uri_host
        origin = (
            f"{self.uri_scheme}://{self.uri_host}" if self.uri_scheme and self.uri_host else ""
        )
        return (
            f"{host} <- {self.client_addr} -- {self.method} {self.p_and_q} {self.version} "
            f"-- {self.status} -- {origin} \"{self.ua}\", \"{self.xff}\" \"{self.upstream}\""
        )

    def output(self) -> None:
        """Write the record to the log at INFO level."""
        _log.info("%s", self.format_line())