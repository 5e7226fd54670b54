"""Responses produced by the proxy itself: errors and HTTPS redirections."""

from __future__ import annotations

from http import HTTPStatus

from .http_result import FailedToRedirect
from .message import Request, Response, Uri, empty_body
from .names import ServerName


def synthetic_error_response(status_code: int) -> Response:
    """An empty-bodied response carrying ``status_code``."""
    return Response(status=status_code, body=empty_body())


def secure_redirection_response(server_name: ServerName, tls_port: int | None, request: Request) -> Response:
    """A 301 redirect to the HTTPS form of ``request``'s target on ``server_name``.

    Port 443 (or no port) is left out of the location. Raises FailedToRedirect
    when no valid location can be built.
    """
    try:
        host = server_name.to_str()
    except UnicodeDecodeError:
        host = ""
    authority = host if tls_port in (None, 443) else f"{host}:{tls_port}"
    try:
        location = Uri(
            scheme="https",
            authority=authority,
            path=request.uri.path or "/",
            query=request.uri.query,
        )
    except ValueError as exc:
        raise FailedToRedirect(exc) from exc
    return Response(
        status=HTTPStatus.MOVED_PERMANENTLY,
        headers={"location": str(location)},
        body=empty_body(),
    )