from http import HTTPStatus

import pytest

from revproxy_core.http_result import FailedToRedirect
from revproxy_core.message import Request, Uri
from revproxy_core.names import ServerName
from revproxy_core.synthetic_response import secure_redirection_response, synthetic_error_response


@pytest.mark.asyncio
async def test_error_response_is_empty():
    res = synthetic_error_response(HTTPStatus.BAD_GATEWAY)
    assert res.status == HTTPStatus.BAD_GATEWAY
    assert await res.body.frame() is None


def test_redirect_default_port():
    res = secure_redirection_response(ServerName("Example.com"), None, Request(uri="/path?q=1"))
    assert res.status == HTTPStatus.MOVED_PERMANENTLY
    loc = Uri.parse(res.headers.get("location"))
    assert loc.scheme == "https"
    assert loc.host == "example.com"
    assert loc.port is None
    assert loc.path_and_query == "/path?q=1"


def test_redirect_port_443_omitted():
    with_none = secure_redirection_response(ServerName("example.com"), None, Request(uri="/a"))
    with_443 = secure_redirection_response(ServerName("example.com"), 443, Request(uri="/a"))
    assert with_none.headers.get("location") == with_443.headers.get("location")


def test_redirect_custom_port():
    res = secure_redirection_response(ServerName("example.com"), 8443, Request(uri="/a"))
    loc = Uri.parse(res.headers.get("location"))
    assert loc.port == 8443
    assert loc.path == "/a"


def test_redirect_empty_path_becomes_root():
    res = secure_redirection_response(ServerName("example.com"), None, Request(uri="http://example.com"))
    loc = Uri.parse(res.headers.get("location"))
    assert loc.path == "/"
    assert loc.query is None


def test_redirect_empty_server_name_fails():
    with pytest.raises(FailedToRedirect):
        secure_redirection_response(ServerName(""), None, Request(uri="/"))


def test_redirect_undecodable_server_name_fails():
    with pytest.raises(FailedToRedirect):
        secure_redirection_response(ServerName(b"\xff\xfe"), None, Request(uri="/"))