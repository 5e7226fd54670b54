import pytest

from revproxy_core.message import Request
from revproxy_core.requests_inspect import inspect_parse_host


def test_host_header_port_is_dropped_and_lowercased():
    req = Request(uri="/", headers={"host": "Example.COM:8080"})
    assert inspect_parse_host(req) == b"example.com"


def test_uri_host_used_without_header():
    req = Request(uri="http://Example.com/path")
    assert inspect_parse_host(req) == b"example.com"


def test_header_and_uri_agree():
    req = Request(uri="http://example.com:8080/", headers={"host": "EXAMPLE.com"})
    assert inspect_parse_host(req) == b"example.com"


def test_header_and_uri_mismatch_raises():
    req = Request(uri="http://example.com/", headers={"host": "example.org"})
    with pytest.raises(ValueError, match="mismatch"):
        inspect_parse_host(req)


def test_neither_host_raises():
    req = Request(uri="/index.html")
    with pytest.raises(ValueError, match="Neither"):
        inspect_parse_host(req)


def test_bracketed_ipv6_with_port():
    req = Request(uri="/", headers={"host": "[::1]:8443"})
    assert inspect_parse_host(req) == b"::1"


def test_bare_ipv6_kept_as_is():
    req = Request(uri="/", headers={"host": "FE80::1"})
    assert inspect_parse_host(req) == "FE80::1".encode()


def test_bracketed_ipv6_header_matches_uri():
    req = Request(uri="http://[::1]:8080/", headers={"host": "[::1]"})
    assert inspect_parse_host(req) == b"::1"