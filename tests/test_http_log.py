import logging
from http import HTTPStatus

from revproxy_core.http_log import HttpMessageLog
from revproxy_core.message import Request, Uri, Version


def _request():
    return Request(
        method="POST",
        uri="/submit?x=1",
        version=Version.HTTP_2,
        headers={"host": "example.com", "user-agent": "tester", "x-forwarded-for": "192.0.2.9"},
    )


def test_from_request_fields():
    log = HttpMessageLog.from_request(_request())
    assert log.method == "POST"
    assert log.host == "example.com"
    assert log.p_and_q == "/submit?x=1"
    assert log.version is Version.HTTP_2
    assert log.ua == "tester"
    assert log.xff == "192.0.2.9"
    assert (log.uri_scheme, log.uri_host, log.status, log.upstream, log.client_addr) == ("", "", "", "", "")


def test_absolute_uri_fields():
    log = HttpMessageLog.from_request(Request(uri="https://example.com/a"))
    assert log.uri_scheme == "https"
    assert log.uri_host == "example.com"
    assert log.host == ""


def test_client_addr_is_canonical():
    log = HttpMessageLog.from_request(_request())
    result = log.record_client_addr(("::ffff:192.0.2.1", 80))
    assert result is log
    assert log.client_addr == "192.0.2.1:80"


def test_ipv6_client_addr_bracketed():
    log = HttpMessageLog.from_request(_request())
    log.record_client_addr(("2001:db8::1", 443))
    assert log.client_addr.startswith("[2001:db8::1]")
    assert log.client_addr.endswith(":443")


def test_status_and_xff_and_upstream():
    log = HttpMessageLog.from_request(_request())
    log.record_status(HTTPStatus.NOT_FOUND).record_xff(None).record_upstream(Uri.parse("http://backend:8080/submit"))
    assert log.status == "404 Not Found"
    assert log.xff == ""
    assert log.upstream == "http://backend:8080/submit"


def test_xff_invisible_chars_give_empty():
    log = HttpMessageLog.from_request(_request())
    log.record_xff("caf\u00e9")
    assert log.xff == ""


def test_format_line_uses_uri_host_when_no_header():
    log = HttpMessageLog.from_request(Request(uri="http://example.com/p"))
    log.record_client_addr(("127.0.0.1", 1234)).record_status(200)
    line = log.format_line()
    assert line.startswith("example.com <- 127.0.0.1:1234 -- GET /p HTTP/1.1 -- 200 OK -- http://example.com ")
    assert line.endswith('"", "" ""')


def test_output_logs_format_line(caplog):
    log = HttpMessageLog.from_request(_request())
    log.record_status(200)
    with caplog.at_level(logging.INFO, logger="revproxy_core.http_log"):
        log.output()
    assert [r.getMessage() for r in caplog.records] == [log.format_line()]