# revproxy-core

Building blocks for an HTTP reverse proxy, written with the standard library
only.

## Modules

- `revproxy_core.names`: `ServerName` and `PathName`, names stored as
  ASCII-lowercased bytes for exact and prefix matching. Build them with
  `to_server_name()` and `to_path_name()`. `PathName` has `get()` (a byte, a
  byte range, or `None` when out of bounds) and `starts_with()`; both classes
  have `to_str()`.
- `revproxy_core.message`: a small HTTP message model: `Version`, `Headers`
  (an ordered, case-insensitive multimap with `get`, `get_all`, `insert`,
  `append`, `remove`, `items`), `Uri` (with `Uri.parse()`, `host`, `port`,
  `path_and_query`), `Frame`, `Request`, `Response`, and the bodies
  `empty_body()` and `full_body()`.
- `revproxy_core.watch`: a single-producer value channel (`channel()`,
  `WatchSender`, `WatchReceiver`). The value `0` means closed; the receiver is
  woken only when the value changes.
- `revproxy_core.incoming_body`: `IncomingLike`, an asynchronous request body
  fed by a `BodySender`. The data slot holds one unconsumed chunk; errors can
  always be queued; trailers come after the data. Also `DecodedLength`,
  `SizeHint`, and the errors `ChannelClosedError`, `BodyWriteAbortedError` and
  `ChannelFullError`.
- `revproxy_core.headers`: header rewriting: `add_forwarding_header()`
  (`x-forwarded-for`, `x-forwarded-proto`, `x-forwarded-port`, `x-real-ip`,
  `x-forwarded-ssl`, `x-original-uri`, `proxy`), `remove_connection_header()`,
  `remove_hop_header()`, `make_cookie_single_line()`, `override_host_header()`,
  `extract_upgrade()` and the helpers `append_header_entry_with_comma()`,
  `add_header_entry_if_not_exist()` and `add_header_entry_overwrite_if_exist()`.
- `revproxy_core.requests_inspect`: `inspect_parse_host()` returns the host of
  a request from its `Host` header and/or URI, without the port, and raises
  `ValueError` when the two disagree or neither is present.
- `revproxy_core.canonical_address`: `to_canonical()` turns IPv4-mapped (and
  IPv4-compatible, except `::1`) IPv6 addresses into IPv4; `format_address()`
  renders `ip:port` or `[ipv6]:port`.
- `revproxy_core.http_result`: the `HttpError` family (for example
  `InvalidHostInRequestHeader` → 400, `SniHostInconsistency` → 421,
  `NoMatchingBackendApp` → 503, `NoUpstreamCandidates` → 404, others → 500)
  and `status_code_for()`.
- `revproxy_core.synthetic_response`: `synthetic_error_response()` and
  `secure_redirection_response()`, a 301 to the HTTPS form of the request.
- `revproxy_core.http_log`: `HttpMessageLog`, an access-log record built with
  `from_request()`, filled in with the `record_*` methods and written with
  `format_line()` / `output()` (INFO on the standard `logging` module).
- `revproxy_core.sockets`: `bind_tcp_socket()` and `bind_udp_socket()` bind to
  a `(host, port)` pair with `SO_REUSEADDR` and, where available,
  `SO_REUSEPORT`.

## Examples

```python
from revproxy_core.names import to_server_name, to_path_name

assert to_server_name("Example.COM") == to_server_name("example.com")
assert to_path_name("/API/v1").starts_with(to_path_name("/api"))
```

```python
from revproxy_core.message import Headers
from revproxy_core.headers import add_forwarding_header, remove_hop_header

headers = Headers()
headers.insert("keep-alive", "timeout=5")
remove_hop_header(headers)
add_forwarding_header(headers, ("192.0.2.10", 50000), ("0.0.0.0", 8080), False, "/index.html")
print(headers.get("x-forwarded-for"))  # 192.0.2.10
print(headers.get("x-forwarded-port"))  # 8080
```

```python
from revproxy_core.message import Request
from revproxy_core.names import to_server_name
from revproxy_core.requests_inspect import inspect_parse_host
from revproxy_core.synthetic_response import secure_redirection_response

request = Request(uri="/a?b=1", headers={"host": "Example.com:8080"})
print(inspect_parse_host(request))  # b'example.com'

response = secure_redirection_response(to_server_name("example.com"), 8443, request)
print(response.status, response.headers.get("location"))
# HTTPStatus.MOVED_PERMANENTLY https://example.com:8443/a?b=1
```

```python
import asyncio
from revproxy_core.incoming_body import IncomingLike

async def main():
    sender, body = IncomingLike.channel()
    with sender:  # leaving the block ends the data
        await sender.send_data(b"hello")
    async for frame in body:
        print(frame.data)  # b'hello'

asyncio.run(main())
```

## What this package does not do

It provides pieces, not a running proxy. There is no command to start, no
listener or accept loop, no TLS handling, no client for forwarding requests
upstream, no backend or path configuration, no load balancing or sticky
cookies, and no HTTP/2 or HTTP/3 connection handling. `bind_tcp_socket()`
returns a bound socket that is not yet listening; serving on it is left to the
caller.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```