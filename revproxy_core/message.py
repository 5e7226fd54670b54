"""HTTP message model: versions, header maps, URIs, body frames, requests and responses."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_DIGITS = frozenset("0123456789")


class Version(enum.Enum):
    """HTTP protocol version."""

    HTTP_09 = "HTTP/0.9"
    HTTP_10 = "HTTP/1.0"
    HTTP_11 = "HTTP/1.1"
    HTTP_2 = "HTTP/2.0"
    HTTP_3 = "HTTP/3.0"

    def __str__(self) -> str:
        return self.value


def _is_token(text: str) -> bool:
    return bool(text) and set(text) <= _TOKEN_CHARS


def _header_name(name: str) -> str:
    if not isinstance(name, str):
        raise TypeError(f"header name must be str, got {type(name).__name__}")
    if not _is_token(name):
        raise ValueError(f"invalid header name: {name!r}")
    return name.lower()


def _header_value(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"header value must be str, got {type(value).__name__}")
    for ch in value:
        code = ord(ch)
        if (code < 0x20 and ch != "\t") or code == 0x7F:
            raise ValueError(f"invalid header value: {value!r}")
    return value


class Headers:
    """Ordered, case-insensitive multimap of header names to values."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]] | None = None) -> None:
        self._entries: list[tuple[str, str]] = []
        if entries is not None:
            pairs = entries.items() if isinstance(entries, Mapping) else entries
            for name, value in pairs:
                self.append(name, value)

    def get(self, name: str) -> str | None:
        """First value for ``name``, or None."""
        key = _header_name(name)
        return next((value for k, value in self._entries if k == key), None)

    def get_all(self, name: str) -> list[str]:
        """Every value for ``name``, in order."""
        key = _header_name(name)
        return [value for k, value in self._entries if k == key]

    def insert(self, name: str, value: str) -> str | None:
        """Replace all values of ``name`` with ``value``; return the previous first value."""
        key = _header_name(name)
        value = _header_value(value)
        previous = None
        position = None
        for index, (k, v) in enumerate(self._entries):
            if k == key:
                previous, position = v, index
                break
        self._entries = [(k, v) for k, v in self._entries if k != key]
        if position is None:
            self._entries.append((key, value))
        else:
            self._entries.insert(position, (key, value))
        return previous

    def append(self, name: str, value: str) -> None:
        """Add a value for ``name`` after any existing ones."""
        self._entries.append((_header_name(name), _header_value(value)))

    def remove(self, name: str) -> str | None:
        """Remove every value of ``name``; return the first one removed, or None."""
        key = _header_name(name)
        removed = [v for k, v in self._entries if k == key]
        self._entries = [(k, v) for k, v in self._entries if k != key]
        return removed[0] if removed else None

    def items(self) -> list[tuple[str, str]]:
        """All ``(name, value)`` pairs in order, names lower-cased."""
        return list(self._entries)

    def copy(self) -> Headers:
        return Headers(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _is_token(name) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._entries == other._entries
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._entries!r})"


def _parse_port(text: str | None) -> int | None:
    if not text:
        return None
    if not set(text) <= _DIGITS:
        raise ValueError(f"invalid port: {text!r}")
    port = int(text)
    if port > 0xFFFF:
        raise ValueError(f"port out of range: {text!r}")
    return port


def _split_authority(authority: str) -> tuple[str, int | None]:
    if (
        not authority
        or any(c in authority for c in "/?#")
        or any(ord(c) <= 0x20 or ord(c) == 0x7F for c in authority)
    ):
        raise ValueError(f"invalid authority: {authority!r}")
    host_port = authority.rpartition("@")[2]
    if host_port.startswith("["):
        end = host_port.find("]")
        if end < 2:
            raise ValueError(f"invalid authority: {authority!r}")
        host, rest = host_port[: end + 1], host_port[end + 1 :]
        if rest and not rest.startswith(":"):
            raise ValueError(f"invalid authority: {authority!r}")
        return host, _parse_port(rest[1:])
    if host_port.count(":") > 1:
        raise ValueError(f"invalid authority: {authority!r}")
    host, _, port_text = host_port.partition(":")
    if not host:
        raise ValueError(f"invalid authority: {authority!r}")
    return host, _parse_port(port_text)


def _check_scheme(scheme: str) -> None:
    valid = (
        bool(scheme)
        and scheme[0].isascii()
        and scheme[0].isalpha()
        and all(c.isascii() and (c.isalnum() or c in "+-.") for c in scheme)
    )
    if not valid:
        raise ValueError(f"invalid scheme: {scheme!r}")


def _split_path_query(text: str) -> tuple[str, str | None]:
    path, sep, query = text.partition("#")[0].partition("?")
    return path, (query if sep else None)


@dataclass(frozen=True)
class Uri:
    """Request target: absolute, origin (``/path?q``), authority or asterisk form."""

    scheme: str | None = None
    authority: str | None = None
    path: str = ""
    query: str | None = None

    def __post_init__(self) -> None:
        if self.scheme is not None:
            _check_scheme(self.scheme)
            if self.authority is None:
                raise ValueError("a URI with a scheme needs an authority")
        if self.authority is not None:
            _split_authority(self.authority)
        if self.path and not (self.path.startswith("/") or self.path == "*"):
            raise ValueError(f"invalid path: {self.path!r}")

    @classmethod
    def parse(cls, text: str) -> Uri:
        """Parse a request target; raises ValueError when it is malformed."""
        if not text or any(ord(c) <= 0x20 or ord(c) == 0x7F for c in text):
            raise ValueError(f"invalid URI: {text!r}")
        if text == "*":
            return cls(path="*")
        if text.startswith("/"):
            path, query = _split_path_query(text)
            return cls(path=path, query=query)
        scheme, sep, rest = text.partition("://")
        if sep:
            _check_scheme(scheme)
            cut = min((i for i in (rest.find(c) for c in "/?#") if i >= 0), default=len(rest))
            authority, remainder = rest[:cut], rest[cut:]
            path, query = _split_path_query(remainder)
            return cls(scheme.lower(), authority, path or "/", query)
        return cls(authority=text)

    @property
    def host(self) -> str | None:
        """Host part of the authority; IPv6 literals keep their brackets."""
        if self.authority is None:
            return None
        return _split_authority(self.authority)[0]

    @property
    def port(self) -> int | None:
        if self.authority is None:
            return None
        return _split_authority(self.authority)[1]

    @property
    def path_and_query(self) -> str | None:
        if not self.path and self.query is None:
            return None
        return self.path + ("" if self.query is None else f"?{self.query}")

    def __str__(self) -> str:
        parts = []
        if self.scheme is not None:
            parts.append(f"{self.scheme}://")
        if self.authority is not None:
            parts.append(self.authority)
        path_and_query = self.path_and_query
        if path_and_query:
            parts.append(path_and_query)
        return "".join(parts)


@dataclass(frozen=True)
class Frame:
    """One body frame: either a chunk of data or a block of trailers."""

    data: bytes | None = None
    trailers: Headers | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.trailers is None):
            raise ValueError("a frame holds exactly one of data or trailers")

    @property
    def is_data(self) -> bool:
        return self.data is not None

    @property
    def is_trailers(self) -> bool:
        return self.trailers is not None


class _BufferedBody:
    """Body whose frames are all known up front."""

    __slots__ = ("_frames",)

    def __init__(self, frames: Iterable[Frame]) -> None:
        self._frames = deque(frames)

    async def frame(self) -> Frame | None:
        return self._frames.popleft() if self._frames else None

    def is_end_stream(self) -> bool:
        return not self._frames

    def __aiter__(self) -> _BufferedBody:
        return self

    async def __anext__(self) -> Frame:
        frame = await self.frame()
        if frame is None:
            raise StopAsyncIteration
        return frame


def empty_body() -> _BufferedBody:
    """A body with no frames."""
    return _BufferedBody(())


def full_body(data: bytes | bytearray | memoryview) -> _BufferedBody:
    """A body holding ``data`` as a single frame (no frame when it is empty)."""
    payload = bytes(data)
    return _BufferedBody([Frame(data=payload)] if payload else [])


def _coerce_headers(headers: Any) -> Headers:
    return headers if isinstance(headers, Headers) else Headers(headers)


@dataclass
class Request:
    """An HTTP request with an asynchronous body."""

    method: str = "GET"
    uri: Uri = field(default_factory=lambda: Uri(path="/"))
    version: Version = Version.HTTP_11
    headers: Headers = field(default_factory=Headers)
    body: Any = field(default_factory=lambda: empty_body())

    def __post_init__(self) -> None:
        if not _is_token(self.method):
            raise ValueError(f"invalid method: {self.method!r}")
        if isinstance(self.uri, str):
            self.uri = Uri.parse(self.uri)
        self.headers = _coerce_headers(self.headers)


@dataclass
class Response:
    """An HTTP response with an asynchronous body."""

    status: int = HTTPStatus.OK
    version: Version = Version.HTTP_11
    headers: Headers = field(default_factory=Headers)
    body: Any = field(default_factory=lambda: empty_body())

    def __post_init__(self) -> None:
        code = int(self.status)
        if not 100 <= code <= 999:
            raise ValueError(f"invalid status code: {self.status!r}")
        try:
            self.status = HTTPStatus(code)
        except ValueError:
            self.status = code
        self.headers = _coerce_headers(self.headers)