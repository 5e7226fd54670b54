"""Lower-cased byte names for hosts and paths, used as exact or prefix lookup keys."""

from __future__ import annotations

NameSource = str | bytes | bytearray | memoryview


def _lowered(value: NameSource) -> bytes:
    if isinstance(value, str):
        raw = value.encode("utf-8")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"cannot build a name from {type(value).__name__}")
    # bytes.lower() only touches ASCII letters, which is exactly what is wanted.
    return raw.lower()


class _ByteName:
    """Common behaviour of byte-based names holding ASCII-lowercased bytes."""

    __slots__ = ("_inner",)

    def __init__(self, value: NameSource = b"") -> None:
        self._inner = _lowered(value)

    def __bytes__(self) -> bytes:
        return self._inner

    def __len__(self) -> int:
        return len(self._inner)

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._inner == other._inner
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._inner))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"

    def _decode(self) -> str:
        return self._inner.decode("utf-8")


class ServerName(_ByteName):
    """A host name or IP address literal, compared case-insensitively."""

    __slots__ = ()

    def to_str(self) -> str:
        """Decode the name as UTF-8; raises UnicodeDecodeError on invalid bytes."""
        return self._decode()


class PathName(_ByteName):
    """A request path such as ``/path/ok``, compared case-insensitively."""

    __slots__ = ()

    def to_str(self) -> str:
        """Decode the path as UTF-8; raises UnicodeDecodeError on invalid bytes."""
        return self._decode()

    def get(self, index: int | slice) -> int | bytes | None:
        """Return the byte (or byte range) at ``index``, or None when out of bounds."""
        size = len(self._inner)
        if isinstance(index, slice):
            if index.step is not None:
                raise ValueError("stepped slices are not supported")
            start = 0 if index.start is None else index.start
            stop = size if index.stop is None else index.stop
            if start < 0 or stop < start or stop > size:
                return None
            return self._inner[start:stop]
        if 0 <= index < size:
            return self._inner[index]
        return None

    def starts_with(self, needle: PathName) -> bool:
        """Whether this path begins with ``needle``."""
        return self._inner.startswith(needle._inner)


def to_server_name(value: NameSource) -> ServerName:
    """Build a ServerName from text or bytes."""
    return ServerName(value)


def to_path_name(value: NameSource) -> PathName:
    """Build a PathName from text or bytes."""
    return PathName(value)