"""Channel-fed request body yielding data frames and then optional trailers.

A :class:`BodySender` feeds chunks to an :class:`IncomingLike` body. The data
channel holds one unconsumed chunk at a time, and errors can always be
queued. Trailers are delivered once the sender has finished its data.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections import deque
from dataclasses import dataclass

from .message import Frame, Headers
from .watch import CLOSED, WatchReceiver, WatchSender
from .watch import channel as watch_channel

WANT_PENDING = 1
WANT_READY = 2

_U64_MAX = 2**64 - 1
MAX_LEN = _U64_MAX - 2
_DATA_CAPACITY = 1


class ChannelClosedError(Exception):
    """The other half of the body channel is gone."""

    def __init__(self, message: str = "body channel is closed") -> None:
        super().__init__(message)


class BodyWriteAbortedError(Exception):
    """The sending half aborted the body."""

    def __init__(self, message: str = "body write aborted") -> None:
        super().__init__(message)


class ChannelFullError(Exception):
    """The channel cannot accept another chunk yet; ``chunk`` is handed back."""

    def __init__(self, chunk: bytes) -> None:
        self.chunk = chunk
        super().__init__("body channel cannot accept another chunk yet")


class DecodedLength:
    """Remaining body length: a known byte count, chunked, or close-delimited."""

    __slots__ = ("_value",)

    CLOSE_DELIMITED: DecodedLength
    CHUNKED: DecodedLength
    ZERO: DecodedLength

    def __init__(self, length: int) -> None:
        if not isinstance(length, int) or not 0 <= length <= MAX_LEN:
            raise ValueError(f"body length out of range: {length!r}")
        self._value = length

    @classmethod
    def _raw(cls, value: int) -> DecodedLength:
        obj = cls.__new__(cls)
        obj._value = value
        return obj

    def _copy(self) -> DecodedLength:
        return DecodedLength._raw(self._value)

    def _is_unknown(self) -> bool:
        return self._value in (_U64_MAX, _U64_MAX - 1)

    def sub_if(self, amount: int) -> None:
        """Subtract ``amount`` from a known length; unknown lengths are left alone."""
        if self._is_unknown():
            return
        if amount < 0 or amount > self._value:
            raise ValueError(f"cannot subtract {amount} from remaining length {self._value}")
        self._value -= amount

    def into_opt(self) -> int | None:
        """The known length, or None when it is chunked or close-delimited."""
        return None if self._is_unknown() else self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DecodedLength):
            return self._value == other._value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._value == _U64_MAX:
            return "DecodedLength.CLOSE_DELIMITED"
        if self._value == _U64_MAX - 1:
            return "DecodedLength.CHUNKED"
        return f"DecodedLength({self._value})"


DecodedLength.CLOSE_DELIMITED = DecodedLength._raw(_U64_MAX)
DecodedLength.CHUNKED = DecodedLength._raw(_U64_MAX - 1)
DecodedLength.ZERO = DecodedLength._raw(0)


@dataclass(frozen=True)
class SizeHint:
    """Bounds on the number of body bytes still to come."""

    lower: int = 0
    upper: int | None = None


class _BodyState:
    __slots__ = (
        "items",
        "data_pending",
        "sender_closed",
        "receiver_closed",
        "trailers",
        "trailers_sent",
        "_waiters",
    )

    def __init__(self) -> None:
        self.items: deque[bytes | BaseException] = deque()
        self.data_pending = 0
        self.sender_closed = False
        self.receiver_closed = False
        self.trailers: Headers | None = None
        self.trailers_sent = False
        self._waiters: list[asyncio.Future[None]] = []

    def notify(self) -> None:
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    async def wait(self) -> None:
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        finally:
            with contextlib.suppress(ValueError):
                self._waiters.remove(waiter)


class BodySender:
    """Sending half of an :class:`IncomingLike` body; use as a context manager to finish it."""

    __slots__ = ("_want", "_state")

    def __init__(self, want: WatchReceiver, state: _BodyState) -> None:
        self._want = want
        self._state = state

    async def ready(self) -> None:
        """Wait until the body has been polled and the channel can take a chunk."""
        while True:
            want = self._want.peek()
            if want == WANT_READY:
                break
            if want == CLOSED:
                raise ChannelClosedError()
            if want != WANT_PENDING:
                raise RuntimeError(f"unexpected want state: {want}")
            await self._want.wait_for_change(want)
        state = self._state
        while True:
            if state.receiver_closed or state.sender_closed:
                raise ChannelClosedError()
            if state.data_pending < _DATA_CAPACITY:
                return
            await state.wait()

    async def send_data(self, chunk: bytes | bytearray | memoryview) -> None:
        """Send a chunk once the channel is ready for it."""
        await self.ready()
        try:
            self.try_send_data(chunk)
        except ChannelFullError as exc:
            raise ChannelClosedError() from exc

    async def send_trailers(self, trailers: Headers) -> None:
        """Send the trailers; only one block may be sent."""
        state = self._state
        if state.trailers_sent or state.sender_closed:
            raise ChannelClosedError()
        state.trailers_sent = True
        if state.receiver_closed:
            raise ChannelClosedError()
        state.trailers = trailers if isinstance(trailers, Headers) else Headers(trailers)
        state.notify()

    def try_send_data(self, chunk: bytes | bytearray | memoryview) -> None:
        """Queue a chunk without waiting; raises ChannelFullError if one is still pending."""
        payload = bytes(chunk)
        state = self._state
        if state.receiver_closed or state.sender_closed:
            raise ChannelClosedError()
        if state.data_pending >= _DATA_CAPACITY:
            raise ChannelFullError(payload)
        state.items.append(payload)
        state.data_pending += 1
        state.notify()

    def abort(self) -> None:
        """Deliver an abort error to the body and finish sending."""
        self.send_error(BodyWriteAbortedError())
        self._close()

    def send_error(self, error: BaseException) -> None:
        """Queue an error for the body, even when the data slot is full."""
        state = self._state
        if state.receiver_closed or state.sender_closed:
            return
        state.items.append(error)
        state.notify()

    def _close(self) -> None:
        state = self._state
        if not state.sender_closed:
            state.sender_closed = True
            state.notify()

    def __enter__(self) -> BodySender:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._close()


class IncomingLike:
    """Streaming body fed through a channel by a :class:`BodySender`."""

    __slots__ = ("_content_length", "_want_tx", "_state", "_data_done", "_trailers_done")

    def __init__(self, content_length: DecodedLength, want_tx: WatchSender, state: _BodyState) -> None:
        self._content_length = content_length
        self._want_tx = want_tx
        self._state = state
        self._data_done = False
        self._trailers_done = False

    @classmethod
    def channel(cls) -> tuple[BodySender, IncomingLike]:
        """A chunked body whose sender is ready at once."""
        return cls.new_channel(DecodedLength.CHUNKED, False)

    @classmethod
    def new_channel(cls, content_length: DecodedLength, wanter: bool) -> tuple[BodySender, IncomingLike]:
        """Create a sender and body; with ``wanter`` the sender waits for the first poll."""
        state = _BodyState()
        want_tx, want_rx = watch_channel(WANT_PENDING if wanter else WANT_READY)
        return BodySender(want_rx, state), cls(content_length._copy(), want_tx, state)

    async def frame(self) -> Frame | None:
        """Next frame of data or trailers, or None at the end of the body."""
        state = self._state
        if state.receiver_closed:
            raise ChannelClosedError()
        self._want_tx.send(WANT_READY)
        if not self._data_done:
            while True:
                if state.items:
                    item = state.items.popleft()
                    if isinstance(item, BaseException):
                        state.notify()
                        raise item
                    state.data_pending -= 1
                    state.notify()
                    self._content_length.sub_if(len(item))
                    return Frame(data=item)
                if state.sender_closed:
                    self._data_done = True
                    break
                await state.wait()
        while True:
            if state.trailers is not None:
                trailers, state.trailers = state.trailers, None
                self._trailers_done = True
                return Frame(trailers=trailers)
            if state.sender_closed or self._trailers_done:
                return None
            await state.wait()

    def is_end_stream(self) -> bool:
        """Whether a known content length has been fully consumed."""
        return self._content_length == DecodedLength.ZERO

    def size_hint(self) -> SizeHint:
        """Exact hint for a known length, open-ended otherwise."""
        known = self._content_length.into_opt()
        if known is None:
            return SizeHint()
        return SizeHint(known, known)

    def close(self) -> None:
        """Drop the receiving half; the sender then fails with ChannelClosedError."""
        state = self._state
        if state.receiver_closed:
            return
        state.receiver_closed = True
        self._want_tx.close()
        state.items.clear()
        state.data_pending = 0
        state.trailers = None
        state.notify()

    def __aiter__(self) -> IncomingLike:
        return self

    async def __anext__(self) -> Frame:
        frame = await self.frame()
        if frame is None:
            raise StopAsyncIteration
        return frame