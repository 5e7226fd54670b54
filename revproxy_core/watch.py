"""Single-producer watch channel holding one integer state.

The receiver is only woken when the value actually changes, and the value
``CLOSED`` (zero) is reserved to mean that the sender is gone.
"""

from __future__ import annotations

import asyncio
import contextlib

CLOSED = 0


class _Shared:
    __slots__ = ("value", "waiters")

    def __init__(self, value: int) -> None:
        self.value = value
        self.waiters: list[asyncio.Future[None]] = []

    def wake(self) -> None:
        waiters, self.waiters = self.waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)


class WatchSender:
    """Publishing half of a watch channel."""

    __slots__ = ("_shared",)

    def __init__(self, shared: _Shared) -> None:
        self._shared = shared

    def send(self, value: int) -> None:
        """Store ``value`` and wake the receiver if it differs from the current one."""
        if not isinstance(value, int) or value < 0:
            raise ValueError(f"watch value must be a non-negative integer, got {value!r}")
        previous = self._shared.value
        self._shared.value = value
        if previous != value:
            self._shared.wake()

    def close(self) -> None:
        """Mark the channel closed."""
        self.send(CLOSED)

    def __enter__(self) -> WatchSender:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class WatchReceiver:
    """Observing half of a watch channel."""

    __slots__ = ("_shared",)

    def __init__(self, shared: _Shared) -> None:
        self._shared = shared

    def peek(self) -> int:
        """Current value, without waiting."""
        return self._shared.value

    async def wait_for_change(self, current: int) -> int:
        """Wait until the value differs from ``current`` and return the new value."""
        loop = asyncio.get_running_loop()
        while self._shared.value == current:
            waiter: asyncio.Future[None] = loop.create_future()
            self._shared.waiters.append(waiter)
            try:
                await waiter
            finally:
                with contextlib.suppress(ValueError):
                    self._shared.waiters.remove(waiter)
        return self._shared.value


def channel(initial: int) -> tuple[WatchSender, WatchReceiver]:
    """Create a connected sender and receiver starting at ``initial``."""
    if initial == CLOSED:
        raise ValueError("initial watch state of 0 is reserved for closed")
    if not isinstance(initial, int) or initial < 0:
        raise ValueError(f"watch value must be a non-negative integer, got {initial!r}")
    shared = _Shared(initial)
    return WatchSender(shared), WatchReceiver(shared)