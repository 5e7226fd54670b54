import asyncio

import pytest

from revproxy_core.watch import CLOSED, channel


def test_initial_closed_is_rejected():
    with pytest.raises(ValueError):
        channel(CLOSED)


def test_negative_value_is_rejected():
    tx, _rx = channel(1)
    with pytest.raises(ValueError):
        tx.send(-1)


def test_peek_sees_initial_and_sent_values():
    tx, rx = channel(1)
    assert rx.peek() == 1
    tx.send(2)
    assert rx.peek() == 2


def test_close_sets_closed():
    tx, rx = channel(2)
    tx.close()
    assert rx.peek() == CLOSED


def test_context_manager_closes_on_exit():
    tx, rx = channel(2)
    with tx:
        assert rx.peek() == 2
    assert rx.peek() == CLOSED


@pytest.mark.asyncio
async def test_wait_returns_immediately_when_already_different():
    tx, rx = channel(1)
    tx.send(2)
    assert await rx.wait_for_change(1) == 2


@pytest.mark.asyncio
async def test_wait_is_woken_by_send():
    tx, rx = channel(1)
    task = asyncio.create_task(rx.wait_for_change(1))
    await asyncio.sleep(0)
    assert not task.done()
    tx.send(2)
    assert await asyncio.wait_for(task, 1) == 2


@pytest.mark.asyncio
async def test_same_value_does_not_wake():
    tx, rx = channel(1)
    task = asyncio.create_task(rx.wait_for_change(1))
    await asyncio.sleep(0)
    tx.send(1)
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert not task.done()
    tx.close()
    assert await asyncio.wait_for(task, 1) == CLOSED


@pytest.mark.asyncio
async def test_cancelled_wait_leaves_channel_usable():
    tx, rx = channel(1)
    task = asyncio.create_task(rx.wait_for_change(1))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    tx.send(3)
    assert await rx.wait_for_change(1) == 3