import pytest

import trio
from trio.testing import assert_checkpoints, wait_all_tasks_blocked

from .._function_streams import FunctionReceiveStream, FunctionSendStream


def recording_pull(chunks, record):
    chunks = list(chunks)

    async def pull(max_bytes):
        record.append(max_bytes)
        await trio.lowlevel.checkpoint()
        if chunks:
            return chunks.pop(0)
        return None

    return pull


def recording_push(record):
    async def push(data):
        record.append(data)
        await trio.lowlevel.checkpoint()

    return push


async def test_FunctionReceiveStream_passes_chunks_through():
    record = []
    stream = FunctionReceiveStream(recording_pull([b"abc", b"de"], record))

    assert await stream.receive_some(10) == b"abc"
    assert await stream.receive_some() == b"de"
    assert record == [10, None]


async def test_FunctionReceiveStream_eof_is_sticky():
    record = []
    stream = FunctionReceiveStream(recording_pull([b"x"], record))

    assert await stream.receive_some(1) == b"x"
    assert await stream.receive_some(1) == b""
    assert "at EOF" in repr(stream)
    for _ in range(3):
        with assert_checkpoints():
            assert await stream.receive_some(1) == b""
    # pull is never called again once it has reported EOF
    assert record == [1, 1]


async def test_FunctionReceiveStream_pull_errors_propagate():
    async def pull(max_bytes):
        raise trio.BrokenResourceError("boom")

    stream = FunctionReceiveStream(pull)
    with pytest.raises(trio.BrokenResourceError):
        await stream.receive_some(1)


async def test_FunctionReceiveStream_bad_max_bytes():
    stream = FunctionReceiveStream(recording_pull([], []))
    with pytest.raises(ValueError):
        await stream.receive_some(0)
    with pytest.raises(ValueError):
        await stream.receive_some(-5)


async def test_FunctionReceiveStream_aclose():
    record = []
    stream = FunctionReceiveStream(recording_pull([b"x"], record))
    async with stream:
        pass
    assert "closed" in repr(stream)
    with pytest.raises(trio.ClosedResourceError):
        await stream.receive_some(1)
    assert record == []


async def test_FunctionReceiveStream_conflict_detection():
    gate = trio.Event()

    async def pull(max_bytes):
        await gate.wait()
        return b"x"

    stream = FunctionReceiveStream(pull)
    async with trio.open_nursery() as nursery:
        nursery.start_soon(stream.receive_some, 1)
        await wait_all_tasks_blocked()
        with pytest.raises(trio.BusyResourceError):
            await stream.receive_some(1)
        gate.set()


async def test_FunctionSendStream_passes_data_through():
    record = []
    stream = FunctionSendStream(recording_push(record))

    await stream.send_all(b"hello")
    await stream.send_all(bytearray(b"world"))
    assert record == [b"hello", bytearray(b"world")]

    with assert_checkpoints():
        await stream.wait_send_all_might_not_block()
    assert len(record) == 2


async def test_FunctionSendStream_rejects_non_bytes():
    record = []
    stream = FunctionSendStream(recording_push(record))
    with pytest.raises(TypeError):
        await stream.send_all("not bytes")
    assert record == []


async def test_FunctionSendStream_send_eof():
    record = []
    stream = FunctionSendStream(recording_push(record))

    await stream.send_all(b"x")
    await stream.send_eof()
    await stream.send_eof()
    assert record == [b"x", None]
    assert "sent EOF" in repr(stream)

    with pytest.raises(trio.ClosedResourceError):
        await stream.send_all(b"y")
    assert record == [b"x", None]


async def test_FunctionSendStream_push_errors_propagate():
    async def push(data):
        raise OSError("write failed")

    stream = FunctionSendStream(push)
    with pytest.raises(OSError):
        await stream.send_all(b"x")


async def test_FunctionSendStream_aclose_does_not_push_eof():
    record = []
    stream = FunctionSendStream(recording_push(record))
    await stream.aclose()
    assert record == []
    with pytest.raises(trio.ClosedResourceError):
        await stream.send_all(b"x")
    with pytest.raises(trio.ClosedResourceError):
        await stream.send_eof()
    with pytest.raises(trio.ClosedResourceError):
        await stream.wait_send_all_might_not_block()


async def test_FunctionSendStream_conflict_detection():
    gate = trio.Event()

    async def push(data):
        await gate.wait()

    stream = FunctionSendStream(push)
    async with trio.open_nursery() as nursery:
        nursery.start_soon(stream.send_all, b"x")
        await wait_all_tasks_blocked()
        with pytest.raises(trio.BusyResourceError):
            await stream.send_all(b"y")
        with pytest.raises(trio.BusyResourceError):
            await stream.send_eof()
        gate.set()
