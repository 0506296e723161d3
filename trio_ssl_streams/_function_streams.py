import trio
from trio.abc import ReceiveStream, SendStream

from ._util import ConflictDetector

__all__ = ["FunctionReceiveStream", "FunctionSendStream"]


class FunctionReceiveStream(ReceiveStream):
    """A :class:`~trio.abc.ReceiveStream` that gets its data from an async
    "pull" function.

    Each call to :meth:`receive_some` awaits ``pull(max_bytes)`` exactly
    once. ``pull`` returns either a chunk of :class:`bytes`, which is handed
    to the caller untouched, or ``None`` to signal end-of-data. Once ``pull``
    has returned ``None`` the stream stays at end-of-file: every later
    :meth:`receive_some` returns ``b""`` without calling ``pull`` again.

    ``max_bytes`` is passed through as given (possibly ``None``); it's up to
    ``pull`` not to return more than that.

    Closing the stream with :meth:`aclose` only closes this view. Whatever
    ``pull`` reads from is left alone.

    Args:
      pull: An async function taking ``max_bytes`` and returning
          ``bytes`` or ``None``.

    """

    def __init__(self, pull):
        self._pull = pull
        self._eof = False
        self._closed = False
        self._conflict_detector = ConflictDetector(
            "another task is already receiving from this stream"
        )

    def __repr__(self):
        if self._closed:
            state = "closed"
        elif self._eof:
            state = "at EOF"
        else:
            state = "open"
        return "<{} {}>".format(type(self).__name__, state)

    async def receive_some(self, max_bytes=None):
        with self._conflict_detector:
            if max_bytes is not None:
                max_bytes = int(max_bytes)
                if max_bytes < 1:
                    raise ValueError("max_bytes must be >= 1")
            if self._closed:
                raise trio.ClosedResourceError("this stream was closed")
            if self._eof:
                await trio.lowlevel.checkpoint()
                return b""
            data = await self._pull(max_bytes)
            if data is None:
                self._eof = True
                return b""
            return data

    async def aclose(self):
        self._closed = True
        await trio.lowlevel.checkpoint()


class FunctionSendStream(SendStream):
    """A :class:`~trio.abc.SendStream` that hands its data to an async
    "push" function.

    :meth:`send_all` awaits ``push(data)`` exactly once with the data it was
    given, and :meth:`send_eof` awaits ``push(None)`` once. After
    :meth:`send_eof`, further calls to :meth:`send_all` raise
    :exc:`trio.ClosedResourceError` and further calls to :meth:`send_eof`
    do nothing.

    What ``push(None)`` actually does is up to ``push``. Closing the stream
    with :meth:`aclose` only closes this view and does *not* call
    ``push(None)``.

    Args:
      push: An async function taking ``bytes`` or ``None``.

    """

    def __init__(self, push):
        self._push = push
        self._eof_sent = False
        self._closed = False
        self._conflict_detector = ConflictDetector(
            "another task is already sending on this stream"
        )

    def __repr__(self):
        if self._closed:
            state = "closed"
        elif self._eof_sent:
            state = "sent EOF"
        else:
            state = "open"
        return "<{} {}>".format(type(self).__name__, state)

    def _check_open(self):
        if self._closed:
            raise trio.ClosedResourceError("this stream was closed")

    async def send_all(self, data):
        with self._conflict_detector:
            if not isinstance(data, (bytes, bytearray, memoryview)):
                raise TypeError(
                    "expected bytes-like data, not {}".format(
                        type(data).__name__
                    )
                )
            self._check_open()
            if self._eof_sent:
                raise trio.ClosedResourceError("can't send data after sending EOF")
            await self._push(data)

    async def wait_send_all_might_not_block(self):
        with self._conflict_detector:
            self._check_open()
            await trio.lowlevel.checkpoint()

    async def send_eof(self):
        """Signal end-of-data by calling ``push(None)``.

        Only the first call reaches ``push``; later calls are no-ops.

        """
        with self._conflict_detector:
            self._check_open()
            if self._eof_sent:
                await trio.lowlevel.checkpoint()
                return
            self._eof_sent = True
            await self._push(None)

    async def aclose(self):
        self._closed = True
        await trio.lowlevel.checkpoint()
