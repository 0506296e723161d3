import trio

from ._function_streams import FunctionReceiveStream, FunctionSendStream

__all__ = [
    "BUFSIZ",
    "session_receive_stream",
    "session_send_stream",
    "session_to_streams",
    "session_to_stream",
]

# Largest single read we ever ask a session for.
BUFSIZ = 32752


def session_receive_stream(session):
    """Wrap ``session`` in a :class:`~trio.abc.ReceiveStream`.

    Every :meth:`~trio.abc.ReceiveStream.receive_some` call performs exactly
    one ``session.read(n)``, where ``n`` is ``max_bytes`` capped at
    :data:`BUFSIZ` (or :data:`BUFSIZ` if ``max_bytes`` is ``None``). An empty
    read means the peer closed the session; from then on the stream keeps
    reporting end-of-file without touching the session. Errors raised by
    ``session.read`` propagate unchanged.

    """

    async def pull(max_bytes):
        if max_bytes is None or max_bytes > BUFSIZ:
            max_bytes = BUFSIZ
        data = await session.read(max_bytes)
        if not data:
            return None
        return data

    return FunctionReceiveStream(pull)


def session_send_stream(session):
    """Wrap ``session`` in a :class:`~trio.abc.SendStream`.

    :meth:`~trio.abc.SendStream.send_all` performs exactly one
    ``session.write(data)`` with the same data. ``send_eof()`` deliberately
    does nothing to the session: sending end-of-data on the stream is weaker
    than ending the TLS session, which has to be done explicitly with
    :meth:`~trio_ssl_streams.abc.SecureSession.shutdown`.

    """

    async def push(data):
        if data is None:
            await trio.lowlevel.checkpoint()
            return
        await session.write(data)

    return FunctionSendStream(push)


def session_to_streams(session):
    """Given an established :class:`~trio_ssl_streams.abc.SecureSession`,
    produce a ``(receive_stream, send_stream)`` pair bound to it.

    The two streams are independent single-consumer views: reading and
    writing may happen from different tasks, but two tasks must not read (or
    write) at the same time. Neither stream ever closes the session, and
    both become useless once the session has been shut down.

    """
    return session_receive_stream(session), session_send_stream(session)


def session_to_stream(session):
    """Like :func:`session_to_streams`, but returns the pair stapled into a
    single bidirectional :class:`trio.StapledStream`.

    """
    receive_stream, send_stream = session_to_streams(session)
    return trio.StapledStream(send_stream, receive_stream)
