import logging
from contextlib import asynccontextmanager, contextmanager

import attr
import trio
from trio.socket import AI_NUMERICSERV, SOCK_STREAM, getaddrinfo, socket

from ._abc import ShutdownMode
from ._adapter import session_to_streams
from ._session import SSLSession
from ._util import close_on_error, format_host_port

__all__ = [
    "DEFAULT_TEARDOWN_TIMEOUT",
    "SSLConnection",
    "open_ssl_connection",
    "ssl_connection",
    "with_ssl_connection",
]

LOGGER = logging.getLogger("trio_ssl_streams.connect")

# How long, in seconds, teardown may spend on sending EOF and shutting the
# session down before giving up and just closing the socket.
DEFAULT_TEARDOWN_TIMEOUT = 5.0


@attr.s(frozen=True, eq=False)
class SSLConnection:
    """Everything :func:`ssl_connection` hands to its body.

    .. attribute:: receive_stream

       A :class:`~trio.abc.ReceiveStream` reading decrypted data from the
       session.

    .. attribute:: send_stream

       A :class:`~trio.abc.SendStream` writing data through the session.
       ``send_eof()`` on it does not end the session.

    .. attribute:: session

       The :class:`~trio_ssl_streams.abc.SecureSession`, for explicit
       control like peer certificate inspection.

    .. attribute:: socket

       The raw socket under the session. It's closed on exit from
       :func:`ssl_connection`; don't close it yourself.

    """

    receive_stream = attr.ib()
    send_stream = attr.ib()
    session = attr.ib()
    socket = attr.ib(repr=False)


async def _resolve_first(host, port):
    # Only the first candidate is ever tried. There's no fallback to later
    # addresses on multi-homed hosts; use trio.open_tcp_stream's happy
    # eyeballs plus SSLSession directly if you need that.
    targets = await getaddrinfo(host, port, type=SOCK_STREAM, flags=AI_NUMERICSERV)

    # getaddrinfo should raise instead of returning an empty list, but a
    # custom hostname resolver might not.
    if not targets:
        msg = "no results found for hostname lookup: {}".format(
            format_host_port(host, port)
        )
        raise OSError(msg)

    return targets[0]


async def _open_session(
    ssl_context, host, port, server_hostname, https_compatible, session_factory
):
    family, type_, proto, _, sockaddr = await _resolve_first(host, port)
    LOGGER.debug("connecting to %s via %r", format_host_port(host, port), sockaddr)

    if server_hostname is None:
        server_hostname = host

    sock = socket(family, type_, proto)
    with close_on_error(sock):
        await sock.connect(sockaddr)
        session = session_factory(
            ssl_context,
            sock,
            server_hostname=server_hostname,
            https_compatible=https_compatible,
        )
        await session.do_handshake()

    LOGGER.debug("handshake with %s complete", format_host_port(host, port))
    return sock, session


async def open_ssl_connection(
    ssl_context,
    host,
    port,
    *,
    server_hostname=None,
    https_compatible=False,
    session_factory=SSLSession,
):
    """Make a TLS connection to the given host and port, and return it as a
    pair of byte streams.

    This resolves ``host`` and ``port``, opens a socket to the first address
    found, runs the TLS handshake over it, and wraps the resulting session
    with :func:`session_to_streams`.

    If anything goes wrong after the socket has been opened (including
    cancellation), the socket is closed before the error propagates. Once
    this function returns, though, nothing will clean up after you: the
    session and its socket are yours. Sending EOF on the returned send stream
    does *not* end the session; to do that, call::

       await session.shutdown(ShutdownMode.UNIDIRECTIONAL)
       session.socket.close()

    If you'd rather not remember that, use :func:`with_ssl_connection` or
    :func:`ssl_connection` instead.

    Args:
      ssl_context (~ssl.SSLContext): The TLS configuration (trust store,
          verification mode, ciphers). It's passed through untouched.
      host (str or bytes): The host to connect to. Can be an IPv4 address,
          IPv6 address, or a hostname.
      port (int): The port to connect to.
      server_hostname (str or None): The name to use for SNI and certificate
          checking. Defaults to ``host``.
      https_compatible (bool): Passed through to the session factory; see
          :class:`trio.SSLStream`.
      session_factory: Called as ``session_factory(ssl_context, sock, *,
          server_hostname, https_compatible)`` with the connected socket, and
          must return a :class:`~trio_ssl_streams.abc.SecureSession`.
          Defaults to :class:`SSLSession`.

    Returns:
      tuple: ``(receive_stream, send_stream, session)``.

    Raises:
      OSError: if the name can't be resolved (:exc:`socket.gaierror`) or the
          connection fails.
      trio.BrokenResourceError: if the handshake fails (when using
          :class:`SSLSession`).

    """
    _, session = await _open_session(
        ssl_context, host, port, server_hostname, https_compatible, session_factory
    )
    receive_stream, send_stream = session_to_streams(session)
    return receive_stream, send_stream, session


@contextmanager
def _ignoring_errors():
    try:
        yield
    except Exception:
        pass


@contextmanager
def _shielded_until(deadline):
    # Shielded from the caller's cancellation, but not from our own deadline:
    # a peer that never reads or never answers can't hold teardown forever.
    with trio.move_on_at(deadline) as cancel_scope:
        cancel_scope.shield = True
        yield


@trio.lowlevel.enable_ki_protection
async def _close_connection(connection, shutdown_mode, teardown_timeout):
    # Each step gets its own guard, so a failure in one never stops the
    # others, and none of them can replace the body's outcome. The two
    # network steps share one deadline; closing the socket needs none.
    deadline = trio.current_time() + teardown_timeout
    with _shielded_until(deadline), _ignoring_errors():
        await connection.send_stream.send_eof()
    with _shielded_until(deadline), _ignoring_errors():
        await connection.session.shutdown(shutdown_mode)
    with _ignoring_errors():
        connection.socket.close()


@asynccontextmanager
async def ssl_connection(
    ssl_context,
    host,
    port,
    *,
    server_hostname=None,
    https_compatible=False,
    session_factory=SSLSession,
    shutdown_mode=ShutdownMode.UNIDIRECTIONAL,
    teardown_timeout=DEFAULT_TEARDOWN_TIMEOUT,
):
    """Open a TLS connection for the duration of an ``async with`` block.

    The connection is made exactly like :func:`open_ssl_connection`, and
    the block receives an :class:`SSLConnection`::

       async with ssl_connection(ctx, "example.com", 443) as conn:
           await conn.send_stream.send_all(b"GET / HTTP/1.0\\r\\n\\r\\n")
           response = await conn.receive_stream.receive_some()

    However the block exits (normally, with an exception, or by being
    cancelled), the connection is then torn down in this order:

    1. EOF is sent on ``send_stream``.
    2. The session is shut down with ``shutdown_mode``.
    3. The socket is closed.

    Teardown runs shielded from the caller's cancellation and with
    KeyboardInterrupt deferred, so all three steps are always attempted.
    Steps 1 and 2 talk to the peer, so together they get at most
    ``teardown_timeout`` seconds; if that runs out they are abandoned and
    the socket is closed anyway. Errors raised by any step are silently
    discarded; the block's own exception, if any, is what propagates.

    Arguments are the same as for :func:`open_ssl_connection`, plus
    ``shutdown_mode`` (a :class:`ShutdownMode`) and ``teardown_timeout``
    (seconds, default :data:`DEFAULT_TEARDOWN_TIMEOUT`).

    """
    sock, session = await _open_session(
        ssl_context, host, port, server_hostname, https_compatible, session_factory
    )
    receive_stream, send_stream = session_to_streams(session)
    connection = SSLConnection(receive_stream, send_stream, session, sock)
    try:
        yield connection
    finally:
        await _close_connection(connection, shutdown_mode, teardown_timeout)


async def with_ssl_connection(
    ssl_context,
    host,
    port,
    async_fn,
    *args,
    server_hostname=None,
    https_compatible=False,
    session_factory=SSLSession,
    shutdown_mode=ShutdownMode.UNIDIRECTIONAL,
    teardown_timeout=DEFAULT_TEARDOWN_TIMEOUT,
):
    """Connect, run ``async_fn`` with the connection, then tear it down.

    Calls ``await async_fn(receive_stream, send_stream, session, *args)``
    inside :func:`ssl_connection`, and returns whatever it returns (or
    raises whatever it raises) once teardown has been attempted.

    Keyword arguments are the same as for :func:`ssl_connection`.

    """
    async with ssl_connection(
        ssl_context,
        host,
        port,
        server_hostname=server_hostname,
        https_compatible=https_compatible,
        session_factory=session_factory,
        shutdown_mode=shutdown_mode,
        teardown_timeout=teardown_timeout,
    ) as connection:
        return await async_fn(
            connection.receive_stream,
            connection.send_stream,
            connection.session,
            *args,
        )
