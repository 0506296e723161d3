import trio

from ._abc import SecureSession, ShutdownMode

__all__ = ["SSLSession"]


class SSLSession(SecureSession):
    """A :class:`~trio_ssl_streams.abc.SecureSession` backed by
    :class:`trio.SSLStream`.

    The session is bound to ``sock``, which must already be connected.
    Nothing goes over the wire until :meth:`do_handshake` is called.

    Args:
      ssl_context (~ssl.SSLContext): The context used for the handshake. It
          is only ever read, so one context can be shared by any number of
          sessions.
      sock (trio.socket.SocketType): A connected ``SOCK_STREAM`` socket.
      server_hostname (str or None): Name to send for SNI and to check the
          peer's certificate against.
      https_compatible (bool): Passed through to :class:`trio.SSLStream`.

    .. attribute:: socket

       The socket this session is bound to. A unidirectional
       :meth:`shutdown` happens to close it too, a bidirectional one leaves
       it open; either way, closing it is up to whoever owns the connection
       (closing it twice is harmless).

    """

    def __init__(
        self, ssl_context, sock, *, server_hostname=None, https_compatible=False
    ):
        self.socket = sock
        self._ssl_stream = trio.SSLStream(
            trio.SocketStream(sock),
            ssl_context,
            server_hostname=server_hostname,
            https_compatible=https_compatible,
        )

    def __repr__(self):
        return "<SSLSession server_hostname={!r}>".format(self.server_hostname)

    @property
    def server_hostname(self):
        return self._ssl_stream.server_hostname

    @property
    def ssl_stream(self):
        """The :class:`trio.SSLStream` doing the actual work, for access to
        things like :meth:`~trio.SSLStream.getpeercert` or
        :meth:`~trio.SSLStream.selected_alpn_protocol`.

        """
        return self._ssl_stream

    async def do_handshake(self):
        await self._ssl_stream.do_handshake()

    async def read(self, max_bytes):
        return await self._ssl_stream.receive_some(max_bytes)

    async def write(self, data):
        await self._ssl_stream.send_all(data)

    async def shutdown(self, mode=ShutdownMode.UNIDIRECTIONAL):
        mode = ShutdownMode(mode)
        if mode is ShutdownMode.UNIDIRECTIONAL:
            # SSLStream.aclose sends close_notify without waiting for the
            # peer's reply, and releases the transport as it goes.
            await self._ssl_stream.aclose()
        else:
            # unwrap() waits for the peer's close_notify and hands back the
            # still-open transport; any cleartext trailing it is dropped.
            await self._ssl_stream.unwrap()
