import enum
from abc import ABCMeta, abstractmethod


class ShutdownMode(enum.Enum):
    """How :meth:`SecureSession.shutdown` ends the TLS session.

    .. attribute:: UNIDIRECTIONAL

       Send our close_notify alert and return without waiting for the
       peer's. This is what the connection helpers use during teardown.

    .. attribute:: BIDIRECTIONAL

       Send our close_notify alert, then wait for the peer to answer with
       its own.

    """

    UNIDIRECTIONAL = "unidirectional"
    BIDIRECTIONAL = "bidirectional"


class SecureSession(metaclass=ABCMeta):
    """The capability interface this library needs from a TLS session.

    A session is bound to exactly one connected socket. It's created by a
    session factory (see :func:`~trio_ssl_streams.open_ssl_connection`),
    handshaked once, read from and written to many times, and finally shut
    down with :meth:`shutdown`. Closing the socket afterwards is the owner's
    job, not the session's.

    :class:`~trio_ssl_streams.SSLSession` is the implementation built on
    :class:`trio.SSLStream`; anything else implementing these four methods
    works too, which is mostly useful for testing.

    Sessions are not safe for concurrent use from multiple tasks.

    """

    __slots__ = ()

    @abstractmethod
    async def do_handshake(self):
        """Perform the TLS handshake over the bound socket.

        Raises:
          Exception: whatever the underlying TLS implementation raises when
              the handshake fails. The caller is responsible for closing the
              socket in that case.

        """

    @abstractmethod
    async def read(self, max_bytes):
        """Read at most ``max_bytes`` bytes of decrypted data.

        Returns:
          bytes: a non-empty chunk of data, or ``b""`` if the peer has
          closed the session.

        """

    @abstractmethod
    async def write(self, data):
        """Encrypt and send all of ``data``."""

    @abstractmethod
    async def shutdown(self, mode=ShutdownMode.UNIDIRECTIONAL):
        """End the TLS session.

        Args:
          mode (ShutdownMode): Whether to wait for the peer's close_notify.

        """
