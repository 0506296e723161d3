"""trio-ssl-streams - TLS connections as plain Trio byte streams
"""

# General layout:
#
# trio_ssl_streams/_function_streams.py builds Trio streams out of async
# pull/push functions.
#
# trio_ssl_streams/_adapter.py uses those to turn a SecureSession into a
# (receive stream, send stream) pair.
#
# trio_ssl_streams/_connect.py resolves, connects, handshakes and tears
# down, on top of the adapter.
#
# This file re-exports the public parts.
#
# Uses `from x import y as y` for compatibility with `pyright --verifytypes`

from ._version import __version__

from ._abc import ShutdownMode as ShutdownMode

from ._function_streams import (
    FunctionReceiveStream as FunctionReceiveStream,
    FunctionSendStream as FunctionSendStream,
)

from ._adapter import (
    BUFSIZ as BUFSIZ,
    session_receive_stream as session_receive_stream,
    session_send_stream as session_send_stream,
    session_to_streams as session_to_streams,
    session_to_stream as session_to_stream,
)

from ._session import SSLSession as SSLSession

from ._connect import (
    DEFAULT_TEARDOWN_TIMEOUT as DEFAULT_TEARDOWN_TIMEOUT,
    SSLConnection as SSLConnection,
    open_ssl_connection as open_ssl_connection,
    ssl_connection as ssl_connection,
    with_ssl_connection as with_ssl_connection,
)

from . import abc
