# Little utilities we use internally

from contextlib import contextmanager
from typing import Iterator, Protocol, TypeVar

import trio


class Closable(Protocol):
    def close(self):
        ...


_CL = TypeVar("_CL", bound=Closable)


@contextmanager
def close_on_error(obj: _CL) -> Iterator[_CL]:
    """Close ``obj`` if the body raises anything at all, then re-raise.

    This includes :exc:`trio.Cancelled` and :exc:`KeyboardInterrupt`: a
    half-opened socket must not outlive a cancelled connection attempt.

    """
    try:
        yield obj
    except BaseException:
        obj.close()
        raise


class ConflictDetector:
    """Guard against two tasks using one half of a stream at once.

    Entering it while another task is already inside raises
    :exc:`trio.BusyResourceError` with ``msg``, instead of waiting. A stream
    built on a pull or push function can't interleave two calls safely, and
    callers that share a stream between tasks are expected to do their own
    locking, so a second caller is always a bug on their side.

    """

    def __init__(self, msg):
        self._msg = msg
        self._held = False

    def __enter__(self):
        if self._held:
            raise trio.BusyResourceError(self._msg)
        else:
            self._held = True

    def __exit__(self, *args):
        self._held = False


def format_host_port(host, port):
    if isinstance(host, bytes):
        host = host.decode("ascii", "replace")
    if ":" in host:
        return "[{}]:{}".format(host, port)
    else:
        return "{}:{}".format(host, port)
