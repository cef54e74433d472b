"""Transport layer implementations.

The transport in use for a given server is selected by the scheme of its
URI: ``ws://`` and ``wss://`` use WebSocket, ``tcp://``, ``ipc://`` and
``inproc://`` use ZeroMQ.
"""

from urllib.parse import urlsplit

from .base import (
    Transport,
    TransportError,
    TransportSendError,
    TransportConnectionError,
)


def transport_class(uri):
    """Return the :class:`Transport` subclass handling the scheme of *uri*."""

    scheme = urlsplit(uri).scheme.lower()

    if scheme in ("ws", "wss"):
        from .websocket import WebSocketTransport
        return WebSocketTransport

    if scheme in ("tcp", "ipc", "inproc"):
        from .zmq import ZmqTransport
        return ZmqTransport

    raise ValueError(f"unsupported transport scheme in {uri!r}")


def connect(uri, callback=None):
    """Open and return a transport to *uri*, delivering inbound frames to
    *callback*.
    """

    transport = transport_class(uri)(uri, callback)
    transport.open()
    return transport
