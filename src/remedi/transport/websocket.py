"""WebSocket transport.

REMEDI servers are reached over WebSocket; each protocol message travels as
a single text frame. The connection is established with the synchronous
:mod:`websockets` client, and a background thread hands every inbound frame
to the transport callback.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import connect

from .base import Frame, Transport, TransportConnectionError, TransportSendError


logger = logging.getLogger(__name__)


class WebSocketTransport(Transport):
    """Maintain a persistent WebSocket connection to a single server."""

    open_timeout = 10.0
    close_timeout = 5.0

    def __init__(self, uri: str, callback: Optional[Callable[[Frame], object]] = None):
        super().__init__(uri, callback)
        self.connection = None
        self._closed = True
        self._send_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    def open(self) -> None:
        try:
            self.connection = connect(self.uri, open_timeout=self.open_timeout, close_timeout=self.close_timeout)
        except (OSError, TimeoutError, WebSocketException) as exc:
            raise TransportConnectionError(f"cannot connect to {self.uri}: {exc}") from exc

        self._closed = False
        self._thread = threading.Thread(target=self.run, args=(self.connection,), daemon=True)
        self._thread.start()

    @property
    def is_open(self) -> bool:
        return self.connection is not None and not self._closed

    def run(self, connection) -> None:
        try:
            for frame in connection:
                try:
                    self.received(frame)
                except Exception:
                    logger.exception("Receive callback failed for message from %s", self.uri)
        except ConnectionClosed as closed:
            logger.warning("Connection to %s closed: %s", self.uri, closed)
        finally:
            self._closed = True

    def send(self, frame: Frame) -> None:
        connection = self.connection
        if connection is None or self._closed:
            raise TransportSendError(f"not connected to {self.uri}")

        # The protocol is JSON text; keep it in text frames.
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8")

        try:
            with self._send_lock:
                connection.send(frame)
        except (ConnectionClosed, OSError, RuntimeError) as exc:
            raise TransportSendError(f"could not send to {self.uri}: {exc}") from exc

    def close(self, reason: str = "Client closed") -> None:
        connection = self.connection
        if connection is None:
            return

        self.connection = None
        self._closed = True
        connection.close(code=1000, reason=reason)

        if self._thread is not None:
            self._thread.join(self.close_timeout)
            self._thread = None
