"""ZeroMQ transport.

An alternative to WebSocket for servers (or test harnesses) exposing a
ZeroMQ ROUTER socket. Each protocol message is one single-part ZeroMQ
message containing the JSON document.

A ZeroMQ socket is not thread-safe, so only the background thread ever
touches the DEALER socket: outbound frames are queued, and the background
thread is woken via an inproc PAIR socket to send them.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

import zmq

from .base import Frame, Transport, TransportConnectionError, TransportSendError


logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


class _Outgoing:
    """One queued outbound frame, and the outcome of sending it."""

    def __init__(self, frame: bytes):
        self.frame = frame
        self.error: Optional[Exception] = None
        self.done = threading.Event()


class ZmqTransport(Transport):
    """Issue messages via a ZeroMQ DEALER socket and receive responses."""

    timeout = 5.0

    def __init__(self, uri: str, callback: Optional[Callable[[Frame], object]] = None):
        super().__init__(uri, callback)

        self.socket = None
        self.shutdown = False

        try:
            self._outbox = queue.SimpleQueue()
        except AttributeError:
            self._outbox = queue.Queue()

        self._signal_rx = None
        self._signal_tx = None
        self._signal_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    def open(self) -> None:
        identity = f"remedi.ZmqTransport.{id(self)}".encode()

        self.socket = zmq_context.socket(zmq.DEALER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.identity = identity

        try:
            self.socket.connect(self.uri)
        except zmq.ZMQError as exc:
            self.socket.close()
            self.socket = None
            raise TransportConnectionError(f"cannot connect to {self.uri}: {exc}") from exc

        internal = f"inproc://remedi.ZmqTransport:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        self.shutdown = False
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    @property
    def is_open(self) -> bool:
        return self.socket is not None and not self.shutdown

    def _signal(self) -> None:
        # The PAIR socket is shared by every sending thread.
        with self._signal_lock:
            self._signal_tx.send(b"")

    def _handle_outgoing(self) -> None:
        # Clear one signal and send one message.
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            outgoing: _Outgoing = self._outbox.get(block=False)
        except queue.Empty:
            return

        try:
            self.socket.send(outgoing.frame, flags=zmq.NOBLOCK)
        except zmq.ZMQError as exc:
            outgoing.error = exc

        outgoing.done.set()

    def _handle_incoming(self) -> None:
        parts = self.socket.recv_multipart()

        # A ROUTER peer may prepend an empty delimiter; the document is last.
        frame = parts[-1]

        try:
            self.received(frame)
        except Exception:
            logger.exception("Receive callback failed for message from %s", self.uri)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    self._handle_outgoing()
                elif active == self.socket:
                    self._handle_incoming()

        # Fail anything still queued.
        while True:
            try:
                outgoing = self._outbox.get(block=False)
            except queue.Empty:
                break
            outgoing.error = TransportSendError("transport closed")
            outgoing.done.set()

        self.socket.close()
        self._signal_rx.close()

    def send(self, frame: Frame) -> None:
        if not self.is_open:
            raise TransportSendError(f"not connected to {self.uri}")

        if isinstance(frame, str):
            frame = frame.encode("utf-8")

        outgoing = _Outgoing(frame)
        self._outbox.put(outgoing)
        self._signal()

        if not outgoing.done.wait(self.timeout):
            raise TransportSendError(f"{self.uri}: message not sent in {self.timeout:.2f} sec")

        if outgoing.error is not None:
            raise TransportSendError(f"could not send to {self.uri}: {outgoing.error}") from outgoing.error

    def close(self, reason: str = "Client closed") -> None:
        if self.socket is None or self.shutdown:
            return

        # ZeroMQ has no closing handshake; the reason is only logged.
        logger.info("Closing connection to %s: %s", self.uri, reason)

        self.shutdown = True
        self._signal()

        if self._thread is not None:
            self._thread.join(self.timeout)
            self._thread = None

        self._signal_tx.close()
