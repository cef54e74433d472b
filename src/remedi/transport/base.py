"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`remedi.protocol` so the protocol remains
transport-agnostic: a transport moves complete JSON documents, one per
frame, and knows nothing about what they contain.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from ..errors import RemediError


Frame = Union[str, bytes]


# Transport agnostic exceptions

class TransportError(RemediError):
    """Base class for all transport-layer errors."""


class TransportSendError(TransportError):
    """A message could not be handed to the transport for delivery."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class Transport(ABC):
    """Minimal contract for a message-oriented, full-duplex transport.

    Every complete inbound frame is handed to :attr:`callback`, from the
    transport's own receive thread.
    """

    def __init__(self, uri: str, callback: Optional[Callable[[Frame], object]] = None):
        self.uri = uri
        self.callback = callback

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.uri!r})"

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self, reason: str = "") -> None:
        """Signal a graceful shutdown and tear down the connection/socket."""

    @abstractmethod
    def send(self, frame: Frame) -> None:
        """Send one serialized message; raises :class:`TransportSendError`."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def received(self, frame: Frame) -> None:
        """Hand an inbound *frame* to the callback, if any."""
        callback = self.callback
        if callback is not None:
            callback(frame)
