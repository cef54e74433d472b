""" Handling of inbound traffic from REMEDI servers. Every complete frame
    received by a transport is handed to a :class:`Dispatcher`, which
    classifies it and files it in the :class:`remedi.store.CorrelationStore`
    for whichever caller is waiting on it.
"""

import logging

from .errors import InvalidMessageError, UndefinedMessageError
from .protocol import message


logger = logging.getLogger(__name__)


class Dispatcher:
    """ Classify inbound frames and route responses into the *store*. One
        bad frame must not interfere with the processing of any other
        frame: unexpected message types are logged as warnings and dropped,
        frames that cannot be parsed are logged as errors, passed to the
        optional *on_error* callback, and dropped.

        A :class:`Dispatcher` instance is callable, so that it can be handed
        directly to a transport as its receive callback.
    """

    def __init__(self, store, on_error=None):

        self.store = store
        self.on_error = on_error


    def __call__(self, frame):
        return self.dispatch(frame)


    def dispatch(self, frame):
        """ Process a single inbound *frame*, either str or bytes. The decoded
            response is returned if it was stored; None is returned if the
            frame was dropped.
        """

        try:
            return self._dispatch(frame)
        except (InvalidMessageError, UndefinedMessageError) as error:
            logger.error("Unable to parse message received from server: %s", error)
            self._signal(error, frame)
            return None


    def _dispatch(self, frame):

        # The message type is established before the message is fully
        # parsed, so that a malformed message of an unexpected type is
        # reported as a parse failure rather than a type mismatch.

        message_type, values = message.classify(frame)

        if message_type not in message.responses:
            logger.warning("Unexpected message received: %.200r", frame)
            return None

        response = message.from_dict(values)
        key = self.store.store(response)

        if message_type == message.MessageType.TRANSLATION_RESPONSE:
            logger.info("Translation response received for job %s", key)
        elif message_type == message.MessageType.PRE_PROCESSOR_RESPONSE:
            logger.info("Pre-processor response received for job %s", key)
        elif message_type == message.MessageType.POST_PROCESSOR_RESPONSE:
            logger.info("Post-processor response received for job %s", key)
        else:
            logger.info("Supported language response received")

        return response


    def _signal(self, error, frame):

        if self.on_error is None:
            return

        try:
            self.on_error(error, frame)
        except Exception:
            logger.exception("Error callback failed for inbound message")


# end of class Dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
