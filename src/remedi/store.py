""" Thread-safe storage for responses that arrived from a REMEDI server but
    have not yet been claimed by the caller that is waiting for them.
"""

import threading

from .protocol.message import MessageType


class Table:
    """ A dictionary of responses keyed by correlation key. At most one
        response is held per key: storing a second response for the same
        key replaces the first. A stored response is handed out exactly once.
    """

    def __init__(self, name):

        self.name = name
        self._responses = dict()
        self._lock = threading.Lock()


    def __contains__(self, key):
        with self._lock:
            return key in self._responses


    def __len__(self):
        with self._lock:
            return len(self._responses)


    def __repr__(self):
        return 'store.Table(%r): %d unread' % (self.name, len(self))


    def store(self, key, response):
        """ Hold on to the *response* for *key*, replacing any unread
            response already present for that key.
        """

        with self._lock:
            self._responses[key] = response


    def take(self, key):
        """ Return and remove the response for *key*. Returns None if no
            response is present.
        """

        with self._lock:
            return self._responses.pop(key, None)


    def clear(self):
        with self._lock:
            self._responses.clear()


# end of class Table



class Slot:
    """ A :class:`Table` with room for a single response and no key, for
        message types where only one request is meaningful at a time.
    """

    def __init__(self, name):

        self.name = name
        self._response = None
        self._lock = threading.Lock()


    def __len__(self):
        with self._lock:
            if self._response is None:
                return 0
            return 1


    def __repr__(self):
        return 'store.Slot(%r): %d unread' % (self.name, len(self))


    def store(self, response):
        with self._lock:
            self._response = response


    def take(self):
        with self._lock:
            response = self._response
            self._response = None

        return response


    def clear(self):
        with self._lock:
            self._response = None


# end of class Slot



class CorrelationStore:
    """ The set of tables holding unclaimed responses, one per response type:
        translation responses keyed by job id, pre- and post-processor
        responses keyed by job token, and a single slot for the supported
        language response.

        The inbound dispatcher is expected to be the only producer, via
        :func:`store`; any number of threads may consume responses via
        :func:`Table.take` or :func:`Slot.take`.
    """

    def __init__(self):

        self.translations = Table('translations')
        self.pre_processed = Table('pre_processed')
        self.post_processed = Table('post_processed')
        self.languages = Slot('languages')


    def __repr__(self):
        tables = (self.translations, self.pre_processed, self.post_processed, self.languages)
        return 'store.CorrelationStore: ' + ', '.join(repr(table) for table in tables)


    def store(self, response):
        """ Route the *response* into the table appropriate for its type,
            and return the correlation key it was stored under. The key for
            the supported language response is always None.
        """

        message_type = response.type

        if message_type == MessageType.TRANSLATION_RESPONSE:
            key = response.job_id
            self.translations.store(key, response)

        elif message_type == MessageType.PRE_PROCESSOR_RESPONSE:
            key = response.group
            self.pre_processed.store(key, response)

        elif message_type == MessageType.POST_PROCESSOR_RESPONSE:
            key = response.group
            self.post_processed.store(key, response)

        elif message_type == MessageType.SUPPORTED_LANGUAGE_RESPONSE:
            key = None
            self.languages.store(response)

        else:
            raise TypeError('not a storable response type: ' + message_type.name)

        return key


    def clear(self):

        self.translations.clear()
        self.pre_processed.clear()
        self.post_processed.clear()
        self.languages.clear()


# end of class CorrelationStore


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
