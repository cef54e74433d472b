""" Correlation identifiers for outbound jobs. Translation jobs are keyed by
    a locally unique, increasing integer; pre- and post-processor jobs are
    keyed by a token derived from the content of the text being processed.
"""

import hashlib
import itertools
import threading


TOKEN_WIDTH = 32


class JobIdGenerator:
    """ Issue translation job identification numbers. The first number
        issued is 1; every subsequent number is strictly greater than the
        last, and no number is ever issued twice by the same instance.
        The expectation is that a single instance is shared by everything
        talking to the same translation server, so that the request/response
        handling can correctly tie an incoming response to the request that
        generated it.
    """

    def __init__(self, start=1):

        if start < 1:
            raise ValueError('job identification numbers must be positive')

        self._lock = threading.Lock()
        self._ticker = itertools.count(start)
        self._current = start - 1


    def next(self):
        """ Return the next job identification number.
        """

        with self._lock:
            id = next(self._ticker)
            self._current = id

        return id


    @property
    def current(self):
        """ The most recently issued number, or zero if none were issued.
        """

        return self._current


# end of class JobIdGenerator



def token_for(text):
    """ Return the job token for the supplied *text*: the MD5 digest of its
        UTF-8 encoding, as lower-case hexadecimal zero-padded to
        :data:`TOKEN_WIDTH` characters. Identical text always yields an
        identical token.
    """

    if text is None:
        text = ''

    digest = hashlib.md5(text.encode('utf-8')).digest()
    number = int.from_bytes(digest, 'big')
    return '%0*x' % (TOKEN_WIDTH, number)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
