""" Turn pushed responses into awaitable results. REMEDI servers answer
    requests asynchronously and offer no notification when a job is lost,
    so a caller waiting on a response repeatedly checks the correlation
    store, waiting a little longer after each unsuccessful check.
"""

import concurrent.futures
import logging
import threading
import time

from .errors import ResponseTimeout


logger = logging.getLogger(__name__)


class Backoff:
    """ The sequence of wait intervals, in seconds, between checks for a
        response: *initial* seconds at first, multiplied by *factor* after
        every unsuccessful check, never exceeding *maximum*.
    """

    def __init__(self, initial=0.25, factor=2, maximum=4.0):

        if initial <= 0:
            raise ValueError('initial wait must be positive')

        if factor < 1:
            raise ValueError('backoff factor must be at least one')

        if maximum < initial:
            raise ValueError('maximum wait must not be less than the initial wait')

        self.initial = initial
        self.factor = factor
        self.maximum = maximum


    def __iter__(self):

        interval = self.initial

        while True:
            yield interval
            interval = min(interval * self.factor, self.maximum)


    def __repr__(self):
        return 'poll.Backoff(initial=%r, factor=%r, maximum=%r)' % (self.initial, self.factor, self.maximum)


# end of class Backoff



class BackoffPoller:
    """ Send a request, then wait for the correlated response. The waiting
        is unbounded unless a *timeout* is set, either here as the default
        for every call or on an individual call to :func:`await_response`.
    """

    def __init__(self, backoff=None, timeout=None):

        if backoff is None:
            backoff = Backoff()

        self.backoff = backoff
        self.timeout = timeout


    def await_response(self, send, take, cancel=None, timeout=None):
        """ Invoke *send* once to transmit the request; any exception it
            raises is passed directly to the caller, and the transmission is
            not retried. Then invoke *take* until it returns something other
            than None, and return that value.

            The optional *cancel* is a :class:`threading.Event`; setting it
            interrupts the wait, no further calls to *take* are made, and
            :class:`concurrent.futures.CancelledError` is raised. If
            a *timeout* in seconds is in effect :class:`ResponseTimeout` is
            raised once it expires.
        """

        if cancel is None:
            cancel = threading.Event()

        if timeout is None:
            timeout = self.timeout

        if timeout is None:
            deadline = None
        else:
            deadline = time.monotonic() + timeout

        send()

        for interval in self.backoff:
            if cancel.is_set():
                raise concurrent.futures.CancelledError('wait for response was cancelled')

            response = take()
            if response is not None:
                return response

            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ResponseTimeout('no response received in %.2f sec' % (timeout))
                interval = min(interval, remaining)

            logger.debug("Still waiting...")
            cancel.wait(interval)


# end of class BackoffPoller


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
