import concurrent.futures
import itertools
import threading
import time

import pytest

import remedi


def test_backoff():

    backoff = remedi.poll.Backoff()
    intervals = list(itertools.islice(backoff, 8))

    assert intervals == [0.25, 0.5, 1, 2, 4, 4, 4, 4]

    backoff = remedi.poll.Backoff(0.1, 3, 1)
    intervals = list(itertools.islice(backoff, 4))

    assert intervals == pytest.approx([0.1, 0.3, 0.9, 1])

    with pytest.raises(ValueError):
        remedi.poll.Backoff(0)

    with pytest.raises(ValueError):
        remedi.poll.Backoff(1, 0.5)

    with pytest.raises(ValueError):
        remedi.poll.Backoff(1, 2, 0.5)

    repr(backoff)


def test_await_response(poller):

    sent = list()
    checks = list()

    def send():
        sent.append(True)

    def take():
        checks.append(True)
        if len(checks) == 4:
            return 'response'
        return None

    assert poller.await_response(send, take) == 'response'
    assert len(sent) == 1
    assert len(checks) == 4


def test_send_failure(poller):

    def send():
        raise remedi.transport.TransportSendError('nope')

    def take():
        raise AssertionError('take() should never be called')

    with pytest.raises(remedi.transport.TransportSendError):
        poller.await_response(send, take)


def test_timeout(poller):

    begin = time.monotonic()

    with pytest.raises(remedi.errors.ResponseTimeout):
        poller.await_response(lambda: None, lambda: None, timeout=0.1)

    elapsed = time.monotonic() - begin
    assert elapsed >= 0.1
    assert elapsed < 2

    # A poller with no timeout keeps waiting until the response arrives.

    backoff = remedi.poll.Backoff(0.01, 2, 0.02)
    unbounded = remedi.poll.BackoffPoller(backoff)
    assert unbounded.timeout is None

    checks = list()

    def take():
        checks.append(True)
        if len(checks) > 20:
            return 'eventually'

    assert unbounded.await_response(lambda: None, take) == 'eventually'


def test_cancel():
    """ Cancellation interrupts a long wait promptly.
    """

    backoff = remedi.poll.Backoff(10, 2, 10)
    poller = remedi.poll.BackoffPoller(backoff)

    cancel = threading.Event()
    checks = list()

    def take():
        checks.append(True)
        return None

    def cancel_soon():
        time.sleep(0.1)
        cancel.set()

    thread = threading.Thread(target=cancel_soon)
    thread.start()

    begin = time.monotonic()

    with pytest.raises(concurrent.futures.CancelledError):
        poller.await_response(lambda: None, take, cancel)

    elapsed = time.monotonic() - begin
    thread.join()

    assert elapsed < 5
    assert len(checks) == 1

    # An already cancelled wait never checks for a response.

    checks.clear()

    with pytest.raises(concurrent.futures.CancelledError):
        poller.await_response(lambda: None, take, cancel)

    assert checks == []


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
