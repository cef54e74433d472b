import pytest

import remedi
from remedi.protocol import message


class LoopbackTransport(remedi.transport.Transport):
    """ A transport that never leaves the process. Every frame sent is
        recorded in :attr:`sent`; if a *responder* is provided it is invoked
        with the decoded request, and whatever it returns (a message, a raw
        frame, a list of either, or None) is delivered straight back to the
        receive callback, as if the server had answered immediately.
    """

    def __init__(self, uri='loopback://test', responder=None):
        remedi.transport.Transport.__init__(self, uri)
        self.responder = responder
        self.sent = list()
        self.opened = False
        self.closed = None
        self.failing = False


    def open(self):
        self.opened = True


    @property
    def is_open(self):
        return self.opened and self.closed is None


    def close(self, reason=''):
        self.closed = reason


    def send(self, frame):

        if self.failing:
            raise remedi.transport.TransportSendError('loopback transport refuses to send')

        self.sent.append(frame)

        if self.responder is None:
            return

        replies = self.responder(message.decode(frame))

        if replies is None:
            return

        if not isinstance(replies, list):
            replies = [replies]

        for reply in replies:
            self.inject(reply)


    def inject(self, frame):
        if isinstance(frame, message.Message):
            frame = frame.encode()
        self.received(frame)


    def requests(self):
        return [message.decode(frame) for frame in self.sent]



dutch = {
    'Hello, World.': 'Waar',
    'How are you?': 'ben je?',
    'Good morning.': 'Goedemorgen.',
    'Good night.': 'Goedenacht.',
}


def translate_to_dutch(request):
    """ A translation server that knows a handful of sentences, and reports
        an error for any sentence it does not know.
    """

    response = message.TranslationResponse(request.job_id, message.StatusCode.OK)

    for sentence in request.sentences:
        try:
            translated = dutch[sentence]
        except KeyError:
            data = message.TargetData(message.StatusCode.ERROR, 'unknown sentence')
        else:
            data = message.TargetData(message.StatusCode.OK, None, translated, [1])

        response.add_target_data(data)

    return response


def upper_case(request):
    """ A processing server that shouts, and detects every language as
        English.
    """

    if request.type == message.MessageType.PRE_PROCESSOR_REQUEST:
        response_class = message.PreProcessorResponse
    else:
        response_class = message.PostProcessorResponse

    return response_class(request.job_token, 'en', request.text.upper(),
                          message.StatusCode.OK, None,
                          request.chunk_index, request.number_of_chunks)


def echo(request):
    """ A processing server that returns its input unchanged, reporting the
        language it was given.
    """

    if request.type == message.MessageType.PRE_PROCESSOR_REQUEST:
        response_class = message.PreProcessorResponse
    else:
        response_class = message.PostProcessorResponse

    return response_class(request.job_token, request.language, request.text,
                          message.StatusCode.OK, None,
                          request.chunk_index, request.number_of_chunks)


@pytest.fixture
def loopback():
    return LoopbackTransport


@pytest.fixture
def responders():
    """ The simulated servers available to a :class:`LoopbackTransport`.
    """

    return {'dutch': translate_to_dutch, 'upper': upper_case, 'echo': echo}


@pytest.fixture
def configuration():
    """ A configuration that polls quickly, so that the tests do too.
    """

    return remedi.Configuration(translator='tcp://127.0.0.1:5555',
                                initial_wait=0.005, maximum_wait=0.05,
                                timeout=5)


@pytest.fixture
def poller(configuration):

    backoff = remedi.poll.Backoff(configuration.initial_wait,
                                  configuration.backoff_factor,
                                  configuration.maximum_wait)

    return remedi.poll.BackoffPoller(backoff, configuration.timeout)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
