""" The REMEDI client: translate text between two languages, performing
    pre- and post-processing as configured. This is the principal entry
    point for users of this package.
"""

import collections
import concurrent.futures
import copy
import functools
import logging
import threading

from . import chunks as chunkmodule
from . import text as textmodule
from . import transport as transportmodule
from .dispatch import Dispatcher
from .errors import StageFailedError, StageNotConfiguredError
from .poll import Backoff, BackoffPoller
from .protocol.ids import JobIdGenerator
from .protocol.message import (
    PostProcessorRequest,
    PreProcessorRequest,
    StatusCode,
    SupportedLanguageRequest,
    TranslationRequest,
)
from .store import CorrelationStore


logger = logging.getLogger(__name__)


ChunkedResult = collections.namedtuple('ChunkedResult', ('text', 'language', 'responses'))

failures = frozenset((StatusCode.ERROR, StatusCode.CANCELED))


class PendingJob:
    """ A job running in the background on behalf of :func:`Client.submit`.
        The job can be abandoned with :func:`cancel`, which stops it waiting
        for any further responses.
    """

    def __init__(self, future, cancel):
        self.future = future
        self.cancel_event = cancel


    def cancel(self):
        """ Stop the job. Returns True if the job had not already finished.
        """

        if self.future.done():
            return False

        self.cancel_event.set()
        self.future.cancel()
        return True


    def cancelled(self):
        return self.cancel_event.is_set()


    def done(self):
        return self.future.done()


    def result(self, timeout=None):
        """ Block until the job is complete and return its result, raising
            any exception the job raised. A :class:`concurrent.futures.TimeoutError`
            is raised if the job is not complete after *timeout* seconds; the
            job itself keeps running.
        """

        return self.future.result(timeout)


# end of class PendingJob



class Client:
    """ A client connected to a translation server, and optionally to a
        pre-processing server and a post-processing server. Each server is
        reached via its own :class:`remedi.transport.Transport`; all of them
        deliver their inbound traffic to a single :class:`Dispatcher`, which
        fills the :class:`CorrelationStore` that requests wait on.

        Every request blocks the calling thread until its response arrives;
        :func:`submit` runs any of them in the background instead. All
        blocking methods accept a *cancel* :class:`threading.Event` and a
        *timeout* in seconds, which default to no cancellation and the
        poller's own timeout (unbounded, unless configured otherwise).
    """

    def __init__(self, translator, pre_processor=None, post_processor=None,
                 generator=None, poller=None, segmenter=None, priority=0,
                 workers=4):

        if translator is None:
            raise ValueError('a translation server transport is required')

        if generator is None:
            generator = JobIdGenerator()

        if poller is None:
            poller = BackoffPoller()

        if segmenter is None:
            segmenter = textmodule.sentences

        self.generator = generator
        self.poller = poller
        self.segmenter = segmenter
        self.priority = priority

        self.store = CorrelationStore()
        self.dispatcher = Dispatcher(self.store)

        self.pre_processor = pre_processor
        self.translator = translator
        self.post_processor = post_processor

        for transport in self.transports():
            transport.callback = self.dispatcher
            if not transport.is_open:
                transport.open()

        self.workers = concurrent.futures.ThreadPoolExecutor(max_workers=workers)
        self.pending = set()
        self.pending_lock = threading.RLock()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    @classmethod
    def connect(cls, configuration):
        """ Connect to the servers named in the *configuration*, a
            :class:`remedi.config.Configuration` instance, and return a new
            :class:`Client`.
        """

        backoff = Backoff(configuration.initial_wait, configuration.backoff_factor, configuration.maximum_wait)
        poller = BackoffPoller(backoff, configuration.timeout)

        opened = list()

        def open_transport(uri):
            if uri is None:
                return None

            transport = transportmodule.transport_class(uri)(uri)
            transport.open()
            opened.append(transport)
            return transport

        try:
            pre_processor = open_transport(configuration.pre_processor)
            translator = open_transport(configuration.translator)
            post_processor = open_transport(configuration.post_processor)
        except Exception:
            for transport in opened:
                transport.close('Client failed to connect')
            raise

        return cls(translator, pre_processor, post_processor,
                   poller=poller, priority=configuration.priority,
                   workers=configuration.workers)


    def transports(self):
        """ Return the configured transports, translation server included.
        """

        transports = list()

        for transport in (self.pre_processor, self.translator, self.post_processor):
            if transport is not None:
                transports.append(transport)

        return transports


    def close(self, reason='Client closed'):
        """ Shut down the connections to every server.
        """

        # No background job outlives the client: a job waiting without a
        # timeout would block interpreter exit.

        with self.pending_lock:
            pending = list(self.pending)
            self.workers.shutdown(wait=False, cancel_futures=True)

        for cancel in pending:
            cancel.set()

        for transport in self.transports():
            transport.close(reason)


    def _await(self, transport, request, take, cancel, timeout):

        send = functools.partial(transport.send, request.encode())
        return self.poller.await_response(send, take, cancel, timeout)


    def supported_languages(self, cancel=None, timeout=None):
        """ Query the language pairs currently supported by the translation
            server. Returns a dictionary mapping each source language to a
            set of target languages.
        """

        logger.info("Requesting supported languages from translation server")

        # Only one such request is meaningful at a time; a leftover response
        # from an abandoned request would otherwise be mistaken for ours.

        self.store.languages.take()

        request = SupportedLanguageRequest()

        logger.debug("Sending supported languages request to server")
        response = self._await(self.translator, request, self.store.languages.take, cancel, timeout)

        logger.info("Finished supported languages request")
        return response.languages


    def supports(self, source, target, cancel=None, timeout=None):
        """ Return True if the translation server supports translating from
            *source* to *target*.
        """

        languages = self.supported_languages(cancel, timeout)

        try:
            targets = languages[source]
        except KeyError:
            return False

        return target in targets


    def translate(self, source, target, text, cancel=None, timeout=None):
        """ Send a request to the translation server, and return its
            :class:`TranslationResponse`. The *text* is either a string,
            which will be split into sentences, or a list of sentences.
        """

        logger.info("Beginning translation of request")

        job_id = self.generator.next()

        if isinstance(text, str):
            request = TranslationRequest.from_text(source, target, text, job_id,
                                                   segmenter=self.segmenter,
                                                   priority=self.priority)
        else:
            request = TranslationRequest(source, target, text, job_id, priority=self.priority)

        take = functools.partial(self.store.translations.take, job_id)

        logger.debug("Sending translation request %d to server", job_id)
        response = self._await(self.translator, request, take, cancel, timeout)

        logger.info("Finished translation of request %d", job_id)
        return response


    def pre_process(self, language, text, cancel=None, timeout=None):
        """ Send a request to the pre-processing server, and return its
            :class:`PreProcessorResponse`. Use
            :attr:`PreProcessorRequest.LANGUAGE_AUTO` as the *language* to
            request language detection, if the server supports it.
        """

        if self.pre_processor is None:
            raise StageNotConfiguredError('Pre-processing server has not been configured for this client')

        logger.info("Beginning pre-processing of request")

        request = PreProcessorRequest(language, text, priority=self.priority)

        logger.debug("Sending pre-processing request %s to server", request.job_token)
        response = self._process(self.pre_processor, self.store.pre_processed, request, cancel, timeout)

        logger.info("Finished pre-processing of request %s", request.job_token)
        return response


    def post_process(self, language, text, cancel=None, timeout=None):
        """ Send a request to the post-processing server, and return its
            :class:`PostProcessorResponse`.
        """

        if self.post_processor is None:
            raise StageNotConfiguredError('Post-processing server has not been configured for this client')

        logger.info("Beginning post-processing of request")

        request = PostProcessorRequest(language, text, priority=self.priority)

        logger.debug("Sending post-processing request %s to server", request.job_token)
        response = self._process(self.post_processor, self.store.post_processed, request, cancel, timeout)

        logger.info("Finished post-processing of request %s", request.job_token)
        return response


    def _process(self, transport, table, request, cancel, timeout):

        # Job tokens are derived from the text alone, so a late response to
        # an abandoned request for the same text may be waiting under this
        # token; discard it so it is not mistaken for ours.

        table.take(request.job_token)

        take = functools.partial(table.take, request.job_token)
        return self._await(transport, request, take, cancel, timeout)


    def pre_process_chunks(self, language, chunks, cancel=None, timeout=None):
        """ Pre-process a body of text that has already been split into
            *chunks* (see :func:`remedi.chunks.split`), each chunk being a
            separate job. Returns a :class:`ChunkedResult` with the
            reassembled text, the language reported by the first successful
            chunk, and the response for every chunk in order.
        """

        if self.pre_processor is None:
            raise StageNotConfiguredError('Pre-processing server has not been configured for this client')

        return self._process_chunks(self.pre_processor, self.store.pre_processed,
                                    PreProcessorRequest, language, chunks, cancel, timeout)


    def post_process_chunks(self, language, chunks, cancel=None, timeout=None):
        """ Post-process a body of text that has already been split into
            *chunks*; see :func:`pre_process_chunks`.
        """

        if self.post_processor is None:
            raise StageNotConfiguredError('Post-processing server has not been configured for this client')

        return self._process_chunks(self.post_processor, self.store.post_processed,
                                    PostProcessorRequest, language, chunks, cancel, timeout)


    def _process_chunks(self, transport, table, request_class, language, chunks, cancel, timeout):

        requests = chunkmodule.processor_requests(request_class, language, chunks, self.priority)

        # Chunks with identical text have identical job tokens, and would
        # collide in the store; each distinct chunk is sent only once.

        distinct = dict()
        for request in requests:
            distinct.setdefault(request.job_token, request)

        logger.info("Sending %d chunks (%d distinct) to %s", len(requests), len(distinct), transport.uri)

        for request in distinct.values():
            table.take(request.job_token)
            transport.send(request.encode())

        received = dict()
        for token in distinct:
            take = functools.partial(table.take, token)
            received[token] = self.poller.await_response(_sent, take, cancel, timeout)

        responses = list()
        language_found = None

        for request in requests:
            response = copy.copy(received[request.job_token])
            response.chunk_index = request.chunk_index
            response.number_of_chunks = request.number_of_chunks
            responses.append(response)

            if language_found is None and response.ok:
                language_found = response.language

        text = chunkmodule.reassemble(responses, ' ', True)
        return ChunkedResult(text, language_found, responses)


    def translate_text(self, source, target, text, cancel=None, timeout=None):
        """ Translate *text* from the *source* language to the *target*
            language, passing it through the pre-processing and
            post-processing servers first and last if they are configured.
            Each stage completes before the next begins; a stage reporting
            an error or cancellation raises :class:`StageFailedError`.

            If the pre-processor reports a language for the text, for
            example because *source* was
            :attr:`PreProcessorRequest.LANGUAGE_AUTO`, that language is the
            source language for translation.

            For simplicity, pre- and post-processing of text is done as a
            single chunk. Sentences that could not be translated are
            replaced with :attr:`TranslationResponse.INCOMPLETE_PLACEHOLDER`.
        """

        logger.info("Translating text (%d characters) from %s to %s", len(text), source, target)

        if self.pre_processor is not None:
            response = self.pre_process(source, text, cancel, timeout)
            _check('Pre-processing', response)

            if response.language:
                source = response.language

            text = response.text or ''

        response = self.translate(source, target, text, cancel, timeout)
        _check('Translation', response)

        translated = response.assemble(' ', True)

        if self.post_processor is not None:
            response = self.post_process(target, translated, cancel, timeout)
            _check('Post-processing', response)

            translated = response.text or ''

        return translated


    def submit(self, method, *args, **kwargs):
        """ Run *method*, one of the blocking methods of this client, in the
            background with the remaining arguments. Returns a
            :class:`PendingJob`.
        """

        cancel = threading.Event()
        kwargs['cancel'] = cancel

        with self.pending_lock:
            self.pending.add(cancel)

        try:
            future = self.workers.submit(method, *args, **kwargs)
        except RuntimeError:
            with self.pending_lock:
                self.pending.discard(cancel)
            raise

        future.add_done_callback(functools.partial(self._finished, cancel))
        return PendingJob(future, cancel)


    def _finished(self, cancel, future):
        with self.pending_lock:
            self.pending.discard(cancel)


# end of class Client



def _sent():
    """ Stand-in for the send step of a request that was already sent.
    """

    pass



def _check(stage, response):

    if response.status_code in failures:
        message = '%s failed with status %s' % (stage, response.status_code.name)

        if response.status_message:
            message += ': ' + response.status_message

        raise StageFailedError(message, response)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
