""" A class representation of a REMEDI message, including subclasses for
    each specific message type. Every message on the wire is a JSON object
    carrying the protocol version and a message type discriminant; the
    remaining fields depend on the message type.
"""

import enum

from .. import json
from .. import text as textmodule
from ..errors import InvalidMessageError, UndefinedMessageError
from . import fields
from .ids import token_for


# This is the version of the REMEDI on-the-wire protocol implemented here.
# The version is validated, not negotiated.

version = fields.PROTOCOL_VERSION


class MessageType(enum.IntEnum):
    """ The message type discriminant, with its integer value on the wire.
    """

    UNDEFINED = 0
    SUPPORTED_LANGUAGE_REQUEST = 1
    SUPPORTED_LANGUAGE_RESPONSE = 2
    TRANSLATION_REQUEST = 3
    TRANSLATION_RESPONSE = 4
    PRE_PROCESSOR_REQUEST = 5
    PRE_PROCESSOR_RESPONSE = 6
    POST_PROCESSOR_REQUEST = 7
    POST_PROCESSOR_RESPONSE = 8

    @classmethod
    def of(cls, code):
        """ Return the type for the integer *code*; unknown codes map to
            :attr:`UNDEFINED` rather than raising an exception.
        """

        if isinstance(code, bool) or not isinstance(code, int):
            return cls.UNDEFINED

        try:
            return cls(code)
        except ValueError:
            return cls.UNDEFINED


class StatusCode(enum.IntEnum):
    """ Result of a job, or of a single sentence within a translation job.
        Only :attr:`OK` results carry usable content.
    """

    UNDEFINED = 0
    UNKNOWN = 1
    OK = 2
    PARTIAL = 3
    CANCELED = 4
    ERROR = 5

    @classmethod
    def of(cls, code):

        if code is None or isinstance(code, bool) or not isinstance(code, int):
            return cls.UNDEFINED

        try:
            return cls(code)
        except ValueError:
            return cls.UNDEFINED



def _field(values, name, kind, default=None):
    """ Retrieve and type-check a single field from a decoded JSON object.
        Absent or null fields return the *default*.
    """

    value = values.get(name)

    if value is None:
        return default

    if kind is int and isinstance(value, bool):
        raise InvalidMessageError("field '%s' must be an integer, not %r" % (name, value))

    if not isinstance(value, kind):
        raise InvalidMessageError("field '%s' must be %s, not %r" % (name, kind.__name__, value))

    return value


def _strings(values, name):

    sequence = _field(values, name, list, list())

    for value in sequence:
        if not isinstance(value, str):
            raise InvalidMessageError("field '%s' must only contain strings, not %r" % (name, value))

    return list(sequence)



class Message:
    """ The :class:`Message` provides a very thin encapsulation of what it
        means to be a message in a REMEDI context: a protocol version and a
        message type. Subclasses add the fields specific to each type via
        :func:`_payload` and :func:`_from_payload`.

        :ivar type: The :class:`MessageType` of this message class.
    """

    type = MessageType.UNDEFINED

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return vars(self) == vars(other)


    def __repr__(self):
        attributes = ', '.join('%s=%r' % item for item in vars(self).items())
        return '%s(%s)' % (type(self).__name__, attributes)


    @property
    def protocol_version(self):
        return version


    def to_dict(self):
        """ Return the JSON-compatible dictionary representation of this
            message, as it would appear on the wire.
        """

        message = dict()
        message[fields.PROT_VER] = version
        message[fields.MSG_TYPE] = int(self.type)
        message.update(self._payload())
        return message


    def encode(self):
        """ Return the JSON encoding of this message as bytes.
        """

        return json.dumps(self.to_dict())


    @classmethod
    def from_dict(cls, values):
        """ Construct an instance from a decoded JSON object. The message type
            and protocol version of *values* are checked against this class;
            :class:`InvalidMessageError` is raised if anything is amiss.
        """

        if cls.type == MessageType.UNDEFINED:
            raise UndefinedMessageError("can't parse messages of type " + cls.type.name)

        their_version = values.get(fields.PROT_VER, version)
        if their_version != version:
            raise InvalidMessageError("message is REMEDI protocol %r, recipient expects %r" % (their_version, version))

        their_type = MessageType.of(values.get(fields.MSG_TYPE))
        if their_type != cls.type:
            raise InvalidMessageError("message of type %s cannot be parsed as %s" % (their_type.name, cls.__name__))

        try:
            return cls._from_payload(values)
        except (TypeError, ValueError) as exception:
            raise InvalidMessageError("message cannot be parsed as %s: %s" % (cls.__name__, exception)) from exception


    def _payload(self):
        return dict()


    @classmethod
    def _from_payload(cls, values):
        return cls()


# end of class Message



class SupportedLanguageRequest(Message):
    """ Ask the translation server which language pairs it supports.
    """

    type = MessageType.SUPPORTED_LANGUAGE_REQUEST


class SupportedLanguageResponse(Message):
    """ The language pairs a translation server currently supports, as a
        mapping of source language to a set of target languages.
    """

    type = MessageType.SUPPORTED_LANGUAGE_RESPONSE

    def __init__(self, languages=None):

        self.languages = dict()

        if languages is not None:
            for source, targets in languages.items():
                self.set_language_pairs(source, targets)


    def add_language_pair(self, source, target):
        self.languages.setdefault(source, set()).add(target)


    def add_language_pairs(self, source, targets):
        self.languages.setdefault(source, set()).update(targets)


    def set_language_pairs(self, source, targets):
        self.languages[source] = set(targets)


    def supports(self, source, target):
        """ Return True if translation from *source* to *target* is
            supported, otherwise return False.
        """

        try:
            targets = self.languages[source]
        except KeyError:
            return False

        return target in targets


    def _payload(self):

        # Sets are not JSON; the sorted order keeps the encoding stable.

        languages = dict()
        for source, targets in self.languages.items():
            languages[source] = sorted(targets)

        return {fields.LANGS: languages}


    @classmethod
    def _from_payload(cls, values):

        languages = _field(values, fields.LANGS, dict, dict())

        for source, targets in languages.items():
            if not isinstance(targets, list):
                raise InvalidMessageError("languages for '%s' must be a list, not %r" % (source, targets))

        return cls(languages)


# end of class SupportedLanguageResponse



class TranslationRequest(Message):
    """ A request to translate an ordered list of *sentences* from the
        *source_language* to the *target_language*. The *job_id* correlates
        the eventual :class:`TranslationResponse` with this request; the
        expectation is that it comes from a shared
        :class:`remedi.protocol.ids.JobIdGenerator`.
    """

    type = MessageType.TRANSLATION_REQUEST

    def __init__(self, source_language=None, target_language=None, sentences=None, job_id=None, priority=0, translation_info=False):

        if sentences is None:
            sentences = list()

        self.job_id = job_id
        self.priority = priority
        self.source_language = source_language
        self.target_language = target_language
        self.translation_info = translation_info
        self.sentences = list(sentences)


    @classmethod
    def from_text(cls, source_language, target_language, text, job_id, segmenter=None, **kwargs):
        """ Build a request from raw *text*, using the *segmenter* to break it
            into sentences. The default segmenter is
            :func:`remedi.text.sentences`.
        """

        if segmenter is None:
            segmenter = textmodule.sentences

        sentences = segmenter(text)
        return cls(source_language, target_language, sentences, job_id, **kwargs)


    def add_sentence(self, sentence):
        self.sentences.append(sentence)


    def _payload(self):

        # It is legal to create a request with None as the job id-- this
        # happens when a request is used as a container-- but trying to
        # send such a request is not permitted.

        if self.job_id is None:
            raise RuntimeError('translation requests must have a job id to be put on the wire')

        payload = dict()
        payload[fields.JOB_ID] = self.job_id
        payload[fields.PRIORITY] = self.priority
        payload[fields.SOURCE_LANG] = self.source_language
        payload[fields.TARGET_LANG] = self.target_language
        payload[fields.IS_TRANS_INFO] = self.translation_info
        payload[fields.SOURCE_SENT] = list(self.sentences)
        return payload


    @classmethod
    def _from_payload(cls, values):

        return cls(
            source_language=_field(values, fields.SOURCE_LANG, str),
            target_language=_field(values, fields.TARGET_LANG, str),
            sentences=_strings(values, fields.SOURCE_SENT),
            job_id=_field(values, fields.JOB_ID, int, 0),
            priority=_field(values, fields.PRIORITY, int, 0),
            translation_info=_field(values, fields.IS_TRANS_INFO, bool, False),
        )


# end of class TranslationRequest



class TargetData:
    """ The translation of a single source sentence. The *translated_text*
        is only meaningful if the *status_code* is :attr:`StatusCode.OK`.
    """

    def __init__(self, status_code=StatusCode.UNDEFINED, status_message=None, translated_text=None, stack_load=None):

        self.status_code = StatusCode.of(int(status_code))
        self.status_message = status_message
        self.translated_text = translated_text
        self.stack_load = stack_load


    def __eq__(self, other):
        if not isinstance(other, TargetData):
            return NotImplemented
        return vars(self) == vars(other)


    def __repr__(self):
        attributes = ', '.join('%s=%r' % item for item in vars(self).items())
        return 'TargetData(%s)' % (attributes)


    @property
    def ok(self):
        return self.status_code == StatusCode.OK


    def to_dict(self):

        data = dict()
        data[fields.STAT_CODE] = int(self.status_code)
        data[fields.STAT_MSG] = self.status_message
        data[fields.TRANS_TEXT] = self.translated_text

        if self.stack_load is None:
            data[fields.STACK_LOAD] = None
        else:
            data[fields.STACK_LOAD] = list(self.stack_load)

        return data


    @classmethod
    def from_dict(cls, values):

        if not isinstance(values, dict):
            raise InvalidMessageError('target data must be an object, not %r' % (values,))

        stack_load = _field(values, fields.STACK_LOAD, list)
        if stack_load is not None:
            for load in stack_load:
                if isinstance(load, bool) or not isinstance(load, int):
                    raise InvalidMessageError("stack load must only contain integers, not %r" % (load,))

        return cls(
            status_code=StatusCode.of(_field(values, fields.STAT_CODE, int)),
            status_message=_field(values, fields.STAT_MSG, str),
            translated_text=_field(values, fields.TRANS_TEXT, str),
            stack_load=stack_load,
        )


# end of class TargetData



class TranslationResponse(Message):
    """ The translation server's answer to a :class:`TranslationRequest`,
        with one :class:`TargetData` entry per source sentence, in order.
    """

    type = MessageType.TRANSLATION_RESPONSE

    INCOMPLETE_PLACEHOLDER = '<Incomplete Translation>'

    def __init__(self, job_id=0, status_code=StatusCode.UNDEFINED, status_message=None, target_data=None):

        if target_data is None:
            target_data = list()

        self.job_id = job_id
        self.status_code = StatusCode.of(int(status_code))
        self.status_message = status_message
        self.target_data = list(target_data)


    def add_target_data(self, target_data):
        self.target_data.append(target_data)


    def assemble(self, delimiter=' ', placeholders=True):
        """ Join the translated sentences with the *delimiter*. Sentences
            that did not translate successfully are replaced with
            :attr:`INCOMPLETE_PLACEHOLDER` if *placeholders* is True, and
            omitted otherwise.
        """

        assembled = list()

        for data in self.target_data:
            if data.ok:
                assembled.append(data.translated_text or '')
            elif placeholders:
                assembled.append(self.INCOMPLETE_PLACEHOLDER)

        return delimiter.join(assembled)


    def _payload(self):

        payload = dict()
        payload[fields.JOB_ID] = self.job_id
        payload[fields.STAT_CODE] = int(self.status_code)
        payload[fields.STAT_MSG] = self.status_message
        payload[fields.TARGET_DATA] = [data.to_dict() for data in self.target_data]
        return payload


    @classmethod
    def _from_payload(cls, values):

        target_data = _field(values, fields.TARGET_DATA, list, list())
        target_data = [TargetData.from_dict(data) for data in target_data]

        return cls(
            job_id=_field(values, fields.JOB_ID, int, 0),
            status_code=StatusCode.of(_field(values, fields.STAT_CODE, int)),
            status_message=_field(values, fields.STAT_MSG, str),
            target_data=target_data,
        )


# end of class TranslationResponse



class ProcessorRequest(Message):
    """ Common structure for pre- and post-processor requests. The job token
        is derived from the *text* unless one is explicitly provided; the
        *chunk_index* and *number_of_chunks* locate this text within a larger
        body of text that was split into independent pieces.
    """

    def __init__(self, language=None, text=None, job_token=None, chunk_index=0, number_of_chunks=1, priority=0):

        if number_of_chunks < 1:
            raise ValueError('number of chunks must be at least one, not %r' % (number_of_chunks,))

        if chunk_index < 0 or chunk_index >= number_of_chunks:
            raise ValueError('chunk index %r is out of range for %r chunks' % (chunk_index, number_of_chunks))

        self.language = language
        self.text = text
        self.chunk_index = chunk_index
        self.number_of_chunks = number_of_chunks
        self.priority = priority

        if job_token is None:
            job_token = self.generate_job_token()

        self.job_token = job_token


    def generate_job_token(self):
        return token_for(self.text)


    def _payload(self):

        payload = dict()
        payload[fields.JOB_TOKEN] = self.job_token
        payload[fields.PRIORITY] = self.priority
        payload[fields.NUM_CHS] = self.number_of_chunks
        payload[fields.CH_IDX] = self.chunk_index
        payload[fields.LANG] = self.language
        payload[fields.TEXT] = self.text
        return payload


    @classmethod
    def _from_payload(cls, values):

        return cls(
            language=_field(values, fields.LANG, str),
            text=_field(values, fields.TEXT, str),
            job_token=_field(values, fields.JOB_TOKEN, str),
            chunk_index=_field(values, fields.CH_IDX, int, 0),
            number_of_chunks=_field(values, fields.NUM_CHS, int, 1),
            priority=_field(values, fields.PRIORITY, int, 0),
        )


class PreProcessorRequest(ProcessorRequest):
    """ Request pre-processing of text; use :data:`LANGUAGE_AUTO` as the
        language to ask the server to detect it.
    """

    type = MessageType.PRE_PROCESSOR_REQUEST

    LANGUAGE_AUTO = fields.LANGUAGE_AUTO


class PostProcessorRequest(ProcessorRequest):

    type = MessageType.POST_PROCESSOR_REQUEST



class ProcessorResponse(Message):
    """ Common structure for pre- and post-processor responses. The response
        mirrors the job token and chunk location of the originating request.
    """

    def __init__(self, job_token=None, language=None, text=None, status_code=StatusCode.UNDEFINED, status_message=None, chunk_index=0, number_of_chunks=1):

        self.job_token = job_token
        self.language = language
        self.text = text
        self.status_code = StatusCode.of(int(status_code))
        self.status_message = status_message
        self.chunk_index = chunk_index
        self.number_of_chunks = number_of_chunks


    @property
    def ok(self):
        return self.status_code == StatusCode.OK


    @property
    def group(self):
        """ The job token with any chunk-local suffix removed.

            This truncation is provisional: it assumes an in-flight token
            never contains the delimiter except to mark a chunk suffix.
        """

        if self.job_token is None:
            return None

        return self.job_token.split(fields.TOKEN_DELIMITER, 1)[0]


    def _payload(self):

        payload = dict()
        payload[fields.STAT_CODE] = int(self.status_code)
        payload[fields.STAT_MSG] = self.status_message
        payload[fields.JOB_TOKEN] = self.job_token
        payload[fields.NUM_CHS] = self.number_of_chunks
        payload[fields.CH_IDX] = self.chunk_index
        payload[fields.LANG] = self.language
        payload[fields.TEXT] = self.text
        return payload


    @classmethod
    def _from_payload(cls, values):

        return cls(
            job_token=_field(values, fields.JOB_TOKEN, str),
            language=_field(values, fields.LANG, str),
            text=_field(values, fields.TEXT, str),
            status_code=StatusCode.of(_field(values, fields.STAT_CODE, int)),
            status_message=_field(values, fields.STAT_MSG, str),
            chunk_index=_field(values, fields.CH_IDX, int, 0),
            number_of_chunks=_field(values, fields.NUM_CHS, int, 1),
        )


class PreProcessorResponse(ProcessorResponse):

    type = MessageType.PRE_PROCESSOR_RESPONSE


class PostProcessorResponse(ProcessorResponse):

    type = MessageType.POST_PROCESSOR_RESPONSE



# The closed set of concrete message classes, one per message type.

types = {
    MessageType.SUPPORTED_LANGUAGE_REQUEST: SupportedLanguageRequest,
    MessageType.SUPPORTED_LANGUAGE_RESPONSE: SupportedLanguageResponse,
    MessageType.TRANSLATION_REQUEST: TranslationRequest,
    MessageType.TRANSLATION_RESPONSE: TranslationResponse,
    MessageType.PRE_PROCESSOR_REQUEST: PreProcessorRequest,
    MessageType.PRE_PROCESSOR_RESPONSE: PreProcessorResponse,
    MessageType.POST_PROCESSOR_REQUEST: PostProcessorRequest,
    MessageType.POST_PROCESSOR_RESPONSE: PostProcessorResponse,
}

responses = frozenset((
    MessageType.SUPPORTED_LANGUAGE_RESPONSE,
    MessageType.TRANSLATION_RESPONSE,
    MessageType.PRE_PROCESSOR_RESPONSE,
    MessageType.POST_PROCESSOR_RESPONSE,
))



def classify(raw):
    """ Decode the raw JSON frame and classify it by its message type. The
        frame is returned as a dictionary alongside its :class:`MessageType`.
    """

    try:
        values = json.loads(raw)
    except json.DecodeError as exception:
        raise InvalidMessageError('message is not valid JSON: %s' % (exception,)) from exception

    if not isinstance(values, dict):
        raise InvalidMessageError('message is not a JSON object')

    try:
        code = values[fields.MSG_TYPE]
    except KeyError:
        raise InvalidMessageError('message is missing the %s field' % (fields.MSG_TYPE))

    return MessageType.of(code), values



def peek(raw):
    """ Return the :class:`MessageType` of the *raw* JSON frame without fully
        parsing the message. Unknown type codes are returned as
        :attr:`MessageType.UNDEFINED`; a frame that is not a JSON object, or
        that has no type code, raises :class:`InvalidMessageError`.
    """

    message_type, values = classify(raw)
    return message_type



def from_dict(values, expected=None):
    """ Construct the appropriate :class:`Message` subclass for the decoded
        JSON object *values*. If an *expected* class is provided the message
        must be of that type.
    """

    message_type = MessageType.of(values.get(fields.MSG_TYPE))

    if expected is not None:
        return expected.from_dict(values)

    if message_type == MessageType.UNDEFINED:
        raise UndefinedMessageError("can't parse messages of type " + message_type.name)

    return types[message_type].from_dict(values)



def decode(raw, expected=None):
    """ Decode the *raw* JSON frame (str or bytes) into a :class:`Message`
        instance. The message type is established first, then the remainder
        of the message is parsed according to that type.
    """

    message_type, values = classify(raw)
    return from_dict(values, expected)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
