import pytest

import remedi
from remedi.protocol import fields
from remedi.protocol import message
from remedi.protocol.ids import token_for


def test_message_types():

    assert message.MessageType.UNDEFINED == 0
    assert message.MessageType.TRANSLATION_REQUEST == 3
    assert message.MessageType.POST_PROCESSOR_RESPONSE == 8

    assert message.MessageType.of(4) == message.MessageType.TRANSLATION_RESPONSE
    assert message.MessageType.of(99) == message.MessageType.UNDEFINED
    assert message.MessageType.of(-1) == message.MessageType.UNDEFINED
    assert message.MessageType.of('4') == message.MessageType.UNDEFINED
    assert message.MessageType.of(True) == message.MessageType.UNDEFINED

    assert message.StatusCode.of(2) == message.StatusCode.OK
    assert message.StatusCode.of(42) == message.StatusCode.UNDEFINED
    assert message.StatusCode.of(None) == message.StatusCode.UNDEFINED

    for message_type, message_class in message.types.items():
        assert message_class.type == message_type


def test_serialization():

    request = message.SupportedLanguageRequest()

    assert request.to_dict() == {'prot_ver': 0, 'msg_type': 1}
    assert request.encode() == b'{"prot_ver":0,"msg_type":1}'
    assert request.protocol_version == 0

    decoded = message.decode('{"prot_ver":0,"msg_type":1}')
    assert isinstance(decoded, message.SupportedLanguageRequest)
    assert decoded == request

    # The protocol version is optional on the way in.

    decoded = message.decode(b'{"msg_type":1}')
    assert decoded == request


def test_decode_as_wrong_class():

    frame = message.SupportedLanguageRequest().encode()

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode(frame, expected=message.TranslationRequest)

    decoded = message.decode(frame, expected=message.SupportedLanguageRequest)
    assert isinstance(decoded, message.SupportedLanguageRequest)


def test_decode_failures():

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('this is not JSON')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('[1, 2, 3]')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"prot_ver":0}')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"prot_ver":1,"msg_type":1}')

    with pytest.raises(remedi.errors.UndefinedMessageError):
        message.decode('{"prot_ver":0,"msg_type":0}')

    with pytest.raises(remedi.errors.UndefinedMessageError):
        message.decode('{"prot_ver":0,"msg_type":99}')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"prot_ver":0,"msg_type":4,"job_id":"seven"}')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"prot_ver":0,"msg_type":4,"job_id":7,"stat_code":true}')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"prot_ver":0,"msg_type":4,"job_id":7,"target_data":[5]}')

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"prot_ver":0,"msg_type":3,"job_id":7,"source_sent":["a",2]}')

    with pytest.raises(remedi.errors.UndefinedMessageError):
        message.Message.from_dict({'prot_ver': 0, 'msg_type': 0})


def test_peek():

    frame = message.TranslationResponse(12, message.StatusCode.OK).encode()
    assert message.peek(frame) == message.MessageType.TRANSLATION_RESPONSE

    # The type is established without parsing the remainder of the message.

    assert message.peek('{"msg_type":6,"job_token":12}') == message.MessageType.PRE_PROCESSOR_RESPONSE
    assert message.peek('{"msg_type":77}') == message.MessageType.UNDEFINED

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.peek('{"job_id":12}')


def test_translation_request():

    request = message.TranslationRequest.from_text('en', 'nl', 'Hello, World. How are you?', 7)

    assert request.sentences == ['Hello, World.', 'How are you?']
    assert request.priority == 0
    assert request.translation_info == False

    values = request.to_dict()
    assert values[fields.PROT_VER] == 0
    assert values[fields.MSG_TYPE] == 3
    assert values[fields.JOB_ID] == 7
    assert values[fields.PRIORITY] == 0
    assert values[fields.SOURCE_LANG] == 'en'
    assert values[fields.TARGET_LANG] == 'nl'
    assert values[fields.IS_TRANS_INFO] == False
    assert values[fields.SOURCE_SENT] == ['Hello, World.', 'How are you?']

    assert message.decode(request.encode()) == request

    request.add_sentence('Good night.')
    assert len(request.sentences) == 3

    def segmenter(text):
        return text.split('|')

    request = message.TranslationRequest.from_text('en', 'nl', 'one|two', 8, segmenter=segmenter, priority=3)
    assert request.sentences == ['one', 'two']
    assert request.priority == 3

    # A request without a job id can be built, but not sent.

    request = message.TranslationRequest('en', 'nl', ['Hello.'])

    with pytest.raises(RuntimeError):
        request.encode()


def test_translation_response_assembly():

    response = message.TranslationResponse(3, message.StatusCode.OK)
    response.add_target_data(message.TargetData(message.StatusCode.OK, None, 'Where'))
    response.add_target_data(message.TargetData(message.StatusCode.ERROR, 'failed'))
    response.add_target_data(message.TargetData(message.StatusCode.OK, None, 'you'))

    assert response.assemble(' ', True) == 'Where <Incomplete Translation> you'
    assert response.assemble(' ', False) == 'Where you'
    assert response.assemble() == 'Where <Incomplete Translation> you'

    assert message.TranslationResponse.INCOMPLETE_PLACEHOLDER == '<Incomplete Translation>'

    decoded = message.decode(response.encode())
    assert decoded == response
    assert decoded.target_data[1].status_message == 'failed'


def test_translation_response_error_entry():
    """ One failed sentence among three good ones leaves a placeholder in
        the position of the failed sentence.
    """

    frame = {
        'prot_ver': 0,
        'msg_type': 4,
        'job_id': 5,
        'stat_code': 2,
        'stat_msg': None,
        'target_data': [
            {'stat_code': 2, 'trans_text': 'Een.', 'stack_load': [1, 2]},
            {'stat_code': 2, 'trans_text': 'Twee.'},
            {'stat_code': 5, 'stat_msg': 'no model', 'trans_text': None},
            {'stat_code': 2, 'trans_text': 'Vier.'},
        ],
    }

    response = message.decode(remedi.json.dumps(frame))

    assert isinstance(response, message.TranslationResponse)
    assert response.job_id == 5
    assert response.target_data[0].stack_load == [1, 2]
    assert response.assemble(' ', True) == 'Een. Twee. <Incomplete Translation> Vier.'


def test_language_pairs():

    response = message.SupportedLanguageResponse()
    assert response.supports('en', 'nl') == False

    response.add_language_pair('en', 'nl')
    response.add_language_pairs('en', ['de', 'fr'])
    response.add_language_pair('nl', 'en')

    assert response.supports('en', 'nl')
    assert response.supports('en', 'fr')
    assert response.supports('nl', 'en')
    assert response.supports('nl', 'de') == False
    assert response.supports('de', 'en') == False

    response.set_language_pairs('en', ['es'])
    assert response.supports('en', 'es')
    assert response.supports('en', 'nl') == False

    values = response.to_dict()
    assert values[fields.LANGS] == {'en': ['es'], 'nl': ['en']}

    response = message.SupportedLanguageResponse({'en': ['nl', 'de', 'nl']})
    assert response.languages == {'en': {'de', 'nl'}}
    assert response.to_dict()[fields.LANGS] == {'en': ['de', 'nl']}

    decoded = message.decode(response.encode())
    assert decoded == response

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"msg_type":2,"langs":{"en":"nl"}}')


def test_processor_request():

    request = message.PreProcessorRequest('en', 'Where are you?')

    assert request.job_token == token_for('Where are you?')
    assert request.chunk_index == 0
    assert request.number_of_chunks == 1
    assert request.generate_job_token() == request.job_token

    values = request.to_dict()
    assert values[fields.MSG_TYPE] == 5
    assert values[fields.JOB_TOKEN] == request.job_token
    assert values[fields.NUM_CHS] == 1
    assert values[fields.CH_IDX] == 0
    assert values[fields.LANG] == 'en'
    assert values[fields.TEXT] == 'Where are you?'

    assert message.decode(request.encode()) == request

    request = message.PostProcessorRequest('nl', 'Waar ben je?', job_token='custom', chunk_index=1, number_of_chunks=2)
    assert request.job_token == 'custom'
    assert request.to_dict()[fields.MSG_TYPE] == 7

    assert message.PreProcessorRequest.LANGUAGE_AUTO == 'auto'

    with pytest.raises(ValueError):
        message.PreProcessorRequest('en', 'text', chunk_index=2, number_of_chunks=2)

    with pytest.raises(ValueError):
        message.PreProcessorRequest('en', 'text', chunk_index=-1)

    with pytest.raises(ValueError):
        message.PreProcessorRequest('en', 'text', number_of_chunks=0)

    with pytest.raises(remedi.errors.InvalidMessageError):
        message.decode('{"msg_type":5,"job_token":"abc","ch_idx":3,"num_chs":2}')


def test_processor_response():

    response = message.PreProcessorResponse('abc.2', 'en', 'Hello.', message.StatusCode.OK, None, 2, 3)

    assert response.ok
    assert response.group == 'abc'
    assert message.PreProcessorResponse('abc').group == 'abc'
    assert message.PreProcessorResponse().group is None

    values = response.to_dict()
    assert values[fields.MSG_TYPE] == 6
    assert values[fields.STAT_CODE] == 2
    assert values[fields.CH_IDX] == 2
    assert values[fields.NUM_CHS] == 3

    decoded = message.decode(response.encode())
    assert decoded == response
    assert isinstance(decoded, message.PreProcessorResponse)

    response = message.PostProcessorResponse('abc', 'en', None, message.StatusCode.CANCELED)
    assert response.ok == False

    decoded = message.decode(response.encode())
    assert isinstance(decoded, message.PostProcessorResponse)
    assert decoded.status_code == message.StatusCode.CANCELED

    # Nor does the response get confused with its counterpart.

    assert decoded != message.PreProcessorResponse('abc', 'en', None, message.StatusCode.CANCELED)

    # The string representation is not enforced, just exercised.

    repr(decoded)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
