""" Splitting of large bodies of text into independently processed chunks,
    and reassembly of the processed chunks into a single body of text.

    The granularity of a chunk is decided by a segmenter (sentences, by
    default); the functions here only assign and honor the ordering
    metadata, the chunk index and the total number of chunks.
"""

import collections

from . import text as textmodule
from .protocol.message import StatusCode


MISSING_PLACEHOLDER = '<Missing Chunk>'


Chunk = collections.namedtuple('Chunk', ('index', 'total', 'text'))


def split(text, segmenter=None, max_chunks=None):
    """ Return an ordered list of :class:`Chunk` instances for *text*. The
        *segmenter* breaks the text into pieces, one chunk per piece; if
        *max_chunks* is specified, consecutive pieces are grouped (joined
        with a single space) so that no more than *max_chunks* chunks are
        returned, each with a near-equal number of pieces.
    """

    if segmenter is None:
        segmenter = textmodule.sentences

    pieces = list(segmenter(text))

    if max_chunks is not None:
        max_chunks = int(max_chunks)
        if max_chunks < 1:
            raise ValueError('max_chunks must be at least one, not %d' % (max_chunks))

        if len(pieces) > max_chunks:
            pieces = _group(pieces, max_chunks)

    total = len(pieces)
    chunks = list()

    for index, piece in enumerate(pieces):
        chunks.append(Chunk(index, total, piece))

    return chunks



def _group(pieces, count):

    size, remainder = divmod(len(pieces), count)
    groups = list()
    start = 0

    for group in range(count):
        end = start + size
        if group < remainder:
            end += 1

        groups.append(' '.join(pieces[start:end]))
        start = end

    return groups



def reassemble(responses, delimiter=' ', placeholders=True):
    """ Assemble the text of a collection of processor *responses* into a
        single string, in chunk index order. The *responses* can arrive in
        any order, and some may be missing.

        When more than one response is present for a given chunk index, the
        response declaring the highest number of chunks is kept, and among
        those the last one seen. The total number of chunks is the highest
        number declared by any response; a response that does not declare a
        positive total is treated as a single chunk.

        A chunk whose status is anything other than OK, or that is missing
        entirely, is replaced with :data:`MISSING_PLACEHOLDER` if
        *placeholders* is True, and is otherwise omitted.
    """

    kept = dict()
    total = 0

    for response in responses:
        declared = response.number_of_chunks
        if declared is None or declared < 1:
            declared = 1

        index = response.chunk_index
        if index is None:
            index = 0

        total = max(total, declared)

        try:
            previous, previous_declared = kept[index]
        except KeyError:
            pass
        else:
            if declared < previous_declared:
                continue

        kept[index] = (response, declared)

    assembled = list()

    for index in range(total):
        try:
            response, declared = kept[index]
        except KeyError:
            response = None

        if response is not None and response.status_code == StatusCode.OK:
            text = response.text
            if text is None:
                text = ''
            assembled.append(text)
        elif placeholders:
            assembled.append(MISSING_PLACEHOLDER)

    return delimiter.join(assembled)



def processor_requests(request_class, language, chunks, priority=0):
    """ Build one processor request of the given *request_class* for each
        entry in *chunks*, which may be :class:`Chunk` instances or plain
        strings. Each request carries its chunk index, the total number of
        chunks, and a job token derived from its text.
    """

    chunks = list(chunks)
    total = len(chunks)
    requests = list()

    for index, chunk in enumerate(chunks):
        if isinstance(chunk, Chunk):
            chunk = chunk.text

        request = request_class(language, chunk, chunk_index=index, number_of_chunks=total, priority=priority)
        requests.append(request)

    return requests


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
