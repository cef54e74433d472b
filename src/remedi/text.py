""" Default sentence segmentation. Translation requests carry their source
    text as an ordered list of sentences; any callable accepting a string
    and returning a list of strings can be used in place of
    :func:`sentences`, for example one backed by a locale-aware library.
"""

import re


# A sentence ends with terminal punctuation, optionally followed by a single
# closing quote or bracket, and then whitespace.

_boundary = re.compile(r'(?:(?<=[.!?…])|(?<=[.!?…][\'"’”)\]]))\s+')


def sentences(text):
    """ Split *text* into a list of sentences, each stripped of surrounding
        whitespace. Text without a sentence boundary is returned as a single
        sentence; empty text yields an empty list.
    """

    if text is None:
        return list()

    results = list()

    for sentence in _boundary.split(text):
        sentence = sentence.strip()
        if sentence:
            results.append(sentence)

    return results


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
