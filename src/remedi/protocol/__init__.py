"""
REMEDI Protocol Layer
=====================

This package defines the messages exchanged between a REMEDI client and
its servers, independent of how they are carried.

Field Vocabulary (fields.py)
    Canonical JSON field names and protocol constants.

Identifiers (ids.py)
    Job identifiers for translation requests, and content-derived job
    tokens for pre- and post-processing requests.

Message Model (message.py)
    One class per message type, each able to convert itself to and from
    its JSON representation; plus the functions that classify and decode
    inbound frames.

The protocol layer does not depend on any transport implementation.
"""

from . import fields
from . import ids
from . import message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
