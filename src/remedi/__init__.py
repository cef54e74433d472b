""" Python implementation of a REMEDI translation client. This includes the
    protocol messages exchanged with REMEDI servers, the machinery that
    correlates their asynchronous responses with outstanding requests, and
    the client that drives text through pre-processing, translation, and
    post-processing.
"""

# Utility components.

from . import errors
from . import json
from . import text

# Submodules used by multiple other components.

from . import protocol
from . import chunks
from . import store
from . import dispatch
from . import poll
from . import transport
from . import config

# Primary public-facing interfaces.

from .client import Client, ChunkedResult, PendingJob
from .config import Configuration
from .errors import RemediError, StageFailedError, StageNotConfiguredError, ResponseTimeout


def connect(configuration=None, **kwargs):
    """ Return a connected :class:`Client`. The *configuration* is a
        :class:`Configuration` instance; if none is provided one is built
        from the environment, with any keyword arguments taking precedence.
    """

    if configuration is None:
        configuration = Configuration.from_environment(**kwargs)

    return Client.connect(configuration)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
