""" Exception classes raised by the REMEDI client. Errors describing a bad
    inbound message are caught and logged by the dispatcher; everything
    else is raised to the caller that triggered it.
"""


class RemediError(Exception):
    """ Base class for all REMEDI client errors.
    """


class InvalidMessageError(RemediError):
    """ A message could not be classified, or its body could not be parsed
        as the type it claims to be.
    """


class UndefinedMessageError(RemediError):
    """ An attempt was made to decode a message of the undefined type, which
        is not a real protocol message.
    """


class StageNotConfiguredError(RemediError):
    """ A pre- or post-processing request was made, but no server was
        configured for that stage.
    """


class StageFailedError(RemediError):
    """ A stage of the translation pipeline returned a failing status code;
        the offending *response* is retained for inspection.
    """

    def __init__(self, message, response=None):
        RemediError.__init__(self, message)
        self.response = response


class ResponseTimeout(RemediError):
    """ No response arrived within the configured timeout.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
