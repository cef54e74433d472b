""" Client configuration: which REMEDI servers to talk to, and how patiently
    to wait for their responses. A configuration can be built directly, read
    from a JSON file, or taken from environment variables.
"""

import os

from . import json


environment_prefix = 'REMEDI_'


class Configuration:
    """ A convenience class to represent REMEDI client configuration. The
        *translator* URI is required; the *pre_processor* and
        *post_processor* URIs are optional, and the corresponding stage of
        the translation pipeline is skipped if they are not set.

        :ivar initial_wait: Seconds to wait after the first check for a response.
        :ivar maximum_wait: Upper bound, in seconds, on a single wait.
        :ivar backoff_factor: Growth of the wait after every unsuccessful check.
        :ivar timeout: Overall limit in seconds on waiting for any one response;
                       None waits forever.
        :ivar priority: Priority assigned to every outbound job.
        :ivar workers: Number of threads available for background jobs.
    """

    uris = ('pre_processor', 'translator', 'post_processor')
    numbers = ('initial_wait', 'maximum_wait', 'backoff_factor', 'timeout', 'priority', 'workers')

    def __init__(self, translator=None, pre_processor=None, post_processor=None,
                 initial_wait=0.25, maximum_wait=4.0, backoff_factor=2,
                 timeout=None, priority=0, workers=4):

        if not translator:
            raise ValueError('a translation server must be configured')

        self.translator = translator
        self.pre_processor = pre_processor or None
        self.post_processor = post_processor or None

        self.initial_wait = float(initial_wait)
        self.maximum_wait = float(maximum_wait)
        self.backoff_factor = float(backoff_factor)
        self.priority = int(priority)
        self.workers = int(workers)

        if timeout is None:
            self.timeout = None
        else:
            self.timeout = float(timeout)


    def __repr__(self):
        attributes = ', '.join('%s=%r' % item for item in vars(self).items())
        return 'Configuration(%s)' % (attributes)


    def __eq__(self, other):
        if not isinstance(other, Configuration):
            return NotImplemented
        return vars(self) == vars(other)


    def to_dict(self):
        return dict(vars(self))


    @classmethod
    def from_dict(cls, values):
        """ Build a configuration from a dictionary; unrecognized keys are
            rejected, to catch typos in configuration files.
        """

        known = set(cls.uris + cls.numbers)
        unknown = set(values) - known

        if unknown:
            raise ValueError('unrecognized configuration keys: ' + ', '.join(sorted(unknown)))

        return cls(**values)


    @classmethod
    def load(cls, filename):
        """ Read a configuration from the JSON file *filename*.
        """

        with open(filename, 'rb') as file:
            contents = file.read()

        values = json.loads(contents)

        if not isinstance(values, dict):
            raise ValueError('configuration file must contain a JSON object: ' + str(filename))

        return cls.from_dict(values)


    def save(self, filename):

        contents = json.dumps(self.to_dict())

        with open(filename, 'wb') as file:
            file.write(contents)


    @classmethod
    def from_environment(cls, environ=None, **overrides):
        """ Build a configuration from environment variables, each name being
            the upper-case attribute name prefixed with ``REMEDI_``; for
            example, ``REMEDI_TRANSLATOR`` and ``REMEDI_TIMEOUT``. Keyword
            arguments take precedence over the environment.
        """

        if environ is None:
            environ = os.environ

        values = dict()

        for name in cls.uris + cls.numbers:
            variable = environment_prefix + name.upper()
            try:
                value = environ[variable]
            except KeyError:
                continue

            if value == '':
                continue

            values[name] = value

        values.update(overrides)
        return cls(**values)


# end of class Configuration


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
