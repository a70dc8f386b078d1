"""
badger.processors
~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from badger.utils import varmap


class Processor(object):
    def __init__(self, config):
        self.config = config

    def process(self, request):
        for n in ('params', 'session', 'cgi_data'):
            if n in request:
                request[n] = self.filter(request[n])
        return request

    def filter(self, data):
        return data


class SanitizeKeysProcessor(Processor):
    """
    Masks the values of request params, session and CGI data whose keys
    contain any of the configured ``filter_keys``.
    """

    MASK = '[FILTERED]'

    def sanitize(self, key, value):
        if value is None or not key:  # key can be a NoneType
            return value

        # Just in case we have bytes here, we want to make them into text
        # properly without failing so we can perform our check.
        if isinstance(key, bytes):
            key = key.decode('utf-8', 'replace')
        else:
            key = str(key)

        key = key.lower()
        for field in self.config.filter_keys:
            if field in key:
                return self.MASK
        return value

    def filter(self, data):
        return varmap(self.sanitize, data)
