"""
badger.exceptions
~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""


class BadgerError(Exception):
    pass


class BuildError(BadgerError, ValueError):
    """
    Raised when a notice cannot be assembled from the given configuration
    or input, e.g. the API key is missing.
    """


class DuplicateAdapter(BadgerError):
    """
    Raised when registering an error adapter for a class which already
    has one.
    """


class NotifyError(BadgerError):
    def __init__(self, message, status=None, body=None):
        super(NotifyError, self).__init__(message)
        self.message = message
        self.status = status
        self.body = body

    def __str__(self):
        if self.status is None:
            return self.message
        return '%s: %s' % (self.message, self.status)


class Rejected(NotifyError):
    """The server declined the notice (4xx)."""


class Unauthorized(Rejected):
    pass


class NotProcessed(Rejected):
    pass


class RateExceeded(Rejected):
    def __init__(self, message, status=429, body=None, retry_after=0):
        super(RateExceeded, self).__init__(message, status, body)
        self.retry_after = retry_after


class Redirected(NotifyError):
    def __init__(self, message, status=None, body=None, location=None):
        super(Redirected, self).__init__(message, status, body)
        self.location = location


class TransportFailure(NotifyError):
    """
    Transient delivery problem: the connection failed or the server
    answered with a 5xx. Callers may retry.
    """


class ServerError(TransportFailure):
    pass


class Timeout(NotifyError):
    def __init__(self, message, timeout=None):
        super(Timeout, self).__init__(message)
        self.timeout = timeout


class UnknownStatus(NotifyError):
    pass
