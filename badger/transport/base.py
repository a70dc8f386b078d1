"""
badger.transport.base
~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from collections import namedtuple

__all__ = ('Response', 'Transport')

Response = namedtuple('Response', 'status headers body')


class Transport(object):
    """
    All transport implementations need to subclass this class

    You must implement a ``send`` coroutine which posts ``data`` to
    ``url`` and returns a :class:`Response`. Connection problems are
    raised as :class:`~badger.exceptions.TransportFailure`, running out
    of time as :class:`~badger.exceptions.Timeout`. The status code is
    interpreted by the client, never by the transport.
    """

    async def send(self, url, data, headers):
        """
        You need to override this to do something with the actual
        data. Usually - this is sending to a server
        """
        raise NotImplementedError

    async def close(self):
        pass
