"""
badger.utils.testutils
~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2013 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import asyncio

from badger.transport.base import Response, Transport
from badger.utils import json


class InMemoryTransport(Transport):
    """
    Records every send and answers with a canned response.

    ``response`` may also be an exception instance, which is raised
    instead, and ``delay`` holds each send for that many seconds first.
    """

    def __init__(self, response=None, delay=None):
        if response is None:
            response = Response(201, {}, '{"id": "abc"}')
        self.response = response
        self.delay = delay
        self.sent = []
        self.closed = False

    @property
    def events(self):
        return [json.loads(data) for url, data, headers in self.sent]

    async def send(self, url, data, headers):
        self.sent.append((url, data, headers))
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(self.response, BaseException):
            raise self.response
        return self.response

    async def close(self):
        self.closed = True
