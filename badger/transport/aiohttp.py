"""
badger.transport.aiohttp
~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2017 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import asyncio

import aiohttp
from aiohttp import ClientError

from badger.conf import defaults
from badger.exceptions import Timeout, TransportFailure
from badger.transport.base import Response, Transport

__all__ = ('AIOHTTPTransport',)


class AIOHTTPTransport(Transport):
    """
    Posts notices with a single ``aiohttp.ClientSession``, which is
    created on first use so that it binds to the running event loop, and
    shared by every concurrent send afterwards.
    """

    def __init__(self, timeout=defaults.TIMEOUT, verify_ssl=True, session=None):
        if isinstance(timeout, str):
            timeout = float(timeout)

        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._session = session
        self._owns_session = session is None

    @property
    def session(self):
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def send(self, url, data, headers):
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with self.session.post(
                    url, data=data, headers=headers, timeout=timeout,
                    allow_redirects=False,
                    ssl=None if self.verify_ssl else False) as response:
                body = await response.read()
                return Response(
                    response.status,
                    response.headers,
                    body.decode('utf-8', errors='replace'),
                )
        # ServerTimeoutError is both a ClientError and a TimeoutError
        except asyncio.TimeoutError as e:
            message = ("Connection to Honeybadger server timed out "
                       "(url: %s, timeout: %s seconds)" % (url, self.timeout))
            raise Timeout(message, self.timeout) from e
        except ClientError as e:
            message = ("Unable to reach Honeybadger server: %s (url: %s)"
                       % (e, url))
            raise TransportFailure(message) from e

    async def close(self):
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None
