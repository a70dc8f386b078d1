"""
badger.base
~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import asyncio
import logging
import platform
import sys
from functools import partial

import badger
from badger import errors
from badger.conf import defaults
from badger.exceptions import (
    BuildError, NotProcessed, RateExceeded, Redirected, Rejected,
    ServerError, Timeout, Unauthorized, UnknownStatus)
from badger.notice import build_notice
from badger.transport.aiohttp import AIOHTTPTransport
from badger.utils import json

__all__ = ('Accepted', 'Client')


class Accepted(object):
    """
    Returned when the server accepted a notice. ``id`` is the notice id
    reported by the server, if it sent one.
    """
    __slots__ = ('status', 'id')

    def __init__(self, status, id=None):
        self.status = status
        self.id = id

    def __repr__(self):
        return '<%s: %s id=%r>' % (type(self).__name__, self.status, self.id)

    def __eq__(self, other):
        return (isinstance(other, Accepted)
                and (self.status, self.id) == (other.status, other.id))

    def __hash__(self):
        return hash((self.status, self.id))


def task_callback(client, task):
    client._pending.discard(task)
    if task.cancelled():
        client.logger.debug('Notice delivery was cancelled')
        return
    exc = task.exception()
    if exc is not None:
        client._failed_send(exc)
    else:
        client._successful_send(task.result())


class Client(object):
    """
    Reports errors to Honeybadger.

    >>> from badger import Client, ConfigBuilder

    >>> client = Client(ConfigBuilder('ffffff').with_env('production').build())

    >>> # Report an exception and wait for the outcome
    >>> try:
    >>>     1/0
    >>> except ZeroDivisionError as exc:
    >>>     outcome = await client.notify(exc, context={'user_id': '42'})
    >>>     print("Exception reported; id is %s" % outcome.id)

    Every call makes exactly one delivery attempt. Failures are raised as
    :class:`~badger.exceptions.NotifyError` subclasses, so retrying is up
    to the caller. A notify call which is cancelled may or may not have
    reached the server.
    """

    def __init__(self, config, transport=None, registry=None):
        cls = self.__class__
        self.logger = logging.getLogger(
            '%s.%s' % (cls.__module__, cls.__name__))
        self.error_logger = logging.getLogger('honeybadger.errors')

        self.config = config
        if transport is None:
            transport = AIOHTTPTransport(timeout=config.timeout)
        self.transport = transport
        self.registry = registry or errors.registry
        self.user_agent = '%s/%s; %s/%s' % (
            defaults.NOTIFIER_NAME, badger.VERSION,
            platform.system(), platform.release())
        self._pending = set()

        if not config.is_active():
            self.logger.info(
                'Honeybadger is not configured (no API key); notify calls '
                'will fail until one is given.')

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_value, tb):
        await self.close()

    def describe(self, error):
        return self.registry.describe(
            error, max_causes=self.config.max_causes)

    def build_notice(self, error=None, context=None, **kwargs):
        """
        Describes ``error`` and assembles the notice for it.

        If ``error`` is not provided, the exception currently being
        handled (``sys.exc_info()``) is used.

        ``kwargs`` are passed through to
        :func:`~badger.notice.build_notice`.
        """
        if error is None:
            exc_info = sys.exc_info()
            if exc_info[1] is None:
                raise BuildError('No exception found')
            error = exc_info

        try:
            description = self.describe(error)
        finally:
            del error

        return build_notice(description, self.config, context=context,
                            **kwargs)

    def get_headers(self):
        return {
            'User-Agent': self.user_agent,
            defaults.API_KEY_HEADER: self.config.api_key,
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

    async def notify(self, error=None, context=None, **kwargs):
        """
        Reports ``error`` and waits for the server's answer.

        >>> await client.notify(exc, context={'user_id': '42'},
        >>>                     params={'page': 2}, tags=['billing'])

        :param error: an exception, ``exc_info`` tuple, string or any
                      object an adapter is registered for
        :param context: mapping reported as ``request.context``
        :return: :class:`Accepted`
        :raises BuildError: if the notice cannot be built
        :raises NotifyError: if delivery failed or the server declined
        """
        notice = self.build_notice(error, context=context, **kwargs)
        return await self.send(notice)

    def notify_nowait(self, error=None, context=None, **kwargs):
        """
        Schedules the report of ``error`` and returns the task at once.

        The notice is built before returning, so ``BuildError`` is still
        raised to the caller. Delivery failures are logged to the
        ``honeybadger.errors`` logger.
        """
        notice = self.build_notice(error, context=context, **kwargs)
        task = asyncio.ensure_future(self.send(notice))
        self._pending.add(task)
        task.add_done_callback(partial(task_callback, self))
        return task

    async def flush(self):
        """
        Waits for all notices scheduled with :meth:`notify_nowait`.
        """
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def send(self, notice):
        """
        Encodes ``notice`` and posts it to the notices endpoint.
        """
        if not self.config.is_active():
            raise BuildError('An API key is required to send a notice')

        data = notice.encode()
        url = self.config.notices_url

        self.logger.debug('Sending notice of length %d to %s', len(data), url)

        timeout = self.config.timeout
        try:
            response = await asyncio.wait_for(
                self.transport.send(url, data, self.get_headers()), timeout)
        except asyncio.TimeoutError:
            raise Timeout(
                'Connection to Honeybadger server timed out '
                '(url: %s, timeout: %s seconds)' % (url, timeout), timeout)

        self.logger.debug('Honeybadger API returned status: %s', response.status)

        return self.handle_response(response)

    def handle_response(self, response):
        status = response.status
        body = response.body

        if 200 <= status < 300:
            data = self._decode_body(body)
            notice_id = data.get('id') if isinstance(data, dict) else None
            return Accepted(status, notice_id)

        if 300 <= status < 400:
            raise Redirected(
                'The endpoint replied with a redirect', status, body,
                location=response.headers.get('Location'))

        if 400 <= status < 500:
            message = self._get_error_message(body)
            if status in (401, 403):
                raise Unauthorized(
                    message or 'API key is incorrect or the account is deactivated',
                    status, body)
            if status == 422:
                raise NotProcessed(
                    message or "The payload couldn't be processed", status, body)
            if status == 429:
                try:
                    retry_after = int(response.headers.get('Retry-After'))
                except (ValueError, TypeError):
                    retry_after = 0
                raise RateExceeded(
                    message or 'Honeybadger rate limit exceeded', status, body,
                    retry_after=retry_after)
            raise Rejected(message or 'Honeybadger rejected the notice',
                           status, body)

        if 500 <= status < 600:
            raise ServerError('Honeybadger responded with a server error',
                              status, body)

        raise UnknownStatus('Honeybadger responded with an unknown status code',
                            status, body)

    def _decode_body(self, body):
        if not body:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return None

    def _get_error_message(self, body):
        data = self._decode_body(body)
        if isinstance(data, dict) and data.get('error'):
            return str(data['error'])
        return None

    def _successful_send(self, outcome):
        self.logger.debug('Notice accepted: %r', outcome)

    def _failed_send(self, e):
        self.error_logger.error(
            'Unable to deliver notice to Honeybadger: %s (url: %s)',
            e, self.config.notices_url,
            exc_info=(type(e), e, e.__traceback__),
            extra={'data': {'remote_url': self.config.notices_url}})

    async def close(self):
        await self.transport.close()
