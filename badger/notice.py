"""
badger.notice
~~~~~~~~~~~~~

Assembles the notice document posted to the notices API.

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import copy
import os
from datetime import datetime, timezone

import badger
from badger.conf import defaults
from badger.exceptions import BuildError
from badger.processors import SanitizeKeysProcessor
from badger.utils import json, merge_dicts
from badger.utils.encoding import to_text
from badger.utils.stacks import relative_to_root

__all__ = ('Notice', 'build_notice')


class Notice(object):
    """
    A fully assembled notice, ready to be encoded and sent once.

    The sections are copied on construction and handed out as copies, so
    a notice cannot be altered after it has been built.
    """
    __slots__ = ('_data',)

    def __init__(self, notifier, error, server, request=None):
        data = {
            'notifier': notifier,
            'error': error,
            'server': server,
        }
        if request is not None:
            data['request'] = request
        object.__setattr__(self, '_data', copy.deepcopy(data))

    def __setattr__(self, key, value):
        raise AttributeError('Notice is read-only')

    def __repr__(self):
        return '<%s: %s: %s>' % (type(self).__name__,
                                 self._data['error']['class'],
                                 self._data['error']['message'])

    @property
    def notifier(self):
        return copy.deepcopy(self._data['notifier'])

    @property
    def error(self):
        return copy.deepcopy(self._data['error'])

    @property
    def server(self):
        return copy.deepcopy(self._data['server'])

    @property
    def request(self):
        return copy.deepcopy(self._data.get('request'))

    def as_dict(self):
        return copy.deepcopy(self._data)

    def encode(self):
        """
        Serializes the notice into UTF-8 encoded JSON.
        """
        return json.dumps(self._data).encode('utf-8')


def get_notifier():
    return {
        'name': defaults.NOTIFIER_NAME,
        'url': defaults.NOTIFIER_URL,
        'version': badger.VERSION,
    }


def _error_section(description, config):
    def backtrace(frames):
        return relative_to_root(
            frames, config.root, defaults.PROJECT_ROOT_MARKER)

    error = {
        'class': description.class_name,
        'message': description.message,
        'backtrace': backtrace(description.backtrace),
        'causes': [
            {
                'class': cause.class_name,
                'message': cause.message,
                'backtrace': backtrace(cause.backtrace),
            }
            for cause in description.causal_chain
        ],
    }
    return error


def _request_section(config, context, params, session, cgi_data,
                     url, component, action):
    given = [v for v in (context, params, session, cgi_data,
                         url, component, action) if v is not None]
    if not given and not config.send_empty_request:
        return None

    request = {
        'context': merge_dicts(context),
        'params': merge_dicts(params),
        'session': merge_dicts(session),
        'cgi_data': merge_dicts(cgi_data),
    }
    if url is not None:
        request['url'] = url
    if component is not None:
        request['component'] = component
    if action is not None:
        request['action'] = action

    return SanitizeKeysProcessor(config).process(request)


def build_notice(description, config, context=None, params=None,
                 session=None, cgi_data=None, url=None, component=None,
                 action=None, tags=None, fingerprint=None, date=None):
    """
    Combines an :class:`~badger.errors.ErrorDescription` with the client
    configuration and optional request data into a :class:`Notice`.

    The ``request`` section is left out when none of ``context``,
    ``params``, ``session``, ``cgi_data``, ``url``, ``component`` or
    ``action`` is given, unless ``config.send_empty_request`` is set.

    :param description: the described error
    :param config: a :class:`~badger.conf.Config`
    :param context: mapping copied verbatim into ``request.context``
    :param tags: iterable of tag strings attached to the error
    :param fingerprint: custom grouping key for the error
    :param date: capture time, defaults to now (UTC)
    :raises BuildError: if ``config.api_key`` is missing or empty
    """
    if not getattr(config, 'api_key', None):
        raise BuildError('An API key is required to build a notice')

    error = _error_section(description, config)
    if tags:
        error['tags'] = sorted(set(to_text(tag) for tag in tags))
    if fingerprint is not None:
        error['fingerprint'] = fingerprint

    request = _request_section(config, context, params, session, cgi_data,
                               url, component, action)

    server = {
        'environment_name': config.environment_name,
        'hostname': config.hostname,
        'project_root': config.root,
        'time': date or datetime.now(timezone.utc),
        'pid': os.getpid(),
    }

    return Notice(get_notifier(), error, server, request)
