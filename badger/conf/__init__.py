"""
badger.conf
~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging
import os

from badger.conf import defaults

__all__ = ('Config', 'ConfigBuilder')

logger = logging.getLogger('badger.conf')


class Config(object):
    """
    Immutable client configuration, shared by every notify call.

    >>> config = Config('ffffff', environment_name='production')
    >>> config.notices_url
    'https://api.honeybadger.io/v1/notices'
    """
    __slots__ = ('api_key', 'endpoint', 'environment_name', 'hostname',
                 'root', 'timeout', 'max_causes', 'send_empty_request',
                 'filter_keys')

    def __init__(self, api_key, endpoint=None, environment_name=None,
                 hostname=None, root=None, timeout=None, max_causes=None,
                 send_empty_request=None, filter_keys=None):
        if root is None:
            root = defaults.ROOT or os.getcwd()
        if timeout is None:
            timeout = defaults.TIMEOUT
        if max_causes is None:
            max_causes = defaults.MAX_CAUSES
        if send_empty_request is None:
            send_empty_request = defaults.SEND_EMPTY_REQUEST
        if filter_keys is None:
            filter_keys = defaults.FILTER_KEYS

        values = {
            'api_key': api_key or '',
            'endpoint': (endpoint or defaults.ENDPOINT).rstrip('/'),
            'environment_name': environment_name or defaults.ENVIRONMENT,
            'hostname': hostname or defaults.NAME,
            'root': root,
            'timeout': float(timeout),
            'max_causes': int(max_causes),
            'send_empty_request': bool(send_empty_request),
            'filter_keys': frozenset(k.lower() for k in filter_keys),
        }
        for key, value in values.items():
            object.__setattr__(self, key, value)

    def __setattr__(self, key, value):
        raise AttributeError('Config is read-only')

    def __delattr__(self, key):
        raise AttributeError('Config is read-only')

    def __repr__(self):
        # never leak the key itself
        return '<%s: endpoint=%r environment_name=%r hostname=%r>' % (
            type(self).__name__, self.endpoint, self.environment_name,
            self.hostname)

    @property
    def notices_url(self):
        return self.endpoint + defaults.NOTICES_PATH

    def is_active(self):
        return bool(self.api_key)


class ConfigBuilder(object):
    """
    Collects options for a :class:`Config`.

    >>> config = ConfigBuilder('ffffff').with_env('production').build()

    Options not given fall back to ``badger.conf.defaults`` when
    :meth:`build` is called.
    """

    def __init__(self, api_key):
        self.api_key = api_key
        self.options = {}

    @classmethod
    def from_env(cls, api_key=None, environ=None):
        """
        Seeds a builder from the process environment:

        - ``HONEYBADGER_API_KEY`` - used when ``api_key`` is not given
        - ``HONEYBADGER_ROOT`` - project root
        - ``ENV`` - environment name
        - ``HOSTNAME`` - host name
        - ``HONEYBADGER_ENDPOINT`` - endpoint override
        - ``HONEYBADGER_TIMEOUT`` - request timeout, in seconds
        """
        if environ is None:
            environ = os.environ

        builder = cls(api_key or environ.get('HONEYBADGER_API_KEY', ''))
        if environ.get('HONEYBADGER_ROOT'):
            builder.with_root(environ['HONEYBADGER_ROOT'])
        if environ.get('ENV'):
            builder.with_env(environ['ENV'])
        if environ.get('HOSTNAME'):
            builder.with_hostname(environ['HOSTNAME'])
        if environ.get('HONEYBADGER_ENDPOINT'):
            builder.with_endpoint(environ['HONEYBADGER_ENDPOINT'])
        if environ.get('HONEYBADGER_TIMEOUT'):
            try:
                builder.with_timeout(float(environ['HONEYBADGER_TIMEOUT']))
            except ValueError:
                logger.debug('Ignoring invalid HONEYBADGER_TIMEOUT: %r',
                             environ['HONEYBADGER_TIMEOUT'])
        return builder

    def with_root(self, project_root):
        self.options['root'] = project_root
        return self

    def with_env(self, environment):
        self.options['environment_name'] = environment
        return self

    def with_hostname(self, hostname):
        self.options['hostname'] = hostname
        return self

    def with_endpoint(self, endpoint):
        self.options['endpoint'] = endpoint
        return self

    def with_timeout(self, timeout):
        """``timeout`` is a number of seconds or a ``timedelta``."""
        if hasattr(timeout, 'total_seconds'):
            timeout = timeout.total_seconds()
        self.options['timeout'] = timeout
        return self

    def with_max_causes(self, max_causes):
        self.options['max_causes'] = max_causes
        return self

    def with_send_empty_request(self, value=True):
        self.options['send_empty_request'] = value
        return self

    def with_filter_keys(self, keys):
        self.options['filter_keys'] = tuple(keys)
        return self

    def build(self):
        return Config(self.api_key, **self.options)
