"""
badger.conf.defaults
~~~~~~~~~~~~~~~~~~~~

Represents the default values for all client settings.

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import socket

ENDPOINT = 'https://api.honeybadger.io'

NOTICES_PATH = '/v1/notices'

# seconds
TIMEOUT = 5

# Not all environments have access to socket module, for example Google App Engine
NAME = socket.gethostname() if hasattr(socket, 'gethostname') else ''

# Resolved to the working directory when a Config is built.
ROOT = None

ENVIRONMENT = ''

# The maximum number of causes walked when describing an error.
MAX_CAUSES = 10

SEND_EMPTY_REQUEST = False

FILTER_KEYS = (
    'password',
    'password_confirmation',
    'credit_card',
    'secret',
    'authorization',
    'api_key',
    'access_token',
)

PROJECT_ROOT_MARKER = '[PROJECT_ROOT]'

NOTIFIER_NAME = 'badger-python'
NOTIFIER_URL = 'https://pypi.org/project/badger-notifier/'

API_KEY_HEADER = 'X-API-Key'
