"""
badger.transport
~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from badger.transport.base import *  # NOQA
from badger.transport.aiohttp import *  # NOQA
