"""
badger
~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

__all__ = ('VERSION', 'Accepted', 'Client', 'Config', 'ConfigBuilder', 'describe',
           'register_adapter')

VERSION = '1.0.0'

from badger.base import *  # NOQA
from badger.conf import *  # NOQA
from badger.errors import describe, register_adapter  # NOQA
