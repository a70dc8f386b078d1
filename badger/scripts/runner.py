"""
badger.scripts.runner
~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import asyncio
import logging
import os
import sys
from optparse import OptionParser

from badger import Client, ConfigBuilder
from badger.exceptions import BadgerError
from badger.utils import json


def store_json(option, opt_str, value, parser):
    try:
        value = json.loads(value)
    except ValueError:
        print("Invalid JSON was used for option %s.  Received: %s" % (opt_str, value))
        sys.exit(1)
    setattr(parser.values, option.dest, value)


def get_loadavg():
    if hasattr(os, 'getloadavg'):
        return os.getloadavg()
    return None


def get_uid():
    try:
        import pwd
    except ImportError:
        return None
    return pwd.getpwuid(os.geteuid())[0]


class BadgerTestError(Exception):
    pass


async def send_test_message(client, options):
    config = client.config
    print("Client configuration:")
    for k in ('endpoint', 'environment_name', 'hostname', 'root', 'timeout'):
        print('  %-17s: %s' % (k, getattr(config, k)))
    print()

    if not config.is_active():
        print("Error: An API key must be set!")
        return False

    context = options.get('context') or {}
    context.setdefault('user', get_uid())
    context.setdefault('loadavg', get_loadavg())

    print('Sending a test notice...', end=' ')

    try:
        raise BadgerTestError('This is a test notice generated using ``badger test``')
    except BadgerTestError as exc:
        error = exc

    try:
        outcome = await client.notify(
            error,
            context=context,
            component='badger.scripts.runner',
            action='test',
            tags=options.get('tags') or [],
        )
    except BadgerError as e:
        print('error!')
        print('  %s' % (e,))
        return False
    finally:
        await client.close()

    print('success!')
    print('Notice ID was %r' % (outcome.id,))
    return True


def main(argv=None):
    root = logging.getLogger('honeybadger.errors')
    root.setLevel(logging.DEBUG)
    root.addHandler(logging.StreamHandler())

    parser = OptionParser(usage='%prog test [API_KEY]')
    parser.add_option("--context", action="callback", callback=store_json,
                      type="string", nargs=1, dest="context")
    parser.add_option("--tags", action="callback", callback=store_json,
                      type="string", nargs=1, dest="tags")
    (opts, args) = parser.parse_args(argv)

    if not args or args[0] != 'test':
        parser.print_usage()
        sys.exit(1)

    builder = ConfigBuilder.from_env(' '.join(args[1:]) or None)
    if not builder.api_key:
        print("Error: No configuration detected!")
        print("You must either pass an API key to the command, or set the "
              "HONEYBADGER_API_KEY environment variable.")
        sys.exit(1)

    client = Client(builder.build())
    if not asyncio.run(send_test_message(client, opts.__dict__)):
        sys.exit(1)
