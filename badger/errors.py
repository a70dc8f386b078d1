"""
badger.errors
~~~~~~~~~~~~~

Turns whatever the application considers an error into an
:class:`ErrorDescription`.

There is no base class an error has to inherit from. Anything offering

- ``message``: a string, or a callable returning one
- ``cause`` (optional): the underlying error, or a callable returning it
- ``backtrace`` (optional): a traceback object or an iterable of frame
  records, innermost first
- ``class_name`` (optional): overrides the type name

can be described. Exceptions, ``sys.exc_info()`` tuples and plain strings
are handled out of the box; other third-party types are supported by
registering an adapter:

>>> def describe_grpc(error):
>>>     return ErrorInfo(
>>>         class_name='RpcError.%s' % error.code().name,
>>>         message=error.details(),
>>>         backtrace=error.__traceback__,
>>>         cause=error.__cause__,
>>>     )
>>> register_adapter(grpc.RpcError, describe_grpc)

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
from collections import namedtuple

from badger.conf import defaults
from badger.exceptions import DuplicateAdapter
from badger.utils.encoding import to_text
from badger.utils.stacks import normalize_backtrace

__all__ = ('ErrorInfo', 'ErrorDescription', 'AdapterRegistry',
           'register_adapter', 'describe')

ErrorInfo = namedtuple('ErrorInfo', 'class_name message backtrace cause')
ErrorInfo.__new__.__defaults__ = (None, None)


class ErrorDescription(object):
    __slots__ = ('class_name', 'message', 'backtrace', 'causal_chain')

    def __init__(self, class_name, message, backtrace=None, causal_chain=None):
        self.class_name = class_name
        self.message = message
        self.backtrace = backtrace or []
        self.causal_chain = causal_chain or []

    def __repr__(self):
        return '<%s: %s: %s>' % (type(self).__name__, self.class_name,
                                 self.message)

    def as_dict(self):
        return {
            'class': self.class_name,
            'message': self.message,
            'backtrace': self.backtrace,
        }


def _call_or_get(obj, name):
    value = getattr(obj, name, None)
    if callable(value):
        try:
            value = value()
        except TypeError:
            # not a zero-argument accessor
            return None
    return value


def adapt_exception(error):
    cause = error.__cause__
    if cause is None and not error.__suppress_context__:
        cause = error.__context__
    return ErrorInfo(
        class_name=type(error).__name__,
        message=to_text(error),
        backtrace=error.__traceback__,
        cause=cause,
    )


def adapt_exc_info(exc_info):
    exc_type, exc_value, exc_traceback = exc_info
    if exc_value is None:
        return ErrorInfo(
            class_name=getattr(exc_type, '__name__', None) or 'Error',
            message='',
            backtrace=exc_traceback,
        )
    info = adapt_exception(exc_value)
    return info._replace(backtrace=exc_traceback or info.backtrace)


def adapt_string(message):
    return ErrorInfo(class_name='Error', message=message)


def adapt_object(error):
    """
    Fallback adapter, reads the capability attributes off any object.
    """
    message = _call_or_get(error, 'message')
    if message is None:
        message = error
    cause = _call_or_get(error, 'cause')
    if cause is None:
        cause = getattr(error, '__cause__', None)
    return ErrorInfo(
        class_name=to_text(_call_or_get(error, 'class_name') or type(error).__name__),
        message=to_text(message),
        backtrace=_call_or_get(error, 'backtrace'),
        cause=cause,
    )


class AdapterRegistry(object):
    def __init__(self, adapters=None):
        self._adapters = {}
        if adapters:
            for cls, func in adapters:
                self.register_adapter(cls, func)

    def register_adapter(self, cls, func):
        """
        It is possible to inject new adapters at runtime
        """
        if cls in self._adapters:
            raise DuplicateAdapter('An adapter for %r is already registered' % (cls,))
        self._adapters[cls] = func

    def unregister_adapter(self, cls):
        self._adapters.pop(cls, None)

    def get_adapter(self, error):
        if isinstance(error, tuple) and len(error) == 3 and isinstance(error[0], type):
            return adapt_exc_info
        for cls in type(error).__mro__:
            if cls in self._adapters:
                return self._adapters[cls]
        return adapt_object

    def adapt(self, error):
        info = self.get_adapter(error)(error)
        return ErrorInfo(
            class_name=to_text(info.class_name) or type(error).__name__,
            message=to_text(info.message) if info.message is not None else '',
            backtrace=normalize_backtrace(info.backtrace),
            cause=info.cause,
        )

    def describe(self, error, max_causes=defaults.MAX_CAUSES):
        """
        Builds the description of ``error`` and of up to ``max_causes`` of
        its causes. The walk stops early on an error it has already
        visited, so cyclic cause graphs are truncated rather than
        followed.
        """
        info = self.adapt(error)
        subject = error
        if self.get_adapter(error) is adapt_exc_info and error[1] is not None:
            subject = error[1]
        # hold references so ids stay unique for the duration of the walk
        visited = [subject]
        seen = set([id(subject)])

        chain = []
        cause = info.cause
        depth = 0
        while cause is not None and depth < max_causes:
            if id(cause) in seen:
                break
            seen.add(id(cause))
            visited.append(cause)
            cause_info = self.adapt(cause)
            chain.append(ErrorDescription(
                cause_info.class_name, cause_info.message, cause_info.backtrace))
            cause = cause_info.cause
            depth += 1

        return ErrorDescription(info.class_name, info.message, info.backtrace, chain)


default_adapters = [
    (BaseException, adapt_exception),
    (str, adapt_string),
]

registry = AdapterRegistry(adapters=default_adapters)


def register_adapter(cls, func):
    registry.register_adapter(cls, func)


def describe(error, max_causes=defaults.MAX_CAUSES):
    return registry.describe(error, max_causes=max_causes)
