"""
badger.utils.stacks
~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import os
from collections.abc import Mapping

from badger.utils.encoding import to_text


def _getitem_from_frame(f_locals, key, default=None):
    """
    f_locals is not guaranteed to have .get(), but it will always
    support __getitem__. Even if it doesnt, we return ``default``.
    """
    try:
        return f_locals[key]
    except Exception:
        return default


def iter_traceback_frames(tb):
    """
    Given a traceback object, it will iterate over all
    frames that do not contain the ``__traceback_hide__``
    local variable.
    """
    while tb:
        # support for __traceback_hide__ which is used by a few libraries
        # to hide internal frames.
        f_locals = getattr(tb.tb_frame, 'f_locals', {})
        if not _getitem_from_frame(f_locals, '__traceback_hide__'):
            yield tb.tb_frame, getattr(tb, 'tb_lineno', None)
        tb = tb.tb_next


def get_stack_info(frames):
    """
    Given a list of ``(frame, lineno)`` pairs, returns a list of
    backtrace lines that are JSON-ready, in the same order.

    We have to be careful here as certain implementations of the
    _Frame class do not contain the nescesary data to lookup all
    of the information we want.
    """
    __traceback_hide__ = True  # NOQA

    results = []
    for frame_info in frames:
        if isinstance(frame_info, (list, tuple)):
            frame, lineno = frame_info
        else:
            frame = frame_info
            lineno = getattr(frame_info, 'f_lineno', None)

        f_locals = getattr(frame, 'f_locals', {})
        if _getitem_from_frame(f_locals, '__traceback_hide__'):
            continue

        f_code = getattr(frame, 'f_code', None)
        if f_code:
            abs_path = f_code.co_filename
            function = f_code.co_name
        else:
            abs_path = None
            function = None

        results.append({
            'file': abs_path or '<unknown>',
            'number': lineno,
            'method': function or '<unknown>',
        })
    return results


def get_backtrace(tb):
    """
    Returns the backtrace lines of a traceback object, innermost
    frame first.
    """
    frames = get_stack_info(iter_traceback_frames(tb))
    frames.reverse()
    return frames


def _frame_from_record(record):
    if isinstance(record, Mapping):
        return {
            'file': to_text(record.get('file') or '<unknown>'),
            'number': record.get('number', record.get('line')),
            'method': to_text(record.get('method') or '<unknown>'),
        }

    # traceback.FrameSummary and friends
    if hasattr(record, 'filename') and hasattr(record, 'lineno'):
        return {
            'file': to_text(record.filename or '<unknown>'),
            'number': record.lineno,
            'method': to_text(getattr(record, 'name', None) or '<unknown>'),
        }

    if isinstance(record, (list, tuple)):
        # (file, line, method)
        values = list(record[:3]) + [None] * (3 - len(record[:3]))
        filename, lineno, method = values
        return {
            'file': to_text(filename or '<unknown>'),
            'number': lineno,
            'method': to_text(method or '<unknown>'),
        }

    return {
        'file': to_text(record),
        'number': None,
        'method': '<unknown>',
    }


def normalize_backtrace(backtrace):
    """
    Coerces whatever an error offers as its trace into a list of
    backtrace lines. Accepts traceback objects, in which case the order
    is flipped to innermost first, or an iterable of frame records
    (mappings, ``FrameSummary`` objects or ``(file, line, method)``
    tuples) which are assumed to already be innermost first.
    """
    if backtrace is None:
        return []
    if hasattr(backtrace, 'tb_frame'):
        return get_backtrace(backtrace)
    if isinstance(backtrace, (str, bytes)):
        return []
    try:
        records = list(backtrace)
    except TypeError:
        return []
    return [_frame_from_record(record) for record in records]


def relative_to_root(frames, root, marker):
    """
    Rewrites every frame path below ``root`` so that it starts with
    ``marker`` instead.
    """
    if not root:
        return frames

    root = root.rstrip(os.sep)
    if not root:
        return frames
    prefix = root + os.sep

    results = []
    for frame in frames:
        path = frame['file']
        if path == root or path.startswith(prefix):
            frame = dict(frame, file=marker + path[len(root):])
        results.append(frame)
    return results
