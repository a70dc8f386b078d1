import os
import traceback

from mock import Mock

from badger.utils.stacks import (
    get_backtrace, get_stack_info, normalize_backtrace, relative_to_root)


def make_frame(filename, name, hide=False):
    frame = Mock()
    frame.f_locals = {'__traceback_hide__': True} if hide else {'k': 'v'}
    frame.f_globals = {}
    frame.f_code.co_filename = filename
    frame.f_code.co_name = name
    return frame


class TestGetStackInfo(object):
    def test_frames(self):
        frames = [(make_frame('a.py', 'first'), 1), (make_frame('b.py', 'second'), 2)]
        assert get_stack_info(frames) == [
            {'file': 'a.py', 'number': 1, 'method': 'first'},
            {'file': 'b.py', 'number': 2, 'method': 'second'},
        ]

    def test_hidden_frames(self):
        frames = [(make_frame('a.py', 'first', hide=True), 1),
                  (make_frame('b.py', 'second'), 2)]
        assert [f['method'] for f in get_stack_info(frames)] == ['second']

    def test_frame_without_code(self):
        frame = Mock(spec=['f_locals', 'f_lineno'])
        frame.f_locals = {}
        frame.f_lineno = 7
        assert get_stack_info([frame]) == [
            {'file': '<unknown>', 'number': 7, 'method': '<unknown>'},
        ]


class TestGetBacktrace(object):
    def test_innermost_first(self):
        def fail():
            raise ValueError()

        try:
            fail()
        except ValueError as exc:
            backtrace = get_backtrace(exc.__traceback__)

        assert [f['method'] for f in backtrace] == ['fail', 'test_innermost_first']
        assert backtrace[0]['number'] < backtrace[1]['number']


class TestNormalizeBacktrace(object):
    def test_none(self):
        assert normalize_backtrace(None) == []

    def test_string_is_not_a_backtrace(self):
        assert normalize_backtrace('File "a.py", line 1') == []

    def test_records(self):
        summary = traceback.FrameSummary('c.py', 3, 'third')
        assert normalize_backtrace([
            {'file': 'a.py', 'line': 1, 'method': 'first'},
            ('b.py', 2),
            summary,
        ]) == [
            {'file': 'a.py', 'number': 1, 'method': 'first'},
            {'file': 'b.py', 'number': 2, 'method': '<unknown>'},
            {'file': 'c.py', 'number': 3, 'method': 'third'},
        ]


class TestRelativeToRoot(object):
    def test_rewrites_paths_under_root(self):
        root = os.path.join(os.sep, 'srv', 'app')
        frames = [
            {'file': os.path.join(root, 'views.py'), 'number': 1, 'method': 'a'},
            {'file': os.path.join(os.sep, 'srv', 'application', 'x.py'),
             'number': 2, 'method': 'b'},
        ]
        result = relative_to_root(frames, root + os.sep, '[PROJECT_ROOT]')
        assert result[0]['file'] == os.path.join('[PROJECT_ROOT]', 'views.py')
        assert result[1]['file'] == frames[1]['file']
        # input is left untouched
        assert frames[0]['file'] == os.path.join(root, 'views.py')

    def test_empty_root(self):
        frames = [{'file': '/a.py', 'number': 1, 'method': 'a'}]
        assert relative_to_root(frames, '', '[PROJECT_ROOT]') == frames
        assert relative_to_root(frames, os.sep, '[PROJECT_ROOT]') == frames
