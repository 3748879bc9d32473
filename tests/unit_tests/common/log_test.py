#!/usr/bin/env python
# -*- coding: utf-8 -*-

import logging
import sys

import aplus
from aplus.common.log import ColoredFormatter, Context, _excepthook, reset, \
    set_debug_mode, set_logs_level

colorFormater = ColoredFormatter()


class TestLogFormating(object):

    def test_colorize_DEBUG(self):
        assert colorFormater._colorize("plop", "DEBUG") == \
            ColoredFormatter._colors['DEBUG'] + "plop" + \
            ColoredFormatter._colors['RESET']

    def test_colorize_NAME(self):
        assert colorFormater._colorize("plop", "NAME") == \
            ColoredFormatter._colors['NAME'] + "plop" + \
            ColoredFormatter._colors['RESET']

    def test_colorize_unknown_color(self):
        assert colorFormater._colorize("plop", "FOO") == \
            "plop" + ColoredFormatter._colors['RESET']

    def test_format_does_not_alter_record(self):
        record = logging.LogRecord('aplus.test', logging.INFO, __file__, 1,
                                   'message', None, None)
        formatter = ColoredFormatter(
            fmt='%(levelname)s %(name)s %(message)s')
        result = formatter.format(record)

        assert ColoredFormatter._colors['INFO'] in result
        assert record.levelname == 'INFO'
        assert record.name == 'aplus.test'

    def test_format_exception(self):
        try:
            raise ValueError('bad value')
        except ValueError:
            ei = sys.exc_info()

        result = colorFormater.formatException(ei)
        assert ColoredFormatter._colors['EXCEPTION_NAME'] + 'ValueError' \
            in result
        assert 'bad value' in result


class TestLogLevels(object):

    def teardown_method(self, method):
        logging.getLogger('aplus').setLevel(logging.NOTSET)
        logging.getLogger('aplus.promise').setLevel(logging.NOTSET)

    def test_set_debug_mode(self):
        set_debug_mode(True)
        assert logging.getLogger('aplus').level == logging.DEBUG
        set_debug_mode(False)
        assert logging.getLogger('aplus').level == logging.WARNING

    def test_set_logs_level(self):
        set_logs_level({'aplus': 'info', 'aplus.promise': 10})
        assert logging.getLogger('aplus').level == logging.INFO
        assert logging.getLogger('aplus.promise').level == logging.DEBUG

    def test_set_invalid_logs_level(self, caplog):
        set_logs_level({'aplus': 'not a level'})
        assert 'Invalid log level' in caplog.text
        assert logging.getLogger('aplus').level == logging.NOTSET

    def test_configure(self, tmpdir):
        path = tmpdir.join('aplus.ini')
        path.write('[config]\ndebug_mode = true\n'
                   'log_levels = aplus.promise=error\n')

        aplus.configure(str(path))

        assert logging.getLogger('aplus').level == logging.DEBUG
        assert logging.getLogger('aplus.promise').level == logging.ERROR


class TestContext(object):

    def test_context_installs_and_removes_handlers(self):
        root_logger = logging.getLogger()
        nb_handlers = len(root_logger.handlers)
        previous_hook = sys.excepthook

        with Context():
            assert len(root_logger.handlers) == nb_handlers + 1
            assert sys.excepthook is previous_hook

        assert len(root_logger.handlers) == nb_handlers
        assert sys.excepthook is previous_hook

    def test_context_logging_uncaught_exceptions(self):
        previous_hook = sys.excepthook

        with Context(log_uncaught=True):
            assert sys.excepthook is _excepthook

        assert sys.excepthook is previous_hook

    def test_excepthook_logs_exception(self, caplog):
        try:
            raise KeyError('uncaught')
        except KeyError:
            _excepthook(*sys.exc_info())

        assert 'Uncaught exception' in caplog.text

    def test_reset(self):
        root_logger = logging.getLogger()
        handler = logging.NullHandler()
        root_logger.addHandler(handler)
        reset()
        assert handler not in root_logger.handlers
