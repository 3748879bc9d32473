# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

from .common import config
from .common import log
from .promise import (AsyncioScheduler, ChainingCycleError, Deferred,
                      PendingError, Promise, PromiseError, RejectionError,
                      Scheduler, deferred, is_thenable, wrap_promise)


def configure(file_path=None):
    """Load the config file and apply the log settings it contains.

    Args:
        file_path (str, optional): path of the config file. By default, the
            file 'aplus.ini' in the user config directory.
    """
    config.load(file_path)
    log.set_debug_mode(config.get('debug_mode'))
    log.set_logs_level(config.get('log_levels'))


__all__ = ['configure', 'AsyncioScheduler', 'ChainingCycleError', 'Deferred',
           'PendingError', 'Promise', 'PromiseError', 'RejectionError',
           'Scheduler', 'deferred', 'is_thenable', 'wrap_promise']
