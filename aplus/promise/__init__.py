# -*- coding: utf-8 -*-

from .decorators import wrap_promise
from .deferred import Deferred, deferred
from .errors import (ChainingCycleError, PendingError, PromiseError,
                     RejectionError)
from .promise import Promise
from .resolution import resolve_thenable
from .scheduler import (AsyncioScheduler, BaseScheduler, Scheduler,
                        get_default_scheduler, set_default_scheduler)
from .util import is_thenable

__all__ = ['is_thenable', 'resolve_thenable', 'ChainingCycleError',
           'PendingError', 'PromiseError', 'RejectionError', 'Promise',
           'Deferred', 'deferred', 'wrap_promise', 'AsyncioScheduler',
           'BaseScheduler', 'Scheduler', 'get_default_scheduler',
           'set_default_scheduler']
