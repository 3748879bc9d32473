# -*- coding: utf-8 -*-

from .promise import Promise


class Deferred(object):
    """

    A Deferred is the "creator" side of an async task, whereas a Promise
    represents the asynchronous value from the "consumer" side.

    It gives access to the `resolve` and `reject` functions of its Promise,
    outside of any executor. Mostly useful for tests and to interface
    callback-based code.

    Attributes:
        promise (Promise): the Promise associated to the Deferred.
        resolve (function)
        reject (function)
    """

    def __init__(self, *args, **kwargs):
        self.promise = Promise(self._executor, *args, **kwargs)

    def _executor(self, resolve, reject):
        self.resolve = resolve
        self.reject = reject


def deferred(scheduler=None):
    """Create a new pending Promise, and returns it with its capabilities.

    Args:
        scheduler (BaseScheduler, optional): scheduler of the Promise.
    Returns:
        Deferred: with the attributes `promise`, `resolve` and `reject`.
    """
    return Deferred(scheduler=scheduler, _name='DEFERRED')
