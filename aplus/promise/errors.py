# -*- coding: utf-8 -*-


class PromiseError(Exception):
    """Base class of the errors raised by the promise module."""
    pass


class ChainingCycleError(PromiseError, TypeError):
    """A Promise has been resolved with itself.

    Following such a chain would never end, so the Promise is rejected with
    this error instead.
    """

    def __init__(self, promise=None):
        self.promise = promise
        PromiseError.__init__(self, 'Chaining cycle detected for %r'
                              % (promise,))


class PendingError(PromiseError):
    """The Promise is still pending after its scheduler has been drained."""
    pass


class RejectionError(PromiseError):
    """A Promise has been rejected with a value who is not an exception.

    Such a value can't be raised as is. It's stored in `reason`.
    """

    def __init__(self, reason):
        self.reason = reason
        PromiseError.__init__(self, reason)

    def __str__(self):
        return repr(self.reason)
