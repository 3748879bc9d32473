# -*- coding: utf-8 -*-

from functools import partial
import logging

from .errors import PendingError, RejectionError
from .resolution import resolve_thenable
from .scheduler import get_default_scheduler
from .util import is_thenable

_logger = logging.getLogger(__name__)


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise is used for asynchronous computation. It contains a value not yet
    known when the Promise is created. It allows to set callbacks who will be
    called as soon as the result is known. It's a "promise" of a future value.

    The callbacks are never called directly: they are given to a scheduler,
    who executes them after the current work, in the order they have been
    registered. Promises returned by `then()` use the same scheduler as the
    Promise they come from.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor, scheduler=None, _name=None, _previous=None):
        """Constructor of the Promise.

        Generate the two callbacks for the executor, then call the `executor`.
        It means the executor will be fully executed before the the constructor
        returns.
        If the executor raises an exception, it's caught and the Promise is
        rejected with this exception (unless it's already settled).

        Args:
            executor (callable): Takes 2 callable arguments:
                The first one, `resolve()` should be called when the Promise
                is fulfilled (ie the tasks is done) and must accept the
                result's value as its only argument. If this value is a
                thenable, the Promise will follow its state.
                The second, `reject()`, should be called when an error
                occurs. Its argument should be an instance of `Exception`.
            scheduler (BaseScheduler, optional): scheduler running the
                callbacks. Default to the module default scheduler.
            _name (str): if set, name used when converted to text.
        """

        self._state = self.PENDING
        self._value = None
        self._reason = None
        if scheduler is None:
            scheduler = get_default_scheduler()
        self._scheduler = scheduler
        self._name = _name or getattr(executor, '__name__', '???')
        self._previous = _previous

        self._callbacks = []
        self._errbacks = []

        def fulfill(value):
            if self._state != self.PENDING:
                _logger.debug('Try to fulfill Promise %r already settled. '
                              'New result will be ignored: %r', self, value)
                return
            self._value = value
            self._state = self.FULFILLED

            callbacks = self._callbacks

            # Free the references
            self._callbacks = None
            self._errbacks = None

            for callback in callbacks:
                self._scheduler.schedule(callback, value)

        def reject(reason):
            if self._state != self.PENDING:
                _logger.debug('Try to reject Promise %r already settled. '
                              'New error will be ignored: %r', self, reason)
                return
            if not isinstance(reason, BaseException):
                # The value is chained like any reason, but result() will
                # raise a RejectionError wrapping it.
                _logger.warning('Promise %r rejected with non-exception '
                                'value: %r', self, reason)
            self._reason = reason
            self._state = self.REJECTED

            errbacks = self._errbacks

            # Free the references
            self._callbacks = None
            self._errbacks = None

            for errback in errbacks:
                self._scheduler.schedule(errback, reason)

        def resolve(value):
            if self._state != self.PENDING:
                _logger.debug('Try to resolve Promise %r already settled. '
                              'New value will be ignored: %r', self, value)
                return
            resolve_thenable(self, value, fulfill, reject)

        try:
            executor(resolve, reject)
        except Exception as error:
            reject(error)

    @property
    def state(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        return self._state

    @property
    def value(self):
        """Value of the fulfilled Promise, or None."""
        return self._value

    @property
    def reason(self):
        """Reason of the rejected Promise, or None."""
        return self._reason

    def is_pending(self):
        return self._state == self.PENDING

    def is_fulfilled(self):
        return self._state == self.FULFILLED

    def is_rejected(self):
        return self._state == self.REJECTED

    def result(self):
        """Run the scheduler, then returns the result of the Promise.

        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            PendingError: if the promise is still pending once the scheduler
                has executed all its waiting callbacks.
            RejectionError: if the promise is rejected with a non-exception
                value.
            *: If the promise is rejected, the rejection cause is raised.
        """
        self._drain()

        if self._state == self.REJECTED:
            if isinstance(self._reason, BaseException):
                raise self._reason
            raise RejectionError(self._reason)
        return self._value

    def exception(self):
        """Run the scheduler, then returns the error of the Promise.

        Returns:
            *: the reason of the rejection of the Promise.
            None: if the promise is fulfilled.
        Raises:
            PendingError: if the promise is still pending once the scheduler
                has executed all its waiting callbacks.
        """
        self._drain()
        return self._reason

    def _drain(self):
        if self._state == self.PENDING:
            self._scheduler.run()
        if self._state == self.PENDING:
            raise PendingError('%r is still pending' % self)

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        If the promise is fulfilled, the `on_fulfilled` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can returns:
        - A value: the new promise will be fulfilled with this value.
        - Another Promise, or any object with a `then` method: when fulfilled
            or rejected, will transfer its status (state and result/error) to
            the Promise returned by this method.

        If a callback is not defined (or is not callable), the state of the
        "self promise" is transferred at the new promise (the state and the
        value/error).

        The callbacks are never executed before `then()` returns, even if the
        Promise is already settled.

        Args:
            on_fulfilled (callable, optional):  This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                exception raised by the original promise as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """
        if not callable(on_fulfilled):
            on_fulfilled = None
        if not callable(on_rejected):
            on_rejected = None

        def deferred_chained_promise(resolve, reject):

            def callback(value):
                if on_fulfilled is None:
                    return resolve(value)
                try:
                    new_value = on_fulfilled(value)
                except Exception as error:
                    return reject(error)
                resolve(new_value)

            def errback(reason):
                if on_rejected is None:
                    return reject(reason)
                try:
                    new_value = on_rejected(reason)
                except Exception as error:
                    return reject(error)
                resolve(new_value)

            self._add_callback(callback)
            self._add_errback(errback)

        if not on_rejected:
            name = '%s' % getattr(on_fulfilled, '__name__', '???')
        elif not on_fulfilled:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))
        return Promise(deferred_chained_promise, scheduler=self._scheduler,
                       _name=name, _previous=self)

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): Must take an argument instance of Exception
                (or one of its subclass). Will be called if `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    def finally_(self, on_finally):
        """Create a new promise calling `on_finally()` when `self` is settled.

        `on_finally` takes no argument and is called in both cases. Its return
        value is ignored, but if it raises, or returns a thenable who
        rejects, the new Promise is rejected with this error. Otherwise, the
        new Promise is settled like `self` (same value, or same reason),
        once the thenable returned by `on_finally` (if any) is settled.

        Args:
            on_finally (callable): callback without argument.
        Returns:
            Promise<*>: new Promise chained to `self`.
        """
        if not callable(on_finally):
            return self.then(on_finally, on_finally)

        scheduler = self._scheduler

        def on_fulfilled(value):
            return Promise.resolve(on_finally(), scheduler=scheduler) \
                .then(lambda _: value)

        def on_rejected(reason):
            return Promise.resolve(on_finally(), scheduler=scheduler) \
                .then(lambda _: Promise.reject(reason, scheduler=scheduler))

        on_fulfilled.__name__ = on_rejected.__name__ = \
            'finally %s' % getattr(on_finally, '__name__', '???')
        return self.then(on_fulfilled, on_rejected)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via then() or catch()), the
        default behavior is to do nothing, and thus, errors are silently
        ignored.
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(reason):
            if isinstance(reason, BaseException):
                _logger.error('[SAFEGUARD] %r', self, exc_info=reason)
            else:
                _logger.error('[SAFEGUARD] %r rejected with %r', self, reason)

        self._add_errback(guard)

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        states = {self.PENDING: 'P', self.FULFILLED: 'F', self.REJECTED: 'R'}

        parts = []
        promise = self
        while promise is not None:
            parts.append('%s %s' % (promise._name, states[promise._state]))
            promise = promise._previous
        return ' -> '.join(reversed(parts))

    @classmethod
    def resolve(cls, value, scheduler=None):
        """Create a promise who resolves the selected value.

        Args:
            value: result of the promise. If it's a Promise, it's returned as
                is. If it's another kind of thenable, the new Promise will
                follow its state.
            scheduler (BaseScheduler, optional): scheduler of the new Promise.
        Returns:
            Promise: new Promise, fulfilled with the value passed in
                parameter, or following the thenable.
        """
        if isinstance(value, cls):
            return value
        return cls(lambda ok, error: ok(value), scheduler=scheduler,
                   _name='RESOLVE')

    @classmethod
    def reject(cls, reason, scheduler=None):
        """Create a Promise rejected for the reason specified.

        The reason is never unwrapped, even if it's a thenable.

        Args:
            reason: Exception set to the Promise
            scheduler (BaseScheduler, optional): scheduler of the new Promise.
        Returns:
            Promise: new Promise already rejected.
        """
        return cls(lambda ok, error: error(reason), scheduler=scheduler,
                   _name='REJECT')

    @classmethod
    def all(cls, promises, scheduler=None):
        """Create a Promise who wait a list of promises to be all fulfilled.

        The resulting Promise resolve when all of the promises in the list are
        resolved, and returns a list of all the resulting values, keeping the
        order of the promise list.
        If a promise is rejected, then the resulting promise is rejected with
        the same reason, and all results from other promises are ignored.

        Args:
            promises (iterable): promises, thenables or plain values. A plain
                value is considered as an already fulfilled promise.
            scheduler (BaseScheduler, optional): scheduler of the new Promise.
                By default, the scheduler of the first Promise of the list.
        Returns:
            Promise<list>: resulting promise, fulfilled when all promises are
                fulfilled, or rejected when one of the promises is rejected.
        """
        promises = list(promises)
        scheduler = cls._source_scheduler(promises, scheduler)
        has_error = [False]

        _remaining_tasks = [len(promises)]
        results = [None] * len(promises)

        def executor(resolve, reject):
            if _remaining_tasks[0] == 0:
                return resolve(results)

            def resolve_one_promise(index, value):
                if has_error[0]:
                    return
                results[index] = value
                _remaining_tasks[0] -= 1
                if _remaining_tasks[0] == 0:
                    resolve(results)

            def reject_one_promise(reason):
                if has_error[0]:
                    return
                has_error[0] = True
                reject(reason)

            for index, p in enumerate(promises):
                promise = cls._adopt(p, scheduler)
                if promise is None:
                    resolve_one_promise(index, p)
                else:
                    promise.then(partial(resolve_one_promise, index),
                                 reject_one_promise)

        return cls(executor, scheduler=scheduler, _name='ALL')

    @classmethod
    def race(cls, promises, scheduler=None):
        """Resolve or reject with the fastest Promise.

        Returns a new Promise, settled as soon as the one of the given
        promises is settled. Result value or rejection reason of the finished
        promise are transmitted. A plain value is considered as an already
        settled promise, and so wins against all pending promises.
        All other Promise result's will be ignored.

        Args:
            promises (iterable): promises, thenables or plain values.
            scheduler (BaseScheduler, optional): scheduler of the new Promise.
                By default, the scheduler of the first Promise of the list.
        Returns:
            Promise: a promise. If `promises` is empty, it stays pending
                forever.
        """
        promises = list(promises)
        scheduler = cls._source_scheduler(promises, scheduler)
        is_resolved = [False]

        def executor(resolve, reject):
            def resolve_once(result):
                if is_resolved[0]:
                    return
                is_resolved[0] = True
                resolve(result)

            def reject_once(reason):
                if is_resolved[0]:
                    return
                is_resolved[0] = True
                reject(reason)

            for p in promises:
                promise = cls._adopt(p, scheduler)
                if promise is None:
                    resolve_once(p)
                else:
                    promise.then(resolve_once, reject_once)

        return cls(executor, scheduler=scheduler, _name='RACE')

    @classmethod
    def all_settled(cls, promises, scheduler=None):
        """Create a Promise who wait a list of promises to be all settled.

        The resulting Promise is never rejected. It's fulfilled with a list of
        dict describing the outcome of each promise, keeping the order of the
        promise list:
        - `{'status': 'fulfilled', 'value': value}`
        - `{'status': 'rejected', 'reason': reason}`

        Args:
            promises (iterable): promises, thenables or plain values. A plain
                value is considered as an already fulfilled promise.
            scheduler (BaseScheduler, optional): scheduler of the new Promise.
                By default, the scheduler of the first Promise of the list.
        Returns:
            Promise<list>: fulfilled when all promises are settled.
        """
        promises = list(promises)
        scheduler = cls._source_scheduler(promises, scheduler)

        _remaining_tasks = [len(promises)]
        results = [None] * len(promises)

        def executor(resolve, reject):
            if _remaining_tasks[0] == 0:
                return resolve(results)

            def settle_one_promise(index, outcome):
                results[index] = outcome
                _remaining_tasks[0] -= 1
                if _remaining_tasks[0] == 0:
                    resolve(results)

            def on_fulfilled(index, value):
                settle_one_promise(index, {'status': cls.FULFILLED,
                                           'value': value})

            def on_rejected(index, reason):
                settle_one_promise(index, {'status': cls.REJECTED,
                                           'reason': reason})

            for index, p in enumerate(promises):
                promise = cls._adopt(p, scheduler)
                if promise is None:
                    on_fulfilled(index, p)
                else:
                    promise.then(partial(on_fulfilled, index),
                                 partial(on_rejected, index))

        return cls(executor, scheduler=scheduler, _name='ALL_SETTLED')

    @classmethod
    def _adopt(cls, value, scheduler):
        """Promise following an input of a combinator.

        Returns:
            Promise: None if `value` is a plain value. If reading its `then`
                attribute raises, a Promise rejected with the error.
        """
        try:
            if not is_thenable(value):
                return None
        except Exception as error:
            return cls.reject(error, scheduler=scheduler)
        return cls.resolve(value, scheduler=scheduler)

    @staticmethod
    def _source_scheduler(promises, scheduler):
        # Without explicit scheduler, use the one of the first input Promise.
        if scheduler is None:
            for p in promises:
                if isinstance(p, Promise):
                    return p._scheduler
        return scheduler

    def _add_callback(self, callback):
        if self._state == self.PENDING:
            self._callbacks.append(callback)
        elif self._state == self.FULFILLED:
            self._scheduler.schedule(callback, self._value)

    def _add_errback(self, errback):
        if self._state == self.PENDING:
            self._errbacks.append(errback)
        elif self._state == self.REJECTED:
            self._scheduler.schedule(errback, self._reason)
