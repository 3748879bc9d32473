# -*- coding: utf-8 -*-

"""Deferred-execution queues used to run the Promise reactions.

A reaction (a callback registered with `Promise.then()`) is never executed in
the call stack who registered or triggered it. Instead, it's given to a
scheduler, who runs it later, in FIFO order.

Two schedulers are available:
- `Scheduler` stores the callbacks in a queue. Nothing happens until someone
  calls `run()`, which executes the callbacks until the queue is empty.
- `AsyncioScheduler` delegates to `loop.call_soon()` of an asyncio event loop.

The default scheduler, used by promises created without an explicit one, is
a `Scheduler` instance. It can be replaced with `set_default_scheduler()`.
"""

import asyncio
from collections import deque
import logging

from ..common import config

_logger = logging.getLogger(__name__)


class BaseScheduler(object):
    """Interface of the deferred-execution queues."""

    def schedule(self, callback, *args):
        """Register a callback to be executed after the current work.

        Args:
            callback (callable): function to call later.
            *args: arguments passed to the callback.
        """
        raise NotImplementedError()

    def run(self, max_iterations=None):
        """Execute synchronously the callbacks waiting in the queue, if any.

        Schedulers who rely on an external loop can't be drained on demand:
        the default implementation does nothing.

        Returns:
            int: number of callbacks executed.
        """
        return 0

    @staticmethod
    def _exec_callback(callback, args):
        try:
            callback(*args)
        except Exception:
            _logger.exception('Scheduled callback %r raised an exception!',
                              callback)


class Scheduler(BaseScheduler):
    """FIFO queue of callbacks, drained by `run()`.

    Callbacks scheduled while the queue is running are appended at the end,
    and executed during the same call to `run()`.
    """

    def __init__(self):
        self._queue = deque()
        self._running = False

    def __len__(self):
        return len(self._queue)

    def schedule(self, callback, *args):
        self._queue.append((callback, args))

    def run(self, max_iterations=None):
        """Execute the queued callbacks until the queue is empty.

        A call made from inside a running callback returns immediately: the
        outer call is already draining the queue.

        Args:
            max_iterations (int, optional): maximum number of callbacks to
                execute. When the limit is reached, the remaining callbacks
                stay in the queue. By default, the value of the config entry
                'scheduler_max_iterations' is used (0 means no limit).
        Returns:
            int: number of callbacks executed.
        """
        if self._running:
            return 0

        if max_iterations is None:
            max_iterations = config.get('scheduler_max_iterations')

        count = 0
        self._running = True
        try:
            while self._queue:
                if max_iterations and count >= max_iterations:
                    _logger.warning('Scheduler stopped after %d callbacks; '
                                    '%d callbacks are still waiting.',
                                    count, len(self._queue))
                    break
                callback, args = self._queue.popleft()
                self._exec_callback(callback, args)
                count += 1
        finally:
            self._running = False
        return count


class AsyncioScheduler(BaseScheduler):
    """Scheduler running the callbacks in an asyncio event loop.

    `loop.call_soon()` executes the callbacks in the order they have been
    registered, on a later iteration of the loop.
    """

    def __init__(self, loop=None):
        """
        Args:
            loop (AbstractEventLoop, optional): loop used to run the
                callbacks. By default, the running loop at the time of the
                first call to `schedule()`.
        """
        self._loop = loop

    @property
    def loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, callback, *args):
        self.loop.call_soon(self._exec_callback, callback, args)


_default_scheduler = Scheduler()


def get_default_scheduler():
    """Returns the scheduler used by promises created without scheduler."""
    return _default_scheduler


def set_default_scheduler(scheduler):
    """Replace the default scheduler.

    Promises already created keep the scheduler they were created with.

    Args:
        scheduler (BaseScheduler): the new default scheduler.
    Returns:
        BaseScheduler: the previous default scheduler.
    """
    global _default_scheduler

    previous = _default_scheduler
    _default_scheduler = scheduler
    return previous
