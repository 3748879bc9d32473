# -*- coding: utf-8 -*-

"""Procedure adopting the outcome of any value into a Promise.

The value can be a plain value, a Promise of this module, or any "thenable"
object (with a callable `then` attribute) coming from another library.
Foreign thenables can misbehave: call both callbacks, call one of them
several times, or raise after having called one. Only the first call has an
effect, everything else is ignored.
"""

import inspect

from .errors import ChainingCycleError

_missing = object()


def resolve_thenable(promise, x, fulfill, reject):
    """Settle `promise` with the eventual outcome of `x`.

    If `x` is a thenable, its `then()` method is called and the procedure is
    applied again with the value it gives. Thenables who call back
    synchronously are processed in a loop instead of a recursion, so a chain
    of nested thenables doesn't grow the stack.

    Args:
        promise (Promise): the promise to settle.
        x: the value to adopt.
        fulfill (callable): sets the promise fulfilled with a value. The value
            is never inspected.
        reject (callable): sets the promise rejected with a reason.
    """
    pending_values = [x]

    while pending_values:
        x = pending_values.pop()

        if x is promise:
            reject(ChainingCycleError(promise))
            return

        if x is None:
            fulfill(x)
            return

        try:
            then = x.then
        except AttributeError as error:
            if inspect.getattr_static(x, 'then', _missing) is _missing:
                # No `then` member: it's a plain value.
                fulfill(x)
            else:
                # `then` exists, but its getter has failed.
                reject(error)
            return
        except Exception as error:
            reject(error)
            return

        if not callable(then):
            fulfill(x)
            return

        _call_then(promise, then, pending_values, fulfill, reject)


def _call_then(promise, then, pending_values, fulfill, reject):
    """Call the `then` method of a thenable with one-shot callbacks.

    A value received while `then()` is still running is pushed in
    `pending_values`, for the caller's loop. A value received later starts a
    new resolution.
    """
    state = {'called': False, 'in_call': True}

    def on_fulfilled(y):
        if state['called']:
            return
        state['called'] = True
        if state['in_call']:
            pending_values.append(y)
        else:
            resolve_thenable(promise, y, fulfill, reject)

    def on_rejected(reason):
        if state['called']:
            return
        state['called'] = True
        reject(reason)

    try:
        then(on_fulfilled, on_rejected)
    except Exception as error:
        if not state['called']:
            state['called'] = True
            reject(error)
    finally:
        state['in_call'] = False
