# -*- coding: utf-8 -*-
"""Resolution of a Promise with the value returned by a callback.

A callback chained with `Promise.then()` can return a direct value, or
another Promise (or any object with a `then` method). In the second case,
the Promise created by `then()` must "adopt" the state of the returned
object: it's fulfilled or rejected only when this object is, recursively.
"""

import logging

from .errors import ChainingCycleError

_logger = logging.getLogger(__name__)

# These types can't have a usable `then` attribute.
_PLAIN_TYPES = (type(None), bool, int, float, complex, str, bytes)


def _has_then(x):
    """Check if a `then` member is declared, without reading it."""
    return hasattr(type(x), 'then') or 'then' in getattr(x, '__dict__', {})


def resolve_promise(promise, x, fulfill, reject):
    """Settle `promise` with `x`, adopting its state if `x` is a thenable.

    Args:
        promise (Promise): the Promise to settle.
        x: the value to resolve with. Usually the value returned by a
            callback.
        fulfill (callable): the fulfill operation of `promise`.
        reject (callable): the reject operation of `promise`.
    """
    if x is promise:
        return reject(ChainingCycleError(promise))

    if isinstance(x, _PLAIN_TYPES):
        return fulfill(x)

    # Only the first call to one of the callbacks (or to the error handling)
    # is taken into account.
    called = [False]

    def on_inner_fulfilled(y):
        if called[0]:
            return
        called[0] = True
        resolve_promise(promise, y, fulfill, reject)

    def on_inner_rejected(error):
        if called[0]:
            return
        called[0] = True
        reject(error)

    try:
        # `then` may be a property: it must be read only once, and any error
        # raised by the accessor (AttributeError included) rejects promise.
        then = x.then if _has_then(x) else None
        if not callable(then):
            called[0] = True
            return fulfill(x)
        then(on_inner_fulfilled, on_inner_rejected)
    except Exception as error:
        if called[0]:
            _logger.debug('Exception raised by an already settled thenable '
                          'will be ignored: %r', error)
            return
        called[0] = True
        reject(error)
