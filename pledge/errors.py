# -*- coding: utf-8 -*-


class TimeoutError(Exception):
    """An operation could not be executed within the time allowed."""
    pass


class ChainingCycleError(TypeError):
    """A Promise has been resolved with itself.

    It happens when a callback returns the very Promise created by the call
    to `then()` that registered it. Waiting for such a Promise would never
    end, so it's rejected with this error instead.
    """

    def __init__(self, promise=None):
        TypeError.__init__(self, 'Chaining cycle detected for promise %r'
                           % (promise,))
        self.promise = promise


class RejectedValueError(Exception):
    """Raised by `Promise.result()` when the rejection reason isn't an error.

    Any value can be used to reject a Promise. When the reason is not an
    instance of `BaseException`, it can't be raised as is, and so is wrapped.

    Attributes:
        reason: the original rejection reason.
    """

    def __init__(self, reason):
        Exception.__init__(self, 'Promise rejected with a non-exception '
                           'value: %r' % (reason,))
        self.reason = reason
