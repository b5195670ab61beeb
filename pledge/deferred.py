# -*- coding: utf-8 -*-

from .promise import Promise


class Deferred(object):
    """The "creator" side of an async task.

    Whereas a Promise represents the asynchronous value from the "consumer"
    side, a Deferred gives access to the operations settling it, so they can
    be called from outside the Promise executor (by a callback-based API, for
    example).

    Attributes:
        promise (Promise): the Promise associated to the Deferred.
        resolve (function): fulfill operation of the promise.
        reject (function): reject operation of the promise.
    """

    def __init__(self, scheduler=None, _name='DEFERRED'):
        self.promise = Promise(self._executor, scheduler=scheduler,
                               _name=_name)

    def _executor(self, resolve, reject):
        self.resolve = resolve
        self.reject = reject
