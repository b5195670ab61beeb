# -*- coding: utf-8 -*-

import logging
from functools import partial

from .common import config
from .errors import RejectedValueError, TimeoutError
from .resolution import resolve_promise
from .scheduler import get_default_scheduler
from .util import callable_name, is_thenable

_logger = logging.getLogger(__name__)


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise contains a value not yet known when the Promise is created. It
    allows to set callbacks who will be called as soon as the result is
    known. It's a "promise" of a future value.

    A Promise is settled only once: either fulfilled with a result, or
    rejected with an error (usually an exception). Further attempts to settle
    it are ignored.

    Callbacks are never executed immediately. They are always handed to the
    scheduler of the Promise, and executed on a later turn, even if the
    Promise is already settled when they're added.
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
        rejected with this exception.

        Args:
            executor (callable): Takes 2 callable arguments:
                The first one, `on_fulfilled()` should be called when the
                Promise is fulfilled (ie the tasks is done) and must accept
                the result's value as its only argument.
                The second, `on_rejected()`, should be called when an error
                occurs. Its argument should be an instance of `Exception`.
            scheduler (Scheduler, optional): scheduler executing the
                callbacks. By default, the default scheduler is used.
            _name (str): if set, name used when converted to text.
            _previous (Promise): if set, Promise from which this one is
                chained. Only used when converted to text.
        """
        if scheduler is None:
            scheduler = get_default_scheduler()

        self._state = self.PENDING
        self._result = None
        self._error = None
        self._scheduler = scheduler
        self._name = _name or callable_name(executor)
        self._previous = _previous

        self._callbacks = []
        self._errbacks = []

        def on_fulfilled(result):
            if self._state != self.PENDING:
                self._log_ignored_settlement('fulfill', result)
                return
            self._result = result
            self._state = self.FULFILLED

            callbacks = self._callbacks

            # Free the references
            self._callbacks = None
            self._errbacks = None

            for callback in callbacks:
                self._scheduler.call_soon(callback, result)

        def on_rejected(error):
            if self._state != self.PENDING:
                self._log_ignored_settlement('reject', error)
                return
            self._error = error
            self._state = self.REJECTED

            errbacks = self._errbacks

            # Free the references
            self._callbacks = None
            self._errbacks = None

            for errback in errbacks:
                self._scheduler.call_soon(errback, error)

        try:
            executor(on_fulfilled, on_rejected)
        except Exception as error:
            on_rejected(error)

    @property
    def state(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        return self._state

    @property
    def scheduler(self):
        """Scheduler: the scheduler executing the callbacks."""
        return self._scheduler

    def result(self, timeout=None):
        """Wait for the result and returns it as soon as it's available.

        While the Promise is pending, the scheduler is driven, so pending
        callbacks are executed.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be fulfilled. By default, it can wait indefinitely.
                A scheduler who can't run turns by itself (like
                `AsyncioScheduler`) can't be waited for: a pending Promise
                raises TimeoutError immediately.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
            RejectedValueError: if the promise is rejected with a value who
                is not an exception.
            *: If the promise is rejected, the rejection cause is raised.
        """
        self._wait(timeout)

        if self._state == self.PENDING:
            raise self._timeout_error()
        elif self._state == self.REJECTED:
            if isinstance(self._error, BaseException):
                raise self._error
            raise RejectedValueError(self._error)
        else:
            return self._result

    def exception(self, timeout=None):
        """Wait for the promise rejection and returns it's error.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be rejected. By default, it can wait indefinitely.
                Same limit as `result()` for schedulers who can't run turns.
        Returns:
            *: the reason of the rejection of the Promise.
            None: if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        self._wait(timeout)

        if self._state == self.PENDING:
            raise self._timeout_error()
        return self._error

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
        self promise is transferred at the new promise (the state and the
        value/error).

        The callbacks are never called before this method returns.

        Args:
            on_fulfilled (callable, optional):  This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                error of the original promise as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """

        def chained_promise_executor(fulfill, reject):

            def callback(result):
                if not callable(on_fulfilled):
                    new_result = result
                else:
                    try:
                        new_result = on_fulfilled(result)
                    except Exception as error:
                        return reject(error)
                resolve_promise(new_promise, new_result, fulfill, reject)

            def errback(error):
                if not callable(on_rejected):
                    return reject(error)
                try:
                    result = on_rejected(error)
                except Exception as new_error:
                    return reject(new_error)
                resolve_promise(new_promise, result, fulfill, reject)

            self._add_callbacks(callback, errback)

        if not callable(on_rejected):
            name = '%s' % callable_name(on_fulfilled)
        elif not callable(on_fulfilled):
            name = '<None, %s>' % callable_name(on_rejected)
        else:
            name = '<%s, %s>' % (callable_name(on_fulfilled),
                                 callable_name(on_rejected))
        new_promise = Promise(chained_promise_executor,
                              scheduler=self._scheduler, _name=name,
                              _previous=self)
        return new_promise

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): Must take the rejection reason as
                argument. Will be called if `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    def finally_(self, callback):
        """Create a new promise calling `callback` once `self` is settled.

        The callback receives no argument. The new Promise is settled like
        `self`, with the same result or error, unless the callback fails: if
        it raises an exception, or returns a Promise who is rejected, the new
        Promise is rejected with this error.

        If the callback returns a Promise, the new Promise waits for it
        before being settled.

        Args:
            callback (callable): function without argument.
        Returns:
            Promise<*>: new Promise chained to `self`.
        """
        scheduler = self._scheduler

        def finally_fulfilled(result):
            return Promise.resolve(callback(), scheduler=scheduler) \
                .then(lambda _: result)

        def finally_rejected(error):
            return Promise.resolve(callback(), scheduler=scheduler) \
                .then(lambda _: Promise.reject(error, scheduler=scheduler))

        return self.then(finally_fulfilled, finally_rejected)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via then() or catch()), the
        default behavior is to do nothing, and thus, errors are silently
        ignored.
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(error):
            if isinstance(error, BaseException):
                _logger.error('[SAFEGUARD] %s' % self,
                              exc_info=(type(error), error,
                                        error.__traceback__))
            else:
                _logger.error('[SAFEGUARD] %s rejected with %r'
                              % (self, error))

        self._add_callbacks(None, guard)

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        if self._state == self.REJECTED:
            state = 'R'
        elif self._state == self.FULFILLED:
            state = 'F'
        else:
            state = 'P'

        if self._previous:
            return '%s -> %s %s' % (self._previous._inner_print(), self._name,
                                    state)
        return '%s %s' % (self._name, state)

    @classmethod
    def resolve(cls, value, scheduler=None):
        """Create a promise who resolves the selected value.

        Args:
            value: result of the promise. If it's a Promise, it's returned as
                is. If it's another thenable object, the new Promise will
                follow its state.
            scheduler (Scheduler, optional): scheduler of the new Promise.
        Returns:
            Promise: Promise containing the value passed in parameter.
        """
        if isinstance(value, Promise):
            return value

        operations = []
        promise = cls(lambda ok, error: operations.extend((ok, error)),
                      scheduler=scheduler, _name='RESOLVE')
        resolve_promise(promise, value, *operations)
        return promise

    @classmethod
    def reject(cls, reason, scheduler=None):
        """Create a Promise rejected for the reason specified.

        Args:
            reason: Exception set to the Promise
            scheduler (Scheduler, optional): scheduler of the new Promise.
        Returns:
            Promise: new Promise already rejected.
        """
        return cls(lambda ok, error: error(reason), scheduler=scheduler,
                   _name='REJECT')

    @classmethod
    def deferred(cls, scheduler=None):
        """Create a new Deferred, the "creator" side of a Promise.

        Returns:
            Deferred: object containing a pending Promise and its `resolve`
                and `reject` operations.
        """
        from .deferred import Deferred
        return Deferred(scheduler=scheduler)

    @classmethod
    def all(cls, promises, scheduler=None):
        """Create a Promise who wait a list of promises to be all fulfilled.

        The resulting Promise resolve when all of the promises in the list are
        resolved, and returns a list of all the resulting values, keeping the
        order of the promise list.
        If a promise is rejected, then the resulting promise is rejected with
        the same reason, and all results from other promises are ignored.

        Values who are not thenable are considered as already fulfilled.

        Args:
            promises (iterable): Promises, thenables or direct values.
            scheduler (Scheduler, optional): scheduler of the new Promise.
        Returns:
            Promise<list>: resulting promise, fulfilled when all promises are
                fulfilled, or rejected when one of the promises is rejected.
        """
        promises = list(promises)
        _remaining_tasks = [len(promises)]
        results = [None] * len(promises)

        if _remaining_tasks[0] == 0:
            return cls.resolve([], scheduler=scheduler)

        def executor(resolve, reject):
            def resolve_one_promise(index, value):
                results[index] = value
                _remaining_tasks[0] -= 1
                if _remaining_tasks[0] == 0:
                    resolve(results)

            for index, p in enumerate(promises):
                if is_thenable(p):
                    p.then(partial(resolve_one_promise, index), reject)
                else:
                    resolve_one_promise(index, p)

        return cls(executor, scheduler=scheduler, _name='ALL')

    @classmethod
    def race(cls, promises, scheduler=None):
        """Returns a Promise settled like the fastest of the given promises.

        The resulting Promise will be settled as soon as the one the promises
        is settled. Result value or rejection reason of the finished promise
        are transmitted. All other Promise result's will be ignored.

        A value who is not thenable is considered as already fulfilled: if
        present, it wins the race.

        An empty list gives a Promise who will stay pending forever.

        Args:
            promises (iterable): Promises, thenables or direct values.
            scheduler (Scheduler, optional): scheduler of the new Promise.
        Returns:
            Promise: a promise
        """
        promises = list(promises)

        def executor(resolve, reject):
            for p in promises:
                if is_thenable(p):
                    p.then(resolve, reject)
                else:
                    resolve(p)

        if not promises:
            _logger.debug('Promise.race() called with an empty list: the '
                          'Promise will never be settled.')
        return cls(executor, scheduler=scheduler, _name='RACE')

    def _wait(self, timeout):
        if self._state == self.PENDING:
            self._scheduler.run_until(
                lambda: self._state != self.PENDING, timeout)

    def _timeout_error(self):
        if self._scheduler.can_run_turns:
            return TimeoutError()
        return TimeoutError('%r is pending, and its scheduler %r can\'t run '
                            'turns by itself: use then() to get its value.'
                            % (self, self._scheduler))

    def _log_ignored_settlement(self, action, value):
        if config.get('warn_on_resettle'):
            level = logging.WARNING
        else:
            level = logging.DEBUG
        _logger.log(level, 'Try to %s Promise %s already settled. New value '
                    'will be ignored: %r', action, repr(self), value)

    def _add_callbacks(self, callback, errback):
        """Register the callbacks to call when the Promise is settled.

        If the Promise is already settled, the matching callback is scheduled
        immediately.

        Args:
            callback (callable, optional): receives the result.
            errback (callable, optional): receives the error.
        """
        if self._state == self.PENDING:
            if callback is not None:
                self._callbacks.append(callback)
            if errback is not None:
                self._errbacks.append(errback)
        elif self._state == self.FULFILLED:
            if callback is not None:
                self._scheduler.call_soon(callback, self._result)
        elif errback is not None:
            self._scheduler.call_soon(errback, self._error)
