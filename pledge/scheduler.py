# -*- coding: utf-8 -*-
"""Cooperative turns on which Promise callbacks are executed.

A Promise never calls its callbacks from inside `then()`, nor from inside the
call who settles it. Instead, each callback is handed to a scheduler, and
will run on a later "turn", after the current piece of code has returned.

The default scheduler is a `TurnScheduler`: a simple FIFO queue of turns,
executed only when the host program asks for it, via `run_once()`,
`run_until_idle()` or `run_until()`. `Promise.result()` drives it
automatically.

Programs already using asyncio can use an `AsyncioScheduler` instead, which
delegates the turns to the asyncio event loop.
"""

from collections import deque
import logging
import threading
import time

from .common import config

_logger = logging.getLogger(__name__)


class Scheduler(object):
    """Base class of the schedulers.

    A scheduler must at least implement `call_soon()`.
    If it can execute turns by itself (on the calling thread), it must set
    `can_run_turns` to True and implement `run_until()`.
    """

    can_run_turns = False

    def call_soon(self, fn, *args):
        """Schedule `fn(*args)` to be executed on a later turn.

        Args:
            fn (callable): function to execute.
            *args: arguments passed to fn.
        """
        raise NotImplementedError()

    def run_until(self, predicate, timeout=None):
        """Execute turns until `predicate()` returns True.

        The base scheduler has no way to execute turns by itself: the
        predicate is just evaluated.

        Args:
            predicate (callable): function without argument.
            timeout (float, optional): maximum time to wait, in seconds.
        Returns:
            the last value returned by `predicate()`.
        """
        return predicate()


class TurnScheduler(Scheduler):
    """FIFO queue of turns, driven by the host program.

    Turns are executed in the exact order they have been scheduled, one
    after the other, on the thread calling the `run_*()` methods.

    `call_soon()` is thread-safe: it's the way for another thread (or a
    library callback) to settle a Promise, by scheduling the call to its
    `resolve` or `reject` operations. Promises themselves are not
    thread-safe.
    """

    can_run_turns = True

    def __init__(self):
        self._turns = deque()
        self._condition = threading.Condition()

    def call_soon(self, fn, *args):
        with self._condition:
            self._turns.append((fn, args))
            self._condition.notify_all()

    def __len__(self):
        with self._condition:
            return len(self._turns)

    def run_once(self):
        """Execute the oldest scheduled turn, if any.

        An exception raised by the turn is logged, then ignored.

        Returns:
            boolean: True if a turn has been executed; False if the queue was
                empty.
        """
        with self._condition:
            if not self._turns:
                return False
            fn, args = self._turns.popleft()

        try:
            fn(*args)
        except Exception:
            _logger.exception('Scheduled turn %s raised an exception!' %
                              getattr(fn, '__name__', repr(fn)))
        return True

    def run_until_idle(self, max_turns=None):
        """Execute turns until the queue is empty.

        Turns scheduled by the executed turns are executed too.

        Args:
            max_turns (int, optional): if set, stop after this number of
                turns. By default, the `turn_batch` config entry is used, 0
                meaning no limit.
        Returns:
            int: number of turns executed.
        """
        if max_turns is None:
            max_turns = config.get('turn_batch')

        count = 0
        while not max_turns or count < max_turns:
            if not self.run_once():
                break
            count += 1
        return count

    def run_until(self, predicate, timeout=None):
        """Execute turns until `predicate()` returns True.

        When the queue is empty and the predicate is still False, it waits
        for another thread to schedule new turns.

        The timeout is checked before each turn: turns scheduling new turns
        forever don't prevent it from returning.

        Args:
            predicate (callable): function without argument.
            timeout (float, optional): if set, maximum time to wait, in
                seconds. By default, it can wait indefinitely.
        Returns:
            the last value returned by `predicate()`.
        """
        deadline = None if timeout is None else time.time() + timeout

        while True:
            result = predicate()
            if result:
                return result
            if deadline is not None and time.time() >= deadline:
                return result
            if self.run_once():
                continue

            with self._condition:
                if self._turns:
                    continue
                if deadline is None:
                    self._condition.wait()
                else:
                    remaining = deadline - time.time()
                    if remaining <= 0:
                        return predicate()
                    self._condition.wait(remaining)


class AsyncioScheduler(Scheduler):
    """Scheduler delegating the turns to an asyncio event loop.

    The turns are executed only by the running loop: `Promise.result()`
    can't wait for a pending Promise, it fails immediately.
    """

    def __init__(self, loop):
        """
        Args:
            loop (asyncio.AbstractEventLoop): loop who will run the turns.
        """
        self.loop = loop

    def call_soon(self, fn, *args):
        self.loop.call_soon_threadsafe(fn, *args)


_default_scheduler = TurnScheduler()


def get_default_scheduler():
    """Returns the scheduler used by Promises created without scheduler."""
    return _default_scheduler


def set_default_scheduler(scheduler):
    """Replace the default scheduler.

    Only the Promises created after this call are affected.

    Args:
        scheduler (Scheduler): the new default scheduler.
    Returns:
        Scheduler: the previous default scheduler.
    """
    global _default_scheduler

    previous = _default_scheduler
    _default_scheduler = scheduler
    _logger.debug('Default scheduler set to %r', scheduler)
    return previous
