# -*- coding: utf-8 -*-

import asyncio
import logging
from threading import Timer

import pytest

from pledge import (AsyncioScheduler, Deferred, Promise, Scheduler,
                    TimeoutError, TurnScheduler, get_default_scheduler,
                    set_default_scheduler)
from pledge.common import config


class TestTurnScheduler(object):

    def test_turns_executed_in_order(self):
        scheduler = TurnScheduler()
        calls = []

        for i in range(5):
            scheduler.call_soon(calls.append, i)

        assert calls == []
        assert len(scheduler) == 5
        assert scheduler.run_until_idle() == 5
        assert calls == [0, 1, 2, 3, 4]
        assert len(scheduler) == 0

    def test_run_once(self):
        scheduler = TurnScheduler()
        calls = []

        scheduler.call_soon(calls.append, 'A')
        scheduler.call_soon(calls.append, 'B')

        assert scheduler.run_once() is True
        assert calls == ['A']
        assert scheduler.run_once() is True
        assert scheduler.run_once() is False
        assert calls == ['A', 'B']

    def test_turns_scheduled_by_turns(self):
        """Turns scheduled during a turn are executed after the others."""
        scheduler = TurnScheduler()
        calls = []

        def first():
            calls.append('first')
            scheduler.call_soon(calls.append, 'nested')

        scheduler.call_soon(first)
        scheduler.call_soon(calls.append, 'second')
        scheduler.run_until_idle()

        assert calls == ['first', 'second', 'nested']

    def test_turn_raising_error(self, caplog):
        """An error in a turn is logged, and doesn't stop the next turns."""
        scheduler = TurnScheduler()
        calls = []

        def failing_turn():
            raise ValueError('failure')

        scheduler.call_soon(failing_turn)
        scheduler.call_soon(calls.append, 'next')
        scheduler.run_until_idle()

        assert calls == ['next']
        assert 'failing_turn' in caplog.text
        assert any(r.exc_info and r.exc_info[0] is ValueError
                   for r in caplog.records)

    def test_run_until_idle_max_turns(self):
        scheduler = TurnScheduler()
        calls = []

        for i in range(5):
            scheduler.call_soon(calls.append, i)

        assert scheduler.run_until_idle(max_turns=2) == 2
        assert calls == [0, 1]

    def test_run_until_idle_turn_batch_config(self):
        config.set('turn_batch', 3)
        scheduler = TurnScheduler()

        for i in range(5):
            scheduler.call_soon(lambda: None)

        assert scheduler.run_until_idle() == 3
        assert scheduler.run_until_idle(max_turns=0) == 2

    def test_run_until_timeout(self):
        scheduler = TurnScheduler()
        assert scheduler.run_until(lambda: False, timeout=0.01) is False

    def test_run_until_timeout_with_endless_turns(self):
        """The timeout expires even if turns are scheduled without end."""
        scheduler = TurnScheduler()

        def endless_turn():
            scheduler.call_soon(endless_turn)

        scheduler.call_soon(endless_turn)
        assert scheduler.run_until(lambda: False, timeout=0.05) is False
        assert len(scheduler) == 1

    def test_result_timeout_with_polling_chain(self, scheduler):
        """`result()` raises TimeoutError while a chain polls forever."""
        def poll(_):
            return Promise.resolve(None).then(poll)

        Promise.resolve(None).then(poll)

        with pytest.raises(TimeoutError):
            Deferred().promise.result(0.05)

    def test_run_until_wait_other_thread(self):
        scheduler = TurnScheduler()
        flag = []

        Timer(0.01, scheduler.call_soon, args=[flag.append, True]).start()

        assert scheduler.run_until(lambda: bool(flag), timeout=5) is True


class TestDefaultScheduler(object):

    def test_promises_use_default_scheduler(self, scheduler):
        assert get_default_scheduler() is scheduler
        assert Promise.resolve(1).scheduler is scheduler

    def test_set_default_scheduler(self, scheduler):
        other = TurnScheduler()

        assert set_default_scheduler(other) is scheduler
        assert get_default_scheduler() is other
        assert Promise.resolve(1).scheduler is other
        set_default_scheduler(scheduler)

    def test_chained_promise_inherit_scheduler(self, scheduler):
        other = TurnScheduler()

        p = Promise.resolve(1, scheduler=other).then(lambda x: x + 1)
        assert p.scheduler is other

        assert scheduler.run_until_idle() == 0
        assert p.state == Promise.PENDING
        assert p.result(0.01) == 2


class TestOtherSchedulers(object):

    def test_base_scheduler(self):
        scheduler = Scheduler()

        with pytest.raises(NotImplementedError):
            scheduler.call_soon(lambda: None)
        assert scheduler.run_until(lambda: 'value') == 'value'

    def test_asyncio_scheduler(self):
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop)
            p = Promise.resolve(2, scheduler=scheduler).then(lambda x: x * 3)

            future = loop.create_future()
            p.then(future.set_result)

            assert loop.run_until_complete(future) == 6
            assert p.result() == 6
        finally:
            loop.close()

    def test_asyncio_scheduler_pending_result(self):
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop)
            p = Promise.resolve(2, scheduler=scheduler).then(lambda x: x * 3)

            # The loop is not running: nothing can be executed.
            assert p.state == Promise.PENDING
            with pytest.raises(TimeoutError):
                p.result(0)
        finally:
            loop.close()

    def test_asyncio_scheduler_result_fails_without_timeout(self):
        """No timeout, but the Promise can't be waited: it fails at once."""
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop)
            p = Promise.resolve(2, scheduler=scheduler).then(lambda x: x * 3)

            assert not scheduler.can_run_turns
            with pytest.raises(TimeoutError) as exc_info:
                p.result()
            assert 'can\'t run turns' in str(exc_info.value)
            with pytest.raises(TimeoutError):
                p.exception()
        finally:
            loop.close()

    def test_turn_scheduler_can_run_turns(self):
        assert TurnScheduler.can_run_turns is True
        assert Scheduler.can_run_turns is False


def test_scheduler_logger_name(caplog):
    with caplog.at_level(logging.DEBUG, logger='pledge'):
        previous = set_default_scheduler(TurnScheduler())
        set_default_scheduler(previous)

    assert any(r.name == 'pledge.scheduler' for r in caplog.records)
