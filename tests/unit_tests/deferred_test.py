# -*- coding: utf-8 -*-

import pytest

from pledge import Deferred, Promise, TimeoutError


class TestDeferred(object):

    def test_deferred_resolve_promise(self):
        df = Deferred()
        assert isinstance(df.promise, Promise)

        with pytest.raises(TimeoutError):
            df.promise.result(0.001)
        df.resolve('Value')
        assert df.promise.result(0.001) == 'Value'

    def test_deferred_reject_promise(self):
        class MyException(Exception):
            pass

        df = Deferred()
        with pytest.raises(TimeoutError):
            df.promise.result(0.001)
        df.reject(MyException())

        with pytest.raises(MyException):
            df.promise.result(0.001)

    def test_deferred_from_promise_class(self, scheduler):
        df = Promise.deferred()
        assert isinstance(df, Deferred)
        assert df.promise.scheduler is scheduler

        df.resolve(3)
        assert df.promise.result(0.001) == 3

    def test_deferred_settled_from_callback_api(self):
        """Settle the Deferred from a callback-style producer."""
        callbacks = []

        def callback_api(on_done):
            callbacks.append(on_done)

        df = Deferred()
        callback_api(df.resolve)
        p = df.promise.then(lambda value: value.upper())

        callbacks[0]('done')
        assert p.result(0.01) == 'DONE'

    def test_deferred_resolve_does_not_adopt(self):
        """`resolve` is the raw fulfill operation: a Promise is a value."""
        inner = Promise.resolve(1)
        df = Deferred()
        df.resolve(inner)
        assert df.promise.result(0.001) is inner
