# -*- coding: utf-8 -*-

from functools import wraps

from .deferred import Deferred
from .util import is_thenable


def reduce_coroutine(safeguard=False):
    """Decorator who converts a coroutine of promises into a single promise.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous Promises.
    Whatever is the number of Promises or async calls used, the result will
    always be an unique Promise wrapping the whole process.

    Each thenable yielded by the generator is waited for; its result is sent
    back to the generator, and its error is thrown into the generator.
    The returned Promise is fulfilled with, by order of priority:
    - the value returned by the generator (if not None).
    - the first value yielded who is not thenable (the generator is then
      closed).
    - the result of the last thenable yielded.

    Args:
        safeguard (boolean): if true, use `Promise.safeguard()` on the
            resulting promise.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                Promise<*>
            """
            df = Deferred(_name='COROUTINE %s' % func.__name__)
            if safeguard:
                df.promise.safeguard()

            try:
                # Create generator; Initialization phase
                gen = func(*args, **kwargs)
            except Exception as error:
                df.reject(error)
                return df.promise

            def _call_next_or_set_result(value):
                if is_thenable(value):
                    value.then(iter_next, iter_error)
                else:
                    gen.close()
                    df.resolve(value)

            def _stop(stop, last_value):
                if stop.value is not None:
                    df.resolve(stop.value)
                else:
                    df.resolve(last_value)

            def iter_next(yielded_value):
                try:
                    next_value = gen.send(yielded_value)
                except StopIteration as stop:
                    return _stop(stop, yielded_value)
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            def iter_error(raised_error):
                if not isinstance(raised_error, BaseException):
                    return df.reject(raised_error)
                try:
                    next_value = gen.throw(raised_error)
                except StopIteration as stop:
                    return _stop(stop, None)
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            # Start and resolve loop.
            try:
                f = next(gen)
            except StopIteration as stop:
                _stop(stop, None)
                return df.promise
            except Exception as error:
                df.reject(error)
                return df.promise
            _call_next_or_set_result(f)

            return df.promise

        return wrapper
    return decorator
