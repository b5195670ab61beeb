# -*- coding: utf-8 -*-

from functools import wraps

from .promise import Promise


def wrap_promise(f=None, scheduler=None):
    """Decorator making a function always return a Promise.

    A Promise returned by the function is transmitted as is; any other
    thenable is followed until settled, and a plain value becomes the
    result of an already fulfilled Promise. An exception raised by the
    function rejects the Promise instead of propagating.

    It can be used bare (``@wrap_promise``), or with the scheduler the
    created Promises must use:

        @wrap_promise(scheduler=my_scheduler)
        def f():
            ...

    Args:
        f (callable, optional): the decorated function.
        scheduler (Scheduler, optional): scheduler of the returned Promises.
            By default, the default scheduler.
    """
    if f is None:
        return lambda func: wrap_promise(func, scheduler=scheduler)

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            value = f(*args, **kwargs)
        except Exception as error:
            return Promise.reject(error, scheduler=scheduler)
        return Promise.resolve(value, scheduler=scheduler)

    return wrapper
