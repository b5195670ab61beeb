# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

from .decorators import wrap_promise
from .deferred import Deferred
from .errors import ChainingCycleError, RejectedValueError, TimeoutError
from .promise import Promise
from .reduce_coroutine import reduce_coroutine
from .scheduler import (AsyncioScheduler, Scheduler, TurnScheduler,
                        get_default_scheduler, set_default_scheduler)
from .util import is_thenable

__all__ = ['AsyncioScheduler', 'ChainingCycleError', 'Deferred', 'Promise',
           'RejectedValueError', 'Scheduler', 'TimeoutError', 'TurnScheduler',
           'get_default_scheduler', 'is_thenable', 'reduce_coroutine',
           'set_default_scheduler', 'wrap_promise']
