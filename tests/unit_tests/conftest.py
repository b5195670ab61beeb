# -*- coding: utf-8 -*-

import pytest

from pledge import TurnScheduler, set_default_scheduler
from pledge.common import config


@pytest.fixture(autouse=True)
def scheduler(request):
    """Replace the default scheduler by a new, empty one.

    The previous default scheduler is restored at the end of the test.

    Returns:
        TurnScheduler: the scheduler used by the Promises of the test.
    """
    new_scheduler = TurnScheduler()
    previous = set_default_scheduler(new_scheduler)

    def _restore():
        set_default_scheduler(previous)
    request.addfinalizer(_restore)
    return new_scheduler


@pytest.fixture(autouse=True)
def clean_config(request):
    """Ensure each test starts and ends with the default settings."""
    config.reset()
    request.addfinalizer(config.reset)
