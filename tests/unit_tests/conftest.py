# -*- coding: utf-8 -*-

import pytest

from aplus.common import config
from aplus.promise import Scheduler, set_default_scheduler


@pytest.fixture(autouse=True)
def scheduler(request):
    """Install a new default scheduler for the duration of the test.

    Callbacks left in the queue by a test can't leak into the next one.

    Returns:
        Scheduler: the default scheduler used by the test.
    """
    new_scheduler = Scheduler()
    previous = set_default_scheduler(new_scheduler)

    def restore():
        set_default_scheduler(previous)
        config.reset()

    request.addfinalizer(restore)
    return new_scheduler
