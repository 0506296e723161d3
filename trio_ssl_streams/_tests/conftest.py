import inspect

import pytest

from trio.testing import MockClock, trio_test


# Run every "async def test_*" under trio.run(), the same way Trio's own test
# suite does, without needing a plugin.
@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        pyfuncitem.obj = trio_test(pyfuncitem.obj)


# trio_test picks up any Clock among a test's arguments, so asking for this
# fixture is enough to run the test in virtual time.
@pytest.fixture
def autojump_clock():
    return MockClock(autojump_threshold=0)
