"""
Pytest configuration and fixtures
"""

import pytest

from yapp_testing import HOST_ORIGIN, FakeClock, FakeHostWindow, FakePage
from yodl.yapp import MemorySessionStorage, YappConfig, YappSDK
from yodl.yapp.storage import SessionRecoveryStore

TEST_ENS_NAME = "testapp.yodl.eth"
TEST_TIMEOUT_MS = 200


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def host_window():
    """Guest embedded in the host frame"""
    return FakeHostWindow(embedded=True)


@pytest.fixture
def top_level_window():
    """Guest running as the top-level document"""
    return FakeHostWindow(embedded=False)


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemorySessionStorage()


@pytest.fixture
def store(storage, clock):
    return SessionRecoveryStore(storage, clock=clock)


@pytest.fixture
def config():
    return YappConfig(origin=HOST_ORIGIN, ens_name=TEST_ENS_NAME, payment_timeout_ms=TEST_TIMEOUT_MS)


@pytest.fixture
def in_frame_sdk(config, host_window, page, storage, clock):
    return YappSDK(config, host_window, page, storage=storage, clock=clock)


@pytest.fixture
def redirect_sdk(config, top_level_window, page, storage, clock):
    return YappSDK(config, top_level_window, page, storage=storage, clock=clock)
