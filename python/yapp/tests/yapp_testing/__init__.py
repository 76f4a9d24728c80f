"""
Test doubles for the environment ports and a mock host
"""

from yapp_testing.environment import HOST_ORIGIN, FakeClock, FakeHostWindow, FakePage
from yapp_testing.mock_host import create_mock_host

__all__ = ["HOST_ORIGIN", "FakeClock", "FakeHostWindow", "FakePage", "create_mock_host"]
