"""
Cross-window messaging primitives
"""

from yodl.yapp.messaging.channel import CrossWindowChannel
from yodl.yapp.messaging.exchange import InFrameExchange, OutcomeHandler
from yodl.yapp.messaging.registry import Listener, ListenerRegistry
from yodl.yapp.messaging.timeout import TimeoutController

__all__ = [
    "CrossWindowChannel",
    "InFrameExchange",
    "Listener",
    "ListenerRegistry",
    "OutcomeHandler",
    "TimeoutController",
]
