"""
Transport selection
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yodl.yapp.environment import HostWindow

logger = logging.getLogger(__name__)


class TransportMode(str, Enum):
    """How requests reach the host"""

    IN_FRAME = "in_frame"
    REDIRECT = "redirect"


def detect_transport_mode(window: "HostWindow") -> TransportMode:
    """Pick the in-frame transport when a host window is reachable."""
    mode = TransportMode.IN_FRAME if window.is_embedded() else TransportMode.REDIRECT
    logger.info(f"Detected transport mode: {mode.value}")
    return mode
