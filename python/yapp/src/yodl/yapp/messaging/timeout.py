"""
Timeout controller for correlated requests
"""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class TimeoutController:
    """
    Fires on_timeout once after duration_ms unless cancelled first.

    A controller that fired or was cancelled stays inert.
    """

    def __init__(
        self,
        duration_ms: int,
        on_timeout: Callable[[], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._duration_ms = duration_ms
        self._on_timeout = on_timeout
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._fired = False
        self._cancelled = False

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def active(self) -> bool:
        return self._handle is not None and not (self._fired or self._cancelled)

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> "TimeoutController":
        """Schedule the timeout on the running loop"""
        if self._handle is not None or self._cancelled:
            return self
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self._duration_ms / 1000, self._fire)
        return self

    def cancel(self) -> bool:
        """Cancel the timeout, returns True if it was still pending"""
        if self._fired or self._cancelled:
            return False
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
        return True

    def _fire(self) -> None:
        if self._cancelled or self._fired:
            return
        self._fired = True
        logger.info(f"Request timed out after {self._duration_ms} ms")
        self._on_timeout()
