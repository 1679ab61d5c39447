"""Trailing-edge debounce on the running event loop."""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Run a callback once input has been quiet for ``delay`` seconds.

    Every ``schedule`` call cancels the pending timer, so only the last value
    scheduled within a quiet window is ever delivered.
    """

    def __init__(self, delay: float, loop: Optional[asyncio.AbstractEventLoop] = None):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[..., None], *args) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self, callback: Callable[..., None], *args) -> None:
        """Deliver immediately, dropping any pending timer."""
        self.cancel()
        callback(*args)

    def _fire(self, callback: Callable[..., None], args: tuple) -> None:
        self._handle = None
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Debounced callback failed: {e}", exc_info=True)
