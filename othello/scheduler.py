"""
Delayed, cancellable scheduling of the computer opponent's turn.
"""
from __future__ import annotations

from typing import Any, Callable, Optional
import logging
import threading

logger = logging.getLogger(__name__)

TimerFactory = Callable[..., Any]


class AIScheduler:
    """Runs one AI callback after a "thinking" delay.

    Only one call may be pending at a time. `cancel()` drops it, and a timer
    that fires after its token was superseded does nothing.
    """

    def __init__(self, delay: float = 0.6, timer_factory: TimerFactory = threading.Timer):
        self.delay = max(0.0, float(delay))
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[Any] = None
        self._token: Optional[int] = None

    @property
    def is_thinking(self) -> bool:
        return self._timer is not None

    @property
    def pending_token(self) -> Optional[int]:
        return self._token

    def schedule(self, token: int, callback: Callable[[int], None]) -> bool:
        """Arm the timer for `callback(token)`; False if a call is already pending."""
        with self._lock:
            if self._timer is not None:
                return False
            timer = self._timer_factory(self.delay, self._fire, args=(token, callback))
            timer.daemon = True
            self._timer = timer
            self._token = token
        timer.start()
        return True

    def cancel(self) -> None:
        with self._lock:
            timer = self._timer
            self._timer = None
            self._token = None
        if timer is not None:
            timer.cancel()
            logger.debug("Cancelled pending AI move")

    def _fire(self, token: int, callback: Callable[[int], None]) -> None:
        with self._lock:
            if self._timer is None or self._token != token:
                return
            self._timer = None
            self._token = None
        callback(token)
