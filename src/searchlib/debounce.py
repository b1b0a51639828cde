"""Cancelable deferred execution used for input debouncing and blur-close."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Handle(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    """Anything with an ``asyncio``-style ``call_later``."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle: ...


class EventLoopScheduler:
    """Schedule on the running asyncio loop, resolved at call time.

    Resolving lazily lets a controller be built before the UI starts its loop.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class Debouncer:
    """Hold at most one pending effect.

    Every ``schedule`` call cancels the previous pending effect, so only the
    last one in a burst fires. A delay of zero still defers to the next loop
    iteration.
    """

    def __init__(self, scheduler: Optional[Scheduler] = None, name: str = "debounce"):
        self._scheduler = scheduler or EventLoopScheduler()
        self._name = name
        self._handle: Optional[Handle] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, effect: Callable[[], None], delay_ms: float) -> None:
        """Cancel any pending effect and run ``effect`` after ``delay_ms``."""
        self.cancel()
        self._generation += 1
        generation = self._generation

        def _fire() -> None:
            # a handle that ignored cancel() must not run a superseded effect
            if generation != self._generation:
                return
            self._handle = None
            logger.debug("%s: firing effect", self._name)
            effect()

        delay = max(float(delay_ms or 0), 0.0) / 1000.0
        self._handle = self._scheduler.call_later(delay, _fire)

    def cancel(self) -> bool:
        """Cancel the pending effect. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._generation += 1
        logger.debug("%s: pending effect cancelled", self._name)
        return True
