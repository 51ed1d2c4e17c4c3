"""
Deferred

The write-once settlement cell behind every Future.
"""

import logging
from collections import deque
from typing import Any, Callable, Deque, Generic, Optional, TypeVar

from .config import SchedulingPolicy
from .exceptions import DoubleSettlementError
from .reactor import Reactor

logger = logging.getLogger(__name__)

E = TypeVar("E")
V = TypeVar("V")

Callback = Callable[[Optional[E], Optional[V]], Any]


class Deferred(Generic[E, V]):
    """
    Mutable settlement state owned by one producer.

    The producer receives ``settle`` as its error-first callback; consumers
    only ever see the cell through a Future. Listeners are never invoked
    inline: delivery always happens on a later reactor turn, in registration
    order, exactly once per listener.
    """

    def __init__(self):
        self.error: Optional[E] = None
        self.value: Optional[V] = None
        self._settled = False
        self._scheduled = False
        # Loop the pending flush went to (None = the reactor's own queue)
        self._scheduled_on = None
        self._listeners: Deque[Callback] = deque()
        # Fixed per cell so one cell never mixes delivery policies
        self._policy = Reactor.policy()

    @property
    def settled(self) -> bool:
        return self._settled

    def settle(self, error: Optional[E] = None, value: Optional[V] = None) -> None:
        """
        Settle the cell with ``(error, value)``.

        Raises:
            DoubleSettlementError: If the cell was already settled
        """
        if self._settled:
            logger.error(
                f"Deferred settled twice (first: error={self.error!r}, value={self.value!r}; "
                f"second: error={error!r}, value={value!r})"
            )
            raise DoubleSettlementError("Called deferred callback twice.")

        self.error = error
        self.value = value
        self._settled = True
        self._trigger()

    def subscribe(self, listener: Callback) -> None:
        """Register ``listener(error, value)`` for the final settlement."""
        if self._settled and self._policy is SchedulingPolicy.TIMER:
            Reactor.schedule_timer(listener, self.error, self.value)
            return

        self._listeners.append(listener)
        if self._settled:
            self._trigger()

    def _trigger(self) -> None:
        target = Reactor.running_loop()
        if self._scheduled and self._scheduled_on is target:
            return
        # A flush pending on another queue may never run from here. Listeners
        # are popped before they fire, so a second flush delivers nothing twice
        self._scheduled = True
        self._scheduled_on = target
        Reactor.schedule(self._flush)

    def _flush(self) -> None:
        try:
            while self._listeners:
                listener = self._listeners.popleft()
                listener(self.error, self.value)
        finally:
            self._scheduled = False
            # A listener raised; the rest get a fresh turn
            if self._listeners:
                self._trigger()
