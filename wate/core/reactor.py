"""
Reactor

Single-threaded turn scheduler behind every settlement cell.

Inside a running asyncio event loop callbacks are handed to the loop
(``call_soon`` / ``call_later``). Outside one they go to the reactor's own
FIFO queues, which the caller drains with ``Reactor.run_until_idle()``.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from .config import ReactorConfig, SchedulingPolicy

logger = logging.getLogger(__name__)

_Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class Reactor:
    """
    Process-wide turn scheduler.

    Not thread-safe: futures must be created, settled and observed from one
    thread of control.
    """

    _initialized = False
    _config: Optional[ReactorConfig] = None
    _soon: Deque[_Task] = deque()
    _timers: Deque[_Task] = deque()

    @classmethod
    def initialize(cls, config: Optional[ReactorConfig] = None) -> None:
        """
        Initialize the reactor.

        Args:
            config: Scheduling configuration (None = load from environment)
        """
        if cls._initialized:
            return

        cls._config = config or ReactorConfig.from_env()
        cls._initialized = True
        logger.debug(
            f"Reactor initialized (policy={cls._config.policy.value}, "
            f"timer_delay={cls._config.timer_delay})"
        )

    @classmethod
    def shutdown(cls) -> None:
        """Drop queued work and configuration."""
        if not cls._initialized:
            return

        dropped = len(cls._soon) + len(cls._timers)
        if dropped:
            logger.debug(f"Reactor shutdown dropped {dropped} queued callbacks")

        cls._soon.clear()
        cls._timers.clear()
        cls._config = None
        cls._initialized = False

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if reactor is initialized."""
        return cls._initialized

    @classmethod
    def config(cls) -> ReactorConfig:
        """Get the active configuration."""
        if not cls._initialized:
            cls.initialize()
        return cls._config

    @classmethod
    def policy(cls) -> SchedulingPolicy:
        """Get the active scheduling policy."""
        return cls.config().policy

    @classmethod
    def running_loop(cls) -> Optional[asyncio.AbstractEventLoop]:
        """Get the event loop running in this thread, if any."""
        return _running_loop()

    @classmethod
    def schedule(cls, fn: Callable[..., Any], *args: Any) -> None:
        """Run ``fn(*args)`` on the next turn."""
        if not cls._initialized:
            cls.initialize()

        loop = _running_loop()
        if loop is not None:
            cls._hand_over(loop)
            loop.call_soon(fn, *args)
        else:
            cls._soon.append((fn, args))

    @classmethod
    def schedule_timer(cls, fn: Callable[..., Any], *args: Any) -> None:
        """Run ``fn(*args)`` from a timer, after all next-turn work."""
        config = cls.config()

        loop = _running_loop()
        if loop is not None:
            cls._hand_over(loop)
            loop.call_later(config.timer_delay, fn, *args)
        else:
            cls._timers.append((fn, args))

    @classmethod
    def pending(cls) -> int:
        """Number of callbacks waiting in the reactor's own queues."""
        return len(cls._soon) + len(cls._timers)

    @classmethod
    def run_until_idle(cls, limit: Optional[int] = None) -> int:
        """
        Drain the reactor's queues.

        Next-turn callbacks always run before timers. Exceptions raised by a
        callback propagate to the caller; everything not yet run stays queued.

        Args:
            limit: Maximum number of callbacks to run (None = until empty)

        Returns:
            Number of callbacks run
        """
        ran = 0
        while cls._soon or cls._timers:
            if limit is not None and ran >= limit:
                break

            if cls._soon:
                fn, args = cls._soon.popleft()
            else:
                fn, args = cls._timers.popleft()

            ran += 1
            fn(*args)

        return ran

    @classmethod
    def _hand_over(cls, loop: asyncio.AbstractEventLoop) -> None:
        """Move work queued outside any loop onto ``loop``, keeping its order."""
        if not cls._soon and not cls._timers:
            return

        logger.debug(
            f"Reactor handing {len(cls._soon)} queued and {len(cls._timers)} timer "
            f"callbacks to the running loop"
        )
        while cls._soon:
            fn, args = cls._soon.popleft()
            loop.call_soon(fn, *args)
        while cls._timers:
            fn, args = cls._timers.popleft()
            loop.call_later(cls._config.timer_delay, fn, *args)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
