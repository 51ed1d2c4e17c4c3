"""
Future

Read-only handle over a settlement cell.
"""

import asyncio
from typing import Any, Callable, Generic, TypeVar

from .deferred import Callback, Deferred
from .result import Result

E = TypeVar("E")
V = TypeVar("V")


class Future(Generic[E, V]):
    """
    Dual-channel asynchronous value.

    Carries exactly one ``(error, value)`` outcome. A Future can only be
    observed; settlement belongs to whoever holds the cell's ``settle``.

    Examples:
        # Callback style
        future.done(lambda err, val: print(err, val))

        # Inside a coroutine
        result = await future
        if result.failed:
            ...
    """

    def __init__(self, deferred: Deferred[E, V]):
        self._deferred = deferred

    def done(self, callback: Callback) -> "Future[E, V]":
        """
        Subscribe to the settlement.

        Args:
            callback: Receives ``(error, value)`` exactly once, on a later turn

        Returns:
            This future, for chaining
        """
        self._deferred.subscribe(callback)
        return self

    def catch(self, callback: Callable[[E], Any]) -> "Future[E, V]":
        """Subscribe ``callback(error)``, invoked only on failure."""
        def on_settled(err, val):
            if err is not None:
                callback(err)
        return self.done(on_settled)

    def __await__(self):
        """
        Make future awaitable.

        Resolves to the settled ``Result``; channel errors are not raised.
        """
        async def _await_impl():
            loop = asyncio.get_running_loop()
            py_future = loop.create_future()

            def callback(err, val):
                if not py_future.done():
                    py_future.set_result(Result(err, val))

            self.done(callback)
            return await py_future

        return _await_impl().__await__()
