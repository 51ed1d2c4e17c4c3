"""Promises/A interop."""

from typing import Any, Callable, Generic, Optional, TypeVar

from .future import Future

E = TypeVar("E")
V = TypeVar("V")


class Promise(Generic[E, V]):
    """
    Thenable view of a Future.

    Not Promises/A+: ``then`` does not return a new promise. A+ consumers
    accept A thenables, so conformant implementations still interoperate.
    """

    def __init__(self, future: Future[E, V]):
        self._future = future

    def then(
        self,
        callback: Optional[Callable[[V], Any]] = None,
        errback: Optional[Callable[[E], Any]] = None,
    ) -> None:
        def on_settled(err, val):
            if err is not None:
                if errback:
                    errback(err)
            elif callback:
                callback(val)

        self._future.done(on_settled)
