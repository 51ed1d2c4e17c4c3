"""
Future Factories

Constructors for futures and bridges to other async-value shapes.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Protocol, TypeVar

from .deferred import Callback, Deferred
from .future import Future
from .promise import Promise

E = TypeVar("E")
V = TypeVar("V")


class Thenable(Protocol):
    def then(self, callback: Callable[[Any], Any], errback: Callable[[Any], Any]) -> Any:
        ...


class EventSource(Protocol):
    def add_event_listener(self, name: str, listener: Callable[..., Any]) -> Any:
        ...


def make(builder: Callable[[Callback], Any]) -> Future:
    """
    Create a future from an error-first callback.

    The builder runs synchronously and receives ``settle(error=None, value=None)``,
    which it may call now or later, but only once.

    Example:
        future = make(lambda settle: settle(None, 42))
    """
    deferred: Deferred = Deferred()
    builder(deferred.settle)
    return Future(deferred)


def create(builder: Callable[[Callable[..., None], Callable[[Any], None]], Any]) -> Future:
    """
    Create a future from separate ``fulfill(value)`` and ``reject(error)``.

    Example:
        future = create(lambda fulfill, reject: fulfill(42))
    """
    deferred: Deferred = Deferred()

    def fulfill(value: Any = None) -> None:
        deferred.settle(None, value)

    def reject(error: Any) -> None:
        deferred.settle(error)

    builder(fulfill, reject)
    return Future(deferred)


def value(val: V) -> Future[Any, V]:
    """Create a future already settled with ``(None, val)``."""
    return create(lambda fulfill, reject: fulfill(val))


def error(err: E) -> Future[E, Any]:
    """Create a future already settled with ``(err, None)``."""
    return make(lambda settle: settle(err))


def from_event_source(source: EventSource) -> Future:
    """
    Wrap a loadable source, such as an image element.

    Settles with the source itself on its ``load`` event, or with the event
    payload as the error on its ``error`` event.
    """
    def builder(settle):
        source.add_event_listener("load", lambda *_: settle(None, source))
        source.add_event_listener("error", lambda err: settle(err))
    return make(builder)


def then(
    future: Future[E, V],
    callback: Callable[[V], Any],
    errback: Optional[Callable[[E], Any]] = None,
) -> Future[E, V]:
    """Promises/A style ``then`` as a function rather than a method."""
    def on_settled(err, val):
        if err is not None:
            if errback:
                errback(err)
        else:
            callback(val)
    return future.done(on_settled)


def from_promise(promise: Thenable) -> Future:
    """Turn any ``then(callback, errback)`` thenable into a future."""
    def builder(settle):
        promise.then(lambda val: settle(None, val), lambda err: settle(err))
    return make(builder)


def to_promise(future: Future[E, V]) -> Promise[E, V]:
    """Turn a future into a Promises/A thenable."""
    return Promise(future)


def from_asyncio(awaitable: Awaitable[V]) -> Future[BaseException, V]:
    """
    Bridge an asyncio future or coroutine into a future.

    The awaitable's result lands on the value channel and its exception on
    the error channel. Coroutines need a running event loop.

    Raises:
        RuntimeError: If given a coroutine outside a running event loop
    """
    if asyncio.iscoroutine(awaitable):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            awaitable.close()
            raise
        task = loop.create_task(awaitable)
    else:
        task = asyncio.ensure_future(awaitable)

    def builder(settle):
        def on_done(fut):
            if fut.cancelled():
                settle(asyncio.CancelledError())
            elif fut.exception() is not None:
                settle(fut.exception())
            else:
                settle(None, fut.result())
        task.add_done_callback(on_done)

    return make(builder)
