"""pytest configuration and fixtures for wate tests."""

import pytest

from wate import Reactor, Result


@pytest.fixture(autouse=True)
def reactor():
    """Give every test a fresh reactor with default configuration.

    Drops anything a previous test left queued.
    """
    Reactor.shutdown()
    yield Reactor
    Reactor.shutdown()


@pytest.fixture
def resolve():
    """Drain the reactor and return the single settlement of a future.

    Only for synchronous tests; asyncio tests ``await`` the future instead.
    """
    def _resolve(future):
        seen = []
        future.done(lambda err, val: seen.append(Result(err, val)))
        Reactor.run_until_idle()
        assert len(seen) == 1, f"listener fired {len(seen)} times"
        return seen[0]
    return _resolve


class FakeEventSource:
    """Minimal event emitter with ``add_event_listener``."""

    def __init__(self):
        self.listeners = {}

    def add_event_listener(self, name, listener):
        self.listeners.setdefault(name, []).append(listener)

    def emit(self, name, *args):
        for listener in self.listeners.get(name, []):
            listener(*args)


class FakeThenable:
    """Promises/A style thenable resolved by hand."""

    def __init__(self):
        self.callbacks = []

    def then(self, callback, errback):
        self.callbacks.append((callback, errback))

    def fulfill(self, val):
        for callback, _ in self.callbacks:
            callback(val)

    def reject(self, err):
        for _, errback in self.callbacks:
            errback(err)


@pytest.fixture
def event_source():
    return FakeEventSource()


@pytest.fixture
def thenable():
    return FakeThenable()
