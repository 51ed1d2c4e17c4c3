"""
Future Combinators

Transformation, collection and spreading over futures.

Collections take ordered lists of futures. ``None`` entries are skipped and
do not count toward completion. Index-ordered outputs mirror input positions,
whatever order the members settle in.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar, Union

from .deferred import Callback
from .exceptions import CollectorOverflowError
from .factories import create, make, then
from .future import Future
from .result import Result

logger = logging.getLogger(__name__)

E = TypeVar("E")
V = TypeVar("V")
OutE = TypeVar("OutE")
OutV = TypeVar("OutV")

Futures = Sequence[Optional[Future]]


# =============================================================================
# Transformations
# =============================================================================

def bind_value(future: Future[E, V], transform: Callable[[V], OutV]) -> Future[E, OutV]:
    """
    Transform the value of a successful future.

    Errors pass through untouched and ``transform`` is never called for them.
    Exceptions raised by ``transform`` are not caught.

    Example:
        doubled = bind_value(value(10), lambda x: x * 2)
    """
    return create(lambda fulfill, reject: then(future, lambda v: fulfill(transform(v)), reject))


def bind_values(futures: Futures, transform: Callable[..., OutV]) -> Future[Any, OutV]:
    """
    Wait for every future, then call ``transform(*values)``.

    Fails with the first error to arrive.
    """
    def builder(settle):
        def on_all(err, values):
            if err is not None:
                settle(err)
            else:
                settle(None, transform(*values))
        when_all(futures).done(on_all)
    return make(builder)


def bind(
    future: Union[Future, Futures],
    transform: Callable[..., OutV],
) -> Future[Any, OutV]:
    """Bind a single future (``bind_value``) or a list of them (``bind_values``)."""
    if isinstance(future, (list, tuple)):
        return bind_values(future, transform)
    return bind_value(future, transform)


def bind_error(future: Future[E, V], transform: Callable[[E], OutE]) -> Future[OutE, V]:
    """Transform the error of a failed future; values pass through untouched."""
    return create(lambda fulfill, reject: then(future, fulfill, lambda e: reject(transform(e))))


def bind_errors(futures: Futures, transform: Callable[..., OutE]) -> Future[OutE, Any]:
    """
    Wait for every future to fail, then call ``transform(*errors)``.

    The first success to arrive passes through instead.
    """
    def builder(settle):
        def on_none(errors, val):
            if errors is None:
                settle(None, val)
            else:
                settle(transform(*errors))
        when_none(futures).done(on_none)
    return make(builder)


def unwrap_value(future: Future[E, Future[OutE, V]]) -> Future[Union[E, OutE], V]:
    """Settle with the eventual outcome of the future held in the value channel."""
    def builder(settle):
        def on_outer(err, val):
            if err is not None:
                settle(err)
                return
            val.done(settle)
        future.done(on_outer)
    return make(builder)


def unwrap_error(future: Future[Future[E, OutV], V]) -> Future[E, Union[V, OutV]]:
    """Settle with the eventual outcome of the future held in the error channel."""
    def builder(settle):
        def on_outer(err, val):
            if err is None:
                settle(None, val)
                return
            err.done(settle)
        future.done(on_outer)
    return make(builder)


def flatten(future: Future) -> Future:
    """
    Collapse nested futures in the value channel.

    Descends until a non-future value is reached; an error at any level
    settles the result immediately.
    """
    def builder(settle):
        def descend(err, val):
            if err is not None:
                settle(err)
                return

            if not isinstance(val, Future):
                settle(None, val)
                return

            val.done(descend)

        future.done(descend)
    return make(builder)


def flat_bind(
    future: Union[Future, Futures],
    transform: Callable[..., Any],
) -> Future:
    """
    Bind over flattened inputs and flatten the output.

    Accepts a single future or a list of them, like ``bind``.
    """
    if isinstance(future, (list, tuple)):
        flat = [flatten(f) if f is not None else None for f in future]
        return flatten(bind_values(flat, transform))
    return flatten(bind_value(flatten(future), transform))


def invert(future: Future[E, V]) -> Future[V, E]:
    """Swap the error and value channels."""
    return make(lambda settle: future.done(lambda err, val: settle(val, err)))


# =============================================================================
# Collections
# =============================================================================

def when_all(futures: Futures) -> Future[Any, List[Any]]:
    """
    Combine futures into one holding all of their values.

    Values are index-ordered. The first error to arrive settles the result
    without waiting for the remaining futures.

    Example:
        when_all([value(1), value(2)])  # -> (None, [1, 2])
    """
    return make(lambda settle: _run(_collect_values, futures, settle))


def when_none(futures: Futures) -> Future[List[Any], Any]:
    """
    Combine futures into one holding all of their errors.

    Errors are index-ordered. The first success to arrive settles the result
    with its value without waiting for the remaining futures.
    """
    return invert(make(lambda settle: _run(_collect_errors, futures, settle)))


def when_settled(futures: Futures) -> Future[Any, List[Result]]:
    """Wait for every future and succeed with their index-ordered ``Result``s."""
    return make(lambda settle: _run(_collect_results, futures, settle))


def last_value(futures: Futures) -> Future[List[Any], Any]:
    """
    Get the value of the last future to succeed.

    Waits for every future. If none succeeded, fails with all errors in
    arrival order.
    """
    return make(lambda settle: _find_last(futures, _has_value, _get_value, _get_error, settle))


def last_error(futures: Futures) -> Future[Any, List[Any]]:
    """
    Get the error of the last future to fail.

    Waits for every future. If none failed, succeeds with all values in
    arrival order.
    """
    return invert(make(lambda settle: _find_last(futures, _has_error, _get_error, _get_value, settle)))


def concat_values(futures: Sequence[Optional[Future[Any, List[Any]]]]) -> Future[Any, List[Any]]:
    """Join the list values of all futures into one list, in input order."""
    return bind_value(when_all(futures), _flatten_lists)


def concat_errors(futures: Sequence[Optional[Future[List[Any], Any]]]) -> Future[List[Any], Any]:
    """Join the list errors of all futures into one list, in input order."""
    return bind_error(when_none(futures), _flatten_lists)


# =============================================================================
# Spreading
# =============================================================================

def spread_values(future: Future[E, Sequence[Any]], callback: Callable[..., Any]) -> Future[E, Sequence[Any]]:
    """Call ``callback(*values)`` if the future succeeds with a sequence."""
    def on_settled(err, values):
        if err is None:
            callback(*values)
    return future.done(on_settled)


def spread_errors(future: Future[Sequence[Any], V], callback: Callable[..., Any]) -> Future[Sequence[Any], V]:
    """Call ``callback(*errors)`` if the future fails with a sequence."""
    def on_settled(errors, val):
        if errors is not None:
            callback(*errors)
    return future.done(on_settled)


def spread_all(futures: Futures, callback: Callable[..., Any]) -> Future[Any, List[Any]]:
    """Call ``callback(*values)`` once every future succeeds."""
    return spread_values(when_all(futures), callback)


def spread_none(futures: Futures, callback: Callable[..., Any]) -> Future[List[Any], Any]:
    """Call ``callback(*errors)`` once every future fails."""
    return spread_errors(when_none(futures), callback)


# =============================================================================
# Aliases
# =============================================================================

transform = bind
transform_value = bind_value
transform_error = bind_error
flat_transform = flat_bind
unwrap = unwrap_value
concat = concat_values

first_value = when_none
first = first_value
first_error = when_all
last = last_value

splat_values = spread_values
splat_errors = spread_errors
splat_all = spread_all
splat = spread_all


# =============================================================================
# Internals
# =============================================================================

# A collector subscribes to one member and reports back through
# ``report(halt, payload)``: halt=True settles the output with ``payload`` as
# its error, halt=False counts the member as complete.
Collector = Callable[[Future, List[Any], int, Callable[..., None]], None]


def _run(collect: Collector, futures: Futures, settle: Callback) -> None:
    slots: List[Any] = [None] * len(futures)
    pending = 0
    halted = False

    def report(halt: bool, payload: Any = None) -> None:
        nonlocal pending, halted
        if halted:
            return

        if halt:
            halted = True
            settle(payload)
            return

        pending -= 1
        if pending == 0:
            settle(None, slots)

    for index, future in enumerate(futures):
        if future is None:
            continue
        pending += 1
        collect(future, slots, index, report)

    # Members always report on a later turn, so this only fires with nothing to wait on
    if pending == 0:
        settle(None, slots)


def _collect_values(future: Future, slots: List[Any], index: int, report: Callable[..., None]) -> None:
    def on_settled(err, val):
        if err is not None:
            report(True, err)
            return
        slots[index] = val
        report(False)
    future.done(on_settled)


def _collect_errors(future: Future, slots: List[Any], index: int, report: Callable[..., None]) -> None:
    def on_settled(err, val):
        if err is None:
            report(True, val)
            return
        slots[index] = err
        report(False)
    future.done(on_settled)


def _collect_results(future: Future, slots: List[Any], index: int, report: Callable[..., None]) -> None:
    def on_settled(err, val):
        slots[index] = Result(err, val)
        # Errors are captured in the slot, so this collector never halts
        report(False)
    future.done(on_settled)


def _collect_results_by_time(future: Future, slots: List[Any], index: int, report: Callable[..., None]) -> None:
    def on_settled(err, val):
        for position, slot in enumerate(slots):
            if slot is None:
                slots[position] = Result(err, val)
                logger.debug(f"Member {index} settled in arrival position {position}")
                break
        else:
            logger.error(f"No free arrival slot for member {index} among {len(slots)}")
            raise CollectorOverflowError(
                "Couldn't insert settlement into arrival-order slots",
                detail=f"member index {index}, {len(slots)} slots",
            )
        report(False)
    future.done(on_settled)


def _find_last(
    futures: Futures,
    predicate: Callable[[Result], bool],
    hit: Callable[[Result], Any],
    miss: Callable[[Result], Any],
    settle: Callback,
) -> None:
    def on_arrived(err, results):
        misses = []
        found = False
        last = None

        for result in results:
            if result is None:
                continue
            if predicate(result):
                last = hit(result)
                found = True
            else:
                misses.append(miss(result))

        if found:
            settle(None, last)
        else:
            settle(misses)

    make(lambda by_time: _run(_collect_results_by_time, futures, by_time)).done(on_arrived)


def _has_value(result: Result) -> bool:
    return result.error is None


def _has_error(result: Result) -> bool:
    return result.error is not None


def _get_value(result: Result) -> Any:
    return result.value


def _get_error(result: Result) -> Any:
    return result.error


def _flatten_lists(lists: Sequence[Optional[Sequence[Any]]]) -> List[Any]:
    out: List[Any] = []
    for inner in lists:
        if inner is None:
            continue
        out.extend(inner)
    return out
