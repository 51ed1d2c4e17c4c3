"""
wate - Dual-Channel Futures

Error-first futures that settle exactly once with an ``(error, value)`` pair,
plus combinators for composing many of them.

Features:
- Write-once settlement with next-turn listener delivery
- Conjunction, disjunction and racing over lists of futures
- Value/error channel transforms, unwrapping and flattening
- Promises/A and asyncio interop

``wate.all``, ``wate.none`` and ``wate.settled`` are attribute aliases for
``when_all``, ``when_none`` and ``when_settled``. They are left out of
``__all__`` so ``from wate import *`` never shadows the ``all`` builtin.
"""

from .core import (
    CollectorOverflowError,
    Deferred,
    DoubleSettlementError,
    Future,
    Promise,
    Reactor,
    ReactorConfig,
    Result,
    SchedulingPolicy,
    WateError,
)
from .core.factories import (
    make, create, value, error,
    from_event_source, then, from_promise, to_promise, from_asyncio,
)
from .core.combinators import (
    bind, bind_value, bind_values, bind_error, bind_errors,
    transform, transform_value, transform_error,
    unwrap, unwrap_value, unwrap_error,
    flatten, flat_bind, flat_transform, invert,
    when_all, when_none, when_settled,
    first, first_value, first_error, last, last_value, last_error,
    concat, concat_values, concat_errors,
    spread_values, spread_errors, spread_all, spread_none,
    splat, splat_values, splat_errors, splat_all,
)

all = when_all
none = when_none
settled = when_settled


__all__ = [
    # Core types
    'Deferred',
    'Future',
    'Promise',
    'Reactor',
    'ReactorConfig',
    'Result',
    'SchedulingPolicy',
    'WateError',
    'DoubleSettlementError',
    'CollectorOverflowError',
    # Factories
    'make',
    'create',
    'value',
    'error',
    'from_event_source',
    'then',
    'from_promise',
    'to_promise',
    'from_asyncio',
    # Transformations
    'bind',
    'bind_value',
    'bind_values',
    'bind_error',
    'bind_errors',
    'transform',
    'transform_value',
    'transform_error',
    'unwrap',
    'unwrap_value',
    'unwrap_error',
    'flatten',
    'flat_bind',
    'flat_transform',
    'invert',
    # Collections
    'when_all',
    'when_none',
    'when_settled',
    'first',
    'first_value',
    'first_error',
    'last',
    'last_value',
    'last_error',
    'concat',
    'concat_values',
    'concat_errors',
    # Spreading
    'spread_values',
    'spread_errors',
    'spread_all',
    'spread_none',
    'splat',
    'splat_values',
    'splat_errors',
    'splat_all',
]
