"""
wate Core

Settlement cells, futures and the reactor that schedules their delivery.
"""

from .config import ReactorConfig, SchedulingPolicy
from .deferred import Deferred
from .exceptions import CollectorOverflowError, DoubleSettlementError, WateError
from .future import Future
from .promise import Promise
from .reactor import Reactor
from .result import Result

__all__ = [
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
]
