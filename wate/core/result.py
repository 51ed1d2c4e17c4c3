"""Settled outcome snapshot."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

E = TypeVar("E")
V = TypeVar("V")


@dataclass(frozen=True)
class Result(Generic[E, V]):
    """Immutable ``(error, value)`` pair captured from one settlement.

    A non-``None`` error marks a failure regardless of the value.
    """
    error: Optional[E] = None
    value: Optional[V] = None

    @property
    def failed(self) -> bool:
        return self.error is not None
