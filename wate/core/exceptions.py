"""Settlement and bookkeeping exception hierarchy.

Channel errors flow through futures as ordinary data and are never raised.
The exceptions below indicate a broken contract and always surface loudly.
"""


class WateError(Exception):
    """Base exception for all fatal wate conditions."""

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class DoubleSettlementError(WateError):
    """A producer invoked its settlement callback more than once."""
    pass


class CollectorOverflowError(WateError):
    """Arrival-order bookkeeping saw more settlements than registered futures."""
    pass
