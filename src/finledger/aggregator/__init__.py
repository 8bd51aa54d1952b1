"""Banking aggregator client interface."""

from finledger.aggregator.base import (
    AggregatorClient,
    AggregatorError,
    SessionExpiredError,
)

__all__ = ["AggregatorClient", "AggregatorError", "SessionExpiredError"]
