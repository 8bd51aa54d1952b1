"""Abstract banking aggregator client.

Only the shape of the data handed to the ledger core is defined here; the
HTTP and authentication plumbing lives in concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional


class AggregatorError(Exception):
    """A request to the banking aggregator failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SessionExpiredError(AggregatorError):
    """The aggregator session is no longer authorized (HTTP 401)."""


class AggregatorClient(ABC):
    """Abstract client for an open-banking aggregator."""

    @abstractmethod
    def get_balances(self, account_uid: str) -> dict[str, Any]:
        """Fetch balances for an account.

        Returns:
            Raw response, e.g. ``{"balances": [{"balance_amount": {...}}]}``

        Raises:
            AggregatorError: If the request fails
        """
        pass

    @abstractmethod
    def get_transactions(self, account_uid: str, date_from: date) -> dict[str, Any]:
        """Fetch transactions booked on or after ``date_from``.

        Returns:
            Raw response, e.g. ``{"transactions": [...]}``

        Raises:
            AggregatorError: If the request fails
        """
        pass
