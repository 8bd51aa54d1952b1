"""Spending statistics domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from finledger.database.base import Database
from finledger.domain.entities import SpendingPoint, Transaction
from finledger.utils.date_parser import days_ago, months_ago


class StatisticsService:
    """Service for aggregating transactions into spending and income series."""

    def __init__(self, db: Database):
        """Initialize statistics service.

        Args:
            db: Database instance
        """
        self.db = db

    def daily_spending(self, days: int = 30, today: Optional[date] = None) -> list[SpendingPoint]:
        """Total spending per booking date over a trailing window.

        Spending is the absolute value of debits (negative amounts). The
        window has no upper bound, so bookings dated after ``today`` count.

        Args:
            days: Length of the trailing window
            today: Reference date, defaults to the current date

        Returns:
            One point per date that had spending, oldest first
        """
        today = today or date.today()
        transactions = self.db.list_transactions(start_date=days_ago(days, today))
        return self._aggregate(
            (txn for txn in transactions if txn.amount < 0),
            lambda txn: txn.booking_date.isoformat(),
            lambda txn: -txn.amount,
        )

    def monthly_income(self, months: int = 6, today: Optional[date] = None) -> list[SpendingPoint]:
        """Total income per calendar month (``YYYY-MM``) over a trailing window.

        The window starts exactly ``months`` calendar months before ``today``,
        so the oldest month is usually partial. Like ``daily_spending`` it has
        no upper bound.

        Args:
            months: Length of the trailing window in months
            today: Reference date, defaults to the current date

        Returns:
            One point per month that had income, oldest first
        """
        today = today or date.today()
        transactions = self.db.list_transactions(start_date=months_ago(months, today))
        return self._aggregate(
            (txn for txn in transactions if txn.amount > 0),
            lambda txn: txn.booking_date.strftime("%Y-%m"),
            lambda txn: txn.amount,
        )

    @staticmethod
    def _aggregate(
        transactions,
        period_key: Callable[[Transaction], str],
        value: Callable[[Transaction], Decimal],
    ) -> list[SpendingPoint]:
        totals: dict[str, Decimal] = defaultdict(Decimal)
        counts: dict[str, int] = defaultdict(int)
        for txn in transactions:
            key = period_key(txn)
            totals[key] += value(txn)
            counts[key] += 1
        return [
            SpendingPoint(period=key, amount=totals[key], count=counts[key])
            for key in sorted(totals)
        ]
