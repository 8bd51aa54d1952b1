"""Domain model entities for finledger.

These are pure data classes representing business concepts, independent of
database schema. Services and the CLI only exchange these objects; ORM rows
never leave the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class DebtType(str, Enum):
    """Direction of a debt from the user's point of view."""

    OWED_BY_ME = "OWED_BY_ME"
    OWED_TO_ME = "OWED_TO_ME"


class SkipReason(str, Enum):
    """Why an upstream record was skipped during reconciliation."""

    NOT_A_MAPPING = "not_a_mapping"
    INVALID_IDENTITY = "invalid_identity"
    MISSING_AMOUNT = "missing_amount"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"


@dataclass(frozen=True)
class Normalized(Generic[T]):
    """Outcome of normalizing one upstream record.

    Exactly one of ``value`` and ``skip_reason`` is set.
    """

    value: Optional[T] = None
    skip_reason: Optional[SkipReason] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.skip_reason is None

    @classmethod
    def skip(cls, reason: SkipReason, detail: str = "") -> "Normalized[T]":
        return cls(value=None, skip_reason=reason, detail=detail)


# Debt ledger


@dataclass(frozen=True)
class Person:
    """Person the user owes money to or is owed money by."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class PersonSummary:
    """Person with the signed net balance of all their open debts."""

    id: int
    name: str
    created_at: datetime
    net_balance: Decimal


@dataclass(frozen=True)
class SubDebt:
    """Partial repayment recorded against a debt."""

    id: int
    debt_id: int
    amount: Decimal
    note: str
    created_at: datetime


@dataclass(frozen=True)
class Debt:
    """Open debt between the user and a person."""

    id: int
    person_id: int
    type: DebtType
    amount: Decimal
    currency: str
    description: str
    created_at: datetime


@dataclass(frozen=True)
class DebtDetail:
    """Debt joined with its person and repayments, with computed balances."""

    id: int
    person_id: int
    person_name: str
    type: DebtType
    amount: Decimal
    currency: str
    description: str
    created_at: datetime
    paid_amount: Decimal
    remaining_amount: Decimal
    sub_debts: tuple[SubDebt, ...] = ()


@dataclass(frozen=True)
class DebtTotals:
    """Aggregate of all net balances."""

    i_owe: Decimal
    owed_to_me: Decimal


@dataclass(frozen=True)
class RepaymentResult:
    """Outcome of recording a repayment."""

    id: int
    deleted: bool
    overpaid: Decimal = Decimal("0")


# Accounts and transactions


@dataclass(frozen=True)
class Account:
    """Bank account as stored locally."""

    account_id: str
    name: str
    iban: str
    balance: Decimal
    currency: str
    bank_name: str
    last_synced: datetime


@dataclass(frozen=True)
class Transaction:
    """Bank transaction as stored locally."""

    transaction_id: str
    account_id: str
    booking_date: date
    amount: Decimal
    currency: str
    creditor_name: Optional[str]
    debtor_name: Optional[str]
    remittance_information: str
    raw_json: str
    created_at: datetime


@dataclass(frozen=True)
class TransactionView:
    """Transaction with its resolved counterparty display name."""

    transaction: Transaction
    display_name: str


@dataclass(frozen=True)
class AccountWithTransactions:
    """Account with its transactions, newest booking date first."""

    account: Account
    transactions: tuple[TransactionView, ...] = ()


@dataclass(frozen=True)
class SyncReport:
    """Counts of what a sync stored and skipped."""

    accounts_saved: int = 0
    accounts_skipped: int = 0
    transactions_saved: int = 0
    transactions_skipped: int = 0
    skip_reasons: tuple[SkipReason, ...] = ()


@dataclass(frozen=True)
class RefreshReport:
    """Outcome of refreshing known accounts against the aggregator."""

    refreshed_accounts: tuple[str, ...] = ()
    failed_accounts: tuple[str, ...] = ()
    expired_accounts: tuple[str, ...] = ()
    transactions_saved: int = 0
    transactions_skipped: int = 0


@dataclass(frozen=True)
class SpendingPoint:
    """Aggregated amount for one period label (a date or a month)."""

    period: str
    amount: Decimal
    count: int = field(default=0, compare=False)
