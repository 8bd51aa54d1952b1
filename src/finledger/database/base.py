"""Abstract database interface."""

import threading
from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from finledger.domain.entities import (
    Account,
    Debt,
    DebtDetail,
    DebtType,
    Person,
    SubDebt,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for finledger.

    Mutating methods commit individually. Services hold ``write_lock`` around
    read-modify-write sequences; it is re-entrant and shared process-wide.
    """

    write_lock = threading.RLock()

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Person operations
    @abstractmethod
    def create_person(self, name: str) -> int:
        """Create a person. Returns person ID.

        Raises:
            DuplicateNameError: If the name is already taken
        """
        pass

    @abstractmethod
    def get_person(self, person_id: int) -> Optional[Person]:
        """Get person by ID."""
        pass

    @abstractmethod
    def get_person_by_name(self, name: str) -> Optional[Person]:
        """Get person by exact name."""
        pass

    @abstractmethod
    def list_people(self) -> list[Person]:
        """List all people ordered by name."""
        pass

    # Debt operations
    @abstractmethod
    def create_debt(
        self,
        person_id: int,
        debt_type: DebtType,
        amount: Decimal,
        description: str,
        currency: str,
    ) -> int:
        """Create a debt. Returns debt ID."""
        pass

    @abstractmethod
    def get_debt(self, debt_id: int) -> Optional[Debt]:
        """Get debt by ID."""
        pass

    @abstractmethod
    def list_debt_details(self, debt_type: Optional[DebtType] = None) -> list[DebtDetail]:
        """List debts with person names and repayments, newest first."""
        pass

    @abstractmethod
    def delete_debt(self, debt_id: int) -> None:
        """Delete a debt and its repayments."""
        pass

    # Repayment operations
    @abstractmethod
    def create_sub_debt(self, debt_id: int, amount: Decimal, note: str) -> int:
        """Record a repayment against a debt. Returns repayment ID."""
        pass

    @abstractmethod
    def get_paid_amount(self, debt_id: int) -> Decimal:
        """Sum of all repayments recorded against a debt."""
        pass

    @abstractmethod
    def list_sub_debts(self, debt_id: int) -> list[SubDebt]:
        """List repayments of a debt, newest first."""
        pass

    # Account operations
    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by its identity."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def save_account(
        self,
        account_id: str,
        name: str,
        iban: str,
        balance: Decimal,
        currency: str,
        bank_name: str,
        last_synced: datetime,
    ) -> bool:
        """Insert or replace an account. Returns True if it was newly created."""
        pass

    # Transaction operations
    @abstractmethod
    def save_transaction(
        self,
        transaction_id: str,
        account_id: str,
        booking_date: date,
        amount: Decimal,
        currency: str,
        creditor_name: Optional[str],
        debtor_name: Optional[str],
        remittance_information: str,
        raw_json: str,
    ) -> bool:
        """Insert or replace a transaction. Returns True if it was newly created."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by its identity."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions, newest booking date first.

        Args:
            account_id: Optional account filter
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter
        """
        pass
