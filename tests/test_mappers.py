"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from finledger.database.models import (
    Account as ORMAccount,
    Debt as ORMDebt,
    Person as ORMPerson,
    SubDebt as ORMSubDebt,
    Transaction as ORMTransaction,
)
from finledger.database.mappers import (
    account_to_domain,
    debt_to_detail,
    debt_to_domain,
    person_to_domain,
    transaction_to_domain,
)
from finledger.domain.entities import (
    Account,
    Debt,
    DebtDetail,
    DebtType,
    Person,
    Transaction,
)


class TestPersonMapper:
    """Tests for Person mapper."""

    def test_person_to_domain(self):
        """Test converting ORM Person to domain Person."""
        orm_person = ORMPerson(id=1, name="Alice", created_at=datetime.now(UTC))
        person = person_to_domain(orm_person)

        assert isinstance(person, Person)
        assert person.id == 1
        assert person.name == "Alice"
        assert person.created_at == orm_person.created_at


class TestDebtMapper:
    """Tests for Debt mappers."""

    def _orm_debt(self):
        created_at = datetime.now(UTC)
        orm_person = ORMPerson(id=3, name="Bob", created_at=created_at)
        orm_debt = ORMDebt(
            id=7,
            person_id=3,
            type="OWED_TO_ME",
            amount=Decimal("100.00"),
            currency="EUR",
            description="Concert tickets",
            created_at=created_at,
        )
        orm_debt.person = orm_person
        orm_debt.sub_debts = [
            ORMSubDebt(id=2, debt_id=7, amount=Decimal("25.00"), note="", created_at=created_at),
            ORMSubDebt(id=1, debt_id=7, amount=Decimal("10.00"), note="cash", created_at=created_at),
        ]
        return orm_debt

    def test_debt_to_domain(self):
        """Test converting ORM Debt to domain Debt."""
        debt = debt_to_domain(self._orm_debt())

        assert isinstance(debt, Debt)
        assert debt.type == DebtType.OWED_TO_ME
        assert debt.amount == Decimal("100.00")
        assert debt.description == "Concert tickets"

    def test_debt_to_detail(self):
        """Test computing paid and remaining amounts from repayments."""
        detail = debt_to_detail(self._orm_debt())

        assert isinstance(detail, DebtDetail)
        assert detail.person_name == "Bob"
        assert detail.paid_amount == Decimal("35.00")
        assert detail.remaining_amount == Decimal("65.00")
        assert [sd.id for sd in detail.sub_debts] == [2, 1]
        assert detail.sub_debts[1].note == "cash"


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            account_id="acc-1",
            name="Checking",
            iban=None,
            balance=Decimal("12.34"),
            currency="EUR",
            bank_name="Bank",
            last_synced=datetime.now(UTC),
        )
        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.account_id == "acc-1"
        assert account.iban == ""
        assert account.balance == Decimal("12.34")


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction to domain Transaction."""
        orm_txn = ORMTransaction(
            transaction_id="tx-1",
            account_id="acc-1",
            booking_date=date(2024, 1, 15),
            amount=Decimal("-50.00"),
            currency="EUR",
            creditor_name="Shop",
            debtor_name=None,
            remittance_information=None,
            raw_json="{}",
            created_at=datetime.now(UTC),
        )
        txn = transaction_to_domain(orm_txn)

        assert isinstance(txn, Transaction)
        assert txn.transaction_id == "tx-1"
        assert txn.amount == Decimal("-50.00")
        assert txn.remittance_information == ""
        assert txn.creditor_name == "Shop"
