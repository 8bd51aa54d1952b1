"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so schema changes stay out of the
domain services.
"""

from decimal import Decimal

from finledger.domain import entities as domain
from finledger.database.models import (
    Person as ORMPerson,
    Debt as ORMDebt,
    SubDebt as ORMSubDebt,
    Account as ORMAccount,
    Transaction as ORMTransaction,
)


def person_to_domain(orm_person: ORMPerson) -> domain.Person:
    """Convert SQLAlchemy Person model to domain Person entity."""
    return domain.Person(
        id=orm_person.id,
        name=orm_person.name,
        created_at=orm_person.created_at,
    )


def debt_to_domain(orm_debt: ORMDebt) -> domain.Debt:
    """Convert SQLAlchemy Debt model to domain Debt entity."""
    return domain.Debt(
        id=orm_debt.id,
        person_id=orm_debt.person_id,
        type=domain.DebtType(orm_debt.type),
        amount=Decimal(orm_debt.amount),
        currency=orm_debt.currency,
        description=orm_debt.description,
        created_at=orm_debt.created_at,
    )


def sub_debt_to_domain(orm_sub_debt: ORMSubDebt) -> domain.SubDebt:
    """Convert SQLAlchemy SubDebt model to domain SubDebt entity."""
    return domain.SubDebt(
        id=orm_sub_debt.id,
        debt_id=orm_sub_debt.debt_id,
        amount=Decimal(orm_sub_debt.amount),
        note=orm_sub_debt.note or "",
        created_at=orm_sub_debt.created_at,
    )


def debt_to_detail(orm_debt: ORMDebt) -> domain.DebtDetail:
    """Convert a Debt row with its person and repayments to a DebtDetail.

    Paid and remaining amounts are computed from the loaded repayments.
    """
    sub_debts = tuple(sub_debt_to_domain(sd) for sd in orm_debt.sub_debts)
    amount = Decimal(orm_debt.amount)
    paid = sum((sd.amount for sd in sub_debts), Decimal("0"))
    return domain.DebtDetail(
        id=orm_debt.id,
        person_id=orm_debt.person_id,
        person_name=orm_debt.person.name,
        type=domain.DebtType(orm_debt.type),
        amount=amount,
        currency=orm_debt.currency,
        description=orm_debt.description,
        created_at=orm_debt.created_at,
        paid_amount=paid,
        remaining_amount=amount - paid,
        sub_debts=sub_debts,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        account_id=orm_account.account_id,
        name=orm_account.name,
        iban=orm_account.iban or "",
        balance=Decimal(orm_account.balance),
        currency=orm_account.currency,
        bank_name=orm_account.bank_name,
        last_synced=orm_account.last_synced,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        transaction_id=orm_transaction.transaction_id,
        account_id=orm_transaction.account_id,
        booking_date=orm_transaction.booking_date,
        amount=Decimal(orm_transaction.amount),
        currency=orm_transaction.currency,
        creditor_name=orm_transaction.creditor_name,
        debtor_name=orm_transaction.debtor_name,
        remittance_information=orm_transaction.remittance_information or "",
        raw_json=orm_transaction.raw_json,
        created_at=orm_transaction.created_at,
    )
