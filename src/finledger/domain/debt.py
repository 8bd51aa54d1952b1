"""Debt ledger domain service."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from finledger.database.base import Database
from finledger.domain.entities import (
    DebtDetail,
    DebtTotals,
    DebtType,
    Person,
    PersonSummary,
    RepaymentResult,
)
from finledger.domain.errors import (
    DuplicateNameError,
    NotFoundError,
    ValidationError,
    debt_not_found,
    duplicate_person_name,
    invalid_debt_type,
    non_positive_amount,
    person_not_found,
    too_many_decimals,
)
from finledger.utils.amount_parser import parse_amount

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "EUR"
DEFAULT_DESCRIPTION = "Debt"

# Debt and repayment columns store cents.
CENT = Decimal("0.01")


def _to_debt_type(value: DebtType | str) -> DebtType:
    if isinstance(value, DebtType):
        return value
    try:
        return DebtType(str(value).strip().upper().replace("-", "_"))
    except ValueError as e:
        raise ValidationError(invalid_debt_type(value)) from e


def _to_positive_amount(value: Decimal | str | int | float) -> Decimal:
    try:
        amount = parse_amount(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    try:
        exact_cents = amount == amount.quantize(CENT)
    except InvalidOperation as e:
        raise ValidationError(f"Amount out of range: {amount}") from e
    if not exact_cents:
        raise ValidationError(too_many_decimals(amount))
    if amount <= 0:
        raise ValidationError(non_positive_amount(amount))
    return amount


class DebtService:
    """Service for the informal debt ledger between the user and people.

    A debt stays open while its remaining balance (amount minus the sum of its
    repayments) is positive. The repayment that brings it to zero or below
    deletes the debt together with its repayments; there is no settled state.
    """

    def __init__(self, db: Database):
        """Initialize debt service.

        Args:
            db: Database instance
        """
        self.db = db

    # People

    def create_person(self, name: str) -> int:
        """Create a person.

        Args:
            name: Unique, non-empty person name

        Returns:
            Person ID

        Raises:
            ValidationError: If the name is empty
            DuplicateNameError: If a person with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Person name must not be empty")

        if self.db.get_person_by_name(name) is not None:
            raise DuplicateNameError(duplicate_person_name(name))

        return self.db.create_person(name)

    def get_person(self, person_id: int) -> Optional[Person]:
        """Get person by ID."""
        return self.db.get_person(person_id)

    def get_person_by_name(self, name: str) -> Optional[Person]:
        """Get person by exact name."""
        return self.db.get_person_by_name(name)

    def list_people(self) -> list[Person]:
        """List all people ordered by name."""
        return self.db.list_people()

    # Debts

    def create_debt(
        self,
        person_id: int,
        debt_type: DebtType | str,
        amount: Decimal | str | int | float,
        description: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> int:
        """Create a debt for a person.

        Args:
            person_id: Owning person ID
            debt_type: OWED_BY_ME or OWED_TO_ME
            amount: Principal, must be greater than zero
            description: Optional description, defaults to "Debt"
            currency: Optional currency code, defaults to EUR

        Returns:
            Debt ID

        Raises:
            ValidationError: If type or amount is invalid
            NotFoundError: If the person does not exist
        """
        debt_type = _to_debt_type(debt_type)
        amount = _to_positive_amount(amount)

        if self.db.get_person(person_id) is None:
            raise NotFoundError(person_not_found(person_id))

        return self.db.create_debt(
            person_id=person_id,
            debt_type=debt_type,
            amount=amount,
            description=(description or "").strip() or DEFAULT_DESCRIPTION,
            currency=(currency or "").strip().upper() or DEFAULT_CURRENCY,
        )

    def record_repayment(
        self,
        debt_id: int,
        amount: Decimal | str | int | float,
        note: Optional[str] = None,
    ) -> RepaymentResult:
        """Record a partial repayment and settle the debt if it is paid off.

        Overpayment is accepted; the excess is reported in the result and
        logged, then discarded together with the debt.

        Args:
            debt_id: Debt ID
            amount: Repaid amount, must be greater than zero
            note: Optional free-text note

        Returns:
            RepaymentResult with the repayment ID and whether the debt was deleted

        Raises:
            ValidationError: If amount is invalid
            NotFoundError: If the debt does not exist
        """
        amount = _to_positive_amount(amount)

        with self.db.write_lock:
            debt = self.db.get_debt(debt_id)
            if debt is None:
                raise NotFoundError(debt_not_found(debt_id))

            sub_debt_id = self.db.create_sub_debt(debt_id, amount, (note or "").strip())
            remaining = debt.amount - self.db.get_paid_amount(debt_id)

            if remaining > 0:
                return RepaymentResult(id=sub_debt_id, deleted=False)

            self.db.delete_debt(debt_id)

        overpaid = -remaining
        if overpaid > 0:
            logger.warning(
                "Debt %s overpaid by %s %s; excess discarded", debt_id, overpaid, debt.currency
            )
        logger.info("Debt %s settled and removed", debt_id)
        return RepaymentResult(id=sub_debt_id, deleted=True, overpaid=overpaid)

    def delete_debt(self, debt_id: int) -> None:
        """Delete a debt and its repayments regardless of remaining balance.

        Raises:
            NotFoundError: If the debt does not exist
        """
        if self.db.get_debt(debt_id) is None:
            raise NotFoundError(debt_not_found(debt_id))
        self.db.delete_debt(debt_id)

    # Queries

    def get_debts_list(self, debt_type: Optional[DebtType | str] = None) -> list[DebtDetail]:
        """List debts with paid/remaining amounts and repayments.

        Args:
            debt_type: Optional filter on debt type

        Returns:
            Debts ordered by creation time, newest first
        """
        if debt_type is not None:
            debt_type = _to_debt_type(debt_type)
        return self.db.list_debt_details(debt_type)

    def get_people_summary(self) -> list[PersonSummary]:
        """List every person with the signed net balance of their debts.

        Money owed to the user counts positive, money the user owes counts
        negative. Balances are recomputed from repayments on every call.
        """
        balances: dict[int, Decimal] = {}
        for debt in self.db.list_debt_details():
            sign = 1 if debt.type == DebtType.OWED_TO_ME else -1
            balances[debt.person_id] = (
                balances.get(debt.person_id, Decimal("0")) + sign * debt.remaining_amount
            )

        return [
            PersonSummary(
                id=person.id,
                name=person.name,
                created_at=person.created_at,
                net_balance=balances.get(person.id, Decimal("0")),
            )
            for person in self.db.list_people()
        ]

    def get_totals(self) -> DebtTotals:
        """Sum positive net balances into owed_to_me and negative ones into i_owe."""
        i_owe = Decimal("0")
        owed_to_me = Decimal("0")
        for person in self.get_people_summary():
            if person.net_balance > 0:
                owed_to_me += person.net_balance
            elif person.net_balance < 0:
                i_owe += -person.net_balance
        return DebtTotals(i_owe=i_owe, owed_to_me=owed_to_me)
