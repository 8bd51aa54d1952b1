"""Tests for the debt ledger service."""

import pytest
from decimal import Decimal

from finledger.domain.entities import DebtType
from finledger.domain.errors import (
    DuplicateNameError,
    NotFoundError,
    ValidationError,
)


def test_create_person(debt_service):
    """Test creating a person."""
    person_id = debt_service.create_person("Alice")
    person = debt_service.get_person(person_id)

    assert person is not None
    assert person.name == "Alice"


def test_create_person_strips_name(debt_service):
    """Test that surrounding whitespace is removed from names."""
    person_id = debt_service.create_person("  Bob  ")
    assert debt_service.get_person(person_id).name == "Bob"


def test_create_person_empty_name(debt_service):
    """Test that an empty name is rejected."""
    with pytest.raises(ValidationError):
        debt_service.create_person("   ")


def test_create_person_duplicate_name(debt_service):
    """Test that a second person with the same name is rejected."""
    debt_service.create_person("Alice")

    with pytest.raises(DuplicateNameError):
        debt_service.create_person("Alice")

    people = [p for p in debt_service.list_people() if p.name == "Alice"]
    assert len(people) == 1


def test_duplicate_name_is_a_value_error(debt_service):
    """Test that domain errors stay compatible with ValueError."""
    debt_service.create_person("Alice")
    with pytest.raises(ValueError, match="already exists"):
        debt_service.create_person("Alice")


def test_create_debt(debt_service, sample_person):
    """Test creating a debt with defaults."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, "100")

    debts = debt_service.get_debts_list()
    assert len(debts) == 1
    debt = debts[0]
    assert debt.id == debt_id
    assert debt.person_name == "Alice"
    assert debt.amount == Decimal("100")
    assert debt.paid_amount == Decimal("0")
    assert debt.remaining_amount == Decimal("100")
    assert debt.currency == "EUR"
    assert debt.description == "Debt"
    assert debt.sub_debts == ()


def test_create_debt_accepts_cli_style_type(debt_service, sample_person):
    """Test that 'owed-by-me' is accepted as a debt type."""
    debt_service.create_debt(
        sample_person.id, "owed-by-me", 12.5, description="Lunch", currency="usd"
    )

    debt = debt_service.get_debts_list()[0]
    assert debt.type == DebtType.OWED_BY_ME
    assert debt.amount == Decimal("12.5")
    assert debt.description == "Lunch"
    assert debt.currency == "USD"


def test_create_debt_invalid_type(debt_service, sample_person):
    """Test that an unknown debt type is rejected."""
    with pytest.raises(ValidationError, match="Invalid debt type"):
        debt_service.create_debt(sample_person.id, "SOMETIMES", 10)


@pytest.mark.parametrize("amount", [0, -5, "abc"])
def test_create_debt_invalid_amount(debt_service, sample_person, amount):
    """Test that zero, negative and unparseable amounts are rejected."""
    with pytest.raises(ValidationError):
        debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, amount)
    assert debt_service.get_debts_list() == []


def test_create_debt_unknown_person(debt_service):
    """Test that a debt needs an existing person."""
    with pytest.raises(NotFoundError):
        debt_service.create_debt(999, DebtType.OWED_TO_ME, 10)


def test_partial_repayment_keeps_debt(debt_service, sample_person):
    """Test that a partial repayment reduces the remaining balance."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 100)

    result = debt_service.record_repayment(debt_id, 60, note="First half")

    assert result.deleted is False
    assert result.overpaid == Decimal("0")
    debt = debt_service.get_debts_list()[0]
    assert debt.paid_amount == Decimal("60")
    assert debt.remaining_amount == Decimal("40")
    assert len(debt.sub_debts) == 1
    assert debt.sub_debts[0].id == result.id
    assert debt.sub_debts[0].note == "First half"


def test_full_repayment_removes_debt(debt_service, sample_person):
    """Test that paying the full amount deletes the debt and its repayments."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 100)

    result = debt_service.record_repayment(debt_id, 100)

    assert result.deleted is True
    assert debt_service.get_debts_list() == []
    assert debt_service.db.list_sub_debts(debt_id) == []


def test_split_repayment_matches_single_repayment(debt_service, sample_person):
    """Test that 60 then 40 ends in the same state as one repayment of 100."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 100)

    first = debt_service.record_repayment(debt_id, 60)
    second = debt_service.record_repayment(debt_id, 40)

    assert first.deleted is False
    assert second.deleted is True
    assert debt_service.get_debts_list() == []
    assert debt_service.db.list_sub_debts(debt_id) == []
    assert debt_service.get_people_summary()[0].net_balance == Decimal("0")


def test_overpayment_settles_and_reports_excess(debt_service, sample_person):
    """Test that overpaying settles the debt and reports the discarded excess."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_BY_ME, 50)

    result = debt_service.record_repayment(debt_id, "65.50")

    assert result.deleted is True
    assert result.overpaid == Decimal("15.50")
    assert debt_service.get_debts_list() == []


def test_repayment_unknown_debt(debt_service):
    """Test that repaying a missing debt fails."""
    with pytest.raises(NotFoundError):
        debt_service.record_repayment(42, 10)


def test_repayment_invalid_amount(debt_service, sample_person):
    """Test that a non-positive repayment is rejected and nothing is recorded."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 100)

    with pytest.raises(ValidationError):
        debt_service.record_repayment(debt_id, 0)

    assert debt_service.get_debts_list()[0].paid_amount == Decimal("0")


def test_repayment_after_settlement_fails(debt_service, sample_person):
    """Test that a settled debt cannot be repaid again."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 10)
    debt_service.record_repayment(debt_id, 10)

    with pytest.raises(NotFoundError):
        debt_service.record_repayment(debt_id, 1)


def test_delete_debt(debt_service, sample_person):
    """Test deleting an open debt with repayments."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 100)
    debt_service.record_repayment(debt_id, 30)

    debt_service.delete_debt(debt_id)

    assert debt_service.get_debts_list() == []
    assert debt_service.db.list_sub_debts(debt_id) == []


def test_delete_missing_debt(debt_service):
    """Test deleting a debt that does not exist."""
    with pytest.raises(NotFoundError):
        debt_service.delete_debt(7)


def test_debts_list_newest_first_and_filtered(debt_service, sample_person):
    """Test ordering and type filtering of the debt list."""
    first = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 10)
    second = debt_service.create_debt(sample_person.id, DebtType.OWED_BY_ME, 20)
    third = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 30)

    assert [d.id for d in debt_service.get_debts_list()] == [third, second, first]
    assert [d.id for d in debt_service.get_debts_list(DebtType.OWED_TO_ME)] == [third, first]
    assert [d.id for d in debt_service.get_debts_list("owed-by-me")] == [second]


def test_net_balance_sign_convention(debt_service, sample_person):
    """Test that owed-to-me counts positive and owed-by-me negative."""
    debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 50)
    debt_service.create_debt(sample_person.id, DebtType.OWED_BY_ME, 30)

    summary = debt_service.get_people_summary()
    assert len(summary) == 1
    assert summary[0].name == "Alice"
    assert summary[0].net_balance == Decimal("20")

    totals = debt_service.get_totals()
    assert totals.owed_to_me == Decimal("20")
    assert totals.i_owe == Decimal("0")


def test_net_balance_uses_remaining_amount(debt_service, sample_person):
    """Test that repayments reduce the net balance."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_BY_ME, 80)
    debt_service.record_repayment(debt_id, 30)

    assert debt_service.get_people_summary()[0].net_balance == Decimal("-50")
    totals = debt_service.get_totals()
    assert totals.i_owe == Decimal("50")
    assert totals.owed_to_me == Decimal("0")


def test_totals_across_people(debt_service):
    """Test that totals add up per-person net balances separately."""
    alice = debt_service.create_person("Alice")
    bob = debt_service.create_person("Bob")
    carol = debt_service.create_person("Carol")
    debt_service.create_debt(alice, DebtType.OWED_TO_ME, 40)
    debt_service.create_debt(bob, DebtType.OWED_BY_ME, 25)
    debt_service.create_debt(bob, DebtType.OWED_TO_ME, 5)

    summary = {p.name: p.net_balance for p in debt_service.get_people_summary()}
    assert summary == {
        "Alice": Decimal("40"),
        "Bob": Decimal("-20"),
        "Carol": Decimal("0"),
    }

    totals = debt_service.get_totals()
    assert totals.owed_to_me == Decimal("40")
    assert totals.i_owe == Decimal("20")
    assert carol in [p.id for p in debt_service.list_people()]


def test_create_debt_rejects_sub_cent_amount(debt_service, sample_person):
    """Test that amounts finer than one cent are rejected, not rounded to zero."""
    with pytest.raises(ValidationError, match="two decimal places"):
        debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, "0.004")

    assert debt_service.get_debts_list() == []


def test_repayment_rejects_sub_cent_amount(debt_service, sample_person):
    """Test that a sub-cent repayment records nothing."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 10)

    with pytest.raises(ValidationError, match="two decimal places"):
        debt_service.record_repayment(debt_id, "0.004")

    assert debt_service.db.list_sub_debts(debt_id) == []
    assert debt_service.get_debts_list()[0].remaining_amount == Decimal("10")


def test_trailing_zero_decimals_accepted(debt_service, sample_person):
    """Test that extra zero decimals are not treated as sub-cent precision."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, "10.500")
    debt_service.record_repayment(debt_id, "0.250")

    assert debt_service.get_debts_list()[0].remaining_amount == Decimal("10.25")


def test_people_summary_ordered_by_name(debt_service):
    """Test that people are listed by name, case-sensitively."""
    for name in ["bob", "Carol", "Alice", "alice"]:
        debt_service.create_person(name)

    names = [p.name for p in debt_service.get_people_summary()]
    assert names == ["Alice", "Carol", "alice", "bob"]


def test_debts_list_repayments_newest_first(debt_service, sample_person):
    """Test that a debt's repayments are listed newest first."""
    debt_id = debt_service.create_debt(sample_person.id, DebtType.OWED_TO_ME, 100)
    first = debt_service.record_repayment(debt_id, 10)
    second = debt_service.record_repayment(debt_id, 20)

    sub_debts = debt_service.get_debts_list()[0].sub_debts
    assert [sd.id for sd in sub_debts] == [second.id, first.id]
    assert [sd.amount for sd in sub_debts] == [Decimal("20"), Decimal("10")]
