"""Utility for resolving person names to IDs."""

from finledger.domain.debt import DebtService
from finledger.domain.errors import (
    NotFoundError,
    person_name_not_found,
    person_not_found,
)


def resolve_person(debt_service: DebtService, person: str | int) -> int:
    """Resolve person name or ID to person ID.

    A value that parses as an integer is treated as an ID first; if no person
    has that ID, it is looked up as a name (people may be called "42").

    Args:
        debt_service: DebtService instance
        person: Person name (str) or ID (int or string representation of int)

    Returns:
        Person ID

    Raises:
        NotFoundError: If person is not found
    """
    if isinstance(person, int):
        if debt_service.get_person(person) is None:
            raise NotFoundError(person_not_found(person))
        return person

    try:
        person_id = int(person)
    except (ValueError, TypeError):
        person_id = None

    if person_id is not None and debt_service.get_person(person_id) is not None:
        return person_id

    found = debt_service.get_person_by_name(person)
    if found is None:
        raise NotFoundError(person_name_not_found(person))
    return found.id
