"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only catch ValueError.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DuplicateNameError(ConflictError):
    """A person with the same name already exists."""


def person_not_found(person_id: int) -> str:
    """Return message for missing person by ID."""
    return f"Person {person_id} not found"


def person_name_not_found(name: str) -> str:
    """Return message for missing person by name."""
    return f"Person '{name}' not found"


def debt_not_found(debt_id: int) -> str:
    """Return message for missing debt."""
    return f"Debt {debt_id} not found"


def duplicate_person_name(name: str) -> str:
    """Return message for a person name collision."""
    return f"Person with name '{name}' already exists"


def non_positive_amount(amount: Decimal) -> str:
    """Return message for an amount that must be greater than zero."""
    return f"Amount must be greater than zero, got {amount}"


def invalid_debt_type(value: object) -> str:
    """Return message for an unknown debt type."""
    return f"Invalid debt type {value!r}: expected OWED_BY_ME or OWED_TO_ME"


def too_many_decimals(amount: Decimal) -> str:
    """Return message for an amount finer than one cent."""
    return f"Amount must have at most two decimal places, got {amount}"
