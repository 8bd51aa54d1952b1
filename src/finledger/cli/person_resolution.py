"""CLI helper for person resolution."""

from __future__ import annotations

import click
from finledger.domain.debt import DebtService
from finledger.domain.errors import NotFoundError
from finledger.utils.person_resolver import resolve_person
from finledger.cli.error_handling import handle_domain_error


def resolve_person_or_exit(
    ctx: click.Context, debt_service: DebtService, person: str | int
) -> int:
    """Resolve person name or ID, or exit with a CLI error."""
    try:
        return resolve_person(debt_service, person)
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)
