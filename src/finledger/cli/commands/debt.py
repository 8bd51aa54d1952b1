"""Debt ledger commands."""

import click
from finledger.domain.debt import DebtService
from finledger.domain.entities import DebtType
from finledger.domain.errors import DomainError
from finledger.cli.error_handling import handle_domain_error
from finledger.cli.person_resolution import resolve_person_or_exit

DEBT_TYPE_CHOICES = {
    "owed-to-me": DebtType.OWED_TO_ME,
    "owed-by-me": DebtType.OWED_BY_ME,
}


@click.group()
def debt_group():
    """Manage debts between you and other people."""
    pass


@debt_group.command("add")
@click.argument("person", metavar="PERSON")
@click.option(
    "--type",
    "debt_type",
    required=True,
    type=click.Choice(sorted(DEBT_TYPE_CHOICES)),
    help="Who owes whom",
)
@click.option("--amount", required=True, help="Debt amount (e.g., 120.50)")
@click.option("--description", help="Description (defaults to 'Debt')")
@click.option("--currency", help="Currency code (defaults to EUR)")
@click.pass_context
def add_debt(
    ctx,
    person: str,
    debt_type: str,
    amount: str,
    description: str | None,
    currency: str | None,
):
    """Add a debt for PERSON (name or ID).

    Examples:
        finledger debt add "Alice" --type owed-to-me --amount 50
        finledger debt add 2 --type owed-by-me --amount 12.30 --description "Lunch"
    """
    db = ctx.obj["db"]
    service = DebtService(db)

    person_id = resolve_person_or_exit(ctx, service, person)

    try:
        debt_id = service.create_debt(
            person_id=person_id,
            debt_type=DEBT_TYPE_CHOICES[debt_type],
            amount=amount,
            description=description,
            currency=currency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created debt {debt_id}")


@debt_group.command("list")
@click.option(
    "--type",
    "debt_type",
    type=click.Choice(sorted(DEBT_TYPE_CHOICES)),
    help="Only show debts of this type",
)
@click.pass_context
def list_debts(ctx, debt_type: str | None):
    """List open debts, newest first."""
    db = ctx.obj["db"]
    service = DebtService(db)

    debts = service.get_debts_list(DEBT_TYPE_CHOICES[debt_type] if debt_type else None)
    if not debts:
        click.echo("No open debts.")
        return

    click.echo("\nDebts:")
    click.echo("-" * 80)
    for debt in debts:
        direction = "owes you" if debt.type == DebtType.OWED_TO_ME else "you owe"
        click.echo(
            f"ID: {debt.id:3d} | {debt.person_name:15s} {direction:8s} | "
            f"{debt.remaining_amount:>10,.2f} of {debt.amount:,.2f} {debt.currency} | "
            f"{debt.description}"
        )
        for sub_debt in debt.sub_debts:
            note = f" ({sub_debt.note})" if sub_debt.note else ""
            click.echo(f"      repaid {sub_debt.amount:,.2f} on {sub_debt.created_at:%Y-%m-%d}{note}")


@debt_group.command("repay")
@click.argument("debt_id", type=int)
@click.argument("amount")
@click.option("--note", help="Note for this repayment")
@click.pass_context
def repay_debt(ctx, debt_id: int, amount: str, note: str | None):
    """Record a repayment of AMOUNT against DEBT_ID.

    The debt is removed once it is fully repaid.
    """
    db = ctx.obj["db"]
    service = DebtService(db)

    try:
        result = service.record_repayment(debt_id, amount, note)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded repayment {result.id}")
    if result.deleted:
        click.echo(f"Debt {debt_id} is fully repaid and was removed")
        if result.overpaid > 0:
            click.echo(f"Warning: overpaid by {result.overpaid:,.2f}", err=True)


@debt_group.command("delete")
@click.argument("debt_id", type=int)
@click.pass_context
def delete_debt(ctx, debt_id: int):
    """Delete a debt and its repayments."""
    db = ctx.obj["db"]
    service = DebtService(db)

    try:
        service.delete_debt(debt_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted debt {debt_id}")


@debt_group.command("totals")
@click.pass_context
def debt_totals(ctx):
    """Show what you owe and what is owed to you."""
    db = ctx.obj["db"]
    service = DebtService(db)

    totals = service.get_totals()
    click.echo(f"Owed to me: {totals.owed_to_me:>12,.2f}")
    click.echo(f"I owe:      {totals.i_owe:>12,.2f}")


def register_commands(cli):
    """Register debt commands with main CLI."""
    cli.add_command(debt_group, name="debt")
