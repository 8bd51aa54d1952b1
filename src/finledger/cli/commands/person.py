"""Person management commands."""

import click
from finledger.domain.debt import DebtService
from finledger.domain.errors import DomainError
from finledger.cli.error_handling import handle_domain_error


@click.group()
def person_group():
    """Manage people you lend to or borrow from."""
    pass


@person_group.command("add")
@click.argument("name", metavar="NAME")
@click.pass_context
def add_person(ctx, name: str):
    """Add a person.

    Examples:
        finledger person add "Alice"
    """
    db = ctx.obj["db"]
    service = DebtService(db)

    try:
        person_id = service.create_person(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created person '{name.strip()}' (ID: {person_id})")


@person_group.command("list")
@click.pass_context
def list_people(ctx):
    """List people with the net balance of their open debts.

    A positive balance is owed to you, a negative one is owed by you.
    """
    db = ctx.obj["db"]
    service = DebtService(db)

    people = service.get_people_summary()
    if not people:
        click.echo("No people found.")
        return

    click.echo("\nPeople:")
    click.echo("-" * 60)
    for person in people:
        click.echo(f"ID: {person.id:3d} | {person.name:20s} | Balance: {person.net_balance:>12,.2f}")


def register_commands(cli):
    """Register person commands with main CLI."""
    cli.add_command(person_group, name="person")
