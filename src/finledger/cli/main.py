"""Main CLI entry point."""

import logging

import click
from finledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from finledger.cli.commands import (
    account,
    debt,
    person,
    stats,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINLEDGER_DB_PATH environment variable)",
    envvar="FINLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
    envvar="FINLEDGER_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Finledger - Personal debts and bank account ledger.

    Track informal debts with friends and keep a local copy of bank accounts
    and transactions fetched from an open-banking aggregator.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
account.register_commands(cli)
debt.register_commands(cli)
person.register_commands(cli)
stats.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
