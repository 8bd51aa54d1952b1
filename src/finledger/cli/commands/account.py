"""Bank account commands."""

import json

import click
from finledger.domain.account import AccountService
from finledger.domain.sync import SyncService


@click.group()
def account_group():
    """Manage synced bank accounts."""
    pass


@account_group.command("sync")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def sync_accounts(ctx, file: str):
    """Store accounts and transactions from an aggregator session export.

    FILE is JSON: {"accounts": [...]} or a bare list of accounts, each with
    optional "balances" and "transactions".

    Examples:
        finledger account sync session.json
    """
    db = ctx.obj["db"]
    service = SyncService(db)

    try:
        with open(file, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Error: Could not read {file}: {e}", err=True)
        ctx.exit(1)
        return

    report = service.sync_accounts(payload)
    click.echo(
        f"Synced {report.accounts_saved} account(s) and "
        f"{report.transactions_saved} transaction(s)"
    )
    skipped = report.accounts_skipped + report.transactions_skipped
    if skipped:
        reasons = ", ".join(sorted({reason.value for reason in report.skip_reasons}))
        click.echo(f"Skipped {skipped} record(s): {reasons}")


@account_group.command("list")
@click.option("--transactions", "-t", is_flag=True, help="Also list each account's transactions")
@click.pass_context
def list_accounts(ctx, transactions: bool):
    """List accounts with their balances."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.get_accounts_with_transactions()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for entry in accounts:
        acc = entry.account
        click.echo(
            f"{acc.account_id:20s} | {acc.name:20s} | {acc.bank_name:12s} | "
            f"{acc.balance:>12,.2f} {acc.currency}"
        )
        if not transactions:
            continue
        for view in entry.transactions:
            txn = view.transaction
            click.echo(
                f"    {txn.booking_date} | {view.display_name:25s} | "
                f"{txn.amount:>10,.2f} {txn.currency}"
            )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
