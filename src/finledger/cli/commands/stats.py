"""Statistics commands."""

import click
from finledger.domain.statistics import StatisticsService


@click.group()
def stats_group():
    """Show spending and income statistics."""
    pass


@stats_group.command("spending")
@click.option("--days", type=click.IntRange(min=1), default=30, show_default=True, help="Trailing window in days")
@click.pass_context
def spending(ctx, days: int):
    """Show spending per day."""
    db = ctx.obj["db"]
    service = StatisticsService(db)

    points = service.daily_spending(days=days)
    if not points:
        click.echo("No spending found.")
        return

    for point in points:
        click.echo(f"{point.period} | {point.amount:>12,.2f} | {point.count} transaction(s)")
    click.echo("-" * 50)
    click.echo(f"Total      | {sum(p.amount for p in points):>12,.2f}")


@stats_group.command("income")
@click.option("--months", type=click.IntRange(min=1), default=6, show_default=True, help="Trailing window in months")
@click.pass_context
def income(ctx, months: int):
    """Show income per month."""
    db = ctx.obj["db"]
    service = StatisticsService(db)

    points = service.monthly_income(months=months)
    if not points:
        click.echo("No income found.")
        return

    for point in points:
        click.echo(f"{point.period} | {point.amount:>12,.2f} | {point.count} transaction(s)")


def register_commands(cli):
    """Register statistics commands with main CLI."""
    cli.add_command(stats_group, name="stats")
