"""Transaction viewing commands."""

import click
from tallyup.cli.date_filters import resolve_cli_date_range
from tallyup.domain.tag import TagService
from tallyup.domain.transaction import TransactionService
from tallyup.utils.date_parser import PERIODS


@click.command("transactions")
@click.option("--from", "start_date", help="Start date (e.g. 2025-01-31, 'last month')")
@click.option("--to", "end_date", help="End date (e.g. 2025-03-31, 'today')")
@click.option("--period", type=click.Choice(PERIODS, case_sensitive=False), help="Named date range")
@click.option("--untagged", is_flag=True, help="Only show transactions without a tag")
@click.pass_context
def list_transactions(ctx, start_date: str, end_date: str, period: str, untagged: bool):
    """List transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    tag_service = TagService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    transactions = service.list_transactions(start_date=start, end_date=end, untagged=untagged)
    if not transactions:
        click.echo("No transactions found.")
        return

    tags = {tag.id: tag.name for tag in tag_service.list_tags()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 90)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>12}  {'Tag':<16} {'Description':<40}")
    click.echo("-" * 90)
    for txn in transactions:
        tag_name = tags.get(txn.tag_id, "") if txn.tag_id is not None else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.amount:>12,.2f}  {tag_name:<16} "
            f"{txn.description[:40]:<40}"
        )


def register_commands(cli):
    """Register transactions command with main CLI."""
    cli.add_command(list_transactions)
