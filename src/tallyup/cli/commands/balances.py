"""Account balance commands."""

import click
from tallyup.domain.balance import BalanceService


@click.command("balances")
@click.pass_context
def list_balances(ctx):
    """Show the latest imported balance of each account."""
    db = ctx.obj["db"]
    service = BalanceService(db)

    balances = service.list_balances()
    if not balances:
        click.echo("No balances found. Import a bank statement first.")
        return

    click.echo(f"{'Account':<40} {'Balance':>14} {'As of':<12}")
    click.echo("-" * 68)
    for balance in balances:
        click.echo(f"{balance.account:<40} {balance.balance:>14,.2f} {str(balance.date):<12}")


def register_commands(cli):
    """Register balances command with main CLI."""
    cli.add_command(list_balances)
