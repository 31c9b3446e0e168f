"""Main CLI entry point."""

import click
from tallyup.database.factories import create_sqlite_database
from tallyup.utils.logging_config import setup_logging

# Import and register all commands at module level
from tallyup.cli.commands import (
    autotag,
    balances,
    import_cmd,
    rule,
    tag,
    transactions,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TALLYUP_DB_PATH environment variable)",
    envvar="TALLYUP_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Tallyup - bank statement importer.

    Import ASB and Kiwibank CSV statements, tag transactions automatically
    with prefix rules, and keep account balances current.
    """
    ctx.ensure_object(dict)
    setup_logging(verbose=verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
tag.register_commands(cli)
rule.register_commands(cli)
autotag.register_commands(cli)
balances.register_commands(cli)
transactions.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
