"""Auto-tagging command."""

import click
from tallyup.domain.auto_tagging import AutoTaggingService
from tallyup.domain.entities import TaggingMode, TaggingOutcome
from tallyup.domain.errors import TaggingError


@click.command("autotag")
@click.option("--untagged", is_flag=True, help="Only tag transactions without a tag")
@click.pass_context
def autotag(ctx, untagged: bool):
    """Apply tagging rules to stored transactions."""
    db = ctx.obj["db"]
    service = AutoTaggingService(db)
    mode = TaggingMode.UNTAGGED if untagged else TaggingMode.ALL

    try:
        result = service.apply_rules(mode)
    except TaggingError as e:
        click.echo(f"Error: Auto-tagging failed. {e}", err=True)
        ctx.exit(1)

    if result.outcome is TaggingOutcome.NO_RULES:
        click.echo("No rules defined. Use 'rule create' to add one.")
    elif result.outcome is TaggingOutcome.NO_MATCHES:
        click.echo("No transactions needed tagging.")
    else:
        click.echo(
            f"Tagged {result.transactions_tagged} transactions with {result.tags_applied} tags."
        )


def register_commands(cli):
    """Register autotag command with main CLI."""
    cli.add_command(autotag)
