"""Tag management commands."""

import click
from tallyup.cli.error_handling import handle_domain_error
from tallyup.domain.errors import DomainError
from tallyup.domain.tag import TagService


@click.group()
def tag_group():
    """Manage tags."""
    pass


@tag_group.command("create")
@click.argument("name")
@click.pass_context
def create_tag(ctx, name: str):
    """Create a new tag."""
    db = ctx.obj["db"]
    service = TagService(db)

    try:
        tag_id = service.create_tag(name)
        click.echo(f"Created tag '{name.strip()}' (ID: {tag_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@tag_group.command("list")
@click.pass_context
def list_tags(ctx):
    """List all tags."""
    db = ctx.obj["db"]
    service = TagService(db)

    tags = service.list_tags()
    if not tags:
        click.echo("No tags found. Use 'tag create' to add one.")
        return

    click.echo(f"{'ID':<6} {'Name':<30}")
    click.echo("-" * 36)
    for tag in tags:
        click.echo(f"{tag.id:<6} {tag.name:<30}")


@tag_group.command("rename")
@click.argument("tag", metavar="TAG")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_tag(ctx, tag: str, new_name: str):
    """Rename a tag.

    TAG can be a tag name or ID.

    Examples:
        tallyup tag rename Coffee "Coffee & Cafes"
        tallyup tag rename 2 Groceries
    """
    db = ctx.obj["db"]
    service = TagService(db)

    try:
        found = service.resolve_tag(tag)
        service.rename_tag(found.id, new_name)
        click.echo(f"Renamed tag '{found.name}' to '{new_name.strip()}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@tag_group.command("delete")
@click.argument("tag")
@click.pass_context
def delete_tag(ctx, tag: str):
    """Delete a tag by ID or name.

    Rules using the tag are deleted and its transactions become untagged.
    """
    db = ctx.obj["db"]
    service = TagService(db)

    try:
        found = service.resolve_tag(tag)
        service.delete_tag(found.id)
        click.echo(f"Deleted tag '{found.name}' (ID: {found.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
