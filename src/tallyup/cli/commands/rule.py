"""Auto-tagging rule commands."""

import click
from tallyup.cli.error_handling import handle_domain_error
from tallyup.domain.errors import DomainError, NotFoundError, rule_not_found
from tallyup.domain.rule import RuleService
from tallyup.domain.tag import TagService


@click.group()
def rule_group():
    """Manage auto-tagging rules."""
    pass


@rule_group.command("create")
@click.argument("pattern")
@click.argument("tag")
@click.pass_context
def create_rule(ctx, pattern: str, tag: str):
    """Tag transactions whose description starts with PATTERN.

    TAG is a tag ID or name. Matching ignores case.
    """
    db = ctx.obj["db"]
    service = RuleService(db)
    tag_service = TagService(db)

    try:
        found = tag_service.resolve_tag(tag)
        rule_id = service.create_rule(pattern=pattern, tag_id=found.id)
        click.echo(f"Created rule '{pattern.strip()}' -> '{found.name}' (ID: {rule_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List all rules."""
    db = ctx.obj["db"]
    service = RuleService(db)

    rules = service.list_rules_with_tags()
    if not rules:
        click.echo("No rules found. Use 'rule create' to add one.")
        return

    click.echo(f"{'ID':<6} {'Pattern':<40} {'Tag':<20}")
    click.echo("-" * 66)
    for rule, tag in rules:
        click.echo(f"{rule.id:<6} {rule.pattern:<40} {tag.name:<20}")


@rule_group.command("edit")
@click.argument("rule_id", type=int)
@click.option("--pattern", help="New description prefix")
@click.option("--tag", help="New tag ID or name")
@click.pass_context
def edit_rule(ctx, rule_id: int, pattern: str | None, tag: str | None):
    """Change the pattern or tag of a rule.

    Only the options that are given change.

    Examples:
        tallyup rule edit 3 --pattern "countdown"
        tallyup rule edit 3 --tag Groceries
    """
    db = ctx.obj["db"]
    service = RuleService(db)
    tag_service = TagService(db)

    if pattern is None and tag is None:
        click.echo("Error: Nothing to change. Use --pattern or --tag.", err=True)
        ctx.exit(1)

    try:
        rule = service.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        found = tag_service.resolve_tag(tag) if tag is not None else tag_service.get_tag(rule.tag_id)
        new_pattern = pattern if pattern is not None else rule.pattern
        service.update_rule(rule_id, pattern=new_pattern, tag_id=found.id)
        click.echo(f"Updated rule {rule_id}: '{new_pattern.strip()}' -> '{found.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    db = ctx.obj["db"]
    service = RuleService(db)

    try:
        service.delete_rule(rule_id)
        click.echo(f"Deleted rule {rule_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
