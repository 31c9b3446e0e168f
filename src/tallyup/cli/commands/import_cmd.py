"""Statement import command."""

import mimetypes
from pathlib import Path

import click
from tallyup.domain.csv_import import CSVImportService
from tallyup.domain.entities import ImportResult, StatementUpload
from tallyup.domain.errors import ContentTypeError, FormatError, StorageError


def format_import_summary(result: ImportResult) -> tuple[str, str]:
    """Build the headline and details shown after an import."""
    count = result.imported_count
    elapsed = f"{result.duration_ms:,}ms"

    if result.tagging_error is not None:
        return (
            "Import succeeded but auto-tagging failed",
            f"Imported {count} transactions in {elapsed}, but rules could not be applied: "
            f"{result.tagging_error}. Run 'tallyup autotag --untagged' to try again.",
        )

    if count == 0:
        return (
            "Import completed",
            f"No new transactions were imported (possibly duplicates). Completed in {elapsed}.",
        )

    tags_applied = result.tagging.tags_applied if result.tagging is not None else 0
    if tags_applied == 0:
        return (
            "Import completed successfully!",
            f"Imported {count} transactions in {elapsed}. No automatic tags were applied.",
        )
    return (
        "Import completed successfully!",
        f"Imported {count} transactions and applied {tags_applied} tags automatically in {elapsed}.",
    )


def read_upload(path: str) -> StatementUpload:
    """Read a statement file, guessing its content type from the file name.

    Raises:
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    content_type, _ = mimetypes.guess_type(path)
    text = Path(path).read_text(encoding="utf-8-sig")
    return StatementUpload(filename=Path(path).name, content_type=content_type, text=text)


@click.command("import")
@click.argument("csv_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--no-auto-tag", is_flag=True, help="Do not apply tagging rules to new transactions")
@click.pass_context
def import_statements(ctx, csv_files: tuple[str, ...], no_auto_tag: bool):
    """Import transactions from ASB or Kiwibank CSV statements.

    All files are imported together: if any file cannot be read, nothing is
    imported. Transactions imported before are skipped.
    """
    db = ctx.obj["db"]
    service = CSVImportService(db)

    uploads = []
    for path in csv_files:
        try:
            uploads.append(read_upload(path))
        except UnicodeDecodeError as e:
            click.echo(f"Error: {path} is not a UTF-8 text file: {e}", err=True)
            ctx.exit(1)

    try:
        result = service.import_statements(uploads, auto_tag=not no_auto_tag)
    except ContentTypeError as e:
        click.echo(f"Error: File type must be CSV. {e}", err=True)
        ctx.exit(1)
    except FormatError as e:
        click.echo(f"Error: Could not parse this statement format. {e}", err=True)
        click.echo("Check that the file is a CSV export from ASB or Kiwibank.", err=True)
        ctx.exit(1)
    except StorageError as e:
        click.echo(f"Error: Internal error, please try again. {e}", err=True)
        ctx.exit(1)

    message, details = format_import_summary(result)
    click.echo(message)
    click.echo(f"  {details}")
    if result.skipped_count:
        click.echo(f"  Skipped: {result.skipped_count} already imported")
    for balance in result.balances:
        click.echo(f"  Balance: {balance.account} {balance.balance:,.2f} as of {balance.date}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statements)
