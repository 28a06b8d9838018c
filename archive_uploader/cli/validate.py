"""CLI command for checking scan file names without touching the wiki."""

import click

from archive_uploader.publishing.filename_parser import try_parse_file_name
from archive_uploader.publishing.models import PageHierarchy


@click.command()
@click.argument("names", nargs=-1, required=True)
def validate(names: tuple[str, ...]) -> None:
    """Check file names against the archive naming format.

    NAMES: File names or paths; files do not need to exist
    """
    invalid = 0
    for name in names:
        parsed = try_parse_file_name(name)
        if parsed is None:
            invalid += 1
            click.echo(f"INVALID  {name}")
            continue

        hierarchy = PageHierarchy.from_parsed(parsed)
        click.echo(f"VALID    {name}")
        click.echo(f"  Archive: {parsed.archive_code} ({parsed.archive_full_name})")
        click.echo(f"  Fund: {parsed.fund}")
        click.echo(f"  Description: {parsed.description}")
        click.echo(f"  Case: {parsed.case_name}")
        click.echo(f"  Years: {parsed.date_range_text}")
        click.echo(f"  Title: {parsed.title}")
        click.echo(f"  Case Page: {hierarchy.case_page}")
        click.echo(f"  Listed On: {hierarchy.archive_listing_page}")

    if invalid:
        click.echo(f"\n{invalid} of {len(names)} file names are invalid", err=True)
        raise click.Abort()


if __name__ == "__main__":
    validate()
