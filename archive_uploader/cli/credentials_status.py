"""CLI command for reporting whether wiki credentials are configured."""

import click

from archive_uploader.cli.utils import load_config
from archive_uploader.wiki.credentials import CredentialsStore, validate_credentials


@click.command("credentials-status")
def credentials_status() -> None:
    """Show whether WIKI_USERNAME and WIKI_PASSWORD are set and look valid."""
    store = CredentialsStore(load_config())
    credentials = store.get_credentials()

    click.echo(f"Username: {credentials.username or '(not set)'}")
    click.echo(f"Password: {'set' if credentials.password else '(not set)'}")

    if not store.has_credentials():
        click.echo("Status: MISSING", err=True)
        raise click.Abort()

    validation = validate_credentials(credentials)
    click.echo(f"Status: {'OK' if validation.valid else 'INVALID'}")
    click.echo(f"  {validation.message}")
    if not validation.valid:
        raise click.Abort()


if __name__ == "__main__":
    credentials_status()
