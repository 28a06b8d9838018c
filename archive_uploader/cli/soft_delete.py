"""CLI command for flagging a Wikisource page for speedy deletion."""

import click
import structlog

from archive_uploader.cli.utils import load_config
from archive_uploader.publishing.page_upsert import soft_delete_page
from archive_uploader.utils.exceptions import ArchiveUploaderError, localized_message
from archive_uploader.wiki.credentials import CredentialsStore
from archive_uploader.wiki.session import WikiSession

logger = structlog.get_logger(__name__)


@click.command("soft-delete")
@click.argument("title")
@click.option("--force", is_flag=True, default=False, help="Skip confirmation prompt")
def soft_delete(title: str, force: bool) -> None:
    """Replace a page with the speedy-deletion template.

    TITLE: Full page title on the sources wiki
    """
    config = load_config()

    if not force and not click.confirm(f'Replace "{title}" with the deletion template?'):
        click.echo("Deletion cancelled")
        return

    try:
        credentials = CredentialsStore(config).require_credentials()
        with WikiSession.sources(config, credentials) as session:
            soft_delete_page(session, title)
    except ArchiveUploaderError as e:
        click.echo(f"Error: {localized_message(e)}", err=True)
        logger.error("soft_delete_failed", title=title, error=e.message)
        raise click.Abort() from e

    click.echo(f'Page "{title}" marked for deletion')


if __name__ == "__main__":
    soft_delete()
