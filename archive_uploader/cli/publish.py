"""CLI command for publishing archival scans to Wikisource and Commons."""

from pathlib import Path

import click
import structlog

from archive_uploader.cli.utils import PublishProgressBar, load_config
from archive_uploader.orchestration import BatchItemResult, PublishOrchestrator
from archive_uploader.publishing.models import PublishStatistics
from archive_uploader.utils.exceptions import MissingCredentialsError, localized_message
from archive_uploader.wiki.credentials import CredentialsStore

logger = structlog.get_logger(__name__)


def _display_results(results: list[BatchItemResult]) -> None:
    """Display per-file outcome."""
    for item in results:
        if item.result is not None:
            click.echo(f"  OK       {item.file_path.name}")
            click.echo(f"           {item.result.case_page_url}")
        elif item.skipped:
            click.echo(f"  SKIPPED  {item.file_path.name} (invalid file name)")
        elif item.error is not None:
            click.echo(f"  FAILED   {item.file_path.name}")
            click.echo(f"           {localized_message(item.error)}")


def _display_summary(results: list[BatchItemResult], stats: PublishStatistics) -> None:
    """Display batch execution summary."""
    click.echo()
    click.echo("=" * 80)
    click.echo("Publishing Complete!")
    click.echo("=" * 80)
    click.echo(f"  Files Published: {sum(1 for item in results if item.succeeded)}")
    click.echo(f"  Files Skipped: {sum(1 for item in results if item.skipped)}")
    click.echo(f"  Files Failed: {sum(1 for item in results if item.error is not None)}")
    click.echo(f"  Pages Created: {stats.pages_created}")
    click.echo(f"  Tables Updated: {stats.tables_updated}")
    click.echo()


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--no-progress", is_flag=True, default=False, help="Hide progress bars")
def publish(files: tuple[Path, ...], no_progress: bool) -> None:
    """Publish scans: create missing pages, update tables, upload the file.

    FILES: Scans named "<Archive> <Fund>-<Description>-<Case>. <Years>. <Title>.<ext>"
    """
    click.echo("=" * 80)
    click.echo("Wikisource Archive Uploader - Publish")
    click.echo("=" * 80)
    click.echo()

    config = load_config()
    store = CredentialsStore(config)

    try:
        credentials = store.require_credentials()
    except MissingCredentialsError as e:
        click.echo(f"Error: {localized_message(e)}", err=True)
        raise click.Abort() from e

    orchestrator = PublishOrchestrator(config)
    progress = PublishProgressBar(disable=no_progress)
    try:
        results = orchestrator.publish_many(files, credentials, progress)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        raise click.Abort() from None
    finally:
        progress.close()

    _display_results(results)
    _display_summary(results, orchestrator.statistics)

    failed = [item for item in results if not item.succeeded]
    if failed:
        logger.error("publish_command_failed", failed=len(failed), total=len(results))
        raise click.Abort()


if __name__ == "__main__":
    publish()
