"""Command group bundling all archive uploader commands."""

import click

from archive_uploader import __version__
from archive_uploader.cli.credentials_status import credentials_status
from archive_uploader.cli.publish import publish
from archive_uploader.cli.soft_delete import soft_delete
from archive_uploader.cli.utils import load_config
from archive_uploader.cli.validate import validate
from archive_uploader.utils.logger import configure_logging


@click.group()
@click.version_option(__version__)
@click.option("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)")
@click.option("--console-logs", is_flag=True, default=False, help="Human-readable log lines")
def cli(log_level: str | None, console_logs: bool) -> None:
    """Publish archival scans to uk.wikisource and Wikimedia Commons."""
    configure_logging(log_level or load_config().log_level, json_output=not console_logs)


cli.add_command(publish)
cli.add_command(validate)
cli.add_command(credentials_status)
cli.add_command(soft_delete)
