"""Shared utilities for CLI commands."""

import click
from tqdm import tqdm

from archive_uploader.utils.config import Config
from archive_uploader.utils.exceptions import ConfigurationError, localized_message


def load_config() -> Config:
    """Load configuration, aborting the command with a readable message on error."""
    try:
        return Config()
    except ConfigurationError as e:
        click.echo(f"Error: {localized_message(e)}", err=True)
        raise click.Abort() from e


class PublishProgressBar:
    """Progress callback that drives one tqdm bar per published file.

    Progress restarting below the last seen value marks the start of the next
    file in a batch, so the current bar is closed and a fresh one opened.
    """

    def __init__(self, disable: bool = False) -> None:
        self.disable = disable
        self._bar: tqdm | None = None
        self._last = 0

    def __call__(self, percent: int, message: str) -> None:
        if self._bar is None or percent < self._last:
            self.close()
            self._bar = tqdm(total=100, unit="%", disable=self.disable)
        if percent > self._last:
            self._bar.update(percent - self._last)
            self._last = percent
        self._bar.set_description(message)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
        self._last = 0
