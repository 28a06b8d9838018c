"""Main entry point for the archive uploader."""

from archive_uploader.cli.main import cli

if __name__ == "__main__":
    cli()
