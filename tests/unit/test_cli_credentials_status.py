"""Unit tests for the credentials-status CLI command."""

from unittest.mock import patch

from click.testing import CliRunner

from archive_uploader.cli.credentials_status import credentials_status
from archive_uploader.utils.config import Config


class TestCredentialsStatusCLI:
    """Test credentials-status CLI command."""

    def test_configured_credentials(self, config: Config) -> None:
        """Test the status of complete bot credentials."""
        with patch("archive_uploader.cli.credentials_status.load_config", return_value=config):
            result = CliRunner().invoke(credentials_status)

        assert result.exit_code == 0
        assert "Username: Archivist@UploadBot" in result.output
        assert "Password: set" in result.output
        assert "secret-bot-password" not in result.output
        assert "Status: OK" in result.output

    def test_missing_credentials(self, config: Config) -> None:
        """Test that unset credentials fail the command."""
        config.username = ""
        config.password = ""

        with patch("archive_uploader.cli.credentials_status.load_config", return_value=config):
            result = CliRunner().invoke(credentials_status)

        assert result.exit_code != 0
        assert "Username: (not set)" in result.output
        assert "Status: MISSING" in result.output

    def test_short_password(self, config: Config) -> None:
        """Test that credentials failing validation are reported."""
        config.password = "short"

        with patch("archive_uploader.cli.credentials_status.load_config", return_value=config):
            result = CliRunner().invoke(credentials_status)

        assert result.exit_code != 0
        assert "Status: INVALID" in result.output
        assert "Password must be at least 8 characters" in result.output
