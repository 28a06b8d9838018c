"""Wiki bot credentials loaded from configuration."""

from dataclasses import dataclass, field

from archive_uploader.utils.config import Config
from archive_uploader.utils.exceptions import MissingCredentialsError

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class WikiCredentials:
    """Username and (bot) password for a wiki API session."""

    username: str = ""
    password: str = field(default="", repr=False)

    def __bool__(self) -> bool:
        return bool(self.username and self.password)


@dataclass(frozen=True)
class CredentialsValidation:
    """Result of checking credentials before they are stored or used."""

    valid: bool
    message: str


class CredentialsStore:
    """Supplies credentials from the environment or a .env file."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def get_credentials(self) -> WikiCredentials:
        """Return configured credentials; empty strings when unset."""
        return WikiCredentials(username=self.config.username, password=self.config.password)

    def has_credentials(self) -> bool:
        return bool(self.get_credentials())

    def require_credentials(self) -> WikiCredentials:
        """Return credentials or fail before any network call is made.

        Raises:
            MissingCredentialsError: If username or password is empty
        """
        credentials = self.get_credentials()
        ensure_credentials(credentials)
        return credentials


def ensure_credentials(credentials: WikiCredentials | None) -> WikiCredentials:
    """Raise MissingCredentialsError unless both username and password are set."""
    if not credentials:
        raise MissingCredentialsError(
            "Wiki credentials are missing. Set WIKI_USERNAME and WIKI_PASSWORD."
        )
    return credentials


def validate_credentials(credentials: WikiCredentials) -> CredentialsValidation:
    """Check the shape of credentials before saving them.

    A username that does not look like a bot account is accepted with a warning.
    """
    if not credentials.username or not credentials.password:
        return CredentialsValidation(False, "Username and password are required")
    if len(credentials.username) < MIN_USERNAME_LENGTH:
        return CredentialsValidation(
            False, f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )
    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        return CredentialsValidation(
            False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if "@" not in credentials.username and "bot" not in credentials.username.lower():
        return CredentialsValidation(
            True,
            "Warning: this does not look like a bot account. "
            "Make sure you are using bot password credentials.",
        )
    return CredentialsValidation(True, "Credentials look valid")
