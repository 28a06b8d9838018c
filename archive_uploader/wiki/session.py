"""Authenticated MediaWiki API session built on mwclient."""

from typing import Any
from urllib.parse import quote

import mwclient  # type: ignore[import-untyped]
import requests
import structlog

from archive_uploader.common.constants import (
    DEFAULT_API_PATH,
    DEFAULT_USER_AGENT,
    UPLOAD_TIMEOUT_SECONDS,
)
from archive_uploader.publishing.models import EditTransform, PageRevision
from archive_uploader.utils.config import Config
from archive_uploader.utils.exceptions import PageMissingError, WikiSessionError
from archive_uploader.wiki.credentials import WikiCredentials, ensure_credentials

logger = structlog.get_logger(__name__)

# Characters left unescaped by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_page_url(host: str, title: str, scheme: str = "https") -> str:
    """Browsable URL of a page, with the title encoded like encodeURIComponent."""
    return f"{scheme}://{host}/wiki/{quote(title, safe=_URI_COMPONENT_SAFE)}"


class WikiSession:
    """One logged-in connection to a MediaWiki installation.

    The mwclient site is created and logged in lazily on first use, so a
    session can be constructed before credentials are validated.
    """

    def __init__(
        self,
        host: str,
        credentials: WikiCredentials,
        path: str = DEFAULT_API_PATH,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: int = UPLOAD_TIMEOUT_SECONDS,
        scheme: str = "https",
    ) -> None:
        """Initialize session settings.

        Args:
            host: Wiki host name (e.g. "uk.wikisource.org")
            credentials: Bot username and password
            path: Script path holding api.php
            user_agent: User-Agent sent with every request
            timeout: Request timeout in seconds
            scheme: URL scheme
        """
        self.host = host
        self.credentials = credentials
        self.path = path
        self.user_agent = user_agent
        self.timeout = timeout
        self.scheme = scheme
        self.logger = logger.bind(wiki=host)
        self._site: mwclient.Site | None = None

    @classmethod
    def sources(cls, config: Config, credentials: WikiCredentials) -> "WikiSession":
        """Session for the wiki holding archive pages."""
        return cls(
            config.sources_host,
            credentials,
            path=config.api_path,
            user_agent=config.user_agent,
            timeout=config.upload_timeout,
        )

    @classmethod
    def commons(cls, config: Config, credentials: WikiCredentials) -> "WikiSession":
        """Session for the media-hosting wiki."""
        return cls(
            config.commons_host,
            credentials,
            path=config.api_path,
            user_agent=config.user_agent,
            timeout=config.upload_timeout,
        )

    @property
    def api_url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}api.php"

    @property
    def site(self) -> mwclient.Site:
        """Logged-in mwclient site, connecting on first access.

        Raises:
            MissingCredentialsError: If credentials are empty
            WikiSessionError: If connecting or logging in fails
        """
        if self._site is None:
            ensure_credentials(self.credentials)
            try:
                site = mwclient.Site(
                    self.host,
                    path=self.path,
                    scheme=self.scheme,
                    clients_useragent=self.user_agent,
                    reqs={"timeout": self.timeout},
                )
                site.login(self.credentials.username, self.credentials.password)
            except (mwclient.errors.MwClientError, requests.RequestException) as e:
                self.logger.error("wiki_login_failed", error=str(e))
                raise WikiSessionError(f"Login to {self.host} failed: {e}") from e
            self.logger.info("wiki_logged_in", username=self.credentials.username)
            self._site = site
        return self._site

    def read(self, title: str) -> PageRevision:
        """Read the current text of a page.

        Returns:
            PageRevision with ``missing=True`` and empty text for absent pages
        """
        try:
            page = self.site.pages[title]
            if not page.exists:
                return PageRevision(title=title, text="", missing=True)
            text = page.text(cache=False)
        except (mwclient.errors.MwClientError, requests.RequestException) as e:
            raise WikiSessionError(f'Reading "{title}" on {self.host} failed: {e}') from e
        return PageRevision(title=title, text=text, missing=False)

    def create(self, title: str, text: str, summary: str) -> None:
        """Create a page; fails if it already exists."""
        self._write(title, text, summary, createonly=True)
        self.logger.info("page_created", title=title)

    def save(self, title: str, text: str, summary: str, minor: bool = False) -> None:
        """Write a page unconditionally."""
        self._write(title, text, summary, minor=minor)
        self.logger.info("page_saved", title=title)

    def edit(self, title: str, transform: EditTransform) -> bool:
        """Read-modify-write an existing page.

        Args:
            title: Page title
            transform: Receives the current body, returns an EditResult or None for no change

        Returns:
            True if the page was written

        Raises:
            PageMissingError: If the page does not exist
        """
        revision = self.read(title)
        if revision.missing:
            raise PageMissingError(title)

        result = transform(revision.text)
        if result is None:
            self.logger.debug("page_edit_skipped", title=title)
            return False

        self._write(title, result.text, result.summary, minor=result.minor, nocreate=True)
        self.logger.info("page_edited", title=title, summary=result.summary, minor=result.minor)
        return True

    def _write(self, title: str, text: str, summary: str, minor: bool = False, **kwargs: Any) -> None:
        try:
            self.site.pages[title].edit(text, summary=summary, minor=minor, **kwargs)
        except (mwclient.errors.MwClientError, requests.RequestException) as e:
            self.logger.error("page_write_failed", title=title, error=str(e))
            raise WikiSessionError(f'Writing "{title}" on {self.host} failed: {e}') from e

    def get_csrf_token(self) -> str:
        """Fetch an anti-forgery token for write requests."""
        try:
            token = self.site.get_token("csrf")
        except (mwclient.errors.MwClientError, requests.RequestException) as e:
            raise WikiSessionError(f"Fetching CSRF token on {self.host} failed: {e}") from e
        if not token:
            raise WikiSessionError(f"Empty CSRF token returned by {self.host}")
        return str(token)

    def post_raw(
        self,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes, str]] | None = None,
        timeout: int | None = None,
    ) -> dict[str, Any]:
        """POST a multipart request to api.php with the session's cookies.

        Returns:
            Decoded JSON response

        Raises:
            WikiSessionError: On transport failure, timeout or a non-JSON response
        """
        try:
            response = self.site.connection.post(
                self.api_url,
                data=data,
                files=files,
                headers={"User-Agent": self.user_agent},
                timeout=timeout or self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise WikiSessionError(
                f"POST to {self.api_url} failed: {e}", is_retryable=True
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise WikiSessionError(
                f"Non-JSON response from {self.api_url}: {response.text[:500]}"
            ) from e
        if not isinstance(payload, dict):
            raise WikiSessionError(f"Unexpected response from {self.api_url}: {payload!r}")
        return payload

    def page_url(self, title: str) -> str:
        """Browsable URL of a page."""
        return build_page_url(self.host, title, self.scheme)

    def close(self) -> None:
        if self._site is not None:
            self._site.connection.close()
            self._site = None

    def __enter__(self) -> "WikiSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
