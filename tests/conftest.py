"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from archive_uploader.publishing.models import EditTransform, PageRevision
from archive_uploader.utils.config import Config
from archive_uploader.utils.exceptions import PageMissingError, WikiSessionError
from archive_uploader.wiki.credentials import WikiCredentials
from archive_uploader.wiki.session import build_page_url

SCAN_NAME = "ЦДАВО Р1-2-3. 1920. Протокол засідання.pdf"
TEST_CHUNK_SIZE = 1024

ARCHIVE_LISTING_TABLE = """{| class="wikitable sortable"
! Фонд !! Назва !! Роки !! Описів
|-
| [[/Р2/]] || Рада народних комісарів || 1919-1920 || 3
|}"""

_CONFIG_ENV_VARS = (
    "WIKI_USERNAME",
    "WIKI_PASSWORD",
    "SOURCES_HOST",
    "COMMONS_HOST",
    "WIKI_API_PATH",
    "WIKI_USER_AGENT",
    "UPLOAD_CHUNK_SIZE",
    "UPLOAD_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


class FakeWikiSession:
    """In-memory wiki implementing the WikiSession interface.

    Writes are recorded so tests can assert exactly which pages were created
    or edited. Upload POSTs are answered by ``upload_responder``.
    """

    def __init__(self, host: str = "uk.wikisource.org", pages: dict[str, str] | None = None):
        self.host = host
        self.pages: dict[str, str] = dict(pages or {})
        self.created: list[str] = []
        self.edited: list[str] = []
        self.saved: list[tuple[str, str, str]] = []
        self.edit_summaries: list[tuple[str, str, bool]] = []
        self.posts: list[tuple[dict[str, str], dict[str, Any] | None, int | None]] = []
        self.token_requests = 0
        self.closed = False
        self.upload_responder = self.default_upload_responder

    def read(self, title: str) -> PageRevision:
        if title not in self.pages:
            return PageRevision(title=title, text="", missing=True)
        return PageRevision(title=title, text=self.pages[title], missing=False)

    def create(self, title: str, text: str, summary: str) -> None:
        if title in self.pages:
            raise WikiSessionError(f'Page "{title}" already exists')
        self.pages[title] = text
        self.created.append(title)

    def save(self, title: str, text: str, summary: str, minor: bool = False) -> None:
        self.pages[title] = text
        self.saved.append((title, text, summary))

    def edit(self, title: str, transform: EditTransform) -> bool:
        if title not in self.pages:
            raise PageMissingError(title)
        result = transform(self.pages[title])
        if result is None:
            return False
        self.pages[title] = result.text
        self.edited.append(title)
        self.edit_summaries.append((title, result.summary, result.minor))
        return True

    def get_csrf_token(self) -> str:
        self.token_requests += 1
        return "csrf+\\"

    def post_raw(
        self,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes, str]] | None = None,
        timeout: int | None = None,
    ) -> dict[str, Any]:
        self.posts.append((dict(data), files, timeout))
        return self.upload_responder(data, files)

    def default_upload_responder(
        self, data: dict[str, str], files: dict[str, tuple[str, bytes, str]] | None
    ) -> dict[str, Any]:
        if data.get("stash") == "1":
            chunk_count = sum(1 for posted, _, _ in self.posts if posted.get("stash") == "1")
            return {"upload": {"result": "Continue", "filekey": f"key-{chunk_count}"}}
        return {
            "upload": {
                "result": "Success",
                "filename": data["filename"],
                "imageinfo": {"url": f"https://upload.example.org/{data['filename']}"},
            }
        }

    @property
    def chunk_posts(self) -> list[dict[str, str]]:
        return [data for data, _, _ in self.posts if data.get("stash") == "1"]

    @property
    def finalize_posts(self) -> list[dict[str, str]]:
        return [data for data, _, _ in self.posts if "stash" not in data]

    def page_url(self, title: str) -> str:
        return build_page_url(self.host, title)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeWikiSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove configuration variables inherited from the developer's shell."""
    for key in _CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config(clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Config:
    """Configuration with test credentials and a small chunk size."""
    monkeypatch.setenv("WIKI_USERNAME", "Archivist@UploadBot")
    monkeypatch.setenv("WIKI_PASSWORD", "secret-bot-password")
    monkeypatch.setenv("UPLOAD_CHUNK_SIZE", str(TEST_CHUNK_SIZE))
    return Config(env_file=tmp_path / "missing.env")


@pytest.fixture
def credentials() -> WikiCredentials:
    return WikiCredentials(username="Archivist@UploadBot", password="secret-bot-password")


@pytest.fixture
def sources_wiki() -> FakeWikiSession:
    """Sources wiki holding only the archive's Soviet fund listing."""
    return FakeWikiSession(pages={"Архів:ЦДАВО/Р": ARCHIVE_LISTING_TABLE})


@pytest.fixture
def commons_wiki() -> FakeWikiSession:
    return FakeWikiSession(host="commons.wikimedia.org")


@pytest.fixture
def scan_file(tmp_path: Path) -> Iterator[Path]:
    """A scan two and a half chunks long, named after the archive grammar."""
    path = tmp_path / SCAN_NAME
    path.write_bytes(b"%PDF" + b"x" * (TEST_CHUNK_SIZE * 5 // 2 - 4))
    yield path
