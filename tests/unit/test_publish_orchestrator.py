"""Unit tests for the publish orchestrator."""

from pathlib import Path

import pytest

from archive_uploader.orchestration import BatchItemResult, PublishOrchestrator
from archive_uploader.utils.config import Config
from archive_uploader.utils.exceptions import (
    FileNameFormatError,
    MissingCredentialsError,
    PageMissingError,
    SourceFileNotFoundError,
    UploadError,
)
from archive_uploader.wiki.credentials import WikiCredentials
from tests.conftest import SCAN_NAME, FakeWikiSession


@pytest.fixture
def orchestrator(
    config: Config, sources_wiki: FakeWikiSession, commons_wiki: FakeWikiSession
) -> PublishOrchestrator:
    return PublishOrchestrator(
        config,
        sources_factory=lambda cfg, creds: sources_wiki,
        commons_factory=lambda cfg, creds: commons_wiki,
    )


class TestPublish:
    """Test the single-file publish sequence."""

    def test_returns_page_titles_and_url(
        self, orchestrator: PublishOrchestrator, scan_file: Path, credentials: WikiCredentials
    ) -> None:
        """Test the publish result."""
        result = orchestrator.publish(scan_file, credentials)

        assert result.archive_page == "Архів:ЦДАВО"
        assert result.fund_page == "Архів:ЦДАВО/Р1"
        assert result.description_page == "Архів:ЦДАВО/Р1/2"
        assert result.case_page == "Архів:ЦДАВО/Р1/2/3"
        assert result.file_name == SCAN_NAME
        assert result.case_page_url == (
            "https://uk.wikisource.org/wiki/"
            "%D0%90%D1%80%D1%85%D1%96%D0%B2%3A%D0%A6%D0%94%D0%90%D0%92%D0%9E"
            "%2F%D0%A01%2F2%2F3"
        )
        assert result.source_url == f"https://upload.example.org/{SCAN_NAME}"

    def test_pages_before_tables_before_upload(
        self,
        orchestrator: PublishOrchestrator,
        sources_wiki: FakeWikiSession,
        commons_wiki: FakeWikiSession,
        scan_file: Path,
        credentials: WikiCredentials,
    ) -> None:
        """Test creation top-down, then table updates bottom-up, then the upload."""
        orchestrator.publish(scan_file, credentials)

        assert sources_wiki.created == [
            "Архів:ЦДАВО/Р1",
            "Архів:ЦДАВО/Р1/2",
            "Архів:ЦДАВО/Р1/2/3",
        ]
        assert sources_wiki.edited == [
            "Архів:ЦДАВО/Р",
            "Архів:ЦДАВО/Р1",
            "Архів:ЦДАВО/Р1/2",
        ]
        assert len(commons_wiki.finalize_posts) == 1
        assert sources_wiki.closed is True
        assert commons_wiki.closed is True

    def test_progress_is_monotonic(
        self, orchestrator: PublishOrchestrator, scan_file: Path, credentials: WikiCredentials
    ) -> None:
        """Test that progress runs from 5 to 100 without going back."""
        events: list[tuple[int, str]] = []

        orchestrator.publish(scan_file, credentials, lambda p, m: events.append((p, m)))

        percents = [percent for percent, _ in events]
        assert percents == sorted(percents)
        assert percents[0] == 5
        assert percents[-1] == 100
        assert events[-1][1] == "Публікацію завершено успішно!"
        assert (73, "Завантаження: 40%") in events
        assert all(isinstance(percent, int) for percent in percents)

    def test_statistics(
        self, orchestrator: PublishOrchestrator, scan_file: Path, credentials: WikiCredentials
    ) -> None:
        """Test counters collected across publishes."""
        orchestrator.publish(scan_file, credentials)
        orchestrator.publish(scan_file, credentials)

        assert orchestrator.statistics.pages_created == 3
        assert orchestrator.statistics.tables_updated == 3
        assert orchestrator.statistics.files_uploaded == 2

    def test_invalid_name_fails_before_network(
        self,
        orchestrator: PublishOrchestrator,
        sources_wiki: FakeWikiSession,
        tmp_path: Path,
        credentials: WikiCredentials,
    ) -> None:
        """Test that an unparseable name is rejected up front."""
        path = tmp_path / "scan.pdf"
        path.write_bytes(b"%PDF")

        with pytest.raises(FileNameFormatError):
            orchestrator.publish(path, credentials)

        assert sources_wiki.created == []
        assert sources_wiki.closed is False

    def test_missing_file_fails_before_network(
        self,
        orchestrator: PublishOrchestrator,
        sources_wiki: FakeWikiSession,
        tmp_path: Path,
        credentials: WikiCredentials,
    ) -> None:
        """Test that a missing file is reported before any page is touched."""
        with pytest.raises(SourceFileNotFoundError):
            orchestrator.publish(tmp_path / SCAN_NAME, credentials)

        assert sources_wiki.created == []

    def test_missing_credentials(
        self, orchestrator: PublishOrchestrator, sources_wiki: FakeWikiSession, scan_file: Path
    ) -> None:
        """Test the credential pre-flight check."""
        with pytest.raises(MissingCredentialsError):
            orchestrator.publish(scan_file, WikiCredentials("", ""))

        assert sources_wiki.created == []

    def test_missing_archive_listing_aborts_before_upload(
        self,
        orchestrator: PublishOrchestrator,
        sources_wiki: FakeWikiSession,
        commons_wiki: FakeWikiSession,
        scan_file: Path,
        credentials: WikiCredentials,
    ) -> None:
        """Test that a failure stops the sequence without rolling back created pages."""
        del sources_wiki.pages["Архів:ЦДАВО/Р"]

        with pytest.raises(PageMissingError):
            orchestrator.publish(scan_file, credentials)

        assert len(sources_wiki.created) == 3
        assert commons_wiki.posts == []
        assert sources_wiki.closed is True
        assert orchestrator.statistics.pages_created == 3


class TestPublishMany:
    """Test batch publishing."""

    def test_invalid_names_are_skipped(
        self,
        orchestrator: PublishOrchestrator,
        scan_file: Path,
        tmp_path: Path,
        credentials: WikiCredentials,
    ) -> None:
        """Test that invalid names are reported as skipped and valid ones published."""
        invalid = tmp_path / "scan.pdf"

        results = orchestrator.publish_many([invalid, scan_file], credentials)

        assert [item.file_path for item in results] == [invalid, scan_file]
        assert results[0].skipped is True
        assert results[0].result is None
        assert results[1].succeeded is True

    def test_failure_does_not_stop_batch(
        self,
        orchestrator: PublishOrchestrator,
        commons_wiki: FakeWikiSession,
        scan_file: Path,
        tmp_path: Path,
        credentials: WikiCredentials,
    ) -> None:
        """Test that the next file is attempted after a failing one."""
        second = tmp_path / "ЦДАВО Р1-2-4. 1921. Накази.pdf"
        second.write_bytes(b"%PDF-1.4")
        calls = {"count": 0}

        def responder(data: dict[str, str], files: object) -> dict[str, object]:
            calls["count"] += 1
            if calls["count"] == 1:
                return {"upload": {"result": "Error"}}
            return commons_wiki.default_upload_responder(data, files)  # type: ignore[arg-type]

        commons_wiki.upload_responder = responder

        results = orchestrator.publish_many([scan_file, second], credentials)

        assert isinstance(results[0].error, UploadError)
        assert results[1].succeeded is True
        assert results[1].result is not None
        assert results[1].result.case_page == "Архів:ЦДАВО/Р1/2/4"

    def test_progress_messages_name_the_file(
        self, orchestrator: PublishOrchestrator, scan_file: Path, credentials: WikiCredentials
    ) -> None:
        """Test that batch progress lines are prefixed with position and file name."""
        messages: list[str] = []

        orchestrator.publish_many([scan_file], credentials, lambda p, m: messages.append(m))

        assert messages
        assert all(message.startswith(f"[1/1] {SCAN_NAME}: ") for message in messages)


def test_batch_item_defaults() -> None:
    """Test that a fresh batch item is neither successful nor skipped."""
    item = BatchItemResult(file_path=Path("scan.pdf"))

    assert item.succeeded is False
    assert item.skipped is False
    assert item.error is None
