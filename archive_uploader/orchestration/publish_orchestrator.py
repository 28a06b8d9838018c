"""Publish orchestrator: page hierarchy sync followed by the scan upload."""

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from archive_uploader.publishing.chunked_upload import ChunkedUploader
from archive_uploader.publishing.filename_parser import parse_file_name, try_parse_file_name
from archive_uploader.publishing.models import (
    PageHierarchy,
    PublishResult,
    PublishStatistics,
)
from archive_uploader.publishing.page_upsert import PageUpsertEngine
from archive_uploader.utils.config import Config
from archive_uploader.utils.exceptions import ArchiveUploaderError, SourceFileNotFoundError
from archive_uploader.wiki.credentials import WikiCredentials, ensure_credentials
from archive_uploader.wiki.session import WikiSession

logger = structlog.get_logger(__name__)

# Receives overall progress (0-100) and a user-facing status line
ProgressCallback = Callable[[int, str], None]

SessionFactory = Callable[[Config, WikiCredentials], WikiSession]

# Share of overall progress reserved for page work; the upload fills the rest
UPLOAD_PROGRESS_START = 55
UPLOAD_PROGRESS_SHARE = 0.45


@dataclass
class BatchItemResult:
    """Outcome of one file in a batch publish.

    Attributes:
        file_path: File that was processed
        result: Publish result when the file was published
        error: Failure that aborted this file's publish
        skipped: True when the file name did not parse and nothing was attempted
    """

    file_path: Path
    result: PublishResult | None = None
    error: ArchiveUploaderError | None = None
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return self.result is not None


def _noop_progress(percent: int, message: str) -> None:
    return None


class PublishOrchestrator:
    """Runs the fixed publish sequence for archival scans.

    Each publish opens its own sources and commons sessions and closes them
    when done. Nothing is rolled back on failure; re-running a publish is safe
    because pages are created only when missing and table rows are merged by id.

    Attributes:
        config: Hosts, chunk size and timeouts
        statistics: Pages created, tables updated and files uploaded so far
    """

    def __init__(
        self,
        config: Config | None = None,
        sources_factory: SessionFactory | None = None,
        commons_factory: SessionFactory | None = None,
    ) -> None:
        """Initialize PublishOrchestrator.

        Args:
            config: Configuration (loaded from the environment when omitted)
            sources_factory: Builds the session for archive pages
            commons_factory: Builds the session for the media upload
        """
        self.config = config or Config()
        self.sources_factory = sources_factory or WikiSession.sources
        self.commons_factory = commons_factory or WikiSession.commons
        self.statistics = PublishStatistics()

    def publish(
        self,
        file_path: str | Path,
        credentials: WikiCredentials,
        on_progress: ProgressCallback | None = None,
    ) -> PublishResult:
        """Publish one scan: sync its page hierarchy, then upload it.

        Args:
            file_path: Local file named after the archive naming grammar
            credentials: Bot credentials used for both wikis
            on_progress: Receives monotonic progress from 0 to 100

        Returns:
            PublishResult with the page titles and the case page URL

        Raises:
            FileNameFormatError: If the file name does not parse
            SourceFileNotFoundError: If the file does not exist
            MissingCredentialsError: If credentials are empty
            ArchiveUploaderError: Any page or upload failure, unmodified
        """
        progress = on_progress or _noop_progress
        path = Path(file_path)
        publish_logger = logger.bind(file_name=path.name)

        try:
            progress(5, "Ініціалізація з'єднання...")
            parsed = parse_file_name(path.name)
            if not path.is_file():
                raise SourceFileNotFoundError(str(path))
            ensure_credentials(credentials)
            progress(10, "Файл успішно проаналізовано...")

            hierarchy = PageHierarchy.from_parsed(parsed)
            publish_logger.info("publish_started", case_page=hierarchy.case_page)

            progress(15, "Підключення...")
            with self.sources_factory(self.config, credentials) as sources:
                engine = PageUpsertEngine(sources)
                try:
                    progress(20, "Створення структури сторінок...")
                    progress(25, "Створення сторінки фонду...")
                    engine.ensure_fund_page(hierarchy.fund_page, parsed)
                    progress(30, "Створення сторінки опису...")
                    engine.ensure_description_page(hierarchy.description_page, parsed)
                    progress(35, "Створення сторінки справи...")
                    engine.ensure_case_page(hierarchy.case_page, parsed)

                    progress(40, "Оновлення навігаційних сторінок...")
                    engine.upsert_fund_into_archive(hierarchy.archive_listing_page, parsed)
                    progress(45, "Оновлення сторінки фонду...")
                    engine.upsert_description_into_fund(hierarchy.fund_page, parsed)
                    progress(50, "Оновлення сторінки опису...")
                    engine.upsert_case_into_description(hierarchy.description_page, parsed)
                finally:
                    self._record_pages(engine)

                case_page_url = sources.page_url(hierarchy.case_page)

            progress(UPLOAD_PROGRESS_START, "Початок завантаження файлу...")
            with self.commons_factory(self.config, credentials) as commons:
                uploader = ChunkedUploader(
                    commons,
                    chunk_size=self.config.chunk_size,
                    timeout=self.config.upload_timeout,
                )
                upload = uploader.upload(
                    path,
                    parsed,
                    lambda percent: progress(
                        UPLOAD_PROGRESS_START + math.floor(percent * UPLOAD_PROGRESS_SHARE),
                        f"Завантаження: {percent}%",
                    ),
                )
            self.statistics.files_uploaded += 1

            progress(100, "Публікацію завершено успішно!")
        except ArchiveUploaderError as e:
            publish_logger.error("publish_failed", error=e.message, kind=e.kind.value)
            raise

        publish_logger.info(
            "publish_completed",
            case_page=hierarchy.case_page,
            case_page_url=case_page_url,
            source_url=upload.source_url,
        )
        return PublishResult(
            archive_page=hierarchy.archive_page,
            fund_page=hierarchy.fund_page,
            description_page=hierarchy.description_page,
            case_page=hierarchy.case_page,
            case_page_url=case_page_url,
            file_name=path.name,
            source_url=upload.source_url,
        )

    def publish_many(
        self,
        file_paths: Iterable[str | Path],
        credentials: WikiCredentials,
        on_progress: ProgressCallback | None = None,
    ) -> list[BatchItemResult]:
        """Publish files one after another.

        Files whose names do not parse are reported as skipped without being
        attempted. A failing file is recorded and the batch moves on.

        Args:
            file_paths: Files to publish, in order
            credentials: Bot credentials used for every file
            on_progress: Receives each file's progress, prefixed with its name

        Returns:
            One BatchItemResult per input path, in input order
        """
        paths = [Path(p) for p in file_paths]
        results: list[BatchItemResult] = []
        valid: list[BatchItemResult] = []
        for path in paths:
            item = BatchItemResult(file_path=path)
            if try_parse_file_name(path.name) is None:
                item.skipped = True
                logger.warning("publish_skipped_invalid_name", file_name=path.name)
            else:
                valid.append(item)
            results.append(item)

        logger.info("batch_started", total=len(paths), valid=len(valid))
        progress = on_progress or _noop_progress
        for index, item in enumerate(valid, start=1):
            prefix = f"[{index}/{len(valid)}] {item.file_path.name}: "
            try:
                item.result = self.publish(
                    item.file_path,
                    credentials,
                    lambda percent, message, prefix=prefix: progress(percent, prefix + message),
                )
            except ArchiveUploaderError as e:
                item.error = e

        logger.info(
            "batch_completed",
            published=sum(1 for item in results if item.succeeded),
            failed=sum(1 for item in results if item.error is not None),
            skipped=sum(1 for item in results if item.skipped),
        )
        return results

    def _record_pages(self, engine: PageUpsertEngine) -> None:
        self.statistics.created_pages.extend(engine.created_pages)
        self.statistics.updated_tables.extend(engine.updated_tables)
        self.statistics.pages_created += len(engine.created_pages)
        self.statistics.tables_updated += len(engine.updated_tables)
