"""Create-if-missing and table upserts for the archive page hierarchy."""

from collections.abc import Mapping
from typing import Protocol

import structlog

from archive_uploader.common.constants import (
    SOFT_DELETE_TEMPLATE,
    SUMMARY_CREATE_CASE,
    SUMMARY_CREATE_DESCRIPTION,
    SUMMARY_CREATE_FUND,
    SUMMARY_SOFT_DELETE,
    SUMMARY_TABLE_ITEM_ADDED,
    SUMMARY_TABLE_REFORMATTED,
)
from archive_uploader.publishing.models import (
    EditResult,
    EditTransform,
    PageRevision,
    ParsedFileName,
    WikiTableRow,
)
from archive_uploader.publishing.templates import (
    get_archive_page_table,
    get_case_page_content,
    get_description_page,
    get_description_page_table,
    get_fund_page,
    get_fund_page_table,
)
from archive_uploader.publishing.wikitable import (
    extract_table,
    normalize_table_start,
    parse_rows,
    render_table,
    upsert_row,
)
from archive_uploader.utils.exceptions import TableParseError

logger = structlog.get_logger(__name__)


class PageSession(Protocol):
    """Page operations the upsert engine needs from a wiki session."""

    def read(self, title: str) -> PageRevision: ...

    def create(self, title: str, text: str, summary: str) -> None: ...

    def edit(self, title: str, transform: EditTransform) -> bool: ...


def upsert_item_into_content(
    content: str,
    identifier: str,
    fallback_template: str | None = None,
    overrides: Mapping[str, str] | None = None,
) -> EditResult | None:
    """Add ``identifier`` to the first wikitable of a page body.

    Args:
        content: Current page body
        identifier: Child id (fund, description or case)
        fallback_template: Skeleton table used when the table is empty or the page is blank
        overrides: Title/year values for the new row

    Returns:
        EditResult with the new body, or None if the body would not change

    Raises:
        TableParseError: If the page holds no parseable table
    """
    body = normalize_table_start(content)
    rows: list[WikiTableRow]
    if not body.strip() and fallback_template:
        # Blank page: the fallback's placeholder row is a pattern, not content
        body = fallback_template
        block = extract_table(body)
        rows = []
    else:
        block = extract_table(body)
        rows = parse_rows(block.normalized)
    outcome = upsert_row(rows, identifier, fallback_template, overrides, original=block.raw)
    if not outcome.changed:
        logger.info("table_up_to_date", identifier=identifier)
        return None

    updated = body.replace(block.raw, render_table(outcome.rows), 1)
    summary = (
        SUMMARY_TABLE_REFORMATTED if len(rows) == len(outcome.rows) else SUMMARY_TABLE_ITEM_ADDED
    )
    logger.info("table_item_upserted", identifier=identifier, summary=summary)
    return EditResult(text=updated, summary=summary, minor=True)


class PageUpsertEngine:
    """Keeps the archive -> fund -> description -> case pages in sync.

    Pages are only ever created, never overwritten; existing pages are touched
    exclusively through their navigation tables.
    """

    def __init__(self, session: PageSession) -> None:
        self.session = session
        self.created_pages: list[str] = []
        self.updated_tables: list[str] = []

    def _ensure_exists(self, title: str, content: str, summary: str) -> bool:
        if not self.session.read(title).missing:
            logger.debug("page_exists", title=title)
            return False
        self.session.create(title, content, summary)
        self.created_pages.append(title)
        return True

    def ensure_fund_page(self, title: str, parsed: ParsedFileName) -> bool:
        """Create the fund page with an empty description table if missing."""
        logger.info("ensure_fund_page", title=title, fund=parsed.fund, archive=parsed.archive_code)
        return self._ensure_exists(
            title, get_fund_page(), SUMMARY_CREATE_FUND.format(fund=parsed.fund)
        )

    def ensure_description_page(self, title: str, parsed: ParsedFileName) -> bool:
        """Create the description page with an empty case table if missing."""
        logger.info("ensure_description_page", title=title, description=parsed.description)
        return self._ensure_exists(
            title,
            get_description_page(),
            SUMMARY_CREATE_DESCRIPTION.format(description=parsed.description),
        )

    def ensure_case_page(self, title: str, parsed: ParsedFileName) -> bool:
        """Create the case page linking the uploaded scan if missing."""
        logger.info("ensure_case_page", title=title, case_name=parsed.case_name)
        return self._ensure_exists(
            title,
            get_case_page_content(parsed.title, parsed.date_range_text, parsed.file_name),
            SUMMARY_CREATE_CASE.format(case_name=parsed.case_name),
        )

    def upsert_child_into_parent(
        self,
        parent_title: str,
        identifier: str,
        fallback_template: str,
        overrides: Mapping[str, str] | None = None,
    ) -> bool:
        """Add a child row to the parent's navigation table.

        Returns:
            True if the parent page was written

        Raises:
            PageMissingError: If the parent page does not exist
            TableParseError: If the parent's table is malformed
        """

        def transform(content: str) -> EditResult | None:
            try:
                return upsert_item_into_content(content, identifier, fallback_template, overrides)
            except TableParseError as e:
                logger.error("table_parse_failed", page=parent_title, error=e.message)
                raise e.with_page(parent_title, content) from e

        written = self.session.edit(parent_title, transform)
        if written:
            self.updated_tables.append(parent_title)
        return written

    def upsert_fund_into_archive(self, listing_page: str, parsed: ParsedFileName) -> bool:
        return self.upsert_child_into_parent(listing_page, parsed.fund, get_archive_page_table())

    def upsert_description_into_fund(self, fund_page: str, parsed: ParsedFileName) -> bool:
        return self.upsert_child_into_parent(
            fund_page, parsed.description, get_fund_page_table()
        )

    def upsert_case_into_description(self, description_page: str, parsed: ParsedFileName) -> bool:
        return self.upsert_child_into_parent(
            description_page,
            parsed.case_name,
            get_description_page_table(),
            {"title": parsed.title, "date_range_text": parsed.date_range_text},
        )


def soft_delete_page(session: PageSession, title: str) -> bool:
    """Replace a page with the speedy-deletion template.

    Bot accounts usually lack the delete right, so the page is flagged for an
    administrator instead of being deleted through the API.
    """
    written = session.edit(
        title,
        lambda _content: EditResult(text=SOFT_DELETE_TEMPLATE, summary=SUMMARY_SOFT_DELETE, minor=True),
    )
    logger.info("page_soft_deleted", title=title)
    return written
