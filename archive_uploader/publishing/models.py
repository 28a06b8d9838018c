"""Data models for archive publishing."""

from collections.abc import Callable
from dataclasses import dataclass, field

from archive_uploader.common.constants import (
    ARCHIVE_PAGE_PREFIX,
    PARTY_FUND_PREFIX,
    PRE_SOVIET_LISTING_SUFFIX,
    SOVIET_FUND_PREFIX,
    UNSPLIT_ARCHIVE_MARKER,
)

# Column header -> cell text; insertion order is column order
WikiTableRow = dict[str, str]


@dataclass(frozen=True)
class ParsedFileName:
    """Hierarchical identity of an archival document parsed from its file name.

    Attributes:
        archive_code: Short archive code (e.g. "ЦДАВО")
        archive_full_name: Display name of the archive
        fund: Fund identifier (e.g. "Р1")
        description: Description (opys) identifier
        case_name: Case (sprava) identifier
        date_range_text: "YYYY" or "YYYY-YYYY"
        title: Free-text document title
        file_name: Original base name, extension included
    """

    archive_code: str
    archive_full_name: str
    fund: str
    description: str
    case_name: str
    date_range_text: str
    title: str
    file_name: str


@dataclass(frozen=True)
class PageHierarchy:
    """Wiki page titles for the four levels of one document."""

    archive_page: str
    fund_page: str
    description_page: str
    case_page: str
    archive_listing_page: str

    @classmethod
    def from_parsed(cls, parsed: ParsedFileName) -> "PageHierarchy":
        """Derive page titles from a parsed file name."""
        archive_page = f"{ARCHIVE_PAGE_PREFIX}{parsed.archive_code}"
        fund_page = f"{archive_page}/{parsed.fund}"
        description_page = f"{fund_page}/{parsed.description}"
        case_page = f"{description_page}/{parsed.case_name}"
        return cls(
            archive_page=archive_page,
            fund_page=fund_page,
            description_page=description_page,
            case_page=case_page,
            archive_listing_page=archive_listing_page(archive_page, parsed.fund),
        )


def archive_listing_page(archive_page: str, fund: str) -> str:
    """Return the page listing the archive's funds that ``fund`` belongs to.

    Large archives keep separate fund lists for Soviet ("Р"), party ("П") and
    pre-Soviet ("Д") funds. Central archives ("Архів:ЦД...") have a single list
    for everything except Soviet and party funds.
    """
    if fund.startswith(SOVIET_FUND_PREFIX):
        return f"{archive_page}/{SOVIET_FUND_PREFIX}"
    if fund.startswith(PARTY_FUND_PREFIX):
        return f"{archive_page}/{PARTY_FUND_PREFIX}"
    if UNSPLIT_ARCHIVE_MARKER in archive_page:
        return archive_page
    return f"{archive_page}/{PRE_SOVIET_LISTING_SUFFIX}"


@dataclass(frozen=True)
class TableBlock:
    """A wikitable located inside a page body.

    Attributes:
        raw: Exact table text as it appears in the page (used for replacement)
        normalized: Table text with trailing separator removed and header in ``!!`` form
    """

    raw: str
    normalized: str


@dataclass
class UpsertOutcome:
    """Result of merging one child row into a table."""

    rows: list[WikiTableRow]
    changed: bool


@dataclass(frozen=True)
class PageRevision:
    """Current state of a wiki page."""

    title: str
    text: str
    missing: bool


@dataclass(frozen=True)
class EditResult:
    """New page body produced by a read-modify-write edit."""

    text: str
    summary: str
    minor: bool = False


# Receives the current page body; returns the new body or None to skip the edit
EditTransform = Callable[[str], EditResult | None]


@dataclass
class UploadSession:
    """Server-side stash state of one chunked upload."""

    file_size: int
    offset: int = 0
    file_key: str | None = None


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a finalized upload."""

    file_name: str
    source_url: str | None


@dataclass(frozen=True)
class PublishResult:
    """Pages touched by a successful publish."""

    archive_page: str
    fund_page: str
    description_page: str
    case_page: str
    case_page_url: str
    file_name: str
    source_url: str | None = None


@dataclass
class PublishStatistics:
    """Counters collected while publishing one or more files."""

    pages_created: int = 0
    tables_updated: int = 0
    files_uploaded: int = 0
    created_pages: list[str] = field(default_factory=list)
    updated_tables: list[str] = field(default_factory=list)
