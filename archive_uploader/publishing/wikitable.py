"""Codec for the sortable navigation wikitable embedded in archive pages.

Tables are read with mwparserfromhell, so any row and cell syntax MediaWiki
accepts (``|``/``!`` cells, ``||``/``!!`` on one line, cell attributes,
captions) can be parsed. Rendering always produces one canonical layout.
"""

import re
from collections.abc import Mapping

import mwparserfromhell  # type: ignore[import-untyped]
import structlog

from archive_uploader.common.constants import DATE_COLUMNS, TITLE_COLUMNS
from archive_uploader.publishing.models import TableBlock, UpsertOutcome, WikiTableRow
from archive_uploader.utils.exceptions import TableParseError

logger = structlog.get_logger(__name__)

TABLE_START = '{| class="wikitable'
TABLE_END = "|}"
RENDERED_TABLE_START = '{| class="wikitable sortable"'
LINK_MARKER = "[["
CELL_TAGS = ("th", "td")
CAPTION_MARKER = "+"

_TABLE_START_RE = re.compile(r'\{\|\s*class="wikitable')
_TRAILING_SEPARATOR_RE = re.compile(r"\|-\s*\Z")
_FIRST_INTEGER_RE = re.compile(r"\d+")


def normalize_table_start(content: str) -> str:
    """Remove stray whitespace between ``{|`` and ``class="wikitable``."""
    return _TABLE_START_RE.sub(TABLE_START, content, count=1)


def extract_table(content: str) -> TableBlock:
    """Locate the first wikitable in a page body.

    Args:
        content: Page body with a normalized table start

    Returns:
        TableBlock with the exact raw span and the normalized table text

    Raises:
        TableParseError: If no table or no header row can be found
    """
    if TABLE_START not in content:
        raise TableParseError("No wikitable found")

    after_start = content.split(TABLE_START)[1]
    if TABLE_END not in after_start:
        raise TableParseError("Wikitable is not closed")
    inner = after_start.split(TABLE_END)[0]

    raw = f"{TABLE_START}{inner}{TABLE_END}"
    table = f"{TABLE_START}{_TRAILING_SEPARATOR_RE.sub('', inner)}{TABLE_END}"

    header_parts = table.split("\n!")
    if len(header_parts) < 2:
        raise TableParseError("Wikitable has no header row")
    header = header_parts[1].split("\n")[0]
    normalized = table.replace(header, header.replace("|", "!"), 1)

    return TableBlock(raw=raw, normalized=normalized)


def _is_caption(cell: mwparserfromhell.nodes.Tag) -> bool:
    return cell.tag == "td" and str(cell.contents).lstrip().startswith(CAPTION_MARKER)


def _cells(
    wikicode: mwparserfromhell.wikicode.Wikicode, skip_captions: bool = False
) -> list[mwparserfromhell.nodes.Tag]:
    return [
        node
        for node in wikicode.filter_tags(recursive=False)
        if node.tag in CELL_TAGS and not (skip_captions and _is_caption(node))
    ]


def _table_lines(normalized: str) -> list[list[mwparserfromhell.nodes.Tag]]:
    """Split the first table into its rows of ``th``/``td`` tags.

    Cells written before the first ``|-`` belong to an implicit first row.
    Rows without cells are dropped.
    """
    tables = mwparserfromhell.parse(normalized).filter_tags(
        matches=lambda node: node.tag == "table"
    )
    if not tables:
        raise TableParseError("Unexpected table start or end")

    contents = tables[0].contents
    # A "|+" caption parses as a td ahead of the first row
    lines = [_cells(contents, skip_captions=True)]
    lines.extend(
        _cells(node.contents) for node in contents.filter_tags(recursive=False) if node.tag == "tr"
    )
    return [line for line in lines if line]


def parse_rows(normalized: str) -> list[WikiTableRow]:
    """Parse a normalized wikitable into rows keyed by header.

    Args:
        normalized: Table text from :func:`extract_table`

    Returns:
        Rows in table order; an empty list for a header-only table

    Raises:
        TableParseError: If the header is missing or a row has the wrong cell count
    """
    text = normalized.strip()
    if not text.startswith("{|") or not text.endswith(TABLE_END):
        raise TableParseError("Unexpected table start or end")

    lines = _table_lines(text)
    if not lines or lines[0][0].tag != "th":
        raise TableParseError("Wikitable has no header row")

    header, *rows = lines
    columns = [str(cell.contents).strip() for cell in header]

    parsed: list[WikiTableRow] = []
    for index, row in enumerate(rows):
        cells = [str(cell.contents).strip() for cell in row]
        if len(cells) != len(columns):
            raise TableParseError(
                f"Found {len(cells)} cells on row {index}, expected {len(columns)}"
            )
        parsed.append(dict(zip(columns, cells, strict=True)))
    return parsed


def render_table(rows: list[WikiTableRow]) -> str:
    """Render rows as a sortable wikitable; no rows renders as an empty string."""
    if not rows:
        return ""
    columns = list(rows[0])
    header = "! " + " !! ".join(columns)
    body = "\n".join(
        "|-\n| " + " || ".join(row.get(column, "") for column in columns) for row in rows
    )
    return f"{RENDERED_TABLE_START}\n{header}\n{body}\n{TABLE_END}"


def _link_column(row: WikiTableRow) -> str | None:
    return next((column for column, value in row.items() if LINK_MARKER in value), None)


def _child_segment(link_cell: str) -> str | None:
    links = mwparserfromhell.parse(link_cell).filter_wikilinks()
    target = str(links[0].title) if links else link_cell
    segments = target.split("/")
    if len(segments) < 3:
        return None
    return segments[1].strip()


def child_identifier(link_cell: str) -> str:
    """Extract the child id from a link cell such as ``[[/Р1/]]``.

    The id is the middle path segment of the first wiki link's target.

    Raises:
        TableParseError: If the link has no ``/id/`` segment
    """
    identifier = _child_segment(link_cell)
    if identifier is None:
        raise TableParseError(f"Link cell {link_cell!r} has no child segment")
    return identifier


def row_key(link_cell: str) -> str:
    """Uniqueness key of a row: its child id, or the whole cell for hand-typed rows."""
    identifier = _child_segment(link_cell)
    return link_cell.strip() if identifier is None else identifier


def numeric_sort_key(link_cell: str) -> int:
    """Sort by the first integer in the row key (0 when there is none)."""
    match = _FIRST_INTEGER_RE.search(row_key(link_cell))
    return int(match.group()) if match else 0


def _pattern_row(rows: list[WikiTableRow]) -> tuple[WikiTableRow, str] | None:
    """Find the first row whose link cell can be reshaped for a new child."""
    for row in rows:
        column = _link_column(row)
        if column is not None and _child_segment(row[column]) is not None:
            return row, column
    return None


def _link_cell_for(pattern_cell: str, identifier: str) -> str:
    start, _, *rest = pattern_cell.split("/")
    if not rest:
        raise TableParseError(f"Link cell {pattern_cell!r} has no child segment")
    return "/".join([start, identifier, *rest])


def build_row(
    pattern: WikiTableRow,
    identifier: str,
    link_column: str,
    overrides: Mapping[str, str] | None = None,
) -> WikiTableRow:
    """Build a new row shaped like ``pattern`` for ``identifier``.

    Title and year columns take values from ``overrides`` (keys ``title`` and
    ``date_range_text``); every other non-link column is left blank.
    """
    overrides = overrides or {}
    row: WikiTableRow = {}
    for column, value in pattern.items():
        if column == link_column:
            row[column] = _link_cell_for(value, identifier)
        elif column in TITLE_COLUMNS:
            row[column] = overrides.get("title", "")
        elif column in DATE_COLUMNS:
            row[column] = overrides.get("date_range_text", "")
        else:
            row[column] = ""
    return row


def _merge_rows(existing: WikiTableRow, new: WikiTableRow) -> WikiTableRow:
    """Keep the existing row, filling only its blank cells from the new one."""
    return {column: value or new.get(column, "") for column, value in existing.items()}


def upsert_row(
    rows: list[WikiTableRow],
    identifier: str,
    fallback_template: str | None = None,
    overrides: Mapping[str, str] | None = None,
    original: str | None = None,
) -> UpsertOutcome:
    """Insert or replace the row for ``identifier`` and keep the table sorted.

    The new row copies the link pattern of the first row holding a ``/id/``
    link. Rows without one (hand-typed links, note rows) are kept, keyed by
    their whole link cell.

    Args:
        rows: Current table rows
        identifier: Child id to add (fund, description or case)
        fallback_template: Table whose rows provide the link pattern when
            ``rows`` has none; its rows are not kept
        overrides: Values for title/year columns
        original: Serialized table to compare against; defaults to rendering ``rows``

    Returns:
        UpsertOutcome with the sorted rows and whether the serialized table changed

    Raises:
        TableParseError: If no link pattern is available
    """
    baseline = render_table(rows) if original is None else original

    pattern = _pattern_row(rows)
    if pattern is None:
        if not fallback_template:
            if not rows:
                raise TableParseError("Table has no rows and no fallback template")
            raise TableParseError("No link column found in table and no fallback template")
        logger.warning("table_pattern_from_fallback", identifier=identifier, rows=len(rows))
        pattern = _pattern_row(parse_rows(extract_table(fallback_template).normalized))
        if pattern is None:
            raise TableParseError("Fallback template has no link column")

    pattern_row, link_column = pattern
    new_row = build_row(pattern_row, identifier, link_column, overrides)

    merged: list[WikiTableRow] = []
    seen: dict[str, int] = {}
    for row in [*rows, new_row]:
        key = row_key(row.get(link_column, ""))
        if key in seen:
            merged[seen[key]] = _merge_rows(merged[seen[key]], row)
            continue
        seen[key] = len(merged)
        merged.append(row)

    merged.sort(key=lambda row: numeric_sort_key(row.get(link_column, "")))
    return UpsertOutcome(rows=merged, changed=render_table(merged) != baseline)
