"""Wikitext templates for archive pages and file descriptions."""

from archive_uploader.common.constants import FILE_PAGE_PREFIX
from archive_uploader.publishing.models import ParsedFileName

FUND_TABLE_HEADER = "!Опис!!Назва!!Роки!!Справ"
DESCRIPTION_TABLE_HEADER = "!№!!Назва!!Роки!!Сторінки"
ARCHIVE_TABLE_HEADER = "!Фонд!!Назва!!Роки!!Описів"

# Placeholder row whose link cell is the pattern for new rows
_PLACEHOLDER_ROW = "|[[/1/]]|| || ||"


def _skeleton_table(header: str) -> str:
    return f'{{| class="wikitable sortable"\n{header}\n|}}'


def _fallback_table(header: str) -> str:
    return f'{{| class="wikitable sortable"\n{header}\n|-\n{_PLACEHOLDER_ROW}\n|}}'


def get_archive_page_table() -> str:
    """Fallback table for an archive fund listing."""
    return _fallback_table(ARCHIVE_TABLE_HEADER)


def get_fund_page_table() -> str:
    """Fallback table for a fund page's list of descriptions."""
    return _fallback_table(FUND_TABLE_HEADER)


def get_description_page_table() -> str:
    """Fallback table for a description page's list of cases."""
    return _fallback_table(DESCRIPTION_TABLE_HEADER)


def get_fund_page(title: str = "", date_range: str = "") -> str:
    return f"""{{{{Архіви/фонд
  | назва = {title}
  | рік = {date_range}
  | примітки =
}}}}

== Описи ==
{_skeleton_table(FUND_TABLE_HEADER)}"""


def get_description_page(title: str = "", date_range: str = "") -> str:
    return f"""{{{{Архіви/опис
  | назва = {title}
  | рік = {date_range}
  | примітки =
}}}}
== Справи ==
{_skeleton_table(DESCRIPTION_TABLE_HEADER)}"""


def file_name_to_wikitext(file_name: str) -> str:
    return f"{FILE_PAGE_PREFIX}{file_name}"


def get_case_page_content(title: str, date_range: str, file_name: str) -> str:
    """Case page body linking the scan on the media wiki."""
    return f"""{{{{Архіви/справа
 | назва = {title}
 | рік = {date_range}
 | link_commons = {file_name_to_wikitext(file_name)}
 | примітки =
}}}}
"""


def get_wikitext_for_file(parsed: ParsedFileName) -> str:
    """File description page with the Information template and license."""
    description = f"{parsed.archive_code} {parsed.fund}-{parsed.description} {parsed.case_name}"
    return f"""
=={{{{int:filedesc}}}}==
{{{{Information
|description={{{{uk|1={description}}}}}
|date={parsed.date_range_text}
|source={parsed.archive_full_name}
|author={parsed.archive_full_name}
|permission=
|other versions=
}}}}

=={{{{int:license-header}}}}==
{{{{PD-Ukraine}}}}{{{{PD-scan|PD-old-assumed-expired}}}}
""".strip()
