"""File name parsing for archival document scans.

Expected grammar::

    <ArchiveCode> <Fund>-<Description>-<Case>. <Year|YearStart-YearEnd>. <Title>.<ext>

Examples::

    ЦДАВО Р1-2-3. 1920. Протокол засідання.pdf
    ДАЛО 123-4-56. 1925-1930. Листування.pdf
"""

import re
from pathlib import PurePath

from archive_uploader.common.constants import ARCHIVES
from archive_uploader.publishing.models import ParsedFileName
from archive_uploader.utils.exceptions import FileNameFormatError

_LETTERS = "А-ЯҐЄІЇа-яґєії"
_TOKEN = f"[0-9{_LETTERS}]+"

FILE_NAME_PATTERN = re.compile(
    rf"^([{_LETTERS}]+)\s({_TOKEN})-({_TOKEN})-({_TOKEN})\.\s([0-9]{{4}}(?:-[0-9]{{4}})?)\.\s(.+)$",
    re.IGNORECASE,
)

# Trailing ".pdf", ".tif", ".mp4" etc.; a title may end in "т.1", so the suffix needs a Latin letter
_EXTENSION_PATTERN = re.compile(r"\.(?=[A-Za-z0-9]*[A-Za-z])[A-Za-z0-9]{1,5}$")


def strip_extension(file_name: str) -> str:
    """Remove a trailing file extension, if any."""
    return _EXTENSION_PATTERN.sub("", file_name)


def _valid_date_range(date_range: str) -> bool:
    start, _, end = date_range.partition("-")
    return not end or start != end


def try_parse_file_name(file_name: str) -> ParsedFileName | None:
    """Parse a file name, returning None when it does not match the grammar.

    Args:
        file_name: Base name or path of the scan; directories are ignored

    Returns:
        ParsedFileName, or None if any group is missing, the archive code is
        unknown or the year range has the same start and end
    """
    base_name = PurePath(file_name).name
    match = FILE_NAME_PATTERN.match(strip_extension(base_name))
    if not match:
        return None

    archive, fund, description, case_name, date_range, title = match.groups()
    title = title.strip()
    if not all((archive, fund, description, case_name, date_range, title)):
        return None
    if archive not in ARCHIVES:
        return None
    if not _valid_date_range(date_range):
        return None

    return ParsedFileName(
        archive_code=archive,
        archive_full_name=ARCHIVES[archive],
        fund=fund,
        description=description,
        case_name=case_name,
        date_range_text=date_range,
        title=title,
        file_name=base_name,
    )


def parse_file_name(file_name: str) -> ParsedFileName:
    """Parse a file name into its archive hierarchy.

    Raises:
        FileNameFormatError: If the name does not match the expected format
    """
    parsed = try_parse_file_name(file_name)
    if parsed is None:
        raise FileNameFormatError(PurePath(file_name).name)
    return parsed
