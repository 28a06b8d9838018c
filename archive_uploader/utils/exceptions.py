"""Custom exception hierarchy for the application."""

from enum import Enum


class ErrorKind(Enum):
    """Language-agnostic error categories surfaced to the presentation layer."""

    CONFIGURATION = "configuration"
    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_FILE_NAME = "invalid_file_name"
    FILE_NOT_FOUND = "file_not_found"
    SESSION = "session"
    PAGE_MISSING = "page_missing"
    TABLE_PARSE = "table_parse"
    UPLOAD = "upload"
    UNKNOWN = "unknown"


class ArchiveUploaderError(Exception):
    """Base exception for all application errors."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, is_retryable: bool = False) -> None:
        """Initialize exception.

        Args:
            message: Error message
            is_retryable: Whether re-running the whole publish is expected to help
        """
        super().__init__(message)
        self.message = message
        self.is_retryable = is_retryable


class ConfigurationError(ArchiveUploaderError):
    """Configuration or environment setup error."""

    kind = ErrorKind.CONFIGURATION


class MissingCredentialsError(ConfigurationError):
    """Wiki credentials are not configured."""

    kind = ErrorKind.MISSING_CREDENTIALS


class FileNameFormatError(ArchiveUploaderError):
    """File name does not follow the archive naming grammar."""

    kind = ErrorKind.INVALID_FILE_NAME

    def __init__(self, file_name: str) -> None:
        super().__init__(f'File name "{file_name}" does not match the expected format.')
        self.file_name = file_name


class SourceFileNotFoundError(ArchiveUploaderError):
    """Local file to publish does not exist."""

    kind = ErrorKind.FILE_NOT_FOUND

    def __init__(self, file_path: str) -> None:
        super().__init__(f"File not found: {file_path}")
        self.file_path = file_path


class WikiSessionError(ArchiveUploaderError):
    """Login or API call on a wiki session failed."""

    kind = ErrorKind.SESSION


class PageMissingError(ArchiveUploaderError):
    """A page expected to exist on the wiki is missing."""

    kind = ErrorKind.PAGE_MISSING

    def __init__(self, page_title: str) -> None:
        super().__init__(f'Page "{page_title}" does not exist.')
        self.page_title = page_title


class TableParseError(ArchiveUploaderError):
    """Embedded wikitext table is missing or malformed."""

    kind = ErrorKind.TABLE_PARSE

    def __init__(
        self, message: str, page_title: str | None = None, content: str | None = None
    ) -> None:
        """Initialize table error.

        Args:
            message: Description of what could not be parsed
            page_title: Title of the page holding the table, when known
            content: Offending page body, when known
        """
        if page_title:
            message = f'{message} (page "{page_title}")'
        super().__init__(message)
        self.page_title = page_title
        self.content = content

    def with_page(self, page_title: str, content: str) -> "TableParseError":
        """Return a copy of this error annotated with page context."""
        return TableParseError(self.message, page_title=page_title, content=content)


class UploadError(ArchiveUploaderError):
    """Chunk or finalize request of the stash upload failed."""

    kind = ErrorKind.UPLOAD

    def __init__(
        self, message: str, response: object | None = None, is_retryable: bool = False
    ) -> None:
        super().__init__(message, is_retryable=is_retryable)
        self.response = response


LOCALIZED_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CONFIGURATION: "Помилка конфігурації програми.",
    ErrorKind.MISSING_CREDENTIALS: (
        "Облікові дані відсутні! Будь ласка, налаштуйте свої облікові дані "
        "Вікімедіа-бота в налаштуваннях програми."
    ),
    ErrorKind.INVALID_FILE_NAME: "Назва файлу не відповідає очікуваному формату.",
    ErrorKind.FILE_NOT_FOUND: "Файл не знайдено.",
    ErrorKind.SESSION: "Не вдалося виконати запит до вікі.",
    ErrorKind.PAGE_MISSING: "Сторінка не існує у вікі.",
    ErrorKind.TABLE_PARSE: "Не вдалося розібрати таблицю на сторінці.",
    ErrorKind.UPLOAD: "Не вдалося завантажити файл.",
    ErrorKind.UNKNOWN: "Невідома помилка.",
}


def localized_message(error: BaseException) -> str:
    """Build a Ukrainian user-facing message for an error.

    The localized sentence is looked up by error kind; the technical detail
    (file name, page title, server payload) is appended so an operator can act on it.
    """
    kind = error.kind if isinstance(error, ArchiveUploaderError) else ErrorKind.UNKNOWN
    return f"{LOCALIZED_MESSAGES[kind]} {error}"
