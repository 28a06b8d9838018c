"""Resumable chunked upload to a MediaWiki stash, followed by finalize."""

import math
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, Protocol

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from archive_uploader.common.constants import (
    CHUNK_SIZE,
    FILE_PAGE_PREFIX,
    SUMMARY_FILE_DESCRIPTION,
    UPLOAD_COMMENT,
    UPLOAD_RESULT_CONTINUE,
    UPLOAD_RESULT_SUCCESS,
    UPLOAD_TIMEOUT_SECONDS,
)
from archive_uploader.publishing.models import ParsedFileName, UploadResult, UploadSession
from archive_uploader.publishing.templates import get_wikitext_for_file
from archive_uploader.utils.exceptions import (
    SourceFileNotFoundError,
    UploadError,
    WikiSessionError,
)

logger = structlog.get_logger(__name__)

# Receives upload progress in percent (0-100)
ProgressCallback = Callable[[int], None]


class MediaSession(Protocol):
    """Media wiki operations the uploader needs."""

    def get_csrf_token(self) -> str: ...

    def post_raw(
        self,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes, str]] | None = None,
        timeout: int | None = None,
    ) -> dict[str, Any]: ...

    def save(self, title: str, text: str, summary: str, minor: bool = False) -> None: ...


class UploadInfo(BaseModel):
    """The ``upload`` object of an action=upload response."""

    model_config = ConfigDict(extra="allow")

    result: str
    filekey: str | None = None
    imageinfo: dict[str, Any] | None = None


class UploadResponse(BaseModel):
    """Top-level action=upload response."""

    model_config = ConfigDict(extra="allow")

    upload: UploadInfo | None = None
    error: dict[str, Any] | None = None


def upload_progress(offset: int, file_size: int) -> int:
    """Percentage of the file sent so far, floored and capped at 100."""
    return math.floor(min(offset / file_size * 100, 100))


def iter_chunks(file_path: Path, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield fixed-size chunks of a file; the last one may be shorter."""
    with file_path.open("rb") as f:
        while chunk := f.read(chunk_size):
            yield chunk


class ChunkedUploader:
    """Streams a local file to the media wiki in stash chunks.

    Every chunk after the first carries the ``filekey`` returned by the
    previous response; a final request without ``stash`` publishes the file.
    """

    def __init__(
        self,
        session: MediaSession,
        chunk_size: int = CHUNK_SIZE,
        timeout: int = UPLOAD_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize uploader.

        Args:
            session: Logged-in session for the media wiki
            chunk_size: Bytes per chunk request
            timeout: Seconds allowed for each chunk or finalize request
        """
        self.session = session
        self.chunk_size = chunk_size
        self.timeout = timeout

    def upload(
        self,
        file_path: str | Path,
        parsed: ParsedFileName,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """Upload a file and write its description page.

        Args:
            file_path: Local file to upload
            parsed: Parsed file name used for the description page
            on_progress: Called with the percentage sent after each chunk

        Returns:
            UploadResult with the file's public URL when the server reports one

        Raises:
            SourceFileNotFoundError: If the file does not exist
            UploadError: If a chunk or the finalize request is rejected or times out
        """
        path = Path(file_path)
        if not path.is_file():
            raise SourceFileNotFoundError(str(path))

        file_name = path.name
        state = UploadSession(file_size=path.stat().st_size)
        if state.file_size == 0:
            raise UploadError(f'File "{file_name}" is empty')

        upload_logger = logger.bind(file_name=file_name, file_size=state.file_size)
        token = self.session.get_csrf_token()

        for chunk in iter_chunks(path, self.chunk_size):
            info = self._send_chunk(file_name, token, state, chunk)
            state.file_key = info.filekey
            state.offset += len(chunk)

            progress = upload_progress(state.offset, state.file_size)
            if on_progress:
                on_progress(progress)
            upload_logger.info(
                "chunk_uploaded", offset=state.offset, filekey=state.file_key, progress=progress
            )

        source_url = self._finalize(file_name, token, state)
        upload_logger.info("file_uploaded", source_url=source_url)

        self.session.save(
            f"{FILE_PAGE_PREFIX}{file_name}",
            get_wikitext_for_file(parsed),
            SUMMARY_FILE_DESCRIPTION,
        )
        return UploadResult(file_name=file_name, source_url=source_url)

    def _base_form(self, file_name: str, token: str, state: UploadSession) -> dict[str, str]:
        return {
            "action": "upload",
            "filename": file_name,
            "filesize": str(state.file_size),
            "format": "json",
            "token": token,
        }

    def _send_chunk(
        self, file_name: str, token: str, state: UploadSession, chunk: bytes
    ) -> UploadInfo:
        data = self._base_form(file_name, token, state)
        data["stash"] = "1"
        data["offset"] = str(state.offset)
        if state.file_key:
            data["filekey"] = state.file_key

        files = {"chunk": (file_name, chunk, "application/octet-stream")}
        payload = self._post(data, files, stage="chunk")
        info = self._check_result(
            payload, (UPLOAD_RESULT_CONTINUE, UPLOAD_RESULT_SUCCESS), "Upload failed"
        )
        if not info.filekey:
            raise UploadError(f"Upload failed: no filekey in response {payload}", response=payload)
        return info

    def _finalize(self, file_name: str, token: str, state: UploadSession) -> str | None:
        data = self._base_form(file_name, token, state)
        data["filekey"] = state.file_key or ""
        data["ignorewarnings"] = "1"
        data["comment"] = UPLOAD_COMMENT

        payload = self._post(data, None, stage="finalize")
        info = self._check_result(payload, (UPLOAD_RESULT_SUCCESS,), "Final upload failed")
        return (info.imageinfo or {}).get("url")

    def _post(
        self,
        data: dict[str, str],
        files: dict[str, tuple[str, bytes, str]] | None,
        stage: str,
    ) -> dict[str, Any]:
        try:
            return self.session.post_raw(data, files=files, timeout=self.timeout)
        except WikiSessionError as e:
            logger.error("upload_request_failed", stage=stage, error=e.message)
            raise UploadError(
                f"Upload {stage} request failed: {e.message}", is_retryable=e.is_retryable
            ) from e

    def _check_result(
        self, payload: dict[str, Any], accepted: tuple[str, ...], message: str
    ) -> UploadInfo:
        try:
            response = UploadResponse.model_validate(payload)
        except PydanticValidationError as e:
            raise UploadError(f"{message}: {payload}", response=payload) from e

        if response.upload is None or response.upload.result not in accepted:
            logger.error("upload_rejected", response=payload)
            raise UploadError(f"{message}: {payload}", response=payload)
        return response.upload
