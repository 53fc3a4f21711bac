"""Upload pipeline error taxonomy."""

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from app.models.uploads import UploadedFile


class UploadError(Exception):
    """Base exception for upload failures.

    Carries the records of every file persisted before the failure so callers
    can inspect what was written even though the call failed.
    """

    code: ClassVar[str] = "upload_error"

    def __init__(self, message: str, uploaded_files: list["UploadedFile"] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.uploaded_files: list["UploadedFile"] = list(uploaded_files or [])


class RequestTooLarge(UploadError):
    """Multipart body exceeds the configured size bound."""

    code = "request_too_large"

    def __init__(self, max_size: int, uploaded_files: list["UploadedFile"] | None = None) -> None:
        super().__init__(f"Request body exceeds {max_size} bytes", uploaded_files)
        self.max_size = max_size


class DisallowedFileType(UploadError):
    """Detected content type is not in the allow-list."""

    code = "disallowed_file_type"

    def __init__(
        self, filename: str, content_type: str, uploaded_files: list["UploadedFile"] | None = None
    ) -> None:
        super().__init__(f"File type {content_type} of '{filename}' is not permitted", uploaded_files)
        self.filename = filename
        self.content_type = content_type


class CreateFailed(UploadError):
    """Destination file could not be created."""

    code = "create_failed"


class WriteFailed(UploadError):
    """Copying the part content to disk failed."""

    code = "write_failed"


class EntropySourceFailure(UploadError):
    """The secure random source could not produce output."""

    code = "entropy_source_failure"


class NoFileProvided(UploadError):
    """The request held no file parts where one was expected."""

    code = "no_file_provided"

    def __init__(self, uploaded_files: list["UploadedFile"] | None = None) -> None:
        super().__init__("No file provided", uploaded_files)
