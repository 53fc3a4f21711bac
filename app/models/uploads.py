"""Upload configuration and result models."""

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from app.core.settings import Settings


class UploadConfig(BaseModel):
    """Read-only upload policy shared by pipeline invocations.

    An empty ``allowed_content_types`` accepts every detected type. This is a
    permissive default: set an explicit allow-list for public endpoints.
    """

    model_config = ConfigDict(frozen=True)

    max_request_size: PositiveInt
    allowed_content_types: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("allowed_content_types", mode="after")
    @classmethod
    def _normalize_types(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(content_type.strip().lower() for content_type in value)

    def allows(self, content_type: str) -> bool:
        """Case-insensitive exact match against the allow-list."""
        if not self.allowed_content_types:
            return True
        return content_type.lower() in self.allowed_content_types

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadConfig":
        return cls(
            max_request_size=settings.UPLOAD_MAX_REQUEST_SIZE,
            allowed_content_types=frozenset(settings.UPLOAD_ALLOWED_CONTENT_TYPES),
        )


class UploadedFile(BaseModel):
    """A validated file persisted to disk."""

    model_config = ConfigDict(frozen=True)

    stored_name: str
    original_name: str
    byte_size: int


class UploadResponse(BaseModel):
    files: list[UploadedFile]


class UploadOneResponse(BaseModel):
    file: UploadedFile


class UploadErrorResponse(BaseModel):
    """Error body returned with the records persisted before the failure."""

    error: str
    detail: str
    files: list[UploadedFile] = Field(default_factory=list)
