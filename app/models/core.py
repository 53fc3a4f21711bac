"""Core models for request/response handling."""

from typing import Any

from werkzeug.http import parse_options_header

MULTIPART_FORM_DATA = "multipart/form-data"


class MultipartBody:
    """Raw multipart/form-data request body with its content type header."""

    __slots__ = ("content_type", "body")

    def __init__(self, content_type: str = "", body: bytes = b"") -> None:
        self.content_type = content_type
        self.body = body

    def __bool__(self) -> bool:
        return bool(self.body)

    def __len__(self) -> int:
        return len(self.body)

    def __repr__(self) -> str:
        return f"MultipartBody(content_type={self.content_type!r}, size={len(self.body)})"

    @property
    def mimetype(self) -> str:
        return parse_options_header(self.content_type)[0].lower()

    def is_multipart(self) -> bool:
        return self.mimetype == MULTIPART_FORM_DATA

    @classmethod
    def from_request(cls, request: Any) -> "MultipartBody":
        """Build from a Robyn request or anything exposing ``headers.get`` and ``body``."""
        headers = request.headers
        content_type = headers.get("content-type") or headers.get("Content-Type") or ""
        body = request.body or b""
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(content_type=content_type, body=bytes(body))
