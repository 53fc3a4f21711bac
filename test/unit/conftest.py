"""Test fixtures for robyn-upload-api unit tests."""

import os
import struct
import zlib
from collections.abc import Callable
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

import pytest
from werkzeug.datastructures import FileStorage, MultiDict
from werkzeug.test import encode_multipart

from app.models.core import MultipartBody
from app.models.uploads import UploadConfig


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        self._data[key.lower()] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key.lower()] = value


@dataclass
class MockQueryParams:
    """Mock QueryParams object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    query_params: MockQueryParams = field(default_factory=MockQueryParams)
    method: str = "POST"
    path: str = "/"


@dataclass
class MockResponse:
    """Mock Response object for Robyn."""

    description: str | bytes = ""
    status_code: int = 200
    headers: dict = field(default_factory=dict)


# -----------------------------------------------------------------------------
# File payloads
# -----------------------------------------------------------------------------


def make_png(width: int = 8, height: int = 8) -> bytes:
    """Encode a valid RGB PNG filled with random pixels."""

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    raw = b"".join(b"\x00" + os.urandom(width * 3) for _ in range(height))
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IDAT", zlib.compress(raw)) + chunk(b"IEND", b"")


JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x00" * 64 + b"\xff\xd9"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"
TEXT_BYTES = b"plain old text, nothing to see here\n"


@pytest.fixture(scope="session")
def png_bytes() -> bytes:
    """PNG large enough to span several copy chunks."""
    return make_png(width=160, height=160)


@pytest.fixture
def small_png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES


@pytest.fixture
def text_bytes() -> bytes:
    return TEXT_BYTES


# -----------------------------------------------------------------------------
# Multipart builders
# -----------------------------------------------------------------------------


FilePayload = tuple[str, str, bytes]


def build_multipart(files: list[FilePayload], fields: dict[str, str] | None = None) -> MultipartBody:
    """Encode ``(field_name, filename, content)`` triples as a multipart body.

    Every part is labelled ``application/octet-stream`` so only sniffing decides its type.
    """
    values: MultiDict = MultiDict()
    for name, value in (fields or {}).items():
        values.add(name, value)
    for field_name, filename, content in files:
        values.add(
            field_name,
            FileStorage(stream=BytesIO(content), filename=filename, name=field_name, content_type="application/octet-stream"),
        )
    boundary, body = encode_multipart(values)
    return MultipartBody(content_type=f"multipart/form-data; boundary={boundary}", body=body)


@pytest.fixture
def make_multipart() -> Callable[..., MultipartBody]:
    """Factory fixture to build multipart bodies."""
    return build_multipart


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Empty writable target directory."""
    target = tmp_path / "uploads"
    target.mkdir()
    return target


@pytest.fixture
def image_config() -> UploadConfig:
    return UploadConfig(max_request_size=10 * 1024 * 1024, allowed_content_types=frozenset({"image/jpeg", "image/png"}))


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock requests."""

    def _make(form: MultipartBody | None = None, query: dict | None = None) -> MockRequest:
        form = form if form is not None else MultipartBody()
        headers = MockHeaders()
        if form.content_type:
            headers["Content-Type"] = form.content_type
            headers["Content-Length"] = str(len(form.body))
        return MockRequest(body=form.body, headers=headers, query_params=MockQueryParams(query or {}))

    return _make


@pytest.fixture
def make_mock_response():
    """Factory fixture to create mock responses."""

    def _make(description: str | bytes = "") -> MockResponse:
        return MockResponse(description=description)

    return _make
