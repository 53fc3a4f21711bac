"""Multipart upload pipeline: parse, sniff, name and persist file parts."""

from contextlib import closing
from io import BytesIO
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.formparser import parse_form_data

from app.core.exceptions import CreateFailed, DisallowedFileType, NoFileProvided, RequestTooLarge, UploadError, WriteFailed
from app.core.naming import stored_name_for
from app.core.sniffing import SNIFF_LENGTH, detect_content_type
from app.models.core import MultipartBody
from app.models.uploads import UploadConfig, UploadedFile

COPY_CHUNK_SIZE = 64 * 1024

FileParts = list[tuple[str, list[FileStorage]]]


def client_filename(filename: str | None) -> str:
    """Base name of a client supplied filename, accepting either path separator."""
    return PurePosixPath((filename or "").replace("\\", "/")).name


def parse_multipart(form: MultipartBody, max_size: int) -> FileParts:
    """Decode file parts grouped by form field.

    Fields come back in first-appearance order, files within a field in
    submission order. Non-multipart bodies yield no parts.
    """
    environ = {
        "REQUEST_METHOD": "POST",
        "CONTENT_TYPE": form.content_type,
        "CONTENT_LENGTH": str(len(form.body)),
        "wsgi.input": BytesIO(form.body),
    }
    try:
        _, _, files = parse_form_data(environ, max_content_length=max_size)
    except RequestEntityTooLarge as ex:
        raise RequestTooLarge(max_size) from ex
    return list(files.lists())


def _copy_part(head: bytes, source: BinaryIO, destination: BinaryIO) -> int:
    written = destination.write(head)
    while chunk := source.read(COPY_CHUNK_SIZE):
        written += destination.write(chunk)
    return written


def save_part(part: FileStorage, target_dir: Path, rename: bool, config: UploadConfig) -> UploadedFile:
    """Validate one file part and write it under ``target_dir``."""
    original_name = client_filename(part.filename)

    with closing(part):
        head = part.stream.read(SNIFF_LENGTH)
        content_type = detect_content_type(head)
        if not config.allows(content_type):
            raise DisallowedFileType(original_name, content_type)

        stored_name = stored_name_for(original_name, rename)
        destination = target_dir / stored_name

        try:
            outfile = destination.open("wb")
        except OSError as ex:
            raise CreateFailed(f"Cannot create {destination}: {ex}") from ex

        try:
            with outfile:
                byte_size = _copy_part(head, part.stream, outfile)
        except OSError as ex:
            raise WriteFailed(f"Cannot write {destination}: {ex}") from ex

    return UploadedFile(stored_name=stored_name, original_name=original_name, byte_size=byte_size)


def upload_files(form: MultipartBody, target_dir: str | Path, rename: bool, config: UploadConfig) -> list[UploadedFile]:
    """
    Persist every file of a multipart request to ``target_dir``.

    Files are processed one at a time. The first failure stops the call: the raised
    ``UploadError`` carries in ``uploaded_files`` the records of the files already
    written, which stay on disk.

    Raises:
        RequestTooLarge: body exceeds ``config.max_request_size``; nothing is processed.
        DisallowedFileType: detected type is not in ``config.allowed_content_types``.
        CreateFailed: destination file could not be created.
        WriteFailed: copying the part to disk failed.
        EntropySourceFailure: a random name could not be generated.
    """
    target_dir = Path(target_dir)
    parts = parse_multipart(form, config.max_request_size)
    uploaded: list[UploadedFile] = []

    try:
        for _field_name, field_parts in parts:
            for part in field_parts:
                if not client_filename(part.filename):
                    continue
                try:
                    uploaded.append(save_part(part, target_dir, rename, config))
                except UploadError as err:
                    err.uploaded_files = list(uploaded)
                    raise
    finally:
        for _field_name, field_parts in parts:
            for part in field_parts:
                part.close()

    return uploaded


def upload_one_file(form: MultipartBody, target_dir: str | Path, rename: bool, config: UploadConfig) -> UploadedFile:
    """Persist the files of a request and return the first record.

    Raises ``NoFileProvided`` when the request carries no file parts.
    """
    uploaded = upload_files(form, target_dir, rename, config)
    if not uploaded:
        raise NoFileProvided()
    return uploaded[0]
