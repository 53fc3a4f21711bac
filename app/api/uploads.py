"""Multipart file upload endpoints."""

import asyncio
from collections.abc import Callable
from typing import Any

import orjson
from robyn import Request, Response

from app.core.exceptions import (
    CreateFailed,
    DisallowedFileType,
    EntropySourceFailure,
    NoFileProvided,
    RequestTooLarge,
    UploadError,
    WriteFailed,
)
from app.core.logger import LogIcon, logger
from app.core.router import Router
from app.core.settings import settings as st
from app.core.uploads import upload_files, upload_one_file
from app.models.core import MultipartBody
from app.models.uploads import UploadConfig, UploadErrorResponse, UploadOneResponse, UploadResponse

router = Router(__file__, prefix="/files")

upload_config = UploadConfig.from_settings(st)

ERROR_STATUS: dict[type[UploadError], int] = {
    RequestTooLarge: 413,
    DisallowedFileType: 415,
    NoFileProvided: 400,
    CreateFailed: 500,
    WriteFailed: 500,
    EntropySourceFailure: 500,
}

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})

JSON_HEADERS = {"content-type": "application/json"}


def parse_rename(value: str | None, default: bool) -> bool:
    """Parse the ``rename`` query parameter."""
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for 'rename': {value!r}")


def error_response(err: UploadError) -> Response:
    """Classify an upload error into a JSON response carrying the partial results."""
    status_code = ERROR_STATUS.get(type(err), 500)

    match err:
        case DisallowedFileType():
            logger.warning(err.message, icon=LogIcon.FORBIDDEN, persisted=len(err.uploaded_files))
        case RequestTooLarge():
            logger.warning(err.message, icon=LogIcon.OVERSIZE)
        case NoFileProvided():
            logger.warning(err.message, icon=LogIcon.VALIDATION)
        case _:
            logger.error(err.message, icon=LogIcon.ERROR, code=err.code, persisted=len(err.uploaded_files))

    body = UploadErrorResponse(error=err.code, detail=err.message, files=err.uploaded_files)
    return Response(status_code=status_code, headers=JSON_HEADERS, description=body.model_dump_json())


async def run_upload(operation: Callable[..., Any], form: MultipartBody, rename: bool) -> Any:
    """Run a blocking upload operation off the event loop using the configured policy."""
    return await asyncio.to_thread(operation, form, st.UPLOAD_DIR, rename, upload_config)


def invalid_query_response(ex: ValueError) -> Response:
    return Response(
        status_code=422,
        headers=JSON_HEADERS,
        description=orjson.dumps({"error": "invalid_query", "detail": str(ex)}).decode(),
    )


@router.post("/upload")
async def upload(request: Request, form: MultipartBody) -> UploadResponse | Response:
    """Store every file of a multipart request."""
    try:
        rename = parse_rename(request.query_params.get("rename", None), st.UPLOAD_RENAME_FILES)
    except ValueError as ex:
        return invalid_query_response(ex)

    try:
        files = await run_upload(upload_files, form, rename)
    except UploadError as err:
        return error_response(err)

    logger.info("Files uploaded", icon=LogIcon.SUCCESS, count=len(files))
    return UploadResponse(files=files)


@router.post("/upload-one")
async def upload_one(request: Request, form: MultipartBody) -> UploadOneResponse | Response:
    """Store the files of a multipart request and return the first."""
    try:
        rename = parse_rename(request.query_params.get("rename", None), st.UPLOAD_RENAME_FILES)
    except ValueError as ex:
        return invalid_query_response(ex)

    try:
        file = await run_upload(upload_one_file, form, rename)
    except UploadError as err:
        return error_response(err)

    logger.info("File uploaded", icon=LogIcon.SUCCESS, stored_name=file.stored_name, size=file.byte_size)
    return UploadOneResponse(file=file)
