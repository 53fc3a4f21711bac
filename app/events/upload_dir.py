"""Upload directory lifespan event."""

import os
from pathlib import Path

from app.core.lifespan import BaseEvent
from app.core.logger import LogIcon, logger
from app.core.settings import settings as st


class UploadDirectoryError(Exception):
    """Raised when the upload directory cannot be used."""


def prepare_upload_dir(path: Path) -> Path:
    """Create ``path`` if missing and check it is a writable directory."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as ex:
        raise UploadDirectoryError(f"Cannot create upload directory {path}: {ex}") from ex

    if not os.access(path, os.W_OK | os.X_OK):
        raise UploadDirectoryError(f"Upload directory {path} is not writable")

    return path.resolve()


def upload_dir_ready(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.W_OK | os.X_OK)


class UploadDirectoryEvent(BaseEvent[Path]):
    """Prepares the directory uploaded files are written to."""

    name = "upload_dir"

    async def startup(self) -> Path:
        upload_dir = prepare_upload_dir(st.UPLOAD_DIR)
        logger.info("Upload directory ready", icon=LogIcon.STORAGE, path=str(upload_dir))
        return upload_dir
