"""Environment driven settings for robyn-upload-api."""

import importlib.metadata
import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_NAME = "robyn-upload-api"
ROOT_DIR = Path(__file__).parent.parent.parent


def project_metadata(root_dir: Path) -> dict:
    """The ``[project]`` table of a source checkout, or installed package metadata."""
    pyproject = root_dir / "pyproject.toml"
    if pyproject.is_file():
        with pyproject.open("rb") as file_handle:
            return tomllib.load(file_handle).get("project", {})
    try:
        installed = importlib.metadata.metadata(PACKAGE_NAME)
    except importlib.metadata.PackageNotFoundError:
        return {}
    return {"name": installed["Name"], "version": installed["Version"]}


class Settings(BaseSettings):
    """Service settings; every field can be overridden by env var or ``.env``."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"

    # Not read from the environment
    PROJECT: ClassVar[dict] = project_metadata(ROOT_DIR)
    API_NAME: ClassVar[str] = PROJECT.get("name", PACKAGE_NAME)
    API_VERSION: ClassVar[str] = PROJECT.get("version", "0.0.0")

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    UPLOAD_DIR: Path = ROOT_DIR / "data" / "uploads"
    UPLOAD_MAX_REQUEST_SIZE: int = 10 * 1024 * 1024
    # Empty list accepts every detected type
    UPLOAD_ALLOWED_CONTENT_TYPES: list[str] = ["image/jpeg", "image/png", "image/gif", "application/pdf"]
    UPLOAD_RENAME_FILES: bool = True

    @property
    def api_url(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
