"""Application settings and configuration."""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

from fastapi import Depends
from loguru import logger
from pydantic import DirectoryPath, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_DIR = Path(".cache")


class CacheFormat(StrEnum):
    JPG = "jpg"
    PNG = "png"
    WEBP = "webp"

    @property
    def media_type(self) -> str:
        return "image/jpeg" if self is CacheFormat.JPG else f"image/{self.value}"


def _create_default_cache_dir() -> Path:
    """
    Create and return the default cache directory.

    :return: The created cache directory path.
    :raises:
        OSError: If directory creation fails.
        PermissionError: If the application lacks permissions to create the directory.
    """
    try:
        DEFAULT_CACHE_DIR.mkdir(parents=True, exist_ok=True)
        logger.info(f"Cache directory: {DEFAULT_CACHE_DIR.resolve()}")
        return DEFAULT_CACHE_DIR
    except (OSError, PermissionError) as e:
        logger.error(f"Failed to create cache directory {DEFAULT_CACHE_DIR}: {e}")
        raise


class Settings(BaseSettings):
    """
    Application configuration settings.

    Settings can be configured via:

    1. Environment variables (e.g., IMAGE_SERVER_IMAGE_ROOT=/srv/images)
    2. .env file in the project root
    3. Default values defined below

    All settings use the IMAGE_SERVER_ prefix for environment variables.

    .. rubric:: Examples

    Serve images from a custom directory and cache as PNG::

        export IMAGE_SERVER_IMAGE_ROOT=/srv/images
        export IMAGE_SERVER_CACHE_FORMAT=png
    """

    # Storage Configuration
    image_root: Annotated[
        Path,
        Field(default=Path("images"), description="Root directory of the source images"),
    ]
    cache_dir: Annotated[
        DirectoryPath,
        Field(default_factory=_create_default_cache_dir, description="Directory holding cached transformations"),
    ]
    cache_format: Annotated[
        CacheFormat,
        Field(default=CacheFormat.JPG, description="File format (and extension) of cached images"),
    ]
    jpeg_quality: Annotated[
        int,
        Field(default=95, ge=1, le=100, description="Encoder quality for lossy cache formats"),
    ]

    # Worker Configuration
    max_workers: Annotated[
        int,
        Field(default=8, gt=0, description="Maximum number of images decoded and transformed concurrently"),
    ]

    # API Configuration
    api_host: Annotated[str, Field(default="127.0.0.1", description="API host address")]
    api_port: Annotated[int, Field(default=8000, description="API port", gt=0, lt=65536)]

    # Application Metadata
    app_title: Annotated[str, Field(default="Image Transform API", description="Application title")]

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        validate_assignment=True,
        extra="forbid",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def app_version(self) -> str:
        """
        Get the application version from package metadata.

        :return: The installed package version, or "0.0.0" when running from a checkout.
        """
        try:
            return version("image-transform-server")
        except PackageNotFoundError:
            logger.warning("Could not determine package version, using fallback '0.0.0'")
            return "0.0.0"

    def log_startup_config(self) -> None:
        """Log application configuration at startup."""
        logger.info("=" * 60)
        logger.info("Application startup - Configuration:")
        logger.info(f"  Title: {self.app_title}")
        logger.info(f"  Version: {self.app_version}")
        logger.info(f"  Host: {self.api_host}:{self.api_port}")
        logger.info(f"  Image root: {self.image_root}")
        logger.info(f"  Cache: {self.cache_dir} (*.{self.cache_format})")
        logger.info(f"  Max workers: {self.max_workers}")
        logger.info("=" * 60)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: The application settings instance.
    """
    return Settings()  # type: ignore


# Type alias for cleaner endpoint signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
