"""File service utilities for locating source images."""

from pathlib import Path

from loguru import logger

from exceptions import AccessDenied, SourceNotFound


def resolve_source_path(image_root: Path, filename: str) -> Path:
    """
    Resolve a requested filename to a source image path with security validation.

    The filename is treated as an opaque relative path (it may contain ``/``) below
    ``image_root``; anything resolving outside of it is refused.

    :param image_root: The directory holding the source images.
    :param filename: The requested filename, relative to ``image_root``.
    :return: The validated absolute path to the file.
    :raises AccessDenied: If the path escapes ``image_root``.
    :raises SourceNotFound: If no file exists at the resolved path.
    """
    root = image_root.resolve()
    filepath = (root / filename).resolve()
    if not filepath.is_relative_to(root):
        logger.warning(f"Refused path outside the image root: {filename}")
        raise AccessDenied("Access denied")

    if not filepath.is_file():
        raise SourceNotFound(f"Image {filename} not found")
    return filepath
