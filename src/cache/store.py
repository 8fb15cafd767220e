"""Content-addressed, append-only cache of transformed images."""

import os
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from loguru import logger

from cache.keys import derive_cache_key
from exceptions import CacheWriteError

type Encoder = Callable[[Any, Path], Any]

ENTRY_MODE: Final = 0o644


@dataclass(frozen=True)
class CacheEntry:
    key: str
    path: Path
    hit: bool


class CacheStore:
    """
    Flat directory holding one ``<digest>.<extension>`` file per (filename, chain) pair.

    Entries are written once and never updated or deleted. Writes go to a hidden
    temporary file in the same directory and are renamed into place, so a reader
    either sees no entry or a complete one. Two requests racing on the same key may
    both compute the image; the last rename wins and both files are complete.

    :param directory: The cache directory, created on first write.
    :param extension: File extension of the entries, also selecting the encoder format.
    :param encode: Writes a computed value to a path, e.g. :func:`images.image_io.save_image`.
    """

    def __init__(self, directory: Path, extension: str, encode: Encoder) -> None:
        self.directory = directory
        self.extension = extension.lstrip(".")
        self.encode = encode

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.{self.extension}"

    def lookup(self, key: str) -> Path | None:
        """Return the entry for ``key`` if it exists, without checking the source image."""
        path = self.path_for(key)
        return path if path.is_file() else None

    def store(self, key: str, value: Any) -> Path:
        """
        Encode ``value`` and atomically publish it under ``key``.

        :raises CacheWriteError: If the directory, the temporary file, the encoder or the rename fails.
        """
        target = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            descriptor, temporary_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}-", suffix=target.suffix)
            os.close(descriptor)
        except OSError as error:
            logger.error(f"Unable to allocate cache file in {self.directory}: {error}")
            raise CacheWriteError("Failed to save cached image") from error

        temporary = Path(temporary_name)
        try:
            self.encode(value, temporary)
            os.chmod(temporary, ENTRY_MODE)
            os.replace(temporary, target)
        except (OSError, ValueError) as error:
            logger.error(f"Failed to write cache entry {target.name}: {error}")
            raise CacheWriteError("Failed to save cached image") from error
        finally:
            temporary.unlink(missing_ok=True)
        logger.info(f"Stored cache entry {target.name}")
        return target

    def lookup_or_compute(self, filename: str, chain: str, compute: Callable[[], Any]) -> CacheEntry:
        """
        Serve the cached entry for ``(filename, chain)`` or compute, store and serve it.

        Errors raised by ``compute`` propagate unchanged and nothing is written.

        :param filename: Source path relative to the image root.
        :param chain: The raw operation chain.
        :param compute: Produces the value to cache, only called on a miss.
        :return: The entry, flagged as a hit or a miss.
        :raises CacheWriteError: If the computed value cannot be persisted.
        """
        key = derive_cache_key(filename, chain)
        if path := self.lookup(key):
            logger.debug(f"Cache hit for {filename} [{chain}]: {path.name}")
            return CacheEntry(key=key, path=path, hit=True)

        logger.debug(f"Cache miss for {filename} [{chain}]")
        return CacheEntry(key=key, path=self.store(key, compute()), hit=False)
