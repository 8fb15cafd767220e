from functools import partial
from pathlib import Path

from loguru import logger
from PIL.Image import Image

from cache import CacheEntry, CacheStore
from file_services import resolve_source_path
from images.image_io import open_image
from operations import apply_chain
from pipelines import run_pipeline


def transform_image(source_path: Path, chain: str) -> Image:
    """Decode the source image and apply the operation chain to it."""
    return run_pipeline(
        source_path,
        open_image,
        partial(apply_chain, chain=chain),
        error_message=f"Failed to transform {source_path.name}",
    )


def serve_image(filename: str, chain: str, *, image_root: Path, store: CacheStore) -> CacheEntry:
    """
    Return the cache entry for ``filename`` transformed by ``chain``, computing it on a miss.

    The source is located first, so a missing source is reported as such whatever the
    chain looks like and whether or not an older entry is still cached.

    :param filename: Source path relative to ``image_root``.
    :param chain: The raw operation chain from the request path.
    :param image_root: Directory holding the source images.
    :param store: The cache to read from and write to.
    :raises ImageServerError: Any error of the lookup, the pipeline or the cache write.
    """
    source_path = resolve_source_path(image_root, filename)
    entry = store.lookup_or_compute(filename, chain, partial(transform_image, source_path, chain))
    logger.info(f"Served {filename} [{chain}] ({'hit' if entry.hit else 'miss'})")
    return entry
