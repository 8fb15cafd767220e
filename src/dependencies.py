from functools import partial

from anyio import CapacityLimiter
from fastapi import Request

from cache import CacheStore
from images.image_io import save_image
from settings import SettingsDep


def get_limiter(request: Request) -> CapacityLimiter:
    """Get the worker thread limiter from the app state."""
    return request.app.state.limiter


def get_cache_store(settings: SettingsDep) -> CacheStore:
    """Build the cache store for the configured directory and format."""
    return CacheStore(
        directory=settings.cache_dir,
        extension=settings.cache_format,
        encode=partial(save_image, quality=settings.jpeg_quality),
    )
