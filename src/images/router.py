from functools import partial
from http import HTTPStatus
from typing import Final

from anyio import CapacityLimiter, to_thread
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from cache import CacheStore
from constants import RoutePrefix
from dependencies import get_cache_store, get_limiter
from settings import SettingsDep

from .controller import serve_image

ROUTE = f"/{RoutePrefix.IMAGES}"
CACHE_HEADER: Final = "X-Cache"
images_route = APIRouter(prefix=ROUTE, tags=[ROUTE])


@images_route.get(
    path="/{operations}/{filename:path}",
    summary="Transform an image with a chain of operations.",
    description="""
    Applies the comma separated chain of operations (e.g. `fill=200x200@center,grayscale`)
    to the source image `filename`, left to right, and returns the result.
    Results are cached per (filename, chain); the `X-Cache` header tells whether the
    response was served from the cache.
""",
    response_class=FileResponse,
    responses={
        HTTPStatus.BAD_REQUEST: {"description": "Malformed chain, invalid parameter or failed operation."},
        HTTPStatus.FORBIDDEN: {"description": "Filename outside of the image root."},
        HTTPStatus.NOT_FOUND: {"description": "Source image not found."},
        HTTPStatus.INTERNAL_SERVER_ERROR: {"description": "The transformed image could not be cached."},
    },
)
async def get_image(
    operations: str,
    filename: str,
    settings: SettingsDep,
    store: CacheStore = Depends(get_cache_store),
    limiter: CapacityLimiter = Depends(get_limiter),
) -> FileResponse:
    """
    Serve the transformed image.

    Decoding, transforming and encoding block, so they run in a worker thread bounded by
    the application's limiter.

    :param operations: The raw operation chain.
    :param filename: Source path relative to the image root; may contain ``/``.
    :returns: FileResponse with the cached image.
    """
    entry = await to_thread.run_sync(
        partial(serve_image, filename, operations, image_root=settings.image_root, store=store),
        limiter=limiter,
    )
    return FileResponse(
        path=entry.path,
        media_type=settings.cache_format.media_type,
        headers={CACHE_HEADER: "HIT" if entry.hit else "MISS"},
    )
