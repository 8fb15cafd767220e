from collections.abc import Mapping
from http import HTTPStatus
from types import MappingProxyType
from typing import Final

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from exceptions import (
    AccessDenied,
    CacheWriteError,
    ChainError,
    ImageServerError,
    ParameterError,
    SourceNotFound,
    TransformError,
)

STATUS_BY_ERROR: Final[Mapping[type[ImageServerError], HTTPStatus]] = MappingProxyType(
    {
        ParameterError: HTTPStatus.BAD_REQUEST,
        ChainError: HTTPStatus.BAD_REQUEST,
        TransformError: HTTPStatus.BAD_REQUEST,
        SourceNotFound: HTTPStatus.NOT_FOUND,
        AccessDenied: HTTPStatus.FORBIDDEN,
        CacheWriteError: HTTPStatus.INTERNAL_SERVER_ERROR,
    }
)


def status_for(error: ImageServerError) -> HTTPStatus:
    """Map an error to its status code through the closest mapped base class."""
    return next(
        (STATUS_BY_ERROR[cls] for cls in type(error).__mro__ if cls in STATUS_BY_ERROR),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )


async def image_server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an :class:`~exceptions.ImageServerError` like an ``HTTPException``."""
    error = exc if isinstance(exc, ImageServerError) else ImageServerError(str(exc))
    status = status_for(error)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error(f"{request.url.path}: {error.message}")
    else:
        logger.warning(f"{request.url.path}: {status.value} {error.message}")
    return JSONResponse(status_code=status, content={"detail": error.message})
