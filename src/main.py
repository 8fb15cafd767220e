from contextlib import asynccontextmanager

from anyio import CapacityLimiter
from fastapi import FastAPI
from loguru import logger
from uvicorn import run

from exceptions import ImageServerError
from images.exceptions import image_server_error_handler
from operations import get_operation_registry
from routers import prefix_router
from settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Prepare shared resources for the application lifespan.

    Logs the configuration, freezes the operation registry and creates the limiter
    that bounds the number of worker threads doing image work.

    :param app: The FastAPI application instance.

    :yields: ``None``
    """
    settings = get_settings()
    settings.log_startup_config()
    logger.info(f"Operations: {', '.join(get_operation_registry())}")
    app.state.limiter = CapacityLimiter(settings.max_workers)
    yield
    logger.info("Shutting down")


app = FastAPI(lifespan=lifespan, title=get_settings().app_title, version=get_settings().app_version)
app.add_exception_handler(ImageServerError, image_server_error_handler)
app.include_router(prefix_router)


if __name__ == "__main__":
    logger.info("Starting server...")
    settings = get_settings()
    run(app, host=settings.api_host, port=settings.api_port, reload=False, workers=1)
