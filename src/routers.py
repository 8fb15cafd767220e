from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from constants import RoutePrefix
from images import OperationInfo, images_route
from operations import get_operation_registry

prefix_router = APIRouter()

prefix_router.include_router(images_route)


@prefix_router.get(
    path="/",
    summary="Redirect to API documentation",
    description="Redirects to the interactive API documentation.",
    include_in_schema=False,
)
async def root() -> RedirectResponse:
    """
    Redirect to the API documentation.

    :return: RedirectResponse to the API documentation.
    """
    return RedirectResponse(url="/docs")


@prefix_router.get(
    path=f"/{RoutePrefix.OPERATIONS}",
    summary="List the supported operations",
    description="""Every operation usable in an image chain, with its parameter shape and an example token.""",
)
async def list_operations() -> list[OperationInfo]:
    return [OperationInfo.from_registered(operation) for operation in get_operation_registry().values()]
