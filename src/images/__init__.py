from .router import images_route
from .schemas import OperationInfo

__all__ = (
    "images_route",
    "OperationInfo",
)
