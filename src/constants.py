from enum import StrEnum


class RoutePrefix(StrEnum):
    IMAGES = "images"
    OPERATIONS = "operations"
