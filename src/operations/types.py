"""Value types shared by the parameter grammar, the registry and the chain executor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from PIL.Image import Image


class Anchor(Enum):
    """Relative position of a region inside an image, as ``(x, y)`` fractions."""

    TOP_LEFT = (0.0, 0.0)
    TOP = (0.5, 0.0)
    TOP_RIGHT = (1.0, 0.0)
    LEFT = (0.0, 0.5)
    CENTER = (0.5, 0.5)
    RIGHT = (1.0, 0.5)
    BOTTOM_LEFT = (0.0, 1.0)
    BOTTOM = (0.5, 1.0)
    BOTTOM_RIGHT = (1.0, 1.0)

    @property
    def token(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_token(cls, token: str) -> Anchor | None:
        return ANCHOR_TOKENS.get(token)


ANCHOR_TOKENS: dict[str, Anchor] = {anchor.token: anchor for anchor in Anchor}


class ParamShape(StrEnum):
    NONE = "none"
    FLOAT = "float"
    DIMENSIONS = "dimensions"
    DIMENSIONS_ANCHOR = "dimensions+anchor"


@dataclass(frozen=True)
class Dimensions:
    """Target size in pixels; ``0`` on an axis means "derive from the aspect ratio"."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class CropSpec:
    dimensions: Dimensions
    anchor: Anchor

    def __str__(self) -> str:
        return f"{self.dimensions}@{self.anchor.token}"


@dataclass(frozen=True)
class Operation:
    """One ``name[=param]`` token of an operation chain, as written by the client."""

    name: str
    raw_param: str = ""

    def __str__(self) -> str:
        return f"{self.name}={self.raw_param}" if self.raw_param else self.name


@runtime_checkable
class TransformProtocol(Protocol):
    """A pure image transform: returns a new image and never mutates its input."""

    def __call__(self, image: Image, value: Any, /) -> Image: ...
