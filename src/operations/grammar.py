"""
Parameter grammar for operation tokens.

Each parser turns the raw text after ``=`` into a typed value or raises the
matching :class:`~exceptions.ParameterError` subclass:

=====================  ==========================  ======================
shape                  example                     error
=====================  ==========================  ======================
float                  ``1.5``, ``-20``, ``2e-1``  ``InvalidParameter``
dimensions             ``400x300``, ``0x200``      ``InvalidDimensions``
anchor                 ``top-left``, ``center``    ``InvalidAnchor``
dimensions + anchor    ``200x200@center``          ``InvalidCropSpec``
=====================  ==========================  ======================
"""

import math
import re
from typing import Final

from exceptions import InvalidAnchor, InvalidCropSpec, InvalidDimensions, InvalidParameter
from operations.types import ANCHOR_TOKENS, Anchor, CropSpec, Dimensions

FLOAT_PATTERN: Final = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
INTEGER_PATTERN: Final = re.compile(r"\d+", re.ASCII)
DIMENSION_SEPARATOR: Final = "x"
ANCHOR_SEPARATOR: Final = "@"
MAX_SIDE: Final = 16_384


def parse_none(raw: str) -> None:
    if raw:
        raise InvalidParameter(f"takes no parameter, got '{raw}'")


def parse_float(raw: str) -> float:
    if not FLOAT_PATTERN.fullmatch(raw):
        raise InvalidParameter(f"'{raw}' is not a decimal number")
    if not math.isfinite(value := float(raw)):
        raise InvalidParameter(f"'{raw}' is out of range")
    return value


def parse_dimensions(raw: str) -> Dimensions:
    """Parse ``<width>x<height>``; either side may be ``0`` and neither may exceed :data:`MAX_SIDE`."""
    parts = raw.split(DIMENSION_SEPARATOR)
    if len(parts) != 2:  # noqa: PLR2004
        raise InvalidDimensions(f"'{raw}' is not of the form <width>x<height>")
    width, height = parts
    for label, value in (("width", width), ("height", height)):
        if not INTEGER_PATTERN.fullmatch(value):
            raise InvalidDimensions(f"invalid {label} '{value}'")
        if len(value) > len(str(MAX_SIDE)) or int(value) > MAX_SIDE:
            raise InvalidDimensions(f"{label} {value} exceeds {MAX_SIDE}")
    return Dimensions(width=int(width), height=int(height))


def parse_anchor(raw: str) -> Anchor:
    if (anchor := ANCHOR_TOKENS.get(raw)) is None:
        raise InvalidAnchor(f"'{raw}' is not one of {', '.join(ANCHOR_TOKENS)}")
    return anchor


def parse_crop_spec(raw: str) -> CropSpec:
    """Parse ``<width>x<height>@<anchor>``."""
    if raw.count(ANCHOR_SEPARATOR) != 1:
        raise InvalidCropSpec(f"'{raw}' is not of the form <width>x<height>@<anchor>")
    dimensions, anchor = raw.split(ANCHOR_SEPARATOR)
    return CropSpec(dimensions=parse_dimensions(dimensions), anchor=parse_anchor(anchor))
