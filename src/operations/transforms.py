"""
Built-in image operations.

Every transform is pure: it receives a decoded :class:`PIL.Image.Image` and the typed
parameter produced by the grammar, and returns a new image. Scalar adjustments follow
the usual percentage conventions (``brightness=-20``, ``contrast=35``,
``saturation=50``), ``hue`` takes degrees and ``blur``/``sharpen`` take a sigma.
"""

from collections.abc import Callable

import numpy as np
from PIL import ImageEnhance, ImageFilter, ImageOps
from PIL.Image import Image, Resampling, merge

from operations.registry import OperationRegistry
from operations.types import CropSpec, Dimensions, ParamShape

RESAMPLING = Resampling.LANCZOS

registry = OperationRegistry()


def _apply_lookup_table(image: Image, curve: Callable[[np.ndarray], np.ndarray]) -> Image:
    """Map every band of ``image`` through ``curve`` evaluated on ``[0, 1]``."""
    levels = curve(np.arange(256, dtype=np.float64) / 255.0) * 255.0
    table = np.clip(np.rint(levels), 0, 255).astype(np.uint8).tolist()
    return image.point(table * len(image.getbands()))


def _bounded_sigma(image: Image, sigma: float) -> float:
    """Beyond the longest side a Gaussian is already flat over the whole image."""
    return min(sigma, float(max(image.size)))


def _require_area(dimensions: Dimensions) -> None:
    if dimensions.width <= 0 or dimensions.height <= 0:
        raise ValueError(f"{dimensions} must have a positive width and height")


@registry.register(shape=ParamShape.FLOAT)
def blur(image: Image, sigma: float) -> Image:
    """Gaussian blur with standard deviation ``sigma``, capped at the longest image side."""
    if sigma <= 0:
        return image.copy()
    return image.filter(ImageFilter.GaussianBlur(radius=_bounded_sigma(image, sigma)))


@registry.register(shape=ParamShape.FLOAT)
def sharpen(image: Image, sigma: float) -> Image:
    """Unsharp-mask sharpening with a blur of standard deviation ``sigma``."""
    if sigma <= 0:
        return image.copy()
    return image.filter(ImageFilter.UnsharpMask(radius=_bounded_sigma(image, sigma), percent=100, threshold=0))


@registry.register(shape=ParamShape.FLOAT)
def gamma(image: Image, value: float) -> Image:
    """Gamma correction; values above 1 brighten, values below 1 darken."""
    exponent = 1.0 / max(value, 0.0001)
    return _apply_lookup_table(image, lambda levels: levels**exponent)


@registry.register(shape=ParamShape.FLOAT)
def contrast(image: Image, percentage: float) -> Image:
    """Adjust contrast by ``percentage`` in ``[-100, 100]``."""
    factor = (100.0 + min(max(percentage, -100.0), 100.0)) / 100.0
    if factor >= 2.0:  # noqa: PLR2004
        return _apply_lookup_table(image, lambda levels: np.where(levels < 0.5, 0.0, 1.0))  # noqa: PLR2004
    slope = factor if factor <= 1.0 else 1.0 / (2.0 - factor)
    return _apply_lookup_table(image, lambda levels: 0.5 + (levels - 0.5) * slope)


@registry.register(shape=ParamShape.FLOAT)
def brightness(image: Image, percentage: float) -> Image:
    """Shift brightness by ``percentage`` in ``[-100, 100]``."""
    shift = min(max(percentage, -100.0), 100.0) / 100.0
    return _apply_lookup_table(image, lambda levels: levels + shift)


@registry.register(shape=ParamShape.FLOAT)
def saturation(image: Image, percentage: float) -> Image:
    """Adjust saturation by ``percentage`` in ``[-100, 500]``."""
    factor = 1.0 + min(max(percentage, -100.0), 500.0) / 100.0
    return ImageEnhance.Color(image).enhance(factor)


@registry.register(shape=ParamShape.FLOAT)
def hue(image: Image, degrees: float) -> Image:
    """Rotate the hue by ``degrees`` in ``[-180, 180]``."""
    offset = round(min(max(degrees, -180.0), 180.0) * 256 / 360)
    if offset == 0 or image.mode != "RGB":
        return image.copy()
    hues, saturations, values = image.convert("HSV").split()
    rotated = hues.point(lambda level: (level + offset) % 256)
    return merge("HSV", (rotated, saturations, values)).convert("RGB")


@registry.register(shape=ParamShape.DIMENSIONS)
def resize(image: Image, dimensions: Dimensions) -> Image:
    """Resize to ``width x height``; a zero side keeps the aspect ratio."""
    width, height = dimensions.width, dimensions.height
    if width == 0 and height == 0:
        raise ValueError("width and height cannot both be zero")
    source_width, source_height = image.size
    if width == 0:
        width = max(1, round(height * source_width / source_height))
    if height == 0:
        height = max(1, round(width * source_height / source_width))
    return image.resize((width, height), RESAMPLING)


@registry.register(shape=ParamShape.DIMENSIONS)
def fit(image: Image, dimensions: Dimensions) -> Image:
    """Scale down to fit inside the box, preserving the aspect ratio; zero is unbounded."""
    if dimensions.width == 0 and dimensions.height == 0:
        raise ValueError("width and height cannot both be zero")
    source_width, source_height = image.size
    fitted = image.copy()
    fitted.thumbnail(
        (dimensions.width or source_width, dimensions.height or source_height),
        RESAMPLING,
        reducing_gap=None,
    )
    return fitted


@registry.register(shape=ParamShape.DIMENSIONS_ANCHOR)
def fill(image: Image, spec: CropSpec) -> Image:
    """Scale and crop to exactly fill the box, keeping the anchored region."""
    _require_area(spec.dimensions)
    return ImageOps.fit(
        image,
        (spec.dimensions.width, spec.dimensions.height),
        method=RESAMPLING,
        centering=spec.anchor.value,
    )


@registry.register(shape=ParamShape.DIMENSIONS_ANCHOR)
def crop(image: Image, spec: CropSpec) -> Image:
    """Cut out a region of the given size at the anchor, clipped to the image bounds."""
    _require_area(spec.dimensions)
    width, height = spec.dimensions.width, spec.dimensions.height
    source_width, source_height = image.size
    anchor_x, anchor_y = spec.anchor.value
    left = int((source_width - width) * anchor_x)
    top = int((source_height - height) * anchor_y)
    return image.crop(
        (
            max(left, 0),
            max(top, 0),
            min(left + width, source_width),
            min(top + height, source_height),
        )
    )


@registry.register(shape=ParamShape.NONE)
def grayscale(image: Image, _: None) -> Image:
    """Desaturate to a single luminance channel."""
    return ImageOps.grayscale(image)


@registry.register(shape=ParamShape.NONE)
def invert(image: Image, _: None) -> Image:
    """Invert every color channel."""
    return ImageOps.invert(image)
