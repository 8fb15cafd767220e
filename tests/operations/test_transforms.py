from collections.abc import Callable

import numpy as np
import pytest
from PIL.Image import Image, fromarray

from operations.transforms import (
    blur,
    brightness,
    contrast,
    crop,
    fill,
    fit,
    gamma,
    grayscale,
    hue,
    invert,
    resize,
    saturation,
    sharpen,
)
from operations.types import Anchor, CropSpec, Dimensions


@pytest.fixture
def image(gradient: Callable[[int, int], Image]) -> Image:
    return gradient(40, 30)


def _pixels(image: Image) -> np.ndarray:
    return np.asarray(image, dtype=np.int16)


class TestPurity:
    @pytest.mark.parametrize(
        ("operation", "value"),
        [
            pytest.param(blur, 2.0, id="blur"),
            pytest.param(sharpen, 2.0, id="sharpen"),
            pytest.param(gamma, 1.8, id="gamma"),
            pytest.param(contrast, 40.0, id="contrast"),
            pytest.param(brightness, -30.0, id="brightness"),
            pytest.param(saturation, 50.0, id="saturation"),
            pytest.param(hue, 90.0, id="hue"),
            pytest.param(resize, Dimensions(20, 0), id="resize"),
            pytest.param(fit, Dimensions(10, 10), id="fit"),
            pytest.param(fill, CropSpec(Dimensions(10, 10), Anchor.CENTER), id="fill"),
            pytest.param(crop, CropSpec(Dimensions(10, 10), Anchor.TOP), id="crop"),
            pytest.param(grayscale, None, id="grayscale"),
            pytest.param(invert, None, id="invert"),
        ],
    )
    def test_input_is_not_mutated(self, image: Image, operation: Callable, value: object) -> None:
        # Arrange
        before = image.tobytes()

        # Act
        result = operation(image, value)

        # Assert
        assert result is not image
        assert image.tobytes() == before


class TestScalarAdjustments:
    @pytest.mark.parametrize("operation", [blur, sharpen])
    def test_non_positive_sigma_is_a_copy(self, image: Image, operation: Callable) -> None:
        assert operation(image, 0.0).tobytes() == image.tobytes()

    def test_blur_smooths_the_image(self) -> None:
        checkerboard = fromarray((np.indices((30, 40)).sum(axis=0) % 2 * 255).astype(np.uint8))
        assert _pixels(blur(checkerboard, 3.0)).std() < _pixels(checkerboard).std() / 4

    def test_gamma_above_one_brightens(self, image: Image) -> None:
        assert _pixels(gamma(image, 2.0)).mean() > _pixels(image).mean()

    def test_brightness_is_clamped(self, image: Image) -> None:
        assert _pixels(brightness(image, 500.0)).min() == 255  # noqa: PLR2004
        assert _pixels(brightness(image, -100.0)).max() == 0

    def test_full_negative_contrast_is_flat_gray(self, image: Image) -> None:
        assert np.unique(_pixels(contrast(image, -100.0))).tolist() == [128]

    def test_full_contrast_is_binary(self, image: Image) -> None:
        assert set(np.unique(_pixels(contrast(image, 100.0))).tolist()) <= {0, 255}

    def test_full_desaturation_equalises_channels(self, image: Image) -> None:
        pixels = _pixels(saturation(image, -100.0))
        assert np.abs(pixels[..., 0] - pixels[..., 1]).max() <= 1

    def test_hue_zero_is_a_copy(self, image: Image) -> None:
        assert hue(image, 0.0).tobytes() == image.tobytes()

    def test_hue_rotation_changes_colors(self, image: Image) -> None:
        assert hue(image, 120.0).tobytes() != image.tobytes()


class TestGeometry:
    @pytest.mark.parametrize(
        ("dimensions", "expected"),
        [
            pytest.param(Dimensions(20, 10), (20, 10), id="both sides"),
            pytest.param(Dimensions(20, 0), (20, 15), id="auto height"),
            pytest.param(Dimensions(0, 60), (80, 60), id="auto width"),
        ],
    )
    def test_resize(self, image: Image, dimensions: Dimensions, expected: tuple[int, int]) -> None:
        assert resize(image, dimensions).size == expected

    @pytest.mark.parametrize("operation", [resize, fit])
    def test_zero_by_zero_is_rejected(self, image: Image, operation: Callable) -> None:
        with pytest.raises(ValueError, match="cannot both be zero"):
            operation(image, Dimensions(0, 0))

    @pytest.mark.parametrize(
        ("dimensions", "expected"),
        [
            pytest.param(Dimensions(20, 20), (20, 15), id="width bound"),
            pytest.param(Dimensions(100, 15), (20, 15), id="height bound"),
            pytest.param(Dimensions(0, 15), (20, 15), id="unbounded width"),
            pytest.param(Dimensions(400, 400), (40, 30), id="never enlarges"),
        ],
    )
    def test_fit(self, image: Image, dimensions: Dimensions, expected: tuple[int, int]) -> None:
        assert fit(image, dimensions).size == expected

    def test_fill_has_exact_size(self, image: Image) -> None:
        assert fill(image, CropSpec(Dimensions(25, 25), Anchor.CENTER)).size == (25, 25)

    def test_fill_anchor_selects_the_kept_region(self, image: Image) -> None:
        left = _pixels(fill(image, CropSpec(Dimensions(10, 30), Anchor.LEFT)))
        right = _pixels(fill(image, CropSpec(Dimensions(10, 30), Anchor.RIGHT)))
        assert left[..., 0].mean() < right[..., 0].mean()

    @pytest.mark.parametrize(
        ("anchor", "origin"),
        [
            pytest.param(Anchor.TOP_LEFT, (0, 0), id="top-left"),
            pytest.param(Anchor.TOP, (15, 0), id="top"),
            pytest.param(Anchor.CENTER, (15, 10), id="center"),
            pytest.param(Anchor.BOTTOM_RIGHT, (30, 20), id="bottom-right"),
        ],
    )
    def test_crop_anchor(self, image: Image, anchor: Anchor, origin: tuple[int, int]) -> None:
        # Arrange
        left, top = origin
        expected = image.crop((left, top, left + 10, top + 10))

        # Act
        result = crop(image, CropSpec(Dimensions(10, 10), anchor))

        # Assert
        assert result.tobytes() == expected.tobytes()

    def test_crop_is_clipped_to_the_image(self, image: Image) -> None:
        assert crop(image, CropSpec(Dimensions(100, 10), Anchor.CENTER)).size == (40, 10)

    @pytest.mark.parametrize("operation", [crop, fill])
    def test_empty_region_is_rejected(self, image: Image, operation: Callable) -> None:
        with pytest.raises(ValueError, match="positive width and height"):
            operation(image, CropSpec(Dimensions(0, 10), Anchor.CENTER))


class TestColor:
    def test_grayscale_has_a_single_channel(self, image: Image) -> None:
        assert grayscale(image, None).mode == "L"

    def test_invert(self, image: Image) -> None:
        assert (_pixels(invert(image, None)) == 255 - _pixels(image)).all()

    def test_invert_twice_is_identity(self, image: Image) -> None:
        assert invert(invert(image, None), None).tobytes() == image.tobytes()
