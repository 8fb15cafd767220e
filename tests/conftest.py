import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import numpy as np
import pytest
from fastapi.testclient import TestClient
from loguru import logger
from PIL.Image import Image, fromarray

from main import app
from settings import Settings, get_settings

SOURCE_SIZE = (400, 300)


class PropagateHandler(logging.Handler):
    """Forward loguru records to standard logging so ``caplog`` sees them."""

    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


def make_gradient(width: int, height: int) -> Image:
    """RGB image whose every pixel differs from its neighbours, so crops and flips are visible."""
    horizontal = np.tile(np.linspace(0, 255, width), (height, 1))
    vertical = np.tile(np.linspace(0, 255, height)[:, np.newaxis], (1, width))
    data = np.stack([horizontal, vertical, 255 - horizontal], axis=-1)
    return fromarray(data.astype(np.uint8))


@pytest.fixture(scope="module")
def client() -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def source_image() -> Image:
    return make_gradient(*SOURCE_SIZE)


@pytest.fixture
def image_root(tmp_path: Path, source_image: Image) -> Path:
    """Image root holding ``photo.png`` and ``albums/2024/photo.png``."""
    root = tmp_path / "images"
    (root / "albums" / "2024").mkdir(parents=True)
    source_image.save(root / "photo.png")
    source_image.save(root / "albums" / "2024" / "photo.png")
    return root


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(image_root: Path, cache_dir: Path) -> Iterator[Settings]:
    """Point the API at the temporary image root and cache directory."""
    test_settings = Settings(image_root=image_root, cache_dir=cache_dir)  # type: ignore
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield test_settings
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def gradient() -> Callable[[int, int], Image]:
    return make_gradient


@pytest.fixture
def caplog(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    handler_id = logger.add(PropagateHandler(), format="{message}")
    yield caplog
    logger.remove(handler_id)
