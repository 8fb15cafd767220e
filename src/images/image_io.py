from pathlib import Path

from PIL import Image as PILImage
from PIL.Image import Image
from returns.result import safe

from exceptions import SourceNotFound
from utils.logger import FailureLevel, log_railway_function


@log_railway_function("Failed to open source image", failure_level=FailureLevel.WARNING)
@safe
def open_image(path: Path) -> Image:
    """
    Decode the source image at ``path`` into a fully loaded RGB image.

    The source file is only read, never modified.

    :param path: Absolute path of the source image.
    :returns: ``Success`` with the decoded image, ``Failure(SourceNotFound)`` if the file is
        missing, is a directory or cannot be decoded.
    """
    try:
        with PILImage.open(path) as source:
            return source.convert("RGB")
    except OSError as error:
        raise SourceNotFound(f"Image {path.name} not found") from error


def save_image(image: Image, output_path: Path, quality: int = 95) -> Path:
    """Encode ``image`` in the format implied by the suffix of ``output_path``."""
    image.save(output_path, quality=quality)
    return output_path
