"""Writing generated images to disk."""

import logging
from pathlib import Path
from typing import Union

from .providers import ImageFormat, detect_image_format

logger = logging.getLogger(__name__)

IMAGE_EXTENSION = ".png"


def ensure_output_dir(output_folder: Union[str, Path]) -> Path:
    """Create ``output_folder`` and any missing parents.

    Raises OSError when the path cannot be created, e.g. when a regular
    file already sits at that location.
    """
    path = Path(output_folder)
    path.mkdir(parents=True, exist_ok=True)
    return path


def image_path(output_folder: Union[str, Path], filename: str) -> Path:
    return Path(output_folder) / f"{filename}{IMAGE_EXTENSION}"


async def save_image(image_bytes: bytes, file_path: Path) -> Path:
    """Write image bytes to ``file_path``, replacing any existing file.

    The parent directory must already exist.
    """
    detected = detect_image_format(image_bytes)
    if detected not in (ImageFormat.PNG, ImageFormat.UNKNOWN):
        logger.warning(f"Provider returned {detected.value} data; writing it to {file_path} unchanged")

    file_path.write_bytes(image_bytes)
    logger.info(f"Saved image to {file_path} ({len(image_bytes)} bytes)")
    return file_path
