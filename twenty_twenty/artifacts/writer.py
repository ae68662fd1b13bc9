"""Artifact writer — persists actual images as PNG baselines or artifacts."""

from __future__ import annotations

import logging
from pathlib import Path

from twenty_twenty.errors import ImageIOError
from twenty_twenty.models.config import DEFAULT_ARTIFACTS_DIR
from twenty_twenty.models.image import RasterImage

logger = logging.getLogger(__name__)

IMAGE_FORMAT = "PNG"


def artifact_path(path: str | Path, artifacts_dir: str | Path = DEFAULT_ARTIFACTS_DIR) -> Path:
    """Mirror ``path`` under the artifacts root, keeping its relative structure."""
    path = Path(path)
    if path.is_absolute():
        path = path.relative_to(path.anchor)
    return Path(artifacts_dir) / path


def write_image(image: RasterImage, destination: str | Path) -> Path:
    """Write ``image`` as PNG, creating missing parent directories."""
    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        image.to_pil().save(destination, format=IMAGE_FORMAT)
    except OSError as e:
        raise ImageIOError(destination, f"unable to write image ({e})") from e
    logger.debug("Wrote %dx%d image to %s", image.width, image.height, destination)
    return destination


def store_artifact(image: RasterImage, path: str | Path, artifacts_dir: str | Path = DEFAULT_ARTIFACTS_DIR) -> Path:
    """Write ``image`` to the artifact mirror of ``path``."""
    dest = write_image(image, artifact_path(path, artifacts_dir))
    logger.info("Stored artifact for %s at %s", path, dest)
    return dest
