"""Baseline loading — reads the reference image an actual image is compared against."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from twenty_twenty.errors import ImageIOError
from twenty_twenty.models.image import RasterImage

logger = logging.getLogger(__name__)


def load_baseline(path: str | Path, like: RasterImage) -> RasterImage:
    """Load the baseline at ``path``.

    A missing file is treated like an empty image: a blank canvas with the
    dimensions of ``like`` is returned so the comparison still runs and
    reports a mismatch. Any other read failure raises ImageIOError.
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            img.load()
            return RasterImage.from_pil(img)
    except FileNotFoundError:
        logger.warning("No baseline at %s, comparing against a blank %dx%d canvas", path, like.width, like.height)
        return RasterImage.blank(like.width, like.height)
    except UnidentifiedImageError as e:
        raise ImageIOError(path, f"decoding image from path failed ({e})") from e
    except OSError as e:
        raise ImageIOError(path, f"unable to read contents ({e})") from e
