"""Assertion orchestrator — compares an actual image with its baseline and applies the mode policy."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from twenty_twenty.artifacts.baseline import load_baseline
from twenty_twenty.artifacts.writer import store_artifact, write_image
from twenty_twenty.comparator.similarity import compare
from twenty_twenty.decoder.frame_decoder import decode_frame
from twenty_twenty.errors import MismatchError, mismatch_message
from twenty_twenty.models.config import AssertConfig, Mode
from twenty_twenty.models.image import RasterImage
from twenty_twenty.models.result import AssertionOutcome

logger = logging.getLogger(__name__)

ImageLike = Union[RasterImage, Image.Image]


def _as_raster(image: ImageLike) -> RasterImage:
    if isinstance(image, RasterImage):
        return image
    return RasterImage.from_pil(image)


def check_image(
    path: str | Path,
    actual: ImageLike,
    threshold: float,
    config: AssertConfig,
) -> AssertionOutcome:
    """Compare ``actual`` with the baseline at ``path`` under ``config.mode``.

    A mismatch is reported through the returned outcome. Decode, I/O and
    comparison failures raise.
    """
    path = Path(path)
    actual = _as_raster(actual)
    mode = config.mode

    if mode == Mode.OVERWRITE:
        write_image(actual, path)
        logger.info("Overwrote baseline %s", path)
        return AssertionOutcome(
            path=str(path), mode=mode, threshold=threshold, passed=True,
            message=f"baseline {path} overwritten",
        )

    expected = load_baseline(path, like=actual)
    score = compare(expected, actual).score
    mismatch = score < threshold
    logger.debug("Compared %s: score %s, threshold %s", path, score, threshold)

    stored: Optional[Path] = None
    if mode == Mode.STORE_ARTIFACT or (mode == Mode.STORE_ARTIFACT_ON_MISMATCH and mismatch):
        stored = store_artifact(actual, path, config.artifacts_dir)

    if mismatch:
        logger.warning("Image %s scored %s, below %s", path, score, threshold)
        message = mismatch_message(path, score, threshold, config.env_var)
    else:
        message = f"image (`{path}`) score is `{score}`"

    return AssertionOutcome(
        path=str(path),
        mode=mode,
        score=score,
        threshold=threshold,
        passed=not mismatch,
        artifact_path=str(stored) if stored else None,
        message=message,
    )


def assert_image(
    path: str | Path,
    actual: ImageLike,
    threshold: float,
    config: Optional[AssertConfig] = None,
) -> AssertionOutcome:
    """Assert that ``actual`` is at least ``threshold`` similar to the baseline at ``path``.

    ``threshold`` is the minimum permissible similarity, between 0.0 and 1.0;
    identical images score 1.0. The mode is read from the TWENTY_TWENTY
    environment variable at call time unless ``config`` is given.

    Raises MismatchError when the score is below ``threshold``.
    """
    config = config if config is not None else AssertConfig.from_env()
    outcome = check_image(path, actual, threshold, config)
    if not outcome.passed:
        raise MismatchError(path, outcome.score, threshold, config.env_var)
    return outcome


def assert_frame(
    path: str | Path,
    data: bytes,
    threshold: float,
    config: Optional[AssertConfig] = None,
) -> AssertionOutcome:
    """Decode an H.264 frame and assert it against the PNG baseline at ``path``.

    The baseline stays a PNG so a diff is easy to review in any image viewer.
    """
    return assert_image(path, decode_frame(data), threshold, config)
