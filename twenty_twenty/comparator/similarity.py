"""SSIM-based image comparison."""

from __future__ import annotations

import logging

import numpy as np
from skimage.metrics import structural_similarity

from twenty_twenty.errors import ComparisonError
from twenty_twenty.models.image import RasterImage
from twenty_twenty.models.result import ComparisonResult

logger = logging.getLogger(__name__)

DEFAULT_WIN_SIZE = 7
MIN_WIN_SIZE = 3
DATA_RANGE = 255
# Stabilizing constants from Wang et al.
K1 = 0.01
K2 = 0.03


def _to_array(image: RasterImage) -> np.ndarray:
    rgba = image.to_rgba()
    return np.frombuffer(rgba.data, dtype=np.uint8).reshape(rgba.height, rgba.width, 4)


def _global_ssim(a: np.ndarray, b: np.ndarray) -> float:
    """SSIM over the whole image as one window, for images too small to slide one over."""
    c1 = (K1 * DATA_RANGE) ** 2
    c2 = (K2 * DATA_RANGE) ** 2
    x = a.reshape(-1, a.shape[-1]).astype(np.float64)
    y = b.reshape(-1, b.shape[-1]).astype(np.float64)
    mu_x = x.mean(axis=0)
    mu_y = y.mean(axis=0)
    var_x = x.var(axis=0)
    var_y = y.var(axis=0)
    cov = ((x - mu_x) * (y - mu_y)).mean(axis=0)
    per_channel = ((2 * mu_x * mu_y + c1) * (2 * cov + c2)) / ((mu_x**2 + mu_y**2 + c1) * (var_x + var_y + c2))
    return min(max(float(per_channel.mean()), 0.0), 1.0)


def _win_size(width: int, height: int) -> int:
    size = min(DEFAULT_WIN_SIZE, width, height)
    return size if size % 2 else size - 1


def compare(expected: RasterImage, actual: RasterImage) -> ComparisonResult:
    """Score how similar ``actual`` is to ``expected``, 1.0 meaning identical.

    Both images are normalized to 8-bit RGBA first, so an RGB image and its
    opaque RGBA equivalent score 1.0.
    """
    a = _to_array(expected)
    b = _to_array(actual)

    if a.shape != b.shape:
        raise ComparisonError(
            f"cannot compare a {expected.width}x{expected.height} image "
            f"with a {actual.width}x{actual.height} image"
        )
    if np.array_equal(a, b):
        return ComparisonResult(score=1.0)

    win_size = _win_size(expected.width, expected.height)
    if win_size < MIN_WIN_SIZE:
        score = _global_ssim(a, b)
        logger.debug("Global SSIM score %.6f for %dx%d image", score, expected.width, expected.height)
        return ComparisonResult(score=score)

    try:
        score = structural_similarity(a, b, win_size=win_size, channel_axis=2, data_range=DATA_RANGE)
    except ValueError as e:
        raise ComparisonError(f"could not compare the images: {e}") from e

    score = min(max(float(score), 0.0), 1.0)
    logger.debug("SSIM score %.6f (window %d)", score, win_size)
    return ComparisonResult(score=score)
