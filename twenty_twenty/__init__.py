"""Visual regression assertions for images and H.264 frames.

Each assertion takes a minimum permissible similarity: the lowest SSIM score
you are willing to accept. Identical images score 1.0.

    from twenty_twenty import assert_image
    assert_image("tests/dog1.png", actual, 0.9)

Set ``TWENTY_TWENTY=overwrite`` to accept the new output as the baseline, or
``TWENTY_TWENTY=store-artifact`` / ``store-artifact-on-mismatch`` to keep
copies of actual images under ``artifacts/`` for review in CI.
"""

from twenty_twenty.comparator.similarity import compare
from twenty_twenty.decoder.frame_decoder import DecodeStage, decode_frame
from twenty_twenty.errors import (
    ComparisonError,
    DecodeError,
    ImageIOError,
    MismatchError,
    TwentyTwentyError,
)
from twenty_twenty.models.config import AssertConfig, Mode, resolve_mode
from twenty_twenty.models.image import PixelFormat, RasterImage
from twenty_twenty.models.result import AssertionOutcome, ComparisonResult
from twenty_twenty.orchestrator import assert_frame, assert_image, check_image

__version__ = "0.1.0"

__all__ = [
    "AssertConfig",
    "AssertionOutcome",
    "ComparisonError",
    "ComparisonResult",
    "DecodeError",
    "DecodeStage",
    "ImageIOError",
    "MismatchError",
    "Mode",
    "PixelFormat",
    "RasterImage",
    "TwentyTwentyError",
    "assert_frame",
    "assert_image",
    "check_image",
    "compare",
    "decode_frame",
    "resolve_mode",
]
