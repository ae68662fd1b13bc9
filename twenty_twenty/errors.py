"""Error taxonomy for image assertions."""

from __future__ import annotations

from pathlib import Path


class TwentyTwentyError(Exception):
    """Base class for every error raised by twenty_twenty."""


class DecodeError(TwentyTwentyError):
    """A compressed frame could not be turned into a raster image."""

    def __init__(self, stage: str, detail: str):
        self.stage = stage
        self.detail = detail
        super().__init__(f"frame decoding failed at {stage}: {detail}")


class ImageIOError(TwentyTwentyError):
    """A baseline could not be read or an image could not be written."""

    def __init__(self, path: str | Path, detail: str):
        self.path = Path(path)
        self.detail = detail
        super().__init__(f"{detail}: {self.path}")


class ComparisonError(TwentyTwentyError):
    """The similarity metric rejected the two images."""


class MismatchError(TwentyTwentyError, AssertionError):
    """The actual image is less similar to the baseline than permitted.

    Subclasses ``AssertionError`` so test runners report it as an ordinary
    test failure rather than an error.
    """

    def __init__(self, path: str | Path, score: float, threshold: float, env_var: str = "TWENTY_TWENTY"):
        self.path = Path(path)
        self.score = score
        self.threshold = threshold
        self.env_var = env_var
        super().__init__(mismatch_message(self.path, score, threshold, env_var))


def mismatch_message(path: Path, score: float, threshold: float, env_var: str) -> str:
    return (
        f"image (`{path}`) score is `{score}` which is less than "
        f"min_permissible_similarity `{threshold}`\n"
        f"set {env_var}=overwrite if these changes are intentional"
    )
