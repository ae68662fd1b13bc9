"""Configuration models for image assertions."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

ENV_VAR = "TWENTY_TWENTY"
ARTIFACTS_DIR_ENV_VAR = "TWENTY_TWENTY_ARTIFACTS_DIR"
DEFAULT_ARTIFACTS_DIR = Path("artifacts")


class Mode(str, Enum):
    """Operating modes selected through the TWENTY_TWENTY environment variable."""

    # Only assert the image diff is within the given threshold.
    DEFAULT = "default"
    # Overwrite the baseline, i.e. accept the changes.
    OVERWRITE = "overwrite"
    # Always store the actual image under the artifacts root.
    STORE_ARTIFACT = "store-artifact"
    # Store the actual image under the artifacts root only when it mismatches.
    STORE_ARTIFACT_ON_MISMATCH = "store-artifact-on-mismatch"


_MODES_BY_SIGNAL = {
    "overwrite": Mode.OVERWRITE,
    "store-artifact": Mode.STORE_ARTIFACT,
    "store-artifact-on-mismatch": Mode.STORE_ARTIFACT_ON_MISMATCH,
}


def resolve_mode(raw: Optional[str]) -> Mode:
    """Map a raw signal value onto a Mode. Unknown or absent values mean DEFAULT."""
    if not isinstance(raw, str):
        return Mode.DEFAULT
    mode = _MODES_BY_SIGNAL.get(raw)
    if mode is None:
        if raw:
            logger.debug("Unrecognized %s value %r, using default mode", ENV_VAR, raw)
        return Mode.DEFAULT
    return mode


class AssertConfig(BaseModel):
    mode: Mode = Mode.DEFAULT
    artifacts_dir: Path = DEFAULT_ARTIFACTS_DIR
    env_var: str = ENV_VAR

    @field_validator("mode", mode="before")
    @classmethod
    def coerce_mode(cls, v):
        if isinstance(v, Mode):
            return v
        return resolve_mode(v)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AssertConfig":
        """Read the configuration from the environment as it is right now."""
        env = os.environ if environ is None else environ
        artifacts_dir = env.get(ARTIFACTS_DIR_ENV_VAR) or DEFAULT_ARTIFACTS_DIR
        return cls(mode=env.get(ENV_VAR), artifacts_dir=artifacts_dir)
