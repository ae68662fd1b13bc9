"""Result data structures produced by comparisons and assertions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from twenty_twenty.models.config import Mode


class ComparisonResult(BaseModel):
    score: float = Field(ge=0.0, le=1.0)  # 1.0 means identical


class AssertionOutcome(BaseModel):
    """Result of checking one actual image against its baseline."""

    path: str
    mode: Mode = Mode.DEFAULT
    score: Optional[float] = None  # None when the baseline was overwritten
    threshold: float
    passed: bool = False
    artifact_path: Optional[str] = None
    message: str = ""
