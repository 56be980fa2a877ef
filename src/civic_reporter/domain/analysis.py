"""Models for issue analysis results."""

import math
from enum import StrEnum

from pydantic import BaseModel, Field

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.6


class AnalysisResult(BaseModel):
    """Structured output returned by the analyze-issue function."""

    issue_type: str
    location: str
    confidence: float = Field(ge=0.0, le=1.0)


class ConfidenceTier(StrEnum):
    """Visual severity derived from a confidence score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def confidence_tier(confidence: float) -> ConfidenceTier:
    """Map a confidence score onto its display tier."""
    if confidence >= HIGH_CONFIDENCE:
        return ConfidenceTier.HIGH
    if confidence >= MEDIUM_CONFIDENCE:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def confidence_percent(confidence: float) -> int:
    """Return the confidence as a whole percentage, rounding halves up."""
    return math.floor(confidence * 100 + 0.5)
