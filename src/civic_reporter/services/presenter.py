"""Display model for an analysis result."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from civic_reporter.domain.analysis import (
    AnalysisResult,
    ConfidenceTier,
    confidence_percent,
    confidence_tier,
)
from civic_reporter.domain.models import IssueRecord

BADGE_CLASSES: dict[ConfidenceTier, str] = {
    ConfidenceTier.HIGH: "badge-positive",
    ConfidenceTier.MEDIUM: "badge-warning",
    ConfidenceTier.LOW: "badge-negative",
}


@dataclass(frozen=True)
class ResultCard:
    """Rendered fields of the result card."""

    issue_type: str
    location: str
    confidence: float
    confidence_percent: int
    tier: ConfidenceTier
    badge_class: str

    @property
    def confidence_label(self) -> str:
        return f"{self.confidence_percent}% Confident"


@dataclass
class ResultPresenter:
    """Shows a result and exposes the one save action."""

    result: AnalysisResult
    on_save: Callable[[AnalysisResult], Awaitable[IssueRecord | None]]

    @property
    def card(self) -> ResultCard:
        return present(self.result)

    async def save(self) -> IssueRecord | None:
        return await self.on_save(self.result)


def present(result: AnalysisResult) -> ResultCard:
    """Build the result card for an analysis result."""
    tier = confidence_tier(result.confidence)
    return ResultCard(
        issue_type=result.issue_type,
        location=result.location,
        confidence=result.confidence,
        confidence_percent=confidence_percent(result.confidence),
        tier=tier,
        badge_class=BADGE_CLASSES[tier],
    )
