"""Saving analyzed issues to the hosted issues table."""

import logging
from dataclasses import dataclass
from typing import Protocol

from civic_reporter.domain.analysis import AnalysisResult
from civic_reporter.domain.errors import (
    AuthRequiredError,
    PersistenceError,
    ValidationError,
)
from civic_reporter.domain.models import IssueRecord, SessionUser

logger = logging.getLogger(__name__)


class IssueRepository(Protocol):
    """Persistence interface for issue records."""

    def insert_issue(self, record: IssueRecord) -> None:
        """Insert a new issue row."""


@dataclass
class PersistenceInvoker:
    """Writes analysis results as pending issue records."""

    repository: IssueRepository
    saving: bool = False

    async def save(
        self, result: AnalysisResult, current_user: SessionUser | None
    ) -> IssueRecord:
        """Persist the result for the current user."""
        if current_user is None:
            raise AuthRequiredError()
        if self.saving:
            raise ValidationError("This issue is already being saved")
        record = IssueRecord(
            user_id=current_user.id,
            issue_type=result.issue_type,
            location=result.location,
            confidence_score=result.confidence,
        )
        self.saving = True
        try:
            self.repository.insert_issue(record)
        except Exception as exc:
            logger.exception(
                "Failed to insert issue", extra={"user_id": str(current_user.id)}
            )
            raise PersistenceError(_failure_message(exc)) from exc
        finally:
            self.saving = False
        return record


def _failure_message(exc: Exception) -> str | None:
    """Return the provider's message rather than the raw error payload."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or None
