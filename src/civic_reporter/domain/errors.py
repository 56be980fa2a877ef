"""Error taxonomy for the issue submission workflow."""

from enum import StrEnum
from typing import ClassVar

RATE_LIMIT_STATUS = 429
PAYMENT_REQUIRED_STATUS = 402


class ErrorKind(StrEnum):
    """Classification attached to every workflow error."""

    AUTH_MISSING = "auth_missing"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    QUOTA_EXHAUSTED = "quota_exhausted"
    REMOTE = "remote"
    PERSISTENCE = "persistence"


class WorkflowError(Exception):
    """Base error carrying a user-facing message and a classification."""

    kind: ClassVar[ErrorKind]
    default_message: ClassVar[str] = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthRequiredError(WorkflowError):
    """No authenticated user is available."""

    kind = ErrorKind.AUTH_MISSING
    default_message = "Please sign in to save issues"


class ValidationError(WorkflowError):
    """Input was rejected before any network call."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"


class RateLimitedError(WorkflowError):
    """The analysis endpoint answered with 429."""

    kind = ErrorKind.RATE_LIMITED
    default_message = "Rate limit exceeded. Please try again later."


class QuotaExhaustedError(WorkflowError):
    """The analysis endpoint answered with 402."""

    kind = ErrorKind.QUOTA_EXHAUSTED
    default_message = "AI credits depleted. Please contact support."


class RemoteError(WorkflowError):
    """Any other analysis endpoint failure."""

    kind = ErrorKind.REMOTE
    default_message = "Failed to analyze issue"


class PersistenceError(WorkflowError):
    """Inserting the issue record failed."""

    kind = ErrorKind.PERSISTENCE
    default_message = "Failed to save issue"


def classify_endpoint_failure(
    status_code: int | None, message: str | None, fallback: str | None = None
) -> WorkflowError:
    """Turn an endpoint failure into its typed workflow error."""
    if status_code == RATE_LIMIT_STATUS:
        return RateLimitedError()
    if status_code == PAYMENT_REQUIRED_STATUS:
        return QuotaExhaustedError()
    return RemoteError(message or fallback)
