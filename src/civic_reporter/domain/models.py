"""Domain models for the civic issue reporter."""

from dataclasses import dataclass
from uuid import UUID

PENDING_STATUS = "pending"


@dataclass(frozen=True)
class SessionUser:
    """Authenticated user attached to a session."""

    id: UUID
    email: str | None = None


@dataclass(frozen=True)
class Session:
    """Authenticated-user context obtained from the auth provider."""

    access_token: str
    user: SessionUser


@dataclass(frozen=True)
class IssueRecord:
    """Represents an issue row written to the issues table."""

    user_id: UUID
    issue_type: str
    location: str
    confidence_score: float
    status: str = PENDING_STATUS
