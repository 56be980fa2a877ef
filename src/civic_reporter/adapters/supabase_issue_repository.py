"""Supabase-backed issue repository."""

from dataclasses import dataclass

from supabase import Client

from civic_reporter.domain.models import IssueRecord
from civic_reporter.services.persistence import IssueRepository


@dataclass
class SupabaseIssueRepository(IssueRepository):
    """Supabase implementation for issue persistence."""

    client: Client
    table_name: str = "issues"

    def insert_issue(self, record: IssueRecord) -> None:
        """Insert an issue row."""
        self.client.table(self.table_name).insert(
            {
                "user_id": str(record.user_id),
                "issue_type": record.issue_type,
                "location": record.location,
                "confidence_score": record.confidence_score,
                "status": record.status,
            }
        ).execute()
