"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import NAMESPACE_URL, uuid5

import pytest

from civic_reporter.config import Settings
from civic_reporter.containers import AppContainer, build_report_view
from civic_reporter.domain.errors import AuthRequiredError
from civic_reporter.domain.models import IssueRecord, Session, SessionUser
from civic_reporter.services.analysis import AnalysisClient, AnalysisEndpointError
from civic_reporter.services.auth import AuthClient, SessionListener
from civic_reporter.services.persistence import IssueRepository
from civic_reporter.services.view import ReportView, ViewRegistry

RESIDENT_EMAIL = "resident@example.com"
RESIDENT_PASSWORD = "secret-password"


def make_session(email: str = RESIDENT_EMAIL) -> Session:
    return Session(
        access_token=f"token-{email}",
        user=SessionUser(id=uuid5(NAMESPACE_URL, email), email=email),
    )


@dataclass
class FakeAuthClient(AuthClient):
    """In-memory auth provider that records subscriptions."""

    session: Session | None = None
    accounts: dict[str, str] = field(
        default_factory=lambda: {RESIDENT_EMAIL: RESIDENT_PASSWORD}
    )
    confirm_sign_ups: bool = False
    fail_session_fetch: bool = False
    listeners: list[SessionListener] = field(default_factory=list)
    unsubscribe_calls: int = 0
    signed_out: bool = False
    close_calls: int = 0
    sign_in_error: Exception | None = None

    async def get_current_session(self) -> Session | None:
        if self.fail_session_fetch:
            raise RuntimeError("auth service unavailable")
        return self.session

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        self.listeners.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe_calls += 1
            self.listeners.remove(callback)

        return unsubscribe

    def emit(self, session: Session | None) -> None:
        self.session = session
        for listener in list(self.listeners):
            listener(session)

    async def get_current_user(self) -> SessionUser | None:
        return self.session.user if self.session else None

    async def sign_in(self, email: str, password: str) -> Session:
        if self.sign_in_error is not None:
            raise self.sign_in_error
        if self.accounts.get(email) != password:
            raise AuthRequiredError("Invalid login credentials")
        self.session = make_session(email)
        return self.session

    async def sign_up(self, email: str, password: str) -> Session | None:
        self.accounts[email] = password
        if self.confirm_sign_ups:
            return None
        self.session = make_session(email)
        return self.session

    async def sign_out(self) -> None:
        self.signed_out = True
        self.emit(None)

    def close(self) -> None:
        self.close_calls += 1
        self.session = None


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis endpoint returning a fixed payload."""

    payload: dict[str, object] | None = field(
        default_factory=lambda: {
            "issue_type": "pothole",
            "location": "Main Street",
            "confidence": 0.92,
        }
    )
    error: AnalysisEndpointError | None = None
    calls: list[tuple[dict[str, object], str | None]] = field(default_factory=list)

    async def invoke(
        self, body: dict[str, object], access_token: str | None = None
    ) -> dict[str, object] | None:
        self.calls.append((body, access_token))
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class InMemoryIssueRepository(IssueRepository):
    """In-memory issue repository for tests."""

    records: list[IssueRecord] = field(default_factory=list)
    error: Exception | None = None

    def insert_issue(self, record: IssueRecord) -> None:
        if self.error is not None:
            raise self.error
        self.records.append(record)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
    )


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def issue_repository() -> InMemoryIssueRepository:
    return InMemoryIssueRepository()


@pytest.fixture
def report_view(
    auth_client: FakeAuthClient,
    analysis_client: FakeAnalysisClient,
    issue_repository: InMemoryIssueRepository,
) -> ReportView:
    auth_client.session = make_session()
    return build_report_view(auth_client, analysis_client, issue_repository)


@pytest.fixture
def container(
    settings: Settings,
    auth_client: FakeAuthClient,
    analysis_client: FakeAnalysisClient,
    issue_repository: InMemoryIssueRepository,
) -> AppContainer:
    def view_factory(client: AuthClient) -> ReportView:
        return build_report_view(client, analysis_client, issue_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        analysis_client=analysis_client,
        auth_client_factory=lambda: auth_client,
        views=ViewRegistry(view_factory=view_factory, ttl_seconds=60),
        close_resources=close_resources,
    )
