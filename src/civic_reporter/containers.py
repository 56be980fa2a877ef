"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from civic_reporter.adapters.analyze_issue_client import HttpxAnalyzeIssueClient
from civic_reporter.adapters.supabase_auth_client import SupabaseAuthClient
from civic_reporter.adapters.supabase_issue_repository import SupabaseIssueRepository
from civic_reporter.config import Settings
from civic_reporter.services.analysis import AnalysisClient, AnalysisInvoker
from civic_reporter.services.auth import AuthClient
from civic_reporter.services.persistence import IssueRepository, PersistenceInvoker
from civic_reporter.services.view import ReportView, ViewRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_client: AnalysisClient
    auth_client_factory: Callable[[], AuthClient]
    views: ViewRegistry
    close_resources: Callable[[], Awaitable[None]]


def build_report_view(
    auth_client: AuthClient,
    analysis_client: AnalysisClient,
    repository: IssueRepository,
) -> ReportView:
    """Assemble a report view from its collaborators."""
    return ReportView(
        auth_client=auth_client,
        analysis=AnalysisInvoker(analysis_client),
        persistence=PersistenceInvoker(repository),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    analysis_client = HttpxAnalyzeIssueClient.create(
        supabase_url=resolved_settings.supabase_url,
        api_key=resolved_settings.supabase_anon_key,
        function_name=resolved_settings.analysis_function,
        timeout=resolved_settings.analysis_timeout_seconds,
    )

    def auth_client_factory() -> SupabaseAuthClient:
        return SupabaseAuthClient.create(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )

    def view_factory(auth_client: AuthClient) -> ReportView:
        if not isinstance(auth_client, SupabaseAuthClient):
            raise TypeError("Supabase views need a SupabaseAuthClient")
        repository = SupabaseIssueRepository(
            auth_client.client, table_name=resolved_settings.issues_table
        )
        return build_report_view(auth_client, analysis_client, repository)

    views = ViewRegistry(
        view_factory=view_factory, ttl_seconds=resolved_settings.view_ttl_seconds
    )

    async def close_resources() -> None:
        views.close_all()
        await analysis_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_client=analysis_client,
        auth_client_factory=auth_client_factory,
        views=views,
        close_resources=close_resources,
    )
