"""Per-browser report view tying the submission workflow together."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from civic_reporter.domain.analysis import AnalysisResult
from civic_reporter.domain.errors import ErrorKind, WorkflowError
from civic_reporter.domain.models import IssueRecord, SessionUser
from civic_reporter.services.analysis import AnalysisInvoker
from civic_reporter.services.auth import SIGN_IN_PATH, AuthClient, SessionGuard
from civic_reporter.services.input_capture import InputCapture, Tab
from civic_reporter.services.notifications import ToastQueue
from civic_reporter.services.persistence import PersistenceInvoker
from civic_reporter.services.presenter import ResultCard, ResultPresenter

logger = logging.getLogger(__name__)

NO_ISSUE_DETECTED = "No civic issue was detected. Try adding more detail."


@dataclass
class ReportView:
    """State of one signed-in browser view.

    Every workflow error raised below this layer is caught here, logged, and
    turned into a single toast, leaving the view ready for another attempt.
    """

    auth_client: AuthClient
    analysis: AnalysisInvoker
    persistence: PersistenceInvoker
    capture: InputCapture = field(default_factory=InputCapture)
    toasts: ToastQueue = field(default_factory=ToastQueue)
    presenter: ResultPresenter | None = None
    redirect_to: str | None = None
    guard: SessionGuard = field(init=False)

    def __post_init__(self) -> None:
        self.guard = SessionGuard(self.auth_client, navigate=self._navigate)

    @property
    def user(self) -> SessionUser | None:
        return self.guard.user

    @property
    def loading(self) -> bool:
        return self.guard.loading

    @property
    def result(self) -> AnalysisResult | None:
        return self.presenter.result if self.presenter else None

    @property
    def card(self) -> ResultCard | None:
        return self.presenter.card if self.presenter else None

    async def mount(self) -> None:
        await self.guard.mount()

    def teardown(self) -> None:
        """Release the subscription, then the auth client's local session."""
        self.guard.teardown()
        try:
            self.auth_client.close()
        except Exception:
            logger.exception("Failed to close auth client")

    def switch_tab(self, tab: Tab) -> None:
        self.capture.switch_tab(tab)

    async def select_file(self, filename: str, content_type: str, data: bytes) -> None:
        try:
            await self.capture.select_file(filename, content_type, data)
        except WorkflowError as exc:
            self._report(exc, "Rejected selected file")

    async def submit(self) -> None:
        """Analyze whichever input the active tab holds."""
        if self.capture.active_tab is Tab.TEXT:
            await self.submit_text()
        else:
            await self.submit_image()

    async def submit_text(self, content: str | None = None) -> None:
        if content is not None:
            self.capture.set_text(content)
        try:
            result = await self.analysis.submit_text(
                self.capture.text, self._access_token()
            )
        except WorkflowError as exc:
            self._report(exc, "Error analyzing text")
            return
        self._complete(result, "Issue analyzed successfully!")

    async def submit_image(self) -> None:
        if self.capture.decoding:
            self.toasts.error("Please wait for the image to finish loading")
            return
        try:
            result = await self.analysis.submit_image(
                self.capture.preview, self._access_token()
            )
        except WorkflowError as exc:
            self._report(exc, "Error analyzing image")
            return
        self._complete(result, "Image analyzed successfully!")

    async def save(self) -> None:
        """Save the displayed result and return to input collection."""
        if self.presenter is None:
            self.toasts.error("There is no analysis result to save")
            return
        try:
            await self.presenter.save()
        except WorkflowError as exc:
            self._report(exc, "Error saving issue")
            return
        self.toasts.success("Issue saved successfully!")
        self.presenter = None
        self.capture.reset()

    async def sign_out(self) -> None:
        await self.auth_client.sign_out()
        self._navigate(SIGN_IN_PATH)

    async def _persist(self, result: AnalysisResult) -> IssueRecord:
        try:
            current_user = await self.auth_client.get_current_user()
        except Exception:
            logger.exception("Failed to fetch current user")
            current_user = None
        return await self.persistence.save(result, current_user)

    def _complete(self, result: AnalysisResult | None, message: str) -> None:
        if result is None:
            self.toasts.info(NO_ISSUE_DETECTED)
            return
        self.presenter = ResultPresenter(result=result, on_save=self._persist)
        self.toasts.success(message)

    def _access_token(self) -> str | None:
        session = self.guard.session
        return session.access_token if session else None

    def _navigate(self, path: str) -> None:
        self.redirect_to = path

    def _report(self, exc: WorkflowError, context: str) -> None:
        level = logging.INFO if exc.kind is ErrorKind.VALIDATION else logging.WARNING
        logger.log(level, "%s: %s", context, exc.message, extra={"kind": exc.kind})
        self.toasts.error(exc.message)


@dataclass
class _ViewEntry:
    view: ReportView
    expires_at: datetime


@dataclass
class ViewRegistry:
    """Open report views keyed by an opaque browser cookie value."""

    view_factory: Callable[[AuthClient], ReportView]
    ttl_seconds: int
    _entries: dict[str, _ViewEntry] = field(default_factory=dict)

    async def open(self, auth_client: AuthClient) -> tuple[str, ReportView]:
        """Build and mount a view for a freshly signed-in auth client."""
        self.prune()
        view = self.view_factory(auth_client)
        await view.mount()
        view_id = secrets.token_urlsafe(24)
        self._entries[view_id] = _ViewEntry(view=view, expires_at=self._expiry())
        return view_id, view

    def get(self, view_id: str | None) -> ReportView | None:
        """Return a live view and extend its lifetime."""
        self.prune()
        if view_id is None:
            return None
        entry = self._entries.get(view_id)
        if entry is None:
            return None
        entry.expires_at = self._expiry()
        return entry.view

    def close(self, view_id: str | None) -> None:
        if view_id is None:
            return
        entry = self._entries.pop(view_id, None)
        if entry is not None:
            entry.view.teardown()

    def close_all(self) -> None:
        for view_id in list(self._entries):
            self.close(view_id)

    def prune(self) -> None:
        """Tear down every expired view."""
        now = datetime.now(tz=UTC)
        for view_id, entry in list(self._entries.items()):
            if now >= entry.expires_at:
                self.close(view_id)

    def __len__(self) -> int:
        return len(self._entries)

    def _expiry(self) -> datetime:
        return datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
