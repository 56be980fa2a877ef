"""Session gating for the report view."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from civic_reporter.domain.models import Session, SessionUser

SIGN_IN_PATH = "/auth"

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session | None], None]


class AuthClient(Protocol):
    """Interface for the hosted authentication provider."""

    async def get_current_session(self) -> Session | None:
        """Return the current session, if any."""

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register a session-change listener and return its unsubscribe."""

    async def get_current_user(self) -> SessionUser | None:
        """Return the user currently signed in, if any."""

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password."""

    async def sign_up(self, email: str, password: str) -> Session | None:
        """Register a new account, returning a session when one is issued."""

    async def sign_out(self) -> None:
        """End the current session."""

    def close(self) -> None:
        """Drop the local session and stop any background token refresh."""


@dataclass
class SessionGuard:
    """Gates the report view on a live session.

    The guard keeps a read-only reference to the latest session and asks the
    navigator to go to the sign-in view whenever that session is missing,
    both on mount and on every later change notification.
    """

    auth_client: AuthClient
    navigate: Callable[[str], None]
    session: Session | None = None
    loading: bool = True
    _unsubscribe: Callable[[], None] | None = field(default=None, repr=False)

    @property
    def user(self) -> SessionUser | None:
        return self.session.user if self.session else None

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    async def mount(self) -> None:
        """Resolve the current session and start listening for changes."""
        self._unsubscribe = self.auth_client.on_session_change(self.handle_change)
        try:
            session = await self.auth_client.get_current_session()
        except Exception:
            logger.exception("Failed to fetch current session")
            session = None
        self.handle_change(session)
        self.loading = False

    def handle_change(self, session: Session | None) -> None:
        """Apply a session update, redirecting when it is empty."""
        self.session = session
        if session is None:
            self.navigate(SIGN_IN_PATH)

    def teardown(self) -> None:
        """Release the session-change subscription."""
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
