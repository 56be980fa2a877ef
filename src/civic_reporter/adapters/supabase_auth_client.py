"""Supabase Auth adapter bound to a single browser view."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client, create_client

from civic_reporter.domain.errors import AuthRequiredError
from civic_reporter.domain.models import Session, SessionUser
from civic_reporter.services.auth import AuthClient, SessionListener


@dataclass
class SupabaseAuthClient(AuthClient):
    """Auth client wrapping one Supabase client and its session state."""

    client: Client

    @classmethod
    def create(cls, supabase_url: str, api_key: str) -> "SupabaseAuthClient":
        """Create an auth client with its own Supabase client."""
        return cls(client=create_client(supabase_url, api_key))

    async def get_current_session(self) -> Session | None:
        """Return the session held by the Supabase client."""
        return _to_session(self.client.auth.get_session())

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Forward Supabase auth events as session updates."""

        def _listener(_event: object, session: object | None) -> None:
            callback(_to_session(session))

        subscription = self.client.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe

    async def get_current_user(self) -> SessionUser | None:
        """Ask Supabase for the signed-in user."""
        response = self.client.auth.get_user()
        if response is None or response.user is None:
            return None
        return _to_user(response.user)

    async def sign_in(self, email: str, password: str) -> Session:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise AuthRequiredError(str(exc) or None) from exc
        session = _to_session(response.session)
        if session is None:
            raise AuthRequiredError("Invalid login credentials")
        return session

    async def sign_up(self, email: str, password: str) -> Session | None:
        """Register an account; no session means confirmation is pending."""
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except AuthError as exc:
            raise AuthRequiredError(str(exc) or None) from exc
        return _to_session(response.session)

    async def sign_out(self) -> None:
        """Sign out of Supabase."""
        self.client.auth.sign_out()

    def close(self) -> None:
        """Sign out locally; this also cancels the client's refresh timer."""
        self.client.auth.sign_out({"scope": "local"})


def _to_user(user: object) -> SessionUser:
    return SessionUser(id=UUID(str(user.id)), email=getattr(user, "email", None))


def _to_session(session: object | None) -> Session | None:
    if session is None or getattr(session, "user", None) is None:
        return None
    return Session(access_token=session.access_token, user=_to_user(session.user))
