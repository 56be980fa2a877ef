"""Sign-in, sign-up and sign-out endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from civic_reporter.api.rendering import templates
from civic_reporter.domain.errors import WorkflowError

if TYPE_CHECKING:
    from civic_reporter.containers import AppContainer
    from civic_reporter.services.auth import AuthClient

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)

AUTH_UNAVAILABLE = "Authentication is unavailable right now. Please try again."

NOTICES = {
    "signed-out": "Signed out successfully",
}


@router.get("", response_class=HTMLResponse)
async def auth_page(request: Request, notice: str | None = None) -> Response:
    """Render the sign-in page, or go home when already signed in."""
    container: AppContainer = request.app.state.container
    view_id = request.cookies.get(container.settings.view_cookie_name)
    view = container.views.get(view_id)
    if view is not None and view.redirect_to is None:
        return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    return _render(request, notice=NOTICES.get(notice or ""))


@router.post("/sign-in")
async def sign_in(
    request: Request, email: str = Form(...), password: str = Form(...)
) -> Response:
    """Sign in and open a report view."""
    container: AppContainer = request.app.state.container
    auth_client = container.auth_client_factory()
    try:
        await auth_client.sign_in(email, password)
    except WorkflowError as exc:
        logger.info("Sign-in rejected: %s", exc.message)
        return _render(request, error=exc.message, email=email)
    except Exception:
        logger.exception("Sign-in failed")
        return _render(request, error=AUTH_UNAVAILABLE, email=email)
    return await _open_view(container, auth_client)


@router.post("/sign-up")
async def sign_up(
    request: Request, email: str = Form(...), password: str = Form(...)
) -> Response:
    """Create an account, signing in when the provider issues a session."""
    container: AppContainer = request.app.state.container
    auth_client = container.auth_client_factory()
    try:
        session = await auth_client.sign_up(email, password)
    except WorkflowError as exc:
        logger.info("Sign-up rejected: %s", exc.message)
        return _render(request, error=exc.message, email=email)
    except Exception:
        logger.exception("Sign-up failed")
        return _render(request, error=AUTH_UNAVAILABLE, email=email)
    if session is None:
        return _render(
            request, notice="Check your email to confirm your account", email=email
        )
    return await _open_view(container, auth_client)


@router.post("/sign-out")
async def sign_out(request: Request) -> Response:
    """Sign out and tear the report view down."""
    container: AppContainer = request.app.state.container
    cookie_name = container.settings.view_cookie_name
    view_id = request.cookies.get(cookie_name)
    view = container.views.get(view_id)
    if view is not None:
        try:
            await view.sign_out()
        except Exception:
            logger.exception("Failed to sign out")
    container.views.close(view_id)
    response = RedirectResponse(
        "/auth?notice=signed-out", status_code=status.HTTP_303_SEE_OTHER
    )
    response.delete_cookie(cookie_name)
    return response


async def _open_view(container: AppContainer, auth_client: AuthClient) -> Response:
    view_id, view = await container.views.open(auth_client)
    target = view.redirect_to or "/"
    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        container.settings.view_cookie_name,
        view_id,
        httponly=True,
        samesite="lax",
        secure=container.settings.secure_cookies,
        max_age=container.settings.view_ttl_seconds,
    )
    return response


def _render(
    request: Request,
    *,
    error: str | None = None,
    notice: str | None = None,
    email: str = "",
) -> Response:
    return templates.TemplateResponse(
        request,
        "auth.html",
        {"error": error, "notice": notice, "email": email},
        status_code=(
            status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK
        ),
    )
