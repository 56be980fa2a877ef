"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import (
    Depends,
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from civic_reporter.api.auth import router as auth_router
from civic_reporter.api.rendering import templates, view_state
from civic_reporter.app_logging import configure_logging
from civic_reporter.containers import AppContainer
from civic_reporter.services.auth import SIGN_IN_PATH
from civic_reporter.services.input_capture import Tab
from civic_reporter.services.view import ReportView


async def require_view(request: Request) -> ReportView:
    """Resolve the caller's report view or send them to sign in."""
    container: AppContainer = request.app.state.container
    view_id = request.cookies.get(container.settings.view_cookie_name)
    view = container.views.get(view_id)
    if view is None or view.redirect_to is not None:
        location = view.redirect_to if view is not None else SIGN_IN_PATH
        container.views.close(view_id)
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER, headers={"Location": location}
        )
    return view


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close application resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(
        request: Request, view: ReportView = Depends(require_view)
    ) -> Response:
        """Render the issue submission page."""
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "view": view,
                "user": view.user,
                "capture": view.capture,
                "card": view.card,
                "toasts": view.toasts.drain(),
            },
        )

    @app.get("/api/state")
    async def state(view: ReportView = Depends(require_view)) -> dict[str, object]:
        """Return the view state as JSON."""
        return view_state(view)

    @app.post("/tab")
    async def switch_tab(
        tab: Tab = Form(...), view: ReportView = Depends(require_view)
    ) -> Response:
        """Switch between the text and image input tabs."""
        view.switch_tab(tab)
        return _home()

    @app.post("/analyze/text")
    async def analyze_text(
        content: str = Form(""), view: ReportView = Depends(require_view)
    ) -> Response:
        """Analyze the submitted description."""
        view.switch_tab(Tab.TEXT)
        await view.submit_text(content)
        return _home()

    @app.post("/image")
    async def select_image(
        file: UploadFile = File(...), view: ReportView = Depends(require_view)
    ) -> Response:
        """Select an image and build its preview."""
        view.switch_tab(Tab.IMAGE)
        data = await file.read()
        await view.select_file(
            file.filename or "upload", file.content_type or "", data
        )
        return _home()

    @app.post("/analyze/image")
    async def analyze_image(view: ReportView = Depends(require_view)) -> Response:
        """Analyze the selected image."""
        view.switch_tab(Tab.IMAGE)
        await view.submit_image()
        return _home()

    @app.post("/issues")
    async def save_issue(view: ReportView = Depends(require_view)) -> Response:
        """Save the displayed analysis result."""
        await view.save()
        return _home()

    return app


def _home() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
