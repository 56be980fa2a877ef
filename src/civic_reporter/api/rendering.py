"""Template rendering helpers."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from civic_reporter.services.view import ReportView

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def view_state(view: ReportView) -> dict[str, object]:
    """Return a JSON-friendly snapshot of a report view."""
    user = view.user
    card = view.card
    return {
        "user": {"id": str(user.id), "email": user.email} if user else None,
        "loading": view.loading,
        "active_tab": view.capture.active_tab.value,
        "text": view.capture.text,
        "file": view.capture.file.filename if view.capture.file else None,
        "has_preview": view.capture.preview is not None,
        "can_submit_image": view.capture.can_submit_image,
        "analyzing": view.analysis.busy,
        "saving": view.persistence.saving,
        "result": (
            {
                "issue_type": card.issue_type,
                "location": card.location,
                "confidence": card.confidence,
                "confidence_percent": card.confidence_percent,
                "tier": card.tier.value,
            }
            if card
            else None
        ),
    }
