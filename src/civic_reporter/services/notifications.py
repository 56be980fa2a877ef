"""Toast notifications shown to the user."""

from dataclasses import dataclass, field
from enum import StrEnum


class ToastLevel(StrEnum):
    """Severity of a toast notification."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    """Single user-visible notification."""

    level: ToastLevel
    message: str


@dataclass
class ToastQueue:
    """Pending notifications, rendered once and then discarded."""

    toasts: list[Toast] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.toasts.append(Toast(ToastLevel.SUCCESS, message))

    def error(self, message: str) -> None:
        self.toasts.append(Toast(ToastLevel.ERROR, message))

    def info(self, message: str) -> None:
        self.toasts.append(Toast(ToastLevel.INFO, message))

    def drain(self) -> list[Toast]:
        """Return pending toasts and clear the queue."""
        pending, self.toasts = self.toasts, []
        return pending
