"""Submission inputs accepted by the analysis endpoint."""

from dataclasses import dataclass
from enum import StrEnum


class InputKind(StrEnum):
    """Discriminator sent to the analysis endpoint."""

    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class TextInput:
    """Free-text issue description."""

    content: str

    @property
    def kind(self) -> InputKind:
        return InputKind.TEXT


@dataclass(frozen=True)
class ImageInput:
    """Image encoded as a data URL."""

    content: str

    @property
    def kind(self) -> InputKind:
        return InputKind.IMAGE


InputPayload = TextInput | ImageInput


def to_request_body(payload: InputPayload) -> dict[str, object]:
    """Build the analyze-issue request body for a payload."""
    return {"inputType": payload.kind.value, "content": payload.content}
