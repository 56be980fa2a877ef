"""Draft state for the text and image input tabs."""

import asyncio
import base64
from dataclasses import dataclass
from enum import StrEnum

from civic_reporter.domain.errors import ValidationError
from civic_reporter.domain.inputs import ImageInput, InputPayload, TextInput


class Tab(StrEnum):
    """Input modes offered by the submission form."""

    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class SelectedFile:
    """Metadata of the file picked in the image tab."""

    filename: str
    content_type: str
    size: int


@dataclass
class InputCapture:
    """Holds both input drafts and the active tab.

    Each tab keeps its own draft; switching tabs never clears the other one.
    """

    active_tab: Tab = Tab.TEXT
    text: str = ""
    file: SelectedFile | None = None
    preview: str | None = None
    decoding: bool = False

    def switch_tab(self, tab: Tab) -> None:
        self.active_tab = tab

    def set_text(self, text: str) -> None:
        self.text = text

    async def select_file(
        self, filename: str, content_type: str, data: bytes
    ) -> None:
        """Select an image file and decode it into a data URL preview."""
        if not content_type.startswith("image/"):
            raise ValidationError("Please upload an image file")
        self.file = SelectedFile(
            filename=filename, content_type=content_type, size=len(data)
        )
        self.decoding = True
        try:
            self.preview = await asyncio.to_thread(to_data_url, data, content_type)
        finally:
            self.decoding = False

    @property
    def can_submit_text(self) -> bool:
        return bool(self.text.strip())

    @property
    def can_submit_image(self) -> bool:
        return self.file is not None and self.preview is not None and not self.decoding

    def payload(self) -> InputPayload:
        """Return the payload for the active tab."""
        if self.active_tab is Tab.TEXT:
            if not self.can_submit_text:
                raise ValidationError("Please enter a description")
            return TextInput(self.text)
        if not self.can_submit_image or self.preview is None:
            raise ValidationError("Please upload an image")
        return ImageInput(self.preview)

    def reset(self) -> None:
        """Return to the initial empty state."""
        self.active_tab = Tab.TEXT
        self.text = ""
        self.file = None
        self.preview = None
        self.decoding = False


def to_data_url(data: bytes, content_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    encoded = base64.b64encode(data).decode("utf-8")
    return f"data:{content_type};base64,{encoded}"
