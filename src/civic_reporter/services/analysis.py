"""Issue analysis via the hosted analyze-issue function."""

import logging
from dataclasses import dataclass
from typing import Protocol

import pydantic

from civic_reporter.domain.analysis import AnalysisResult
from civic_reporter.domain.errors import (
    RemoteError,
    ValidationError,
    classify_endpoint_failure,
)
from civic_reporter.domain.inputs import (
    ImageInput,
    InputPayload,
    TextInput,
    to_request_body,
)

logger = logging.getLogger(__name__)


class AnalysisEndpointError(Exception):
    """Raised by analysis clients when the endpoint call fails."""

    def __init__(self, status_code: int | None, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class AnalysisClient(Protocol):
    """Interface for invoking the analysis endpoint."""

    async def invoke(
        self, body: dict[str, object], access_token: str | None = None
    ) -> dict[str, object] | None:
        """Send a request body and return the decoded response, if any."""


@dataclass
class AnalysisInvoker:
    """Sends one input to the analysis endpoint and classifies failures.

    Only one request may be in flight at a time; `busy` stays set for the
    whole call and a second submission is rejected without a network call.
    """

    client: AnalysisClient
    busy: bool = False

    async def submit_text(
        self, content: str, access_token: str | None = None
    ) -> AnalysisResult | None:
        """Analyze a free-text description."""
        if not content or not content.strip():
            raise ValidationError("Please enter a description")
        return await self._submit(TextInput(content), access_token)

    async def submit_image(
        self, preview: str | None, access_token: str | None = None
    ) -> AnalysisResult | None:
        """Analyze an image given as a data URL."""
        if not preview:
            raise ValidationError("Please upload an image")
        return await self._submit(ImageInput(preview), access_token)

    async def _submit(
        self, payload: InputPayload, access_token: str | None
    ) -> AnalysisResult | None:
        if self.busy:
            raise ValidationError("An analysis is already in progress")
        self.busy = True
        try:
            raw = await self.client.invoke(to_request_body(payload), access_token)
        except AnalysisEndpointError as exc:
            raise classify_endpoint_failure(
                exc.status_code,
                exc.message,
                fallback=f"Failed to analyze {payload.kind.value}",
            ) from exc
        finally:
            self.busy = False

        if raw is None:
            return None
        try:
            return AnalysisResult.model_validate(raw)
        except pydantic.ValidationError as exc:
            logger.warning(
                "Analysis response did not match the expected shape",
                extra={"input_type": payload.kind.value},
            )
            raise RemoteError("Analysis returned an unexpected response") from exc
