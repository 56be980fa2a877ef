"""Tests for the analysis invoker."""

import asyncio
from dataclasses import dataclass, field

import pytest

from civic_reporter.domain.errors import (
    ErrorKind,
    QuotaExhaustedError,
    RateLimitedError,
    RemoteError,
    ValidationError,
    classify_endpoint_failure,
)
from civic_reporter.services.analysis import AnalysisEndpointError, AnalysisInvoker
from tests.conftest import FakeAnalysisClient


@dataclass
class BlockingAnalysisClient:
    """Analysis client that waits until released."""

    release: asyncio.Event
    calls: int = 0
    payload: dict[str, object] = field(
        default_factory=lambda: {
            "issue_type": "flooding",
            "location": "River Road",
            "confidence": 0.65,
        }
    )

    async def invoke(
        self, body: dict[str, object], access_token: str | None = None
    ) -> dict[str, object] | None:
        self.calls += 1
        await self.release.wait()
        return self.payload


def test_submit_text_returns_result() -> None:
    client = FakeAnalysisClient()
    invoker = AnalysisInvoker(client)

    result = asyncio.run(invoker.submit_text("pothole on Main Street", "token-1"))

    assert result is not None
    assert result.issue_type == "pothole"
    assert result.confidence == 0.92
    assert client.calls == [
        ({"inputType": "text", "content": "pothole on Main Street"}, "token-1")
    ]
    assert not invoker.busy


def test_submit_image_sends_image_discriminator() -> None:
    client = FakeAnalysisClient()
    invoker = AnalysisInvoker(client)

    asyncio.run(invoker.submit_image("data:image/png;base64,AAAA"))

    body, _ = client.calls[0]
    assert body == {"inputType": "image", "content": "data:image/png;base64,AAAA"}


@pytest.mark.parametrize("content", ["", "   \n"])
def test_empty_text_never_calls_endpoint(content: str) -> None:
    client = FakeAnalysisClient()
    invoker = AnalysisInvoker(client)

    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(invoker.submit_text(content))

    assert excinfo.value.kind is ErrorKind.VALIDATION
    assert client.calls == []


def test_missing_image_never_calls_endpoint() -> None:
    client = FakeAnalysisClient()
    invoker = AnalysisInvoker(client)

    with pytest.raises(ValidationError):
        asyncio.run(invoker.submit_image(None))

    assert client.calls == []


@pytest.mark.parametrize(
    ("status_code", "error_type", "message"),
    [
        (429, RateLimitedError, "Rate limit exceeded. Please try again later."),
        (402, QuotaExhaustedError, "AI credits depleted. Please contact support."),
        (500, RemoteError, "model exploded"),
        (None, RemoteError, "model exploded"),
    ],
)
def test_endpoint_failures_are_classified(
    status_code: int | None, error_type: type, message: str
) -> None:
    client = FakeAnalysisClient(
        error=AnalysisEndpointError(status_code, "model exploded")
    )
    invoker = AnalysisInvoker(client)

    with pytest.raises(error_type) as excinfo:
        asyncio.run(invoker.submit_text("pothole"))

    assert excinfo.value.message == message
    assert len(client.calls) == 1
    assert not invoker.busy


def test_classify_falls_back_when_message_missing() -> None:
    error = classify_endpoint_failure(503, "", fallback="Failed to analyze image")

    assert isinstance(error, RemoteError)
    assert error.message == "Failed to analyze image"


def test_empty_body_yields_no_result() -> None:
    invoker = AnalysisInvoker(FakeAnalysisClient(payload=None))

    assert asyncio.run(invoker.submit_text("pothole")) is None


def test_malformed_body_is_remote_error() -> None:
    invoker = AnalysisInvoker(FakeAnalysisClient(payload={"issue_type": "pothole"}))

    with pytest.raises(RemoteError):
        asyncio.run(invoker.submit_text("pothole"))


def test_second_submission_while_busy_is_rejected() -> None:
    async def scenario() -> tuple[AnalysisInvoker, BlockingAnalysisClient, object]:
        client = BlockingAnalysisClient(release=asyncio.Event())
        invoker = AnalysisInvoker(client)
        first = asyncio.create_task(invoker.submit_text("flooded underpass"))
        await asyncio.sleep(0)
        assert invoker.busy
        with pytest.raises(ValidationError):
            await invoker.submit_text("flooded underpass")
        client.release.set()
        return invoker, client, await first

    invoker, client, result = asyncio.run(scenario())

    assert client.calls == 1
    assert result is not None
    assert not invoker.busy
