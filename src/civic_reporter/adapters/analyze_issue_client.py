"""HTTPX client for the hosted analyze-issue edge function."""

from dataclasses import dataclass

import httpx

from civic_reporter.services.analysis import AnalysisClient, AnalysisEndpointError

DEFAULT_ERROR_MESSAGE = "Edge Function returned a non-2xx status code"


@dataclass
class HttpxAnalyzeIssueClient(AnalysisClient):
    """Analysis client calling a Supabase edge function over HTTP."""

    function_url: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(
        cls,
        supabase_url: str,
        api_key: str,
        function_name: str,
        timeout: float = 60.0,
    ) -> "HttpxAnalyzeIssueClient":
        """Create a client with a managed httpx session."""
        function_url = f"{supabase_url.rstrip('/')}/functions/v1/{function_name}"
        return cls(
            function_url=function_url,
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def invoke(
        self, body: dict[str, object], access_token: str | None = None
    ) -> dict[str, object] | None:
        """POST the body and return the decoded JSON response."""
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {access_token or self.api_key}",
        }
        try:
            response = await self.http_client.post(
                self.function_url, json=body, headers=headers, timeout=self.timeout
            )
        except httpx.HTTPError as exc:
            raise AnalysisEndpointError(None, str(exc) or type(exc).__name__) from exc
        if response.is_error:
            raise AnalysisEndpointError(response.status_code, _error_message(response))
        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise AnalysisEndpointError(
                response.status_code, "Analysis returned invalid JSON"
            ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Extract the error text an edge function sent back."""
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or DEFAULT_ERROR_MESSAGE
    if isinstance(payload, dict):
        for key in ("error", "message", "msg"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return DEFAULT_ERROR_MESSAGE
