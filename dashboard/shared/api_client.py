"""HTTP client for the weather advisor API, used by the chat page."""

from __future__ import annotations

from typing import Any

import httpx

from weatheradvisor.models.location import Location, LocationCandidate

DEFAULT_TIMEOUT = 90.0


class AdvisorAPIError(Exception):
    """Raised when the advisor API is unreachable or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AdvisorAPIClient:
    """Thin client over the advisor's HTTP routes.

    Usage:
        with AdvisorAPIClient("http://localhost:8000") as api:
            candidates = api.search_locations("Hyderabad")
            answer = api.ask("Do I need an umbrella?", candidates[0].to_location(), "session-1")
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self) -> AdvisorAPIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise AdvisorAPIError(f"Request to {path} timed out") from exc
        except httpx.TransportError as exc:
            raise AdvisorAPIError(f"Could not reach the advisor API: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = None
            if isinstance(payload, dict):
                message = payload.get("error")
            raise AdvisorAPIError(
                message or f"API error: {response.status_code}", status_code=response.status_code,
            )
        if payload is None:
            raise AdvisorAPIError(f"Invalid response format from {path}", status_code=response.status_code)
        return payload

    # ── Routes ──────────────────────────────────────────────────────────────

    def ask(self, question: str, location: Location, session_id: str | None = None) -> str:
        body: dict[str, Any] = {
            "question": question,
            "location": location.model_dump(),
        }
        if session_id:
            body["sessionId"] = session_id
        return self._request("POST", "/weather", json=body)["answer"]

    def search_locations(self, query: str) -> list[LocationCandidate]:
        data = self._request("GET", "/locations", params={"q": query})
        return [LocationCandidate.from_provider_dict(item) for item in data.get("results") or []]

    def fallback_locations(self, query: str) -> list[LocationCandidate]:
        data = self._request("GET", "/locations/fallback", params={"q": query})
        return [LocationCandidate.from_provider_dict(item) for item in data.get("results") or []]

    def clear_memory(self, session_id: str) -> None:
        self._request("POST", "/clear-memory", json={"sessionId": session_id})
