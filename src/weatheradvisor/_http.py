"""Low-level HTTP transport layer wrapping httpx."""

from __future__ import annotations

import re
from typing import Any

import httpx

from weatheradvisor.exceptions import (
    ProviderConnectionError,
    ProviderTimeoutError,
    UpstreamServiceError,
)

DEFAULT_TIMEOUT = 30.0

_SECRET_PARAM_RE = re.compile(r"((?:appid|key)=)[^&]+")


def redact(url: str) -> str:
    """Hide API keys carried as query parameters."""
    return _SECRET_PARAM_RE.sub(r"\1API_KEY_HIDDEN", url)


def _handle_response(response: httpx.Response, service: str) -> Any:
    """Validate response status and return parsed JSON."""
    if response.status_code >= 400:
        raise UpstreamServiceError(
            status_code=response.status_code,
            message=response.text[:300],
            service=service,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamServiceError(
            status_code=502,
            message=f"Invalid JSON from {service}: {response.text[:100]}",
            service=service,
        ) from exc


class SyncTransport:
    """Synchronous JSON-over-HTTP transport for one provider."""

    def __init__(
        self,
        base_url: str,
        service: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.service = service
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
        )

    def get(self, endpoint: str, params: dict[str, Any]) -> Any:
        """Perform a GET request and return parsed JSON."""
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(redact(str(exc)), self.service) from exc
        except httpx.TransportError as exc:
            raise ProviderConnectionError(redact(str(exc)), self.service) from exc
        return _handle_response(response, self.service)

    def close(self) -> None:
        self._client.close()
