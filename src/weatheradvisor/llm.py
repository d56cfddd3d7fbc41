"""Chat-completion client for the hosted language model."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from weatheradvisor.exceptions import (
    LLMError,
    LLMMalformedResponseError,
    LLMGatewayTimeoutError,
    LLMRequestError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 2
APP_TITLE = "Weather Advisor"

_LOG_PREVIEW_CHARS = 200


@dataclass(frozen=True)
class InvokeOptions:
    max_tokens: int = 500
    temperature: float | None = None


@dataclass(frozen=True)
class LLMResult:
    """Either the answer text or the error that prevented one."""

    text: str | None = None
    error: LLMError | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.text)


def _is_transient(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def parse_completion(payload: Any) -> str:
    """Return ``choices[0].message.content`` or raise LLMMalformedResponseError."""
    if not isinstance(payload, dict):
        raise LLMMalformedResponseError("Empty response from completion endpoint")
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        raise LLMMalformedResponseError("No choices in completion response")
    choice = choices[0]
    if not isinstance(choice, dict) or not isinstance(choice.get("message"), dict):
        raise LLMMalformedResponseError("Completion choice has no message")
    content = choice["message"].get("content")
    if not content or not str(content).strip():
        raise LLMMalformedResponseError("Completion choice has no content")
    return str(content)


class LLMClient:
    """Synchronous client for an OpenAI-compatible chat-completion endpoint.

    Usage:
        with LLMClient(api_key="...", app_url="http://localhost:8000") as llm:
            result = llm.invoke(system, user, InvokeOptions(max_tokens=600))
            if result.ok:
                print(result.text)
    """

    def __init__(
        self,
        api_key: str | None,
        app_url: str,
        model: str,
        temperature: float = 0.7,
        base_url: str = OPENROUTER_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_retries = max(0, max_retries)
        self._sleep = sleep
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key or ''}",
                "HTTP-Referer": app_url,
                "X-Title": APP_TITLE,
            },
        )

    def __enter__(self) -> LLMClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._client.close()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def invoke(
        self,
        system_prompt: str,
        user_prompt: str,
        options: InvokeOptions | None = None,
    ) -> LLMResult:
        """Send one completion request, retrying transient failures.

        Timeouts and malformed responses are returned at once; connection
        errors, 429 and 5xx responses are retried after sleeping
        ``2 ** (attempt - 1)`` seconds.
        """
        if not self._api_key:
            return LLMResult(error=LLMRequestError("OPENROUTER_API_KEY is missing"))

        options = options or InvokeOptions()
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature if options.temperature is None else options.temperature,
            "max_tokens": options.max_tokens,
        }

        last_error: LLMError = LLMRequestError("Failed to communicate with the completion endpoint")
        for attempt in range(self.max_retries + 1):
            if attempt:
                self._sleep(2 ** (attempt - 1))
            attempts = attempt + 1
            try:
                response = self._client.post("/chat/completions", json=body)
            except httpx.TimeoutException as exc:
                logger.error("Completion request timed out: %s", exc)
                return LLMResult(error=LLMTimeoutError(str(exc) or "timed out"), attempts=attempts)
            except httpx.TransportError as exc:
                logger.error("Completion request failed (attempt %d): %s", attempts, exc)
                last_error = LLMRequestError(str(exc))
                continue

            if response.status_code == 504:
                logger.error("Completion gateway timeout")
                return LLMResult(error=LLMGatewayTimeoutError("Gateway timeout"), attempts=attempts)
            if response.status_code >= 400:
                logger.error(
                    "Completion API error (attempt %d): HTTP %d %s",
                    attempts, response.status_code, response.text[:_LOG_PREVIEW_CHARS],
                )
                last_error = LLMRequestError(
                    f"HTTP {response.status_code}", status_code=response.status_code,
                )
                if _is_transient(response.status_code):
                    continue
                return LLMResult(error=last_error, attempts=attempts)

            try:
                text = parse_completion(response.json())
            except ValueError:
                logger.error("Completion response is not JSON: %s", response.text[:_LOG_PREVIEW_CHARS])
                return LLMResult(
                    error=LLMMalformedResponseError("Completion response is not JSON"),
                    attempts=attempts,
                )
            except LLMMalformedResponseError as exc:
                logger.error("%s: %s", exc, response.text[:_LOG_PREVIEW_CHARS])
                return LLMResult(error=exc, attempts=attempts)

            logger.info("LLM response received: %s...", text[:100])
            return LLMResult(text=text, attempts=attempts)

        return LLMResult(error=last_error, attempts=self.max_retries + 1)
