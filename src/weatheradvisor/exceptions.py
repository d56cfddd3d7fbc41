"""Custom exceptions for the weather advisor."""

from __future__ import annotations


class WeatherAdvisorError(Exception):
    """Base exception for all weather advisor errors."""


class ValidationError(WeatherAdvisorError):
    """Raised when a request is missing a field or carries a malformed one."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        self.message = message or f"Missing required parameter: {field}"
        super().__init__(self.message)


class ConfigurationError(WeatherAdvisorError):
    """Raised when a required API key or setting is absent."""


class UpstreamServiceError(WeatherAdvisorError):
    """Raised when a geocoding or weather provider returns an error response."""

    def __init__(self, status_code: int, message: str, service: str = "provider") -> None:
        self.status_code = status_code
        self.message = message
        self.service = service
        super().__init__(f"{service} HTTP {status_code}: {message}")


class ProviderConnectionError(UpstreamServiceError):
    """Raised when a provider cannot be reached."""

    def __init__(self, message: str, service: str = "provider") -> None:
        super().__init__(503, message, service)


class ProviderTimeoutError(UpstreamServiceError):
    """Raised when a provider request times out."""

    def __init__(self, message: str, service: str = "provider") -> None:
        super().__init__(504, message, service)


class WeatherUnavailableError(UpstreamServiceError):
    """Raised when weather data cannot be fetched and nothing is cached."""


# ── LLM errors ─────────────────────────────────────────────────────────────
# These travel inside an LLMResult rather than being raised to callers.


class LLMError(WeatherAdvisorError):
    """Base class for language-model invocation failures."""


class LLMTimeoutError(LLMError):
    """The completion request exceeded its timeout."""


class LLMGatewayTimeoutError(LLMTimeoutError):
    """The completion gateway answered 504."""


class LLMMalformedResponseError(LLMError):
    """The completion response had no usable choices."""


class LLMRequestError(LLMError):
    """The completion request failed after all retry attempts."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
