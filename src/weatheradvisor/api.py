"""HTTP routes for the weather advisor.

Usage:
    uvicorn weatheradvisor.api:create_app --factory

or run ``weatheradvisor-api`` once the package is installed.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from weatheradvisor.advisor import WeatherAdvisor, build_advisor
from weatheradvisor.api_logging import configure_logging
from weatheradvisor.config import Settings, load_settings
from weatheradvisor.exceptions import (
    ConfigurationError,
    UpstreamServiceError,
    ValidationError,
    WeatherUnavailableError,
)
from weatheradvisor.geocoding import LocationResolver, fallback_search
from weatheradvisor.models.location import DEFAULT_COUNTRY, Location

logger = logging.getLogger(__name__)

GEOCODE_TEST_QUERY = "London"
GEOCODE_TEST_LIMIT = 2

WEATHER_UNAVAILABLE_MESSAGE = "Weather data unavailable. Please try again later."
GENERIC_ERROR_MESSAGE = "Failed to process your request"


# ── Request bodies ─────────────────────────────────────────────────────────
# Every field is optional so a missing one surfaces as a 400 naming it.


class LocationBody(BaseModel):
    city: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None


class WeatherRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str | None = None
    location: LocationBody | None = None
    session_id: str | None = Field(default=None, alias="sessionId")

    def to_location(self) -> Location:
        if self.location is None or not (self.location.city or "").strip():
            raise ValidationError("location")
        return Location(
            city=self.location.city.strip(),
            country=(self.location.country or "").strip() or DEFAULT_COUNTRY,
            lat=self.location.lat,
            lng=self.location.lng,
        )


class ClearMemoryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(default=None, alias="sessionId")


# ── Dependencies ───────────────────────────────────────────────────────────


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_advisor(request: Request) -> WeatherAdvisor:
    return request.app.state.advisor


def get_resolver(request: Request) -> LocationResolver:
    return request.app.state.resolver


# ── Error handlers ─────────────────────────────────────────────────────────


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def _malformed_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Malformed request to %s: %s", request.url.path, exc.errors())
        return _error(400, "Malformed request body")

    @app.exception_handler(ConfigurationError)
    async def _configuration(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Configuration error on %s: %s", request.url.path, exc)
        return _error(500, "Configuration error: API key is missing")

    @app.exception_handler(WeatherUnavailableError)
    async def _weather_unavailable(request: Request, exc: WeatherUnavailableError) -> JSONResponse:
        logger.error("Weather unavailable on %s: %s", request.url.path, exc)
        return _error(500, WEATHER_UNAVAILABLE_MESSAGE)

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _error(500, GENERIC_ERROR_MESSAGE)


# ── Routes ─────────────────────────────────────────────────────────────────


def _install_routes(app: FastAPI) -> None:
    @app.post("/weather")
    def ask_weather(
        body: WeatherRequest,
        advisor: WeatherAdvisor = Depends(get_advisor),
    ) -> dict[str, Any]:
        question = (body.question or "").strip()
        if not question:
            raise ValidationError("question")
        location = body.to_location()
        result = advisor.answer(question, location, body.session_id)
        return {"answer": result.answer}

    @app.get("/locations", response_model=None)
    def search_locations(
        q: str = "",
        resolver: LocationResolver = Depends(get_resolver),
    ) -> dict[str, Any] | JSONResponse:
        try:
            candidates = resolver.search(q)
        except UpstreamServiceError as exc:
            logger.error("Location search failed for %r: %s", q, exc)
            return _error(exc.status_code, f"Error from location service: {exc.message}")
        return {
            "results": [candidate.to_provider_dict() for candidate in candidates],
            "status": {"code": 200, "message": "OK"},
        }

    @app.get("/locations/fallback")
    def search_fallback_locations(q: str = "") -> dict[str, Any]:
        return {
            "results": [candidate.to_provider_dict() for candidate in fallback_search(q)],
            "source": "fallback",
        }

    @app.post("/clear-memory")
    def clear_memory(
        body: ClearMemoryRequest,
        advisor: WeatherAdvisor = Depends(get_advisor),
    ) -> dict[str, bool]:
        advisor.clear_memory(body.session_id or "")
        return {"success": True}

    @app.get("/test")
    def configuration_report(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
        return {
            "apiKeyConfigured": bool(settings.openrouter_api_key),
            "appUrl": settings.app_url or "Not configured",
            "environment": settings.app_env,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/test-geocode", response_model=None)
    def geocode_smoke_test(
        resolver: LocationResolver = Depends(get_resolver),
    ) -> dict[str, Any] | JSONResponse:
        if not resolver.configured:
            return _error(400, "API key is not set", apiKeyExists=False)
        try:
            candidates = resolver.search(
                GEOCODE_TEST_QUERY, limit=GEOCODE_TEST_LIMIT, use_fallback=False,
            )
        except UpstreamServiceError as exc:
            return {
                "success": False,
                "status": exc.status_code,
                "apiKeyExists": True,
                "results": 0,
                "data": None,
                "error": exc.message,
            }
        return {
            "success": True,
            "status": 200,
            "apiKeyExists": True,
            "results": len(candidates),
            "data": [
                {"formatted": c.formatted, "components": dict(c.components)} for c in candidates
            ],
            "error": None,
        }


# ── Application factory ────────────────────────────────────────────────────


def create_app(
    settings: Settings | None = None,
    advisor: WeatherAdvisor | None = None,
    resolver: LocationResolver | None = None,
) -> FastAPI:
    """Build the API, constructing default collaborators from settings.

    Collaborators passed in are left open on shutdown; the caller owns them.
    """
    settings = settings or load_settings()
    owned: list[Any] = []
    if advisor is None:
        advisor = build_advisor(settings)
        owned.append(advisor)
    if resolver is None:
        resolver = LocationResolver(settings.opencage_api_key, timeout=settings.http_timeout_seconds)
        owned.append(resolver)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        for collaborator in owned:
            collaborator.close()

    app = FastAPI(title="Weather Advisor", lifespan=lifespan)
    app.state.settings = settings
    app.state.advisor = advisor
    app.state.resolver = resolver

    _install_error_handlers(app)
    _install_routes(app)
    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_dir)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
