"""Location resolution through the OpenCage geocoding API."""

from __future__ import annotations

import logging

from weatheradvisor._http import DEFAULT_TIMEOUT, SyncTransport
from weatheradvisor.api_logging import log_api_call
from weatheradvisor.exceptions import (
    ConfigurationError,
    UpstreamServiceError,
    ValidationError,
)
from weatheradvisor.models.location import Location, LocationCandidate

logger = logging.getLogger(__name__)

OPENCAGE_BASE_URL = "https://api.opencagedata.com/geocode/v1"
MIN_QUERY_LENGTH = 3
MIN_FALLBACK_QUERY_LENGTH = 2
RESULT_LIMIT = 10


def _candidate(formatted: str, lat: float, lng: float, **components: str) -> LocationCandidate:
    return LocationCandidate(formatted=formatted, lat=lat, lng=lng, components=components)


FALLBACK_LOCATIONS: dict[str, LocationCandidate] = {
    "hyderabad": _candidate(
        "Hyderabad, Telangana, India", 17.385044, 78.486671,
        city="Hyderabad", state="Telangana", country="India",
    ),
    "delhi": _candidate(
        "New Delhi, Delhi, India", 28.613939, 77.209021,
        city="New Delhi", state="Delhi", country="India",
    ),
    "mumbai": _candidate(
        "Mumbai, Maharashtra, India", 19.075984, 72.877656,
        city="Mumbai", state="Maharashtra", country="India",
    ),
    "dallas": _candidate(
        "Dallas, Texas, United States", 32.7767, -96.7970,
        city="Dallas", country="United States",
    ),
    "london": _candidate(
        "London, England, United Kingdom", 51.5074, -0.1278,
        city="London", country="United Kingdom",
    ),
    "tokyo": _candidate(
        "Tokyo, Japan", 35.6762, 139.6503,
        city="Tokyo", country="Japan",
    ),
    "paris": _candidate(
        "Paris, Île-de-France, France", 48.8566, 2.3522,
        city="Paris", country="France",
    ),
    "new york": _candidate(
        "New York, NY, United States", 40.7128, -74.0060,
        city="New York", country="United States",
    ),
}


def parse_location_text(text: str) -> Location:
    """Turn user-entered ``"City, Country"`` text into a Location."""
    if not text or not text.strip():
        raise ValidationError("location")
    return Location.parse(text)


def fallback_search(query: str) -> list[LocationCandidate]:
    """Look the query up in the static table of well-known cities.

    The last table key contained in the query wins; at most one result.
    """
    normalized = (query or "").strip().lower()
    if len(normalized) < MIN_FALLBACK_QUERY_LENGTH:
        raise ValidationError(
            "q", f"Please provide a search query of at least {MIN_FALLBACK_QUERY_LENGTH} characters",
        )
    results: list[LocationCandidate] = []
    for key, candidate in FALLBACK_LOCATIONS.items():
        if key in normalized:
            results = [candidate]
    return results


class LocationResolver:
    """Resolve free-text place names into ranked location candidates.

    Usage:
        with LocationResolver(api_key="...") as resolver:
            candidates = resolver.search("Hyderabad")
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = OPENCAGE_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._transport = SyncTransport(base_url=base_url, service="opencage", timeout=timeout)

    def __enter__(self) -> LocationResolver:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    @log_api_call
    def search(
        self, query: str, limit: int = RESULT_LIMIT, use_fallback: bool = True,
    ) -> list[LocationCandidate]:
        """Return geocoding candidates for ``query``, best match first.

        With ``use_fallback`` the static table stands in when the provider
        fails or finds nothing for a well-known city.
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise ValidationError(
                "q", f"Please provide a search query of at least {MIN_QUERY_LENGTH} characters",
            )
        if not self._api_key:
            raise ConfigurationError("OPENCAGE_API_KEY is missing")

        fallback = FALLBACK_LOCATIONS.get(query.lower()) if use_fallback else None
        try:
            data = self._transport.get(
                "/json",
                {"q": query, "key": self._api_key, "limit": limit, "no_annotations": 1},
            )
        except UpstreamServiceError as exc:
            if fallback is None:
                raise
            logger.warning("Geocoding failed for %r (%s); using fallback data", query, exc)
            return [fallback]

        results = [
            LocationCandidate.from_provider_dict(item)
            for item in ((data.get("results") if isinstance(data, dict) else None) or [])
            if isinstance(item, dict) and (item.get("geometry") or {}).get("lat") is not None
        ]
        if not results and fallback is not None:
            logger.info("Using fallback data for %r", query)
            return [fallback]
        return results
