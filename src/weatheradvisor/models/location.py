"""Location models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COUNTRY = "United States"

# Address components tried in order when naming a geocoding result.
_CITY_COMPONENTS = ("city", "town", "village", "municipality", "city_district", "district")


class Location(BaseModel):
    """A place the user asks about, optionally with coordinates."""

    model_config = ConfigDict(frozen=True)

    city: str
    country: str = DEFAULT_COUNTRY
    lat: float | None = None
    lng: float | None = None

    @classmethod
    def parse(cls, text: str) -> Location:
        """Parse ``"City, Country"`` text; country defaults to the United States."""
        parts = [part.strip() for part in text.split(",") if part.strip()]
        if not parts:
            raise ValueError("Location text is empty")
        country = parts[-1] if len(parts) > 1 else DEFAULT_COUNTRY
        return cls(city=parts[0], country=country)

    @property
    def cache_key(self) -> str:
        return f"{self.city.strip().lower()}|{self.country.strip().lower()}"

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def label(self) -> str:
        return f"{self.city}, {self.country}"


class LocationCandidate(BaseModel):
    """One ranked geocoding result."""

    model_config = ConfigDict(frozen=True)

    formatted: str
    lat: float
    lng: float
    components: dict[str, Any] = Field(default_factory=dict)

    @property
    def city(self) -> str:
        """Best-guess city name from the address components."""
        for key in _CITY_COMPONENTS:
            value = self.components.get(key)
            if value:
                return str(value)
        return self.formatted.split(",")[0].strip()

    @property
    def country(self) -> str:
        return str(self.components.get("country") or "Unknown")

    def to_location(self) -> Location:
        return Location(city=self.city, country=self.country, lat=self.lat, lng=self.lng)

    def to_provider_dict(self) -> dict[str, Any]:
        """Render in the geocoding provider's result shape."""
        return {
            "formatted": self.formatted,
            "geometry": {"lat": self.lat, "lng": self.lng},
            "components": dict(self.components),
        }

    @classmethod
    def from_provider_dict(cls, data: dict[str, Any]) -> LocationCandidate:
        geometry = data.get("geometry") or {}
        return cls(
            formatted=data.get("formatted", ""),
            lat=geometry.get("lat"),
            lng=geometry.get("lng"),
            components=data.get("components") or {},
        )
