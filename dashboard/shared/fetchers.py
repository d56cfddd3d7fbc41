"""Cached calls to the advisor API."""

from __future__ import annotations

import logging

import streamlit as st

from weatheradvisor.config import load_settings

from .api_client import AdvisorAPIClient, AdvisorAPIError

logger = logging.getLogger(__name__)


def api_client() -> AdvisorAPIClient:
    return AdvisorAPIClient(load_settings().advisor_api_url)


# ── Cached fetchers ──────────────────────────────────────────────────────────


@st.cache_data(ttl=600)
def fetch_location_candidates(query: str) -> list[dict]:
    """Search the geocoder, falling back to the static city table on error."""
    with api_client() as api:
        try:
            return [c.to_provider_dict() for c in api.search_locations(query)]
        except AdvisorAPIError as exc:
            if exc.status_code == 400:
                raise
            logger.warning("Location search failed (%s); trying fallback table", exc)
            return [c.to_provider_dict() for c in api.fallback_locations(query)]
