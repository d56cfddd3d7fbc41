"""Shared sidebar rendering for location selection."""

from __future__ import annotations

import streamlit as st

from weatheradvisor.geocoding import MIN_QUERY_LENGTH, parse_location_text
from weatheradvisor.models.location import Location, LocationCandidate

from .api_client import AdvisorAPIError
from .fetchers import fetch_location_candidates

_LOCATION_KEY = "location"


def render_location_sidebar() -> Location | None:
    """Render location search in the sidebar and return the chosen location.

    The choice is kept in ``st.session_state`` so it survives reruns.
    """
    st.sidebar.title("Your location")

    mode = st.sidebar.radio("Set location by", ["Search", "Type City, Country"], horizontal=True)

    if mode == "Search":
        query = st.sidebar.text_input("City", placeholder="e.g. Hyderabad")
        if len(query.strip()) >= MIN_QUERY_LENGTH:
            try:
                candidates = [LocationCandidate.from_provider_dict(c) for c in fetch_location_candidates(query.strip())]
            except AdvisorAPIError as exc:
                st.sidebar.error(f"Error: {exc.message}")
                candidates = []
            if candidates:
                options = {c.formatted: c for c in candidates}
                picked = st.sidebar.selectbox("Matches", list(options.keys()))
                if st.sidebar.button("Use this location"):
                    st.session_state[_LOCATION_KEY] = options[picked].to_location()
            else:
                st.sidebar.info("No locations found. Try a different search term.")
        elif query.strip():
            st.sidebar.caption(f"Enter at least {MIN_QUERY_LENGTH} characters to search.")
    else:
        text = st.sidebar.text_input("Location", placeholder="London, United Kingdom")
        if st.sidebar.button("Use this location") and text.strip():
            st.session_state[_LOCATION_KEY] = parse_location_text(text)

    location: Location | None = st.session_state.get(_LOCATION_KEY)
    if location is not None:
        st.sidebar.success(f"Current location: {location.label}")
        if st.sidebar.button("Change location"):
            del st.session_state[_LOCATION_KEY]
            st.rerun()
    return location
