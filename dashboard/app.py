"""Weather Advisor chat page, Streamlit over the advisor HTTP API."""

from __future__ import annotations

import uuid

import streamlit as st

from shared import (
    AdvisorAPIError,
    api_client,
    blocks_to_markdown,
    escape_text,
    render_location_sidebar,
    split_answer_blocks,
)

GREETING = (
    "Hi! I'm your Weather Advisor. Ask me anything about weather or for advice "
    "based on current conditions."
)
NO_LOCATION_REPLY = (
    "I need to know your location to provide accurate weather advice. "
    "Please set your location first."
)
ERROR_REPLY = "Sorry, I had trouble getting an answer. Please try again in a moment."

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Weather Advisor",
    page_icon="⛅",
    layout="centered",
)

if "session_id" not in st.session_state:
    st.session_state.session_id = f"session-{uuid.uuid4().hex}"
if "messages" not in st.session_state:
    st.session_state.messages = [{"role": "assistant", "content": GREETING}]


# ── Sidebar: location ────────────────────────────────────────────────────────

location = render_location_sidebar()

st.sidebar.divider()
if st.sidebar.button("Clear conversation"):
    try:
        with api_client() as api:
            api.clear_memory(st.session_state.session_id)
    except AdvisorAPIError as exc:
        st.sidebar.error(f"Could not clear server memory: {exc.message}")
    st.session_state.messages = [{"role": "assistant", "content": GREETING}]


# ── Chat history ─────────────────────────────────────────────────────────────

st.title("Weather Advisor")
if location is not None:
    st.caption(f"Answering for {location.label}")


def render_message(role: str, content: str) -> None:
    with st.chat_message(role):
        if role == "assistant":
            st.markdown(blocks_to_markdown(split_answer_blocks(content)) or content)
        else:
            st.markdown(escape_text(content))


for message in st.session_state.messages:
    render_message(message["role"], message["content"])


# ── New question ─────────────────────────────────────────────────────────────

question = st.chat_input("Ask about the weather...")
if question and question.strip():
    st.session_state.messages.append({"role": "user", "content": question})
    render_message("user", question)

    if location is None:
        reply = NO_LOCATION_REPLY
    else:
        with st.spinner("Checking the weather..."):
            try:
                with api_client() as api:
                    reply = api.ask(question.strip(), location, st.session_state.session_id)
            except AdvisorAPIError as exc:
                st.toast(f"API error: {exc.message}")
                reply = ERROR_REPLY

    st.session_state.messages.append({"role": "assistant", "content": reply})
    render_message("assistant", reply)
