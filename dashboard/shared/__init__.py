"""Shared chat-page utilities."""

# --- Formatting ---
from .formatters import AnswerBlock, blocks_to_markdown, escape_text, split_answer_blocks, strip_markdown

# --- API access ---
from .api_client import AdvisorAPIClient, AdvisorAPIError
from .fetchers import api_client, fetch_location_candidates

# --- UI components ---
from .sidebar import render_location_sidebar

__all__ = [
    "AdvisorAPIClient",
    "AdvisorAPIError",
    "AnswerBlock",
    "api_client",
    "blocks_to_markdown",
    "escape_text",
    "fetch_location_candidates",
    "render_location_sidebar",
    "split_answer_blocks",
    "strip_markdown",
]
