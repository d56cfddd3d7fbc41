"""Shared fixtures for chat-page tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add dashboard to path so `shared` is importable
_dashboard_dir = str(Path(__file__).resolve().parent.parent.parent / "dashboard")
if _dashboard_dir not in sys.path:
    sys.path.insert(0, _dashboard_dir)

API_URL = "http://advisor.test"


@pytest.fixture
def api_url() -> str:
    return API_URL


@pytest.fixture
def sample_answer() -> str:
    return (
        "## ☔ Rain Outlook\n"
        "\n"
        "Tomorrow looks **wet** in London with a high of 56°F.\n"
        "\n"
        "What to bring:\n"
        "- An *umbrella*\n"
        "- A waterproof jacket 🧥\n"
        "\n"
        "Stay dry!"
    )
