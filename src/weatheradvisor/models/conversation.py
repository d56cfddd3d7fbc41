"""Conversation turn model."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class ConversationTurn(BaseModel):
    """A single question or answer in a session's history."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
