"""Per-session conversation history."""

from __future__ import annotations

import threading
from typing import Protocol

from weatheradvisor.models.conversation import ConversationTurn

MAX_TURNS = 10


class SessionMemoryStore(Protocol):
    """Keyed store of recent conversation turns."""

    def append(self, session_id: str, turn: ConversationTurn) -> None: ...

    def get_history(self, session_id: str) -> list[ConversationTurn]: ...

    def save_exchange(self, session_id: str, question: str, answer: str) -> None: ...

    def clear(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Process-local session store keeping the last ``max_turns`` turns."""

    def __init__(self, max_turns: int = MAX_TURNS) -> None:
        self.max_turns = max_turns
        self._sessions: dict[str, list[ConversationTurn]] = {}
        self._lock = threading.Lock()

    def append(self, session_id: str, turn: ConversationTurn) -> None:
        with self._lock:
            history = self._sessions.setdefault(session_id, [])
            history.append(turn)
            if len(history) > self.max_turns:
                del history[: len(history) - self.max_turns]

    def get_history(self, session_id: str) -> list[ConversationTurn]:
        """Return a copy of the session's turns, oldest first."""
        with self._lock:
            return list(self._sessions.get(session_id, ()))

    def save_exchange(self, session_id: str, question: str, answer: str) -> None:
        self.append(session_id, ConversationTurn(role="user", content=question))
        self.append(session_id, ConversationTurn(role="assistant", content=answer))

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
