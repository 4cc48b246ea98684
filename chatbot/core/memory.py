"""In-process conversation memory.

Sessions live for the lifetime of the process only. Nothing is persisted and
nothing is evicted; restart the server to clear it.
"""

from __future__ import annotations

import secrets
import string
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


_BASE36 = string.digits + string.ascii_lowercase


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_session_id() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def generate_message_id() -> str:
    return f"msg_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


class Exchange(BaseModel):
    """One user turn and the assistant's reply."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=generate_message_id)
    timestamp: str = Field(default_factory=utc_now_iso)
    user_message: str = Field(..., alias="userMessage")
    bot_response: str = Field(..., alias="botResponse")
    session_id: str = Field(..., alias="sessionId")

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class SessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, List[Exchange]] = {}

    def get(self, session_id: str) -> List[Exchange]:
        return list(self._sessions.get(session_id, ()))

    def append(self, session_id: str, exchange: Exchange) -> None:
        if exchange.session_id != session_id:
            raise ValueError(
                f"Exchange belongs to session {exchange.session_id!r}, not {session_id!r}"
            )
        self._sessions.setdefault(session_id, []).append(exchange)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
