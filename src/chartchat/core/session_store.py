from __future__ import annotations

from collections.abc import Callable
from threading import RLock
from typing import Generic, TypeVar

T = TypeVar("T")


class InMemorySessionStore(Generic[T]):
    def __init__(self):
        self._lock = RLock()
        self._sessions: dict[str, T] = {}

    def get(self, session_id: str) -> T | None:
        with self._lock:
            return self._sessions.get(session_id)

    def get_or_create(self, session_id: str, factory: Callable[[str], T]) -> T:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = factory(session_id)
                self._sessions[session_id] = session
            return session

    def pop(self, session_id: str) -> T | None:
        with self._lock:
            return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
