from typing import Dict, Optional

from .interfaces import Session, SessionKey, SessionStore


class MemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self._sessions: Dict[SessionKey, Session] = {}

    def get(self, key: SessionKey) -> Optional[Session]:
        return self._sessions.get(key)

    def put(self, key: SessionKey, session: Session) -> None:
        self._sessions[key] = session

    def remove(self, key: SessionKey) -> None:
        self._sessions.pop(key, None)
