"""
Server-side session storage.

The signed session cookie only carries an opaque session identifier;
the identity bound to it lives in a ``SessionStore``.  ``SessionService``
is created once per application in ``create_app`` and handed to request
handlers through a FastAPI dependency (see ``core.security``), so tests
and alternative deployments can swap the store without touching any
handler.
"""

import secrets
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional, Tuple


@dataclass
class SessionData:
    """Identity bound to a session."""

    user_id: int
    user_name: str


class SessionStore:
    """Interface for key/value session backends."""

    def get(self, sid: str) -> Optional[dict]:
        raise NotImplementedError

    def set(self, sid: str, data: dict, ttl: int) -> None:
        raise NotImplementedError

    def delete(self, sid: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Process-local store with per-session expiry.

    Expired sessions are evicted when they are read, and all expired
    sessions are swept whenever a new one is stored.  The clock is
    injectable so expiry can be tested without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._data: Dict[str, Tuple[float, dict]] = {}

    def get(self, sid: str) -> Optional[dict]:
        item = self._data.get(sid)
        if item is None:
            return None
        expires_at, data = item
        if expires_at <= self._clock():
            self._data.pop(sid, None)
            return None
        return dict(data)

    def set(self, sid: str, data: dict, ttl: int) -> None:
        now = self._clock()
        self._sweep(now)
        self._data[sid] = (now + ttl, dict(data))

    def delete(self, sid: str) -> None:
        self._data.pop(sid, None)

    def _sweep(self, now: float) -> None:
        expired = [sid for sid, (expires_at, _) in self._data.items() if expires_at <= now]
        for sid in expired:
            del self._data[sid]

    def __len__(self) -> int:
        return len(self._data)


class SessionService:
    """Create, resolve and destroy sessions on top of a ``SessionStore``."""

    def __init__(self, store: SessionStore, lifetime: int) -> None:
        self.store = store
        self.lifetime = lifetime

    def create(self, user_id: int, user_name: str) -> str:
        """Bind a fresh session identifier to the given user."""
        sid = secrets.token_urlsafe(32)
        self.store.set(sid, asdict(SessionData(user_id, user_name)), self.lifetime)
        return sid

    def get(self, sid: Optional[str]) -> Optional[SessionData]:
        if not sid:
            return None
        data = self.store.get(sid)
        if data is None:
            return None
        return SessionData(**data)

    def destroy(self, sid: Optional[str]) -> None:
        """Forget a session.  Unknown or missing identifiers are ignored."""
        if sid:
            self.store.delete(sid)
