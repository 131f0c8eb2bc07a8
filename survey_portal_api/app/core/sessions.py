"""
Server‑side sessions and the FastAPI dependencies that read them.

A session is an opaque token associated with a user id and an expiry.
The token travels to the browser inside a signed cookie; everything
else stays in the ``SessionStore``.  A request is anonymous when it has
no cookie, a cookie with a bad signature, an unknown token or an
expired one.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request, Response

from .config import Settings
from .security import new_session_token, sign_session_token, unsign_session_token

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    token: str
    user_id: int
    expires_at: float


class SessionStore:
    """In‑memory mapping from session token to user id with expiry."""

    def __init__(self, ttl_seconds: int) -> None:
        self.ttl_seconds = ttl_seconds
        self._sessions: Dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> SessionRecord:
        """Open a session for ``user_id``; expired sessions are dropped first."""
        now = time.time()
        record = SessionRecord(
            token=new_session_token(),
            user_id=user_id,
            expires_at=now + self.ttl_seconds,
        )
        with self._lock:
            self._purge_locked(now)
            self._sessions[record.token] = record
        return record

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, token: str) -> Optional[SessionRecord]:
        """Return the live session for ``token``; expired ones are dropped."""
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if record.expires_at <= time.time():
                del self._sessions[token]
                return None
            return record

    def delete(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_locked(time.time())

    def _purge_locked(self, now: float) -> int:
        expired = [t for t, r in self._sessions.items() if r.expires_at <= now]
        for token in expired:
            del self._sessions[token]
        return len(expired)


class SessionManager:
    """Glue between the session store and the session cookie."""

    def __init__(self, store: SessionStore, settings: Settings) -> None:
        self.store = store
        self.secret = settings.session_secret
        self.cookie_name = settings.session_cookie_name
        self.cookie_secure = settings.session_cookie_secure

    def current(self, request: Request) -> Optional[SessionRecord]:
        value = request.cookies.get(self.cookie_name)
        if not value:
            return None
        token = unsign_session_token(value, self.secret)
        if token is None:
            logger.debug("Ignoring session cookie with an invalid signature")
            return None
        return self.store.get(token)

    def start(self, request: Request, response: Response, user_id: int) -> SessionRecord:
        """Open a session for ``user_id``, replacing any current one."""
        previous = self.current(request)
        if previous is not None:
            self.store.delete(previous.token)
        record = self.store.create(user_id)
        response.set_cookie(
            key=self.cookie_name,
            value=sign_session_token(record.token, self.secret),
            max_age=self.store.ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
        )
        return record

    def end(self, request: Request, response: Response) -> None:
        record = self.current(request)
        if record is not None:
            self.store.delete(record.token)
        response.delete_cookie(key=self.cookie_name, httponly=True, samesite="lax")


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_current_user_id(request: Request) -> Optional[int]:
    """Dependency returning the session's user id, or ``None`` when anonymous."""
    record = get_session_manager(request).current(request)
    return record.user_id if record else None
