"""
Business logic for local user accounts.

``AuthService`` registers and authenticates users against the users
collection of a ``RecordStore``.  Usernames are unique regardless of
case but keep the casing they were registered with.  Login failures
never reveal whether the username exists.

Sessions are not handled here: the service returns a ``UserIdentity``
and the HTTP layer decides what to do with it.
"""

import logging
import re
import time
from datetime import datetime, timezone
from typing import List, Optional

from ..core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..core.security import DEFAULT_ITERATIONS, hash_password, verify_password
from ..core.store import USERS, Record, RecordStore
from ..schemas.user import User, UserIdentity

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_-]{2,32}$")
MIN_USERNAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6

INVALID_CREDENTIALS = "Invalid username or password"


def _find_by_username(records: List[Record], username: str) -> Optional[Record]:
    wanted = username.lower()
    for record in records:
        if str(record.get("username", "")).lower() == wanted:
            return record
    return None


def _find_by_id(records: List[Record], user_id: int) -> Optional[Record]:
    for record in records:
        if record.get("id") == user_id:
            return record
    return None


def _next_user_id(records: List[Record]) -> int:
    """Creation time in milliseconds, bumped past any id already taken."""
    candidate = int(time.time() * 1000)
    taken = {r.get("id") for r in records}
    if candidate in taken:
        candidate = max(i for i in taken if isinstance(i, int)) + 1
    return candidate


class AuthService:
    """Сервис учётных записей: регистрация, вход, аватар, текущий пользователь."""

    def __init__(self, store: RecordStore, password_iterations: int = DEFAULT_ITERATIONS) -> None:
        self.store = store
        self.password_iterations = password_iterations

    def register(self, username: str, password: str) -> UserIdentity:
        """Create a new user and return its identity.

        Raises ``ValidationError`` for a malformed username or a short
        password and ``ConflictError`` if the username is taken under
        case‑insensitive comparison.
        """
        username = (username or "").strip()
        password = password or ""
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError("Invalid username")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not USERNAME_RE.match(username):
            raise ValidationError("Username may only contain letters, numbers, _ and -")

        # Hashing is slow on purpose; keep it outside the collection lock.
        password_hash = hash_password(password, self.password_iterations)

        def _insert(records: List[Record]) -> User:
            if _find_by_username(records, username) is not None:
                raise ConflictError("Username already exists")
            user = User(
                id=_next_user_id(records),
                username=username,
                password_hash=password_hash,
                avatar_url="",
                created_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            )
            records.append(user.to_record())
            return user

        user = self.store.update(USERS, _insert)
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return UserIdentity.from_user(user)

    def login(self, username: str, password: str) -> UserIdentity:
        """Check credentials and return the stored identity.

        Unknown usernames and wrong passwords raise the same
        ``AuthError`` so callers cannot enumerate accounts.
        """
        username = (username or "").strip()
        password = password or ""
        if not username or not password:
            raise ValidationError("Incomplete credentials")

        record = _find_by_username(self.store.load(USERS), username)
        if record is None or not verify_password(password, str(record.get("passwordHash", ""))):
            logger.warning("Failed login attempt for %s", username)
            raise AuthError(INVALID_CREDENTIALS)
        user = User.model_validate(record)
        logger.info("User %s logged in", user.username)
        return UserIdentity.from_user(user)

    def update_avatar(self, user_id: Optional[int], avatar_url: Optional[str]) -> UserIdentity:
        """Overwrite the avatar URL of the session's user.

        The URL is stored as given; it is not checked to point at an
        image.
        """
        if user_id is None:
            raise AuthError("Not authenticated")

        def _set_avatar(records: List[Record]) -> User:
            record = _find_by_id(records, user_id)
            if record is None:
                raise NotFoundError("User not found")
            record["avatarUrl"] = avatar_url or ""
            return User.model_validate(record)

        user = self.store.update(USERS, _set_avatar)
        logger.info("Updated avatar for user %s", user.id)
        return UserIdentity.from_user(user)

    def current_user(self, user_id: Optional[int]) -> Optional[UserIdentity]:
        """Return the identity for ``user_id`` or ``None`` if anonymous."""
        if user_id is None:
            return None
        record = _find_by_id(self.store.load(USERS), user_id)
        if record is None:
            return None
        return UserIdentity.from_user(User.model_validate(record))
