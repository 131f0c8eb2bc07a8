"""
Pydantic models for user data.

``User`` mirrors a record of the users collection, including the
password hash, and is only used inside the service layer.  The API
returns ``IdentityRead`` / ``MeRead``, which never carry the hash.
Persisted and wire field names are camelCase (``avatarUrl``); Python
code uses snake_case through aliases.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """A stored user record."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    password_hash: str = Field(..., alias="passwordHash")
    avatar_url: str = Field("", alias="avatarUrl")
    created_at: str = Field(..., alias="createdAt")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class UserIdentity(BaseModel):
    """What the rest of the app knows about an authenticated user."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    avatar_url: str = Field("", alias="avatarUrl")

    @classmethod
    def from_user(cls, user: User) -> "UserIdentity":
        return cls(id=user.id, username=user.username, avatar_url=user.avatar_url or "")


class Credentials(BaseModel):
    """Body of ``/register`` and ``/login``.

    Both fields default to empty strings so that missing values reach
    the service and are reported with a meaningful message.  Numbers
    are accepted and read as their decimal text, the way a form would
    send them; lists and objects are still malformed.
    """

    username: str = ""
    password: str = ""

    @field_validator("username", "password", mode="before")
    @classmethod
    def _numbers_as_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class AvatarUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    avatar_url: Optional[str] = Field(None, alias="avatarUrl")


class IdentityRead(BaseModel):
    """Response of a successful register or login."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    id: int
    username: str
    avatar_url: str = Field("", alias="avatarUrl")


class MeRead(BaseModel):
    """Current session state; only ``logged`` is set for anonymous callers."""

    model_config = ConfigDict(populate_by_name=True)

    logged: bool
    id: Optional[int] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")
