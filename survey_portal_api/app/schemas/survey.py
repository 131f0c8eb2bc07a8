"""Pydantic models for survey responses, login records and the export."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class LoginRecord(BaseModel):
    """A login audit entry.

    Only these three fields exist; anything else a client sends,
    passwords in particular, is dropped before persisting.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    username: str = ""
    avatar_url: str = Field("", alias="avatarUrl")
    timestamp: str


class ExportRead(BaseModel):
    responses: List[Dict[str, Any]]
    logins: List[Dict[str, Any]]


class OkRead(BaseModel):
    ok: bool = True


class AvatarRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")
