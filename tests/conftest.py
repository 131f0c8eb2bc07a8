"""Shared fixtures for the Survey Portal API tests."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from survey_portal_api.app.core.config import Settings
from survey_portal_api.app.core.errors import UpstreamError
from survey_portal_api.app.core.store import JsonFileRecordStore
from survey_portal_api.app.main import create_app
from survey_portal_api.app.services.auth_service import AuthService
from survey_portal_api.app.services.avatar_service import AvatarLookup


class FakeAvatarLookup(AvatarLookup):
    """In‑memory ``AvatarLookup`` that records every call."""

    def __init__(
        self,
        ids: Optional[Dict[str, int]] = None,
        thumbnails: Optional[Dict[int, str]] = None,
        fail_on: Tuple[str, ...] = (),
    ) -> None:
        self.ids = ids or {}
        self.thumbnails = thumbnails or {}
        self.fail_on = fail_on
        self.calls: List[Tuple[str, object]] = []

    def resolve_id(self, username: str) -> Optional[int]:
        self.calls.append(("resolve_id", username))
        if "resolve_id" in self.fail_on:
            raise UpstreamError("Could not query the avatar service", detail="boom")
        return self.ids.get(username)

    def resolve_thumbnail(self, user_id: int) -> Optional[str]:
        self.calls.append(("resolve_thumbnail", user_id))
        if "resolve_thumbnail" in self.fail_on:
            raise UpstreamError("Could not fetch the avatar thumbnail", detail="boom")
        return self.thumbnails.get(user_id)


# ---------------------------------------------------------------------------
# Fixture: settings and store rooted in a temporary data directory
# ---------------------------------------------------------------------------

@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(
        data_dir=str(data_dir),
        session_secret="test-secret",
        session_ttl_seconds=3600,
        auth_rate_limit=100,
        auth_rate_window_seconds=60,
        # Keep hashing fast; the format is the same as in production.
        password_hash_iterations=1_000,
        cors_origins="*",
    )


@pytest.fixture
def store(data_dir: Path) -> JsonFileRecordStore:
    return JsonFileRecordStore(data_dir)


@pytest.fixture
def auth_service(store: JsonFileRecordStore) -> AuthService:
    return AuthService(store, password_iterations=1_000)


@pytest.fixture
def avatar_lookup() -> FakeAvatarLookup:
    return FakeAvatarLookup(
        ids={"builderman": 156},
        thumbnails={156: "https://tr.rbxcdn.com/builderman.png"},
    )


# ---------------------------------------------------------------------------
# Fixture: HTTP client over a fully wired app
# ---------------------------------------------------------------------------

@pytest.fixture
def client(settings: Settings, store: JsonFileRecordStore, avatar_lookup: FakeAvatarLookup):
    app = create_app(settings, store=store, avatar_lookup=avatar_lookup)
    with TestClient(app) as test_client:
        yield test_client
