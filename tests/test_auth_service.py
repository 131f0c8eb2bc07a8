"""Registration, login and avatar tests against the service layer."""

from __future__ import annotations

import pytest

from survey_portal_api.app.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from survey_portal_api.app.core.store import USERS, JsonFileRecordStore
from survey_portal_api.app.services.auth_service import AuthService


def test_register_and_login(auth_service: AuthService) -> None:
    identity = auth_service.register("Ana_01", "secret1")
    assert identity.username == "Ana_01"
    assert isinstance(identity.id, int)

    logged = auth_service.login("Ana_01", "secret1")
    assert logged.id == identity.id
    assert logged.username == "Ana_01"


def test_register_on_empty_store(store: JsonFileRecordStore, auth_service: AuthService) -> None:
    assert store.load(USERS) == []
    auth_service.register("first", "secret1")
    assert len(store.load(USERS)) == 1


def test_register_duplicate_username_any_case(auth_service: AuthService) -> None:
    auth_service.register("Ana_01", "secret1")
    with pytest.raises(ConflictError):
        auth_service.register("ana_01", "other1")
    with pytest.raises(ConflictError):
        auth_service.register("ANA_01", "other1")


def test_login_keeps_stored_casing(auth_service: AuthService) -> None:
    auth_service.register("MixedCase", "secret1")
    assert auth_service.login("mixedcase", "secret1").username == "MixedCase"


def test_password_is_hashed(store: JsonFileRecordStore, auth_service: AuthService) -> None:
    auth_service.register("hashme", "plaintext1")
    record = store.load(USERS)[0]
    assert record["passwordHash"] != "plaintext1"
    assert "plaintext1" not in record["passwordHash"]
    assert "password" not in record


def test_stored_record_fields(store: JsonFileRecordStore, auth_service: AuthService) -> None:
    auth_service.register("fields", "secret1")
    record = store.load(USERS)[0]
    assert set(record) == {"id", "username", "passwordHash", "avatarUrl", "createdAt"}
    assert record["avatarUrl"] == ""
    assert record["createdAt"].endswith("Z")


def test_wrong_password_and_unknown_user_look_the_same(auth_service: AuthService) -> None:
    auth_service.register("Ana_01", "secret1")
    with pytest.raises(AuthError) as wrong:
        auth_service.login("Ana_01", "wrong")
    with pytest.raises(AuthError) as unknown:
        auth_service.login("nobody", "secret1")
    assert wrong.value.message == unknown.value.message


@pytest.mark.parametrize(
    "username, password, message",
    [
        ("a", "secret1", "Invalid username"),
        ("", "secret1", "Invalid username"),
        ("valid", "12345", "Password must be at least 6 characters"),
        ("bad name", "secret1", "Username may only contain letters, numbers, _ and -"),
        ("x" * 33, "secret1", "Username may only contain letters, numbers, _ and -"),
        ("ñandú", "secret1", "Username may only contain letters, numbers, _ and -"),
    ],
)
def test_register_validation(auth_service: AuthService, username: str, password: str, message: str) -> None:
    with pytest.raises(ValidationError) as exc:
        auth_service.register(username, password)
    assert exc.value.message == message


def test_register_strips_whitespace(auth_service: AuthService) -> None:
    assert auth_service.register("  spaced  ", "secret1").username == "spaced"


def test_login_requires_both_fields(auth_service: AuthService) -> None:
    with pytest.raises(ValidationError):
        auth_service.login("", "secret1")
    with pytest.raises(ValidationError):
        auth_service.login("someone", "")


def test_user_ids_are_unique(auth_service: AuthService) -> None:
    ids = {auth_service.register(f"user{i}", "secret1").id for i in range(5)}
    assert len(ids) == 5


def test_update_avatar(store: JsonFileRecordStore, auth_service: AuthService) -> None:
    identity = auth_service.register("avatar", "secret1")
    updated = auth_service.update_avatar(identity.id, "https://example.com/me.png")
    assert updated.avatar_url == "https://example.com/me.png"
    assert store.load(USERS)[0]["avatarUrl"] == "https://example.com/me.png"
    assert auth_service.login("avatar", "secret1").avatar_url == "https://example.com/me.png"


def test_update_avatar_requires_session(auth_service: AuthService) -> None:
    with pytest.raises(AuthError):
        auth_service.update_avatar(None, "https://example.com/me.png")


def test_update_avatar_unknown_user(auth_service: AuthService) -> None:
    with pytest.raises(NotFoundError):
        auth_service.update_avatar(12345, "https://example.com/me.png")


def test_current_user(auth_service: AuthService) -> None:
    identity = auth_service.register("current", "secret1")
    assert auth_service.current_user(identity.id) == identity
    assert auth_service.current_user(None) is None
    assert auth_service.current_user(identity.id + 1) is None
