"""Owner-or-admin predicate and the error taxonomy."""

import pytest

from ideaboard.config import Settings
from ideaboard.errors import Forbidden, NotAuthenticated
from ideaboard.models.user import Role
from ideaboard.services.passwords import hash_password, verify_password
from ideaboard.services.permissions import (
    Principal,
    ensure_admin,
    ensure_authenticated,
    ensure_owner_or_admin,
)

OWNER = Principal(id=1, role=Role.USER, email="owner@example.com")
STRANGER = Principal(id=2, role=Role.USER, email="stranger@example.com")
ADMIN = Principal(id=3, role=Role.ADMIN, email="boss@example.com")


def test_owner_allowed():
    assert ensure_owner_or_admin(OWNER, owner_id=1) is OWNER


def test_admin_allowed_on_anything():
    assert ensure_owner_or_admin(ADMIN, owner_id=1) is ADMIN


def test_stranger_forbidden():
    with pytest.raises(Forbidden) as excinfo:
        ensure_owner_or_admin(STRANGER, owner_id=1, message="nope")
    assert excinfo.value.message == "nope"
    assert excinfo.value.status_code == 403


def test_missing_principal_is_unauthenticated():
    with pytest.raises(NotAuthenticated):
        ensure_owner_or_admin(None, owner_id=1)
    with pytest.raises(NotAuthenticated):
        ensure_authenticated(None)
    with pytest.raises(NotAuthenticated):
        ensure_admin(None)


def test_admin_check():
    assert ensure_admin(ADMIN) is ADMIN
    with pytest.raises(Forbidden):
        ensure_admin(OWNER)


def test_password_roundtrip():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret", "not-a-bcrypt-hash")


def test_cors_origins_from_comma_string():
    settings = Settings(CORS_ORIGINS="http://a.example.com, http://b.example.com")
    assert settings.CORS_ORIGINS == ["http://a.example.com", "http://b.example.com"]
