"""Tests authentification et politique des rôles / Authentication and role policy tests."""

import pytest

from treatment_dispatch.api.deps import user_from_token
from treatment_dispatch.models.user import User, UserRole
from treatment_dispatch.utils.auth import (
    ROLE_POLICY,
    create_access_token,
    decode_token,
    hash_password,
    is_allowed,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("winter-is-coming")
    assert hashed != "winter-is-coming"
    assert verify_password("winter-is-coming", hashed)
    assert not verify_password("summer", hashed)


def test_driver_permissions():
    assert is_allowed(UserRole.DRIVER, "tickets", "read")
    assert is_allowed(UserRole.DRIVER, "tickets", "transition")
    assert is_allowed(UserRole.DRIVER, "treatments", "create")
    assert not is_allowed(UserRole.DRIVER, "tickets", "create")
    assert not is_allowed(UserRole.DRIVER, "trucks", "delete")
    assert not is_allowed(UserRole.DRIVER, "materials", "update")


def test_dispatcher_cannot_manage_users():
    assert is_allowed(UserRole.DISPATCHER, "tickets", "create")
    assert not is_allowed(UserRole.DISPATCHER, "users", "create")
    assert not is_allowed(UserRole.DISPATCHER, "dashboard", "statewide")


def test_admin_allowed_everywhere():
    for resource, action in ROLE_POLICY:
        assert is_allowed(UserRole.ADMIN, resource, action)


def test_unknown_operation_denied():
    assert not is_allowed(UserRole.ADMIN, "reactor", "launch")


def test_token_roundtrip():
    user = User(id=7, email="d@test.io", role=UserRole.DISPATCHER, tmc_id=3, name="Dee")
    payload = decode_token(create_access_token(user))
    assert payload["sub"] == "7"
    assert payload["type"] == "access"
    assert payload["role"] == "dispatcher"
    assert payload["tmc_id"] == 3
    assert payload["email"] == "d@test.io"


def test_invalid_token():
    assert decode_token("not-a-token") is None


@pytest.mark.asyncio
async def test_token_of_deleted_user_rejected(session, ids):
    user = await session.get(User, ids["driver"])
    token = create_access_token(user)
    assert (await user_from_token(session, token)).id == ids["driver"]

    await session.delete(user)
    await session.commit()

    assert await user_from_token(session, token) is None
    assert await user_from_token(session, "") is None
