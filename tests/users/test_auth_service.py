from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from src.farm_hr.farm_hr.core.enums import Role, SuperRole
from src.farm_hr.farm_hr.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.farm_hr.farm_hr.users.model import Identity, User
from src.farm_hr.farm_hr.users.service import AuthService, UserService
from src.farm_hr.farm_hr.users.tokens import decode_token, issue_token

SECRET = "test-secret-key-with-at-least-32-bytes"


class FakeUsersRepo:
    def __init__(self):
        self.users: dict[int, User] = {}

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_identifier(self, identifier):
        return next((u for u in self.users.values() if identifier in (u.username, u.email)), None)

    def exists_with(self, *, username, email, phone):
        return any(
            u.username == username or (email and u.email == email) or u.phone == phone for u in self.users.values()
        )

    def create_user(self, *, name, email, phone, username, password_hash, role):
        user_id = len(self.users) + 1
        self.users[user_id] = User(
            user_id=user_id,
            name=name,
            email=email,
            phone=phone,
            username=username,
            password_hash=password_hash,
            role=role,
        )
        return user_id

    def update_user(self, *, user_id, name, email, phone, username, role):
        self.users[user_id] = replace(self.users[user_id], name=name, email=email, phone=phone, username=username, role=role)
        return True

    def list_all(self):
        return list(self.users.values())

    def list_ids(self):
        return list(self.users)


def _register(svc, **overrides):
    data = dict(
        name="An Nguyen",
        email="an@farm.test",
        phone="0901",
        username="an",
        password="secret1",
        confirm_password="secret1",
    )
    data.update(overrides)
    return svc.register(**data)


def test_register_hashes_password_and_defaults_to_member():
    repo = FakeUsersRepo()
    user = _register(AuthService(repo))

    assert user.role == Role.TEAM_MEMBER
    assert user.password_hash != "secret1"
    assert "password_hash" not in user.to_public()


def test_register_validation():
    svc = AuthService(FakeUsersRepo())

    with pytest.raises(ValidationError, match="Passwords do not match"):
        _register(svc, confirm_password="other")
    with pytest.raises(ValidationError):
        _register(svc, password="123", confirm_password="123")
    with pytest.raises(ValidationError):
        _register(svc, role="Owner")

    _register(svc)
    with pytest.raises(ConflictError):
        _register(svc, email="other@farm.test", phone="0999")


def test_authenticate_by_username_or_email():
    svc = AuthService(FakeUsersRepo())
    _register(svc)

    assert svc.authenticate("an", "secret1").username == "an"
    assert svc.authenticate("an@farm.test", "secret1").username == "an"
    with pytest.raises(AuthenticationError):
        svc.authenticate("an", "wrong-password")
    with pytest.raises(AuthenticationError):
        svc.authenticate("nobody", "secret1")


def test_team_management_requires_leader():
    repo = FakeUsersRepo()
    user = _register(AuthService(repo))
    users = UserService(repo)
    member = Identity.of(user)
    leader = Identity(user_id=99, role=Role.TEAM_LEADER)

    with pytest.raises(AuthorizationError):
        users.list_users(member)

    updated = users.update_user(leader, user.user_id, name="An N.", role="Team Leader")
    assert updated.name == "An N."
    assert updated.role == Role.TEAM_LEADER
    assert updated.phone == "0901"

    with pytest.raises(NotFoundError):
        users.get_user(leader, 12345)


def test_token_roundtrip_carries_roles():
    identity = Identity(user_id=5, role=Role.TEAM_LEADER, super_role=SuperRole.ADMIN)

    decoded = decode_token(issue_token(identity, secret=SECRET, ttl_minutes=60), secret=SECRET)

    assert decoded == identity
    assert decoded.is_admin()
    assert decoded.can_manage_team()


def test_expired_or_forged_tokens_are_rejected():
    identity = Identity(user_id=5, role=Role.TEAM_MEMBER)
    expired = issue_token(
        identity,
        secret=SECRET,
        ttl_minutes=60,
        now=datetime.now(timezone.utc) - timedelta(hours=2),
    )

    with pytest.raises(AuthenticationError):
        decode_token(expired, secret=SECRET)
    with pytest.raises(AuthenticationError):
        decode_token(issue_token(identity, secret="another-secret-key-for-tests-0000", ttl_minutes=60), secret=SECRET)
    with pytest.raises(AuthenticationError):
        decode_token("not-a-token", secret=SECRET)


def test_self_registration_cannot_pick_a_leader_role():
    repo = FakeUsersRepo()
    svc = AuthService(repo)

    with pytest.raises(AuthorizationError):
        _register(svc, role="Team Leader")
    assert repo.users == {}

    assert _register(svc, role="Team Member").role == Role.TEAM_MEMBER
