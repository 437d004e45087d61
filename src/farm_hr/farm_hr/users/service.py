from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import Identity, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _parse_role(value: Optional[str], *, default: Role) -> Role:
    if not value:
        return default
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Invalid role")


class AuthService:
    """Use case: register and authenticate (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(
        self,
        *,
        name: str,
        email: Optional[str],
        phone: str,
        username: str,
        password: str,
        confirm_password: str,
        role: Optional[str] = None,
    ) -> User:
        name = require_non_empty(name, "Name")
        phone = require_non_empty(phone, "Phone")
        username = require_non_empty(username, "Username")
        require_non_empty(password, "Password")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        email = optional_text(email)

        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        # leaders are promoted through the admin user update, never self-registered
        if _parse_role(role, default=Role.TEAM_MEMBER) != Role.TEAM_MEMBER:
            raise AuthorizationError("Only Team Member accounts can self-register")

        if self._users.exists_with(username=username, email=email, phone=phone):
            raise ConflictError("Username, email or phone already in use")

        user_id = self._users.create_user(
            name=name,
            email=email,
            phone=phone,
            username=username,
            password_hash=generate_password_hash(password),
            role=Role.TEAM_MEMBER,
        )
        logger.info("registered user %s (%s)", user_id, username)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def authenticate(self, identifier: str, password: str) -> User:
        user = self._users.get_by_identifier((identifier or "").strip())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return user


class UserService:
    """Use case: profile lookup and team-leader user management."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_current(self, identity: Identity) -> User:
        user = self._users.get_by_id(identity.user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(self, identity: Identity) -> Sequence[User]:
        if not identity.can_manage_team():
            raise AuthorizationError("Access denied. Admin only.")
        return self._users.list_all()

    def get_user(self, identity: Identity, user_id: int) -> User:
        if not identity.can_manage_team():
            raise AuthorizationError("Access denied. Admin only.")
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user(
        self,
        identity: Identity,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        username: Optional[str] = None,
        role: Optional[str] = None,
    ) -> User:
        current = self.get_user(identity, user_id)

        # absent fields keep their stored value
        self._users.update_user(
            user_id=current.user_id,
            name=require_non_empty(name, "Name") if name is not None else current.name,
            email=optional_text(email) if email is not None else current.email,
            phone=require_non_empty(phone, "Phone") if phone is not None else current.phone,
            username=require_non_empty(username, "Username") if username is not None else current.username,
            role=_parse_role(role, default=current.role),
        )
        return self.get_user(identity, user_id)
