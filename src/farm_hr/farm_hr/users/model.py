from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role, SuperRole


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object, no DB access code here.
    """

    user_id: int
    name: str
    email: Optional[str]
    phone: str
    username: str
    password_hash: str
    role: Role
    super_role: Optional[SuperRole] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "username": self.username,
            "role": self.role.value,
            "super_role": self.super_role.value if self.super_role else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, decoded from the session token."""

    user_id: int
    role: Role
    super_role: Optional[SuperRole] = None

    def is_admin(self) -> bool:
        return self.super_role == SuperRole.ADMIN

    def can_manage_team(self) -> bool:
        return self.role == Role.TEAM_LEADER or self.is_admin()

    @classmethod
    def of(cls, user: User) -> "Identity":
        return cls(user_id=user.user_id, role=user.role, super_role=user.super_role)
