from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_identifier(self, identifier: str) -> Optional[User]:
        """Look a user up by username or email."""
        raise NotImplementedError

    def exists_with(self, *, username: str, email: Optional[str], phone: str) -> bool:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: Optional[str],
        phone: str,
        username: str,
        password_hash: str,
        role: Role,
    ) -> int:
        raise NotImplementedError

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: Optional[str],
        phone: str,
        username: str,
        role: Role,
    ) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_ids(self) -> Sequence[int]:
        raise NotImplementedError
