from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.enums import Role, SuperRole
from ..core.exceptions import AuthenticationError
from .model import Identity

JWT_ALGORITHM = "HS256"


def issue_token(identity: Identity, *, secret: str, ttl_minutes: int, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "id": identity.user_id,
        "role": identity.role.value,
        "super_role": identity.super_role.value if identity.super_role else None,
        "iat": now,
        "exp": now + timedelta(minutes=int(ttl_minutes)),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, *, secret: str) -> Identity:
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Invalid or expired token")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token")

    try:
        return Identity(
            user_id=int(payload["id"]),
            role=Role(payload["role"]),
            super_role=SuperRole(payload["super_role"]) if payload.get("super_role") else None,
        )
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")
