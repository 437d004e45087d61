"""Request guards for the JSON API.

The token comes from the ``token`` cookie or an ``Authorization: Bearer``
header; the decoded Identity is stored on ``flask.g.identity``.
"""
from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from ..core.constants import TOKEN_COOKIE_NAME
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..users.model import Identity
from ..users.tokens import decode_token


def _read_token() -> str:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(TOKEN_COOKIE_NAME, "")


def current_identity() -> Identity:
    identity = g.get("identity")
    if identity is None:
        token = _read_token()
        if not token:
            raise AuthenticationError("Not authenticated")
        identity = decode_token(token, secret=current_app.config["JWT_SECRET"])
        g.identity = identity
    return identity


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_identity()
        return view(*args, **kwargs)

    return wrapper


def leader_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_identity().can_manage_team():
            raise AuthorizationError("Access denied. Admin only.")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_identity().is_admin():
            raise AuthorizationError("Access denied. Admin only.")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
