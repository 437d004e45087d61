from __future__ import annotations

import logging

from flask import Flask, jsonify, make_response

from ..common.guards import current_identity, json_body, leader_required, login_required
from ..core.constants import TOKEN_COOKIE_NAME
from ..container import Container
from .model import Identity
from .tokens import issue_token

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        user = container.auth_service.register(
            name=data.get("name", ""),
            email=data.get("email"),
            phone=data.get("phone", ""),
            username=data.get("username", ""),
            password=data.get("password", ""),
            confirm_password=data.get("confirmPassword", data.get("confirm_password", "")),
            role=data.get("role"),
        )
        return jsonify({"message": "User registered successfully", "user": user.to_public()}), 201

    @app.route("/api/v1/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("identifier", ""), data.get("password", ""))

        # Absent rows for today and today's work-off usage are settled on every login.
        container.daily_sweep.run()

        ttl_minutes = int(app.config["JWT_TTL_MINUTES"])
        token = issue_token(Identity.of(user), secret=app.config["JWT_SECRET"], ttl_minutes=ttl_minutes)

        resp = make_response(jsonify({"message": "Login successful"}), 200)
        resp.set_cookie(
            TOKEN_COOKIE_NAME,
            token,
            httponly=True,
            secure=bool(app.config.get("COOKIE_SECURE", False)),
            samesite="Strict",
            max_age=ttl_minutes * 60,
        )
        return resp

    @app.route("/api/v1/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        resp = make_response(jsonify({"message": "Logged out"}), 200)
        resp.delete_cookie(TOKEN_COOKIE_NAME)
        return resp

    @app.route("/api/v1/protected", methods=["GET"], endpoint="protected")
    @login_required
    def protected():
        return jsonify({"message": "Protected route accessed", "user_id": current_identity().user_id})

    @app.route("/api/v1/admin/protected", methods=["GET"], endpoint="admin_protected")
    @leader_required
    def admin_protected():
        return jsonify({"message": "Admin protected route accessed"})

    @app.route("/api/v1/users/me", methods=["GET"], endpoint="current_user")
    @login_required
    def current_user():
        user = container.user_service.get_current(current_identity())
        return jsonify({"user": user.to_public()})

    @app.route("/api/v1/admin/users", methods=["GET"], endpoint="admin_users")
    @leader_required
    def admin_users():
        users = container.user_service.list_users(current_identity())
        return jsonify({"users": [u.to_public() for u in users]})

    @app.route("/api/v1/admin/users/<int:user_id>", methods=["GET"], endpoint="admin_user_detail")
    @leader_required
    def admin_user_detail(user_id: int):
        user = container.user_service.get_user(current_identity(), user_id)
        return jsonify({"user": user.to_public()})

    @app.route("/api/v1/admin/users/<int:user_id>", methods=["PUT"], endpoint="admin_user_update")
    @leader_required
    def admin_user_update(user_id: int):
        data = json_body()
        user = container.user_service.update_user(
            current_identity(),
            user_id,
            name=data.get("name"),
            email=data.get("email"),
            phone=data.get("phone"),
            username=data.get("username"),
            role=data.get("role"),
        )
        logger.info("user %s updated by %s", user_id, current_identity().user_id)
        return jsonify({"user": user.to_public()})
