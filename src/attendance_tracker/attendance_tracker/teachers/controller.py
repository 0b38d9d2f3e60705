from __future__ import annotations

from flask import Flask, g

from ..common.web import json_body, ok, pick, token_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth_required = token_required(container)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        data = json_body()
        result = container.auth_service.authenticate(pick(data, "email", default=""), pick(data, "password", default=""))
        classes = container.class_service.list_classes(result.teacher.teacher_id)
        return ok(
            message="Login successful",
            token=result.token,
            teacher=dict(result.teacher.to_public_dict(), assigned_classes=[c.to_dict() for c in classes]),
        )

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def register_teacher():
        data = json_body()
        teacher = container.teacher_service.register(
            full_name=pick(data, "name", "full_name", default=""),
            email=pick(data, "email", default=""),
            password=pick(data, "password", default=""),
            teacher_id=pick(data, "uid", "teacherId", "teacher_id"),
            phone=pick(data, "phone"),
            department=pick(data, "department"),
        )
        return ok(201, message="Teacher registered", teacher=teacher.to_public_dict())

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @auth_required
    def me():
        teacher = g.teacher
        classes = container.class_service.list_classes(teacher.teacher_id)
        return ok(teacher=dict(teacher.to_public_dict(), assigned_classes=[c.to_dict() for c in classes]))

    @app.route("/api/auth/verify-token", methods=["POST"], endpoint="auth_verify_token")
    @auth_required
    def verify_token():
        return ok(message="Token is valid", teacher_id=g.teacher.teacher_id)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @auth_required
    def logout():
        # Tokens are stateless; the client drops its copy.
        return ok(message="Logout successful")
