from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import error_response, json_body, server_error
from ..core.exceptions import AuthenticationError, DomainError
from ..container import Container
from .guards import Guards


def _caller_is_admin(guards: Guards) -> bool:
    caller = guards.optional_user()
    return caller is not None and caller.is_admin


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        try:
            result = container.auth_service.register(
                name=data.get("name"),
                email=data.get("email"),
                password=data.get("password"),
                role=data.get("role"),
                allow_admin=_caller_is_admin(guards),
            )
            return jsonify({"message": "User registered successfully", "success": True, **result}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Registration")

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        try:
            result = container.auth_service.login(email=data.get("email"), password=data.get("password"))
            return jsonify({"message": "Login successful", "success": True, **result})
        except AuthenticationError as e:
            # clients treat a failed login as a bad request
            return jsonify({"message": str(e)}), 400
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Login")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @guards.token_required
    def auth_me():
        return jsonify(g.current_user.public())

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @guards.admin_required
    def users_list():
        return jsonify([u.public() for u in container.user_service.list_users()])

    @app.route("/api/users/stats", methods=["GET"], endpoint="users_stats")
    @guards.admin_required
    def users_stats():
        stats = container.user_service.stats()
        return jsonify(
            {
                "totalUsers": stats["total_users"],
                "totalStudents": stats["total_students"],
                "totalAdmins": stats["total_admins"],
                "blockedUsers": stats["blocked_users"],
                "activeUsers": stats["active_users"],
            }
        )

    @app.route("/api/users/role/<role>", methods=["GET"], endpoint="users_by_role")
    @guards.admin_required
    def users_by_role(role: str):
        try:
            return jsonify([u.public() for u in container.user_service.list_users(role=role)])
        except DomainError as e:
            return error_response(e)

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    @guards.admin_required
    def users_get(user_id: int):
        try:
            return jsonify(container.user_service.get(user_id).public())
        except DomainError as e:
            return error_response(e)

    @app.route("/api/users/<int:user_id>/block", methods=["PUT"], endpoint="users_block")
    @guards.admin_required
    def users_block(user_id: int):
        try:
            container.user_service.block(
                user_id, reason=json_body().get("reason"), blocked_by=g.current_user.email
            )
            return jsonify({"message": "User blocked successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Block user")

    @app.route("/api/users/<int:user_id>/unblock", methods=["PUT"], endpoint="users_unblock")
    @guards.admin_required
    def users_unblock(user_id: int):
        try:
            container.user_service.unblock(user_id)
            return jsonify({"message": "User unblocked successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Unblock user")

    @app.route("/api/users/<int:user_id>/warning", methods=["PUT"], endpoint="users_warning")
    @guards.admin_required
    def users_warning(user_id: int):
        try:
            count = container.user_service.add_warning(user_id)
            return jsonify({"message": "Warning added successfully", "warningCount": count})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Add warning")

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @guards.admin_required
    def users_delete(user_id: int):
        try:
            container.user_service.delete(user_id)
            return jsonify({"message": "User deleted successfully"})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return server_error("Delete user")
